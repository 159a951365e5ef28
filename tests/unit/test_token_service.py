"""Unit tests for HttpTokenService.

Uses httpx.MockTransport in place of a token endpoint.
"""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import patch
from urllib.parse import parse_qsl

import httpx
import pytest

from identity_token_sdk.config import RetryConfig, TelemetryConfig, TokenServiceConfig
from identity_token_sdk.endpoints import DefaultEndpointsProvider
from identity_token_sdk.errors import ErrorCode, ServiceError, TokenFlowError
from identity_token_sdk.models import ClientCredentials
from identity_token_sdk.tokenflows import ClientCredentialsTokenFlow
from identity_token_sdk.token_service import (
    GRANT_TYPE_JWT_BEARER,
    HttpTokenService,
    TokenService,
    replace_subdomain,
)

TOKEN_ENDPOINT = "https://subdomain.auth.example.com/oauth/token"


def form_data(request: httpx.Request) -> dict[str, str]:
    """Decode the form encoded body of ``request``."""
    return dict(parse_qsl(request.content.decode()))


class RecordingTransport:
    """Records requests and answers them with a handler."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []
        self._handler = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)


def make_service(
    handler: Callable[[httpx.Request], httpx.Response],
    config: TokenServiceConfig | None = None,
) -> tuple[HttpTokenService, RecordingTransport]:
    transport = RecordingTransport(handler)
    client = httpx.Client(transport=httpx.MockTransport(transport))
    return HttpTokenService(config, client=client), transport


@pytest.fixture
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Replace retry sleeps with a recorder."""
    delays: list[float] = []
    monkeypatch.setattr("identity_token_sdk.http.time.sleep", delays.append)
    return delays


class TestReplaceSubdomain:
    """Tests for replace_subdomain."""

    def test_replaces_first_label(self) -> None:
        assert (
            replace_subdomain(TOKEN_ENDPOINT, "tenant")
            == "https://tenant.auth.example.com/oauth/token"
        )

    def test_keeps_port(self) -> None:
        assert (
            replace_subdomain("https://a.example.com:8443/oauth/token", "b")
            == "https://b.example.com:8443/oauth/token"
        )

    def test_keeps_user_information(self) -> None:
        assert (
            replace_subdomain("https://user:pw@a.example.com:8443/oauth/token", "b")
            == "https://user:pw@b.example.com:8443/oauth/token"
        )

    def test_without_subdomain(self) -> None:
        assert replace_subdomain(TOKEN_ENDPOINT, None) == TOKEN_ENDPOINT

    def test_single_label_host_unchanged(self) -> None:
        assert replace_subdomain("http://localhost/oauth/token", "t") == "http://localhost/oauth/token"


class TestHttpTokenService:
    """Tests for token requests over HTTP."""

    def test_satisfies_protocol(self) -> None:
        service, _ = make_service(lambda request: httpx.Response(200))

        assert isinstance(service, TokenService)

    def test_password_grant(
        self, client_credentials: ClientCredentials, sample_token_response: dict
    ) -> None:
        service, transport = make_service(
            lambda request: httpx.Response(200, json=sample_token_response)
        )

        response = service.retrieve_access_token_via_password_grant(
            TOKEN_ENDPOINT, client_credentials, "user", "pass"
        )

        assert response.access_token == sample_token_response["access_token"]
        assert response.refresh_token == "refresh_token_value"
        assert response.scopes == ["openid", "uaa.user"]
        request = transport.requests[0]
        assert request.method == "POST"
        assert str(request.url) == TOKEN_ENDPOINT
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"
        assert form_data(request) == {
            "grant_type": "password",
            "client_id": "test-client-id",
            "client_secret": "test-client-secret",
            "username": "user",
            "password": "pass",
        }

    def test_client_credentials_grant_with_subdomain_and_parameters(
        self, client_credentials: ClientCredentials, sample_token_response: dict
    ) -> None:
        service, transport = make_service(
            lambda request: httpx.Response(200, json=sample_token_response)
        )

        service.retrieve_access_token_via_client_credentials_grant(
            TOKEN_ENDPOINT, client_credentials, "tenant", {"token_format": "jwt"}
        )

        request = transport.requests[0]
        assert request.url.host == "tenant.auth.example.com"
        data = form_data(request)
        assert data["grant_type"] == "client_credentials"
        assert data["token_format"] == "jwt"

    def test_optional_parameters_applied_last(
        self, client_credentials: ClientCredentials, sample_token_response: dict
    ) -> None:
        service, transport = make_service(
            lambda request: httpx.Response(200, json=sample_token_response)
        )

        service.retrieve_access_token_via_refresh_token(
            TOKEN_ENDPOINT, client_credentials, "RT0", optional_parameters={"client_id": "other"}
        )

        data = form_data(transport.requests[0])
        assert data["refresh_token"] == "RT0"
        assert data["client_id"] == "other"

    def test_authorization_code_grant(
        self, client_credentials: ClientCredentials, sample_token_response: dict
    ) -> None:
        service, transport = make_service(
            lambda request: httpx.Response(200, json=sample_token_response)
        )

        service.retrieve_access_token_via_authorization_code_grant(
            TOKEN_ENDPOINT, client_credentials, "code", "https://app/cb", "verifier"
        )

        data = form_data(transport.requests[0])
        assert data["grant_type"] == "authorization_code"
        assert data["code"] == "code"
        assert data["redirect_uri"] == "https://app/cb"
        assert data["code_verifier"] == "verifier"

    def test_jwt_bearer_grant(
        self, client_credentials: ClientCredentials, sample_token_response: dict
    ) -> None:
        service, transport = make_service(
            lambda request: httpx.Response(200, json=sample_token_response)
        )

        service.retrieve_access_token_via_jwt_bearer_token_grant(
            TOKEN_ENDPOINT, client_credentials, "user.jwt.token"
        )

        data = form_data(transport.requests[0])
        assert data["grant_type"] == GRANT_TYPE_JWT_BEARER
        assert data["assertion"] == "user.jwt.token"

    def test_error_response(self, client_credentials: ClientCredentials) -> None:
        service, _ = make_service(
            lambda request: httpx.Response(
                401, json={"error": "unauthorized", "error_description": "Bad credentials"}
            )
        )

        with pytest.raises(ServiceError) as exc_info:
            service.retrieve_access_token_via_client_credentials_grant(
                TOKEN_ENDPOINT, client_credentials
            )

        error = exc_info.value
        assert error.status_code == 401
        assert error.code == ErrorCode.SERVICE_ERROR
        assert error.message == "Token endpoint responded with status 401: Bad credentials"
        assert "Bad credentials" in error.response_body
        assert error.correlation_id is not None

    def test_invalid_token_response(self, client_credentials: ClientCredentials) -> None:
        service, _ = make_service(lambda request: httpx.Response(200, json={"token": "x"}))

        with pytest.raises(ServiceError, match="invalid token response") as exc_info:
            service.retrieve_access_token_via_client_credentials_grant(
                TOKEN_ENDPOINT, client_credentials
            )

        assert exc_info.value.status_code == 200

    def test_non_json_response(self, client_credentials: ClientCredentials) -> None:
        service, _ = make_service(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(ServiceError, match="invalid token response"):
            service.retrieve_access_token_via_client_credentials_grant(
                TOKEN_ENDPOINT, client_credentials
            )

    def test_timeout(self, client_credentials: ClientCredentials) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        service, _ = make_service(handler)

        with pytest.raises(ServiceError) as exc_info:
            service.retrieve_access_token_via_client_credentials_grant(
                TOKEN_ENDPOINT, client_credentials
            )

        assert exc_info.value.code == ErrorCode.SERVICE_TIMEOUT
        assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)

    def test_no_retry_by_default(
        self, client_credentials: ClientCredentials, no_sleep: list[float]
    ) -> None:
        service, transport = make_service(lambda request: httpx.Response(503))

        with pytest.raises(ServiceError) as exc_info:
            service.retrieve_access_token_via_client_credentials_grant(
                TOKEN_ENDPOINT, client_credentials
            )

        assert exc_info.value.code == ErrorCode.SERVICE_UNAVAILABLE
        assert len(transport.requests) == 1
        assert no_sleep == []

    def test_retries_when_configured(
        self,
        client_credentials: ClientCredentials,
        sample_token_response: dict,
        no_sleep: list[float],
    ) -> None:
        responses = iter(
            [
                httpx.Response(429, headers={"Retry-After": "2"}),
                httpx.Response(200, json=sample_token_response),
            ]
        )
        config = TokenServiceConfig(retry=RetryConfig(max_retries=2))
        service, transport = make_service(lambda request: next(responses), config)

        response = service.retrieve_access_token_via_client_credentials_grant(
            TOKEN_ENDPOINT, client_credentials
        )

        assert response.expires_in == 3600
        assert len(transport.requests) == 2
        assert no_sleep == [2.0]

    def test_client_errors_not_retried(
        self, client_credentials: ClientCredentials, no_sleep: list[float]
    ) -> None:
        config = TokenServiceConfig(retry=RetryConfig(max_retries=3))
        service, transport = make_service(lambda request: httpx.Response(400), config)

        with pytest.raises(ServiceError):
            service.retrieve_access_token_via_client_credentials_grant(
                TOKEN_ENDPOINT, client_credentials
            )

        assert len(transport.requests) == 1

    def test_close_keeps_injected_client(self) -> None:
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))

        with HttpTokenService(client=client):
            pass

        assert not client.is_closed

    def test_close_owned_client(self) -> None:
        service = HttpTokenService()

        service.close()

        assert service._http.is_closed

    def test_invalid_request_raises_service_error(
        self, client_credentials: ClientCredentials
    ) -> None:
        """A request that cannot be built is reported as ServiceError, not sent."""
        service, transport = make_service(lambda request: httpx.Response(200))

        with pytest.raises(ServiceError, match="Invalid token request") as exc_info:
            service.retrieve_access_token_via_client_credentials_grant(
                TOKEN_ENDPOINT, client_credentials, optional_parameters={"aKey": 1}
            )

        assert isinstance(exc_info.value.__cause__, ValueError)
        assert transport.requests == []

    def test_invalid_request_surfaces_as_flow_error(
        self, client_credentials: ClientCredentials
    ) -> None:
        """Flows report invalid request parameters through TokenFlowError."""
        service, transport = make_service(lambda request: httpx.Response(200))
        flow = ClientCredentialsTokenFlow(
            service,
            DefaultEndpointsProvider("https://subdomain.auth.example.com"),
            client_credentials,
        )

        with pytest.raises(TokenFlowError, match="Invalid token request"):
            flow.optional_parameters({"aKey": 1}).execute()

        assert transport.requests == []


class TestRequestTracing:
    """Tests for telemetry settings of HttpTokenService."""

    @pytest.mark.parametrize(
        ("telemetry", "traced"),
        [
            (TelemetryConfig(), True),
            (TelemetryConfig(trace_requests=False), False),
            (TelemetryConfig(enabled=False), False),
        ],
    )
    def test_request_spans_follow_config(
        self,
        client_credentials: ClientCredentials,
        sample_token_response: dict,
        telemetry: TelemetryConfig,
        traced: bool,
    ) -> None:
        config = TokenServiceConfig(telemetry=telemetry)
        service, _ = make_service(
            lambda request: httpx.Response(200, json=sample_token_response), config
        )

        with (
            patch("identity_token_sdk.token_service.trace_operation") as service_spans,
            patch("identity_token_sdk.http.trace_operation") as http_spans,
        ):
            service.retrieve_access_token_via_client_credentials_grant(
                TOKEN_ENDPOINT, client_credentials
            )

        assert service_spans.called is traced
        assert http_spans.called is traced
