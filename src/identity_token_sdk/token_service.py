"""Token service port and its HTTP implementation.

Token flows depend on the ``TokenService`` protocol only. ``HttpTokenService``
implements it with httpx against an OAuth 2.0 token endpoint.
"""

from __future__ import annotations

from contextlib import nullcontext
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlsplit, urlunsplit

import httpx
from pydantic import ValidationError

from .config import TokenServiceConfig
from .errors import ErrorCode, ServiceError
from .http import create_http_client, request_with_retry
from .models import ClientCredentials, TokenRequest, TokenResponse
from .telemetry import get_logger, trace_operation

GRANT_TYPE_CLIENT_CREDENTIALS = "client_credentials"
GRANT_TYPE_PASSWORD = "password"
GRANT_TYPE_REFRESH_TOKEN = "refresh_token"
GRANT_TYPE_AUTHORIZATION_CODE = "authorization_code"
GRANT_TYPE_JWT_BEARER = "urn:ietf:params:oauth:grant-type:jwt-bearer"


@runtime_checkable
class TokenService(Protocol):
    """Retrieves access tokens from a token endpoint, one method per grant.

    Implementations report every failure (network, timeout, provider-side
    rejection) as ``ServiceError``.
    """

    def retrieve_access_token_via_client_credentials_grant(
        self,
        token_endpoint: str,
        client_credentials: ClientCredentials,
        subdomain: str | None,
        optional_parameters: dict[str, str] | None,
    ) -> TokenResponse: ...

    def retrieve_access_token_via_password_grant(
        self,
        token_endpoint: str,
        client_credentials: ClientCredentials,
        username: str,
        password: str,
        subdomain: str | None,
        optional_parameters: dict[str, str] | None,
    ) -> TokenResponse: ...

    def retrieve_access_token_via_refresh_token(
        self,
        token_endpoint: str,
        client_credentials: ClientCredentials,
        refresh_token: str,
        subdomain: str | None,
        optional_parameters: dict[str, str] | None,
    ) -> TokenResponse: ...

    def retrieve_access_token_via_authorization_code_grant(
        self,
        token_endpoint: str,
        client_credentials: ClientCredentials,
        authorization_code: str,
        redirect_uri: str,
        code_verifier: str | None,
        subdomain: str | None,
        optional_parameters: dict[str, str] | None,
    ) -> TokenResponse: ...

    def retrieve_access_token_via_jwt_bearer_token_grant(
        self,
        token_endpoint: str,
        client_credentials: ClientCredentials,
        token: str,
        subdomain: str | None,
        optional_parameters: dict[str, str] | None,
    ) -> TokenResponse: ...


def replace_subdomain(uri: str, subdomain: str | None) -> str:
    """Replace the first label of the host of ``uri`` with ``subdomain``.

    URIs whose host has a single label are returned unchanged. User
    information and port are kept.
    """
    if not subdomain:
        return uri
    parts = urlsplit(uri)
    host = parts.hostname or ""
    labels = host.split(".")
    if len(labels) < 2:
        return uri
    netloc = ".".join([subdomain, *labels[1:]])
    userinfo, separator, _ = parts.netloc.rpartition("@")
    if separator:
        netloc = f"{userinfo}@{netloc}"
    if parts.port is not None:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit(parts._replace(netloc=netloc))


class HttpTokenService:
    """``TokenService`` over HTTP.

    Sends form encoded POST requests carrying the client credentials in the
    body. Retries follow ``TokenServiceConfig.retry``; none are made by default.
    Requests run in spans unless ``config.telemetry`` disables telemetry or
    request tracing.
    """

    def __init__(
        self,
        config: TokenServiceConfig | None = None,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self.config = config or TokenServiceConfig()
        self._http = client or create_http_client(self.config)
        self._owns_client = client is None
        telemetry = self.config.telemetry
        self._trace_requests = telemetry.enabled and telemetry.trace_requests
        self._logger = get_logger()

    def __enter__(self) -> HttpTokenService:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if it was created by this service."""
        if self._owns_client:
            self._http.close()

    def retrieve_access_token_via_client_credentials_grant(
        self,
        token_endpoint: str,
        client_credentials: ClientCredentials,
        subdomain: str | None = None,
        optional_parameters: dict[str, str] | None = None,
    ) -> TokenResponse:
        request = self._token_request(
            grant_type=GRANT_TYPE_CLIENT_CREDENTIALS,
            client_credentials=client_credentials,
            optional_parameters=optional_parameters,
        )
        return self._request_access_token(token_endpoint, request, subdomain)

    def retrieve_access_token_via_password_grant(
        self,
        token_endpoint: str,
        client_credentials: ClientCredentials,
        username: str,
        password: str,
        subdomain: str | None = None,
        optional_parameters: dict[str, str] | None = None,
    ) -> TokenResponse:
        request = self._token_request(
            grant_type=GRANT_TYPE_PASSWORD,
            client_credentials=client_credentials,
            username=username,
            password=password,
            optional_parameters=optional_parameters,
        )
        return self._request_access_token(token_endpoint, request, subdomain)

    def retrieve_access_token_via_refresh_token(
        self,
        token_endpoint: str,
        client_credentials: ClientCredentials,
        refresh_token: str,
        subdomain: str | None = None,
        optional_parameters: dict[str, str] | None = None,
    ) -> TokenResponse:
        request = self._token_request(
            grant_type=GRANT_TYPE_REFRESH_TOKEN,
            client_credentials=client_credentials,
            refresh_token=refresh_token,
            optional_parameters=optional_parameters,
        )
        return self._request_access_token(token_endpoint, request, subdomain)

    def retrieve_access_token_via_authorization_code_grant(
        self,
        token_endpoint: str,
        client_credentials: ClientCredentials,
        authorization_code: str,
        redirect_uri: str,
        code_verifier: str | None = None,
        subdomain: str | None = None,
        optional_parameters: dict[str, str] | None = None,
    ) -> TokenResponse:
        request = self._token_request(
            grant_type=GRANT_TYPE_AUTHORIZATION_CODE,
            client_credentials=client_credentials,
            code=authorization_code,
            redirect_uri=redirect_uri,
            code_verifier=code_verifier,
            optional_parameters=optional_parameters,
        )
        return self._request_access_token(token_endpoint, request, subdomain)

    def retrieve_access_token_via_jwt_bearer_token_grant(
        self,
        token_endpoint: str,
        client_credentials: ClientCredentials,
        token: str,
        subdomain: str | None = None,
        optional_parameters: dict[str, str] | None = None,
    ) -> TokenResponse:
        request = self._token_request(
            grant_type=GRANT_TYPE_JWT_BEARER,
            client_credentials=client_credentials,
            assertion=token,
            optional_parameters=optional_parameters,
        )
        return self._request_access_token(token_endpoint, request, subdomain)

    def _token_request(self, **fields: Any) -> TokenRequest:
        try:
            return TokenRequest(**fields)
        except ValidationError as e:
            raise ServiceError(f"Invalid token request: {e}", cause=e) from e

    def _request_access_token(
        self,
        token_endpoint: str,
        request: TokenRequest,
        subdomain: str | None,
    ) -> TokenResponse:
        url = replace_subdomain(token_endpoint, subdomain)
        span = (
            trace_operation(
                "token_request",
                attributes={"oauth.grant_type": request.grant_type, "http.url": url},
            )
            if self._trace_requests
            else nullcontext()
        )
        with span:
            response = request_with_retry(
                self._http,
                "POST",
                url,
                self.config.retry,
                trace=self._trace_requests,
                data=request.to_form_data(),
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
            return self._parse_token_response(response)

    def _parse_token_response(self, response: httpx.Response) -> TokenResponse:
        try:
            return TokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            self._logger.error(
                "Invalid token response",
                status_code=response.status_code,
                error=str(e),
            )
            raise ServiceError(
                f"Token endpoint returned an invalid token response: {e}",
                ErrorCode.SERVICE_ERROR,
                status_code=response.status_code,
                response_body=response.text,
                cause=e,
            ) from e
