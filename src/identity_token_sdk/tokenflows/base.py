"""Common behaviour of all OAuth 2.0 token flows.

A flow collects grant specific parameters through fluent setters and
validates them when ``execute`` is called, before any request is made.
Each ``execute`` call performs exactly one token service call. Retries,
caching and timeouts belong to the token service.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar, Self

from ..errors import FlowValidationError, InvalidArgumentError, ServiceError, TokenFlowError
from ..telemetry import get_logger, trace_operation

if TYPE_CHECKING:
    from ..endpoints import EndpointsProvider
    from ..models import ClientCredentials, TokenResponse
    from ..token_service import TokenService


class TokenFlow(ABC):
    """Base class of the token flows.

    Subclasses declare ``flow_name`` and implement ``_required_fields`` and
    ``_request_token``. Setters override earlier values and may be called in
    any order; a configured flow may be executed again.
    """

    flow_name: ClassVar[str]

    def __init__(
        self,
        token_service: TokenService | None,
        endpoints_provider: EndpointsProvider | None,
        client_credentials: ClientCredentials | None,
    ) -> None:
        if token_service is None:
            raise InvalidArgumentError("TokenService must not be None", argument="token_service")
        if endpoints_provider is None:
            raise InvalidArgumentError(
                "EndpointsProvider must not be None", argument="endpoints_provider"
            )
        if client_credentials is None:
            raise InvalidArgumentError(
                "ClientCredentials must not be None", argument="client_credentials"
            )
        self._token_service = token_service
        self._endpoints_provider = endpoints_provider
        self._client_credentials = client_credentials
        self._subdomain: str | None = None
        self._optional_parameters: dict[str, str] | None = None
        self._logger = get_logger().bind(flow=self.flow_name)

    def subdomain(self, subdomain: str) -> Self:
        """Request the token from the tenant identified by ``subdomain``."""
        self._subdomain = subdomain
        return self

    def optional_parameters(self, parameters: Mapping[str, str]) -> Self:
        """Send additional request parameters.

        The parameters are passed to the token service as given. They are not
        checked against the standard parameter names and may replace them.
        """
        self._optional_parameters = dict(parameters)
        return self

    def execute(self) -> TokenResponse:
        """Request an access token.

        Returns:
            The token service response, unchanged.

        Raises:
            FlowValidationError: If a required field is not set.
            TokenFlowError: If the token service fails.
        """
        self._validate()
        token_endpoint = self._endpoints_provider.token_endpoint
        self._logger.debug(
            "token_flow_executing",
            token_endpoint=token_endpoint,
            subdomain=self._subdomain,
        )
        with trace_operation(
            "token_flow",
            attributes={"oauth.flow": self.flow_name, "oauth.subdomain": self._subdomain},
        ):
            try:
                return self._request_token(token_endpoint)
            except ServiceError as e:
                self._logger.warning(
                    "token_flow_failed",
                    status_code=e.status_code,
                    correlation_id=e.correlation_id,
                    error=e.message,
                )
                raise TokenFlowError.from_service_error(e, self.flow_name) from e

    def _validate(self) -> None:
        for name, value in self._required_fields():
            if value is None:
                raise FlowValidationError(f"{name} not set", field=name)

    def _required_fields(self) -> list[tuple[str, Any]]:
        """Required fields as ``(name, value)`` pairs in checking order."""
        return []

    @abstractmethod
    def _request_token(self, token_endpoint: str) -> TokenResponse:
        """Call the token service for this grant."""
