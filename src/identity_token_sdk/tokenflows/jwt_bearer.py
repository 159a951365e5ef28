"""JWT bearer grant (RFC 7523), exchanging a user token for an access token."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self

from .base import TokenFlow

if TYPE_CHECKING:
    from ..models import TokenResponse


class JwtBearerTokenFlow(TokenFlow):
    flow_name = "jwt bearer token flow"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._token: str | None = None

    def token(self, token: str) -> Self:
        self._token = token
        return self

    def _required_fields(self) -> list[tuple[str, Any]]:
        return [("Bearer token", self._token)]

    def _request_token(self, token_endpoint: str) -> TokenResponse:
        return self._token_service.retrieve_access_token_via_jwt_bearer_token_grant(
            token_endpoint=token_endpoint,
            client_credentials=self._client_credentials,
            token=self._token,
            subdomain=self._subdomain,
            optional_parameters=self._optional_parameters,
        )
