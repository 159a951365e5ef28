"""Refresh token grant (RFC 6749 section 6)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self

from .base import TokenFlow

if TYPE_CHECKING:
    from ..models import TokenResponse


class RefreshTokenFlow(TokenFlow):
    """Exchanges a refresh token for a new access token."""

    flow_name = "refresh token flow"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._refresh_token: str | None = None

    def refresh_token(self, refresh_token: str) -> Self:
        self._refresh_token = refresh_token
        return self

    def _required_fields(self) -> list[tuple[str, Any]]:
        return [("Refresh token", self._refresh_token)]

    def _request_token(self, token_endpoint: str) -> TokenResponse:
        return self._token_service.retrieve_access_token_via_refresh_token(
            token_endpoint=token_endpoint,
            client_credentials=self._client_credentials,
            refresh_token=self._refresh_token,
            subdomain=self._subdomain,
            optional_parameters=self._optional_parameters,
        )
