"""Resource owner password credentials grant (RFC 6749 section 4.3)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self

from .base import TokenFlow

if TYPE_CHECKING:
    from ..models import TokenResponse


class PasswordTokenFlow(TokenFlow):
    """Requests a user token with the user's name and password."""

    flow_name = "password flow"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._username: str | None = None
        self._password: str | None = None

    def username(self, username: str) -> Self:
        self._username = username
        return self

    def password(self, password: str) -> Self:
        self._password = password
        return self

    def _required_fields(self) -> list[tuple[str, Any]]:
        return [("Username", self._username), ("Password", self._password)]

    def _request_token(self, token_endpoint: str) -> TokenResponse:
        return self._token_service.retrieve_access_token_via_password_grant(
            token_endpoint=token_endpoint,
            client_credentials=self._client_credentials,
            username=self._username,
            password=self._password,
            subdomain=self._subdomain,
            optional_parameters=self._optional_parameters,
        )
