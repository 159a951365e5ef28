"""Authorization code grant (RFC 6749 section 4.1) with optional PKCE verifier."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self

from .base import TokenFlow

if TYPE_CHECKING:
    from ..models import TokenResponse


class AuthorizationCodeTokenFlow(TokenFlow):
    """Exchanges an authorization code for a user token."""

    flow_name = "authorization code flow"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._authorization_code: str | None = None
        self._redirect_uri: str | None = None
        self._code_verifier: str | None = None

    def authorization_code(self, authorization_code: str) -> Self:
        self._authorization_code = authorization_code
        return self

    def redirect_uri(self, redirect_uri: str) -> Self:
        self._redirect_uri = redirect_uri
        return self

    def code_verifier(self, code_verifier: str) -> Self:
        """PKCE code verifier matching the challenge sent with the authorize request."""
        self._code_verifier = code_verifier
        return self

    def _required_fields(self) -> list[tuple[str, Any]]:
        return [
            ("Authorization code", self._authorization_code),
            ("Redirect URI", self._redirect_uri),
        ]

    def _request_token(self, token_endpoint: str) -> TokenResponse:
        return self._token_service.retrieve_access_token_via_authorization_code_grant(
            token_endpoint=token_endpoint,
            client_credentials=self._client_credentials,
            authorization_code=self._authorization_code,
            redirect_uri=self._redirect_uri,
            code_verifier=self._code_verifier,
            subdomain=self._subdomain,
            optional_parameters=self._optional_parameters,
        )
