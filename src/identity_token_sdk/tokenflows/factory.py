"""Factory for token flows sharing one set of collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import InvalidArgumentError
from .authorization_code import AuthorizationCodeTokenFlow
from .client_credentials import ClientCredentialsTokenFlow
from .jwt_bearer import JwtBearerTokenFlow
from .password import PasswordTokenFlow
from .refresh_token import RefreshTokenFlow

if TYPE_CHECKING:
    from ..endpoints import EndpointsProvider
    from ..models import ClientCredentials
    from ..token_service import TokenService


class TokenFlows:
    """Creates a fresh flow per request, all bound to the same collaborators.

    The collaborators are owned by the caller and shared by every flow this
    factory creates, so they must be safe for concurrent use.
    """

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

    def client_credentials_token_flow(self) -> ClientCredentialsTokenFlow:
        return ClientCredentialsTokenFlow(*self._collaborators())

    def password_token_flow(self) -> PasswordTokenFlow:
        return PasswordTokenFlow(*self._collaborators())

    def refresh_token_flow(self) -> RefreshTokenFlow:
        return RefreshTokenFlow(*self._collaborators())

    def authorization_code_token_flow(self) -> AuthorizationCodeTokenFlow:
        return AuthorizationCodeTokenFlow(*self._collaborators())

    def jwt_bearer_token_flow(self) -> JwtBearerTokenFlow:
        return JwtBearerTokenFlow(*self._collaborators())

    def _collaborators(self) -> tuple[TokenService, EndpointsProvider, ClientCredentials]:
        return self._token_service, self._endpoints_provider, self._client_credentials
