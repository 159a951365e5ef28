"""OAuth 2.0 token flows."""

from .authorization_code import AuthorizationCodeTokenFlow
from .base import TokenFlow
from .client_credentials import ClientCredentialsTokenFlow
from .factory import TokenFlows
from .jwt_bearer import JwtBearerTokenFlow
from .password import PasswordTokenFlow
from .refresh_token import RefreshTokenFlow

__all__ = [
    "AuthorizationCodeTokenFlow",
    "ClientCredentialsTokenFlow",
    "JwtBearerTokenFlow",
    "PasswordTokenFlow",
    "RefreshTokenFlow",
    "TokenFlow",
    "TokenFlows",
]
