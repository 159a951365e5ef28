"""Identity token SDK: token building and OAuth 2.0 token flows."""

from .algorithms import SignatureAlgorithm
from .config import (
    IdentityService,
    RetryConfig,
    ServiceConfiguration,
    ServiceConfigurationBuilder,
    TelemetryConfig,
    TokenServiceConfig,
)
from .endpoints import DefaultEndpointsProvider, EndpointsProvider
from .errors import (
    ClaimsResourceError,
    FlowValidationError,
    IdentityTokenError,
    InvalidArgumentError,
    InvalidKeyError,
    NoSuchAlgorithmError,
    ServiceError,
    SignatureComputationError,
    SigningError,
    TokenFlowError,
)
from .keys import KeyPair, load_private_key
from .models import ClientCredentials, TokenResponse
from .signature import CryptographySignatureCalculator, SignatureCalculator
from .token import Token
from .token_builder import NO_EXPIRE_DATE, TokenBuilder
from .token_service import HttpTokenService, TokenService
from .tokenflows import (
    AuthorizationCodeTokenFlow,
    ClientCredentialsTokenFlow,
    JwtBearerTokenFlow,
    PasswordTokenFlow,
    RefreshTokenFlow,
    TokenFlows,
)

__all__ = [
    "AuthorizationCodeTokenFlow",
    "ClaimsResourceError",
    "ClientCredentials",
    "ClientCredentialsTokenFlow",
    "CryptographySignatureCalculator",
    "DefaultEndpointsProvider",
    "EndpointsProvider",
    "FlowValidationError",
    "HttpTokenService",
    "IdentityService",
    "IdentityTokenError",
    "InvalidArgumentError",
    "InvalidKeyError",
    "JwtBearerTokenFlow",
    "KeyPair",
    "NO_EXPIRE_DATE",
    "NoSuchAlgorithmError",
    "PasswordTokenFlow",
    "RefreshTokenFlow",
    "RetryConfig",
    "ServiceConfiguration",
    "ServiceConfigurationBuilder",
    "ServiceError",
    "SignatureAlgorithm",
    "SignatureCalculator",
    "SignatureComputationError",
    "SigningError",
    "TelemetryConfig",
    "Token",
    "TokenBuilder",
    "TokenFlowError",
    "TokenFlows",
    "TokenResponse",
    "TokenService",
    "TokenServiceConfig",
    "load_private_key",
]

__version__ = "0.1.0"
