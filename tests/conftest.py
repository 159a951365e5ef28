"""
Shared test fixtures for identity token SDK tests.

Provides mocked token flow collaborators, key pairs and
sample token data.
"""

from unittest.mock import MagicMock

import pytest

from identity_token_sdk.config import (
    IdentityService,
    ServiceConfiguration,
    ServiceConfigurationBuilder,
)
from identity_token_sdk.endpoints import EndpointsProvider
from identity_token_sdk.keys import KeyPair
from identity_token_sdk.models import ClientCredentials, TokenResponse
from identity_token_sdk.algorithms import SignatureAlgorithm
from identity_token_sdk.token_service import TokenService

TOKEN_ENDPOINT = "https://subdomain.auth.example.com/oauth/token"
ACCESS_TOKEN = "abc123"
REFRESH_TOKEN = "refresh-abc123"
EXPIRES_IN = 3600


@pytest.fixture(scope="session")
def rsa_keys() -> KeyPair:
    """Provide an RSA key pair, generated once per session."""
    return KeyPair.generate(SignatureAlgorithm.RS256)


@pytest.fixture(scope="session")
def ec_keys() -> KeyPair:
    """Provide a P-256 key pair, generated once per session."""
    return KeyPair.generate(SignatureAlgorithm.ES256)


@pytest.fixture
def client_credentials() -> ClientCredentials:
    """Provide test client credentials."""
    return ClientCredentials(client_id="test-client-id", client_secret="test-client-secret")


@pytest.fixture
def token_service() -> MagicMock:
    """Provide a mock token service."""
    return MagicMock(spec=TokenService)


@pytest.fixture
def endpoints_provider() -> MagicMock:
    """Provide an endpoints provider returning a fixed token endpoint."""
    provider = MagicMock(spec=EndpointsProvider)
    provider.token_endpoint = TOKEN_ENDPOINT
    return provider


@pytest.fixture
def token_response() -> TokenResponse:
    """Provide a sample token response."""
    return TokenResponse(
        access_token=ACCESS_TOKEN,
        expires_in=EXPIRES_IN,
        refresh_token=REFRESH_TOKEN,
    )


@pytest.fixture
def sample_token_response() -> dict:
    """Provide a sample OAuth token response body."""
    return {
        "access_token": "eyJhbGciOiJSUzI1NiIsInR5cCI6IkpXVCJ9.test",
        "token_type": "bearer",
        "expires_in": 3600,
        "refresh_token": "refresh_token_value",
        "scope": "openid uaa.user",
    }


@pytest.fixture
def service_configuration() -> ServiceConfiguration:
    """Provide an XSUAA service configuration."""
    return (
        ServiceConfigurationBuilder.for_service(IdentityService.XSUAA)
        .with_client_id("sb-client!t1234")
        .with_client_secret("secret")
        .with_url("https://subdomain.auth.example.com")
        .build()
    )
