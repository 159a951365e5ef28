"""Endpoint providers for OAuth 2.0 identity services."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .config import ServiceConfiguration
from .errors import InvalidArgumentError, InvalidConfigError

TOKEN_PATH = "/oauth/token"
AUTHORIZE_PATH = "/oauth/authorize"
JWKS_PATH = "/token_keys"


@runtime_checkable
class EndpointsProvider(Protocol):
    """Source of the token endpoint URI a token flow calls."""

    @property
    def token_endpoint(self) -> str:
        """Absolute URI of the token endpoint."""
        ...


class DefaultEndpointsProvider:
    """Derives the OAuth 2.0 endpoints from the base URI of the identity service."""

    def __init__(self, base_uri: str) -> None:
        if not base_uri:
            raise InvalidArgumentError("Base URI must not be empty", argument="base_uri")
        self._base_uri = base_uri.rstrip("/")

    @classmethod
    def from_configuration(cls, configuration: ServiceConfiguration) -> DefaultEndpointsProvider:
        """Use the ``url`` of a service configuration as base URI.

        Raises:
            InvalidConfigError: If the configuration has no url.
        """
        if not configuration.url:
            raise InvalidConfigError("Service configuration has no url", field="url")
        return cls(configuration.url)

    @property
    def base_uri(self) -> str:
        return self._base_uri

    @property
    def token_endpoint(self) -> str:
        return f"{self._base_uri}{TOKEN_PATH}"

    @property
    def authorize_endpoint(self) -> str:
        return f"{self._base_uri}{AUTHORIZE_PATH}"

    @property
    def jwks_uri(self) -> str:
        return f"{self._base_uri}{JWKS_PATH}"

    def __repr__(self) -> str:
        return f"DefaultEndpointsProvider(base_uri={self._base_uri!r})"
