"""Configuration for the identity token SDK.

Uses Pydantic v2 for validation with sensible defaults. Service
configurations are immutable once built.
"""

from __future__ import annotations

import os
import random
from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Annotated, Any, Self

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_serializer, field_validator

from .errors import InvalidArgumentError, InvalidConfigError
from .models import ClientCredentials

CLIENT_ID = "clientid"
CLIENT_SECRET = "clientsecret"
URL = "url"
APP_ID = "xsappname"


class IdentityService(StrEnum):
    """Identity providers tokens are issued for."""

    XSUAA = "xsuaa"
    IAS = "ias"


class RetryConfig(BaseModel):
    """Retry configuration with exponential backoff."""

    model_config = ConfigDict(frozen=True)

    max_retries: Annotated[int, Field(ge=0, le=10)] = 0
    initial_delay: Annotated[float, Field(gt=0, le=60)] = 1.0
    max_delay: Annotated[float, Field(gt=0, le=300)] = 30.0
    exponential_base: Annotated[float, Field(ge=1.5, le=3.0)] = 2.0
    jitter: Annotated[float, Field(ge=0, le=1.0)] = 0.1

    def get_delay(self, attempt: int) -> float:
        """Calculate delay for given attempt with exponential backoff."""
        delay = min(
            self.initial_delay * (self.exponential_base**attempt),
            self.max_delay,
        )
        jitter_range = delay * self.jitter
        return delay + random.uniform(-jitter_range, jitter_range)  # noqa: S311


class TelemetryConfig(BaseModel):
    """OpenTelemetry and logging configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    service_name: str = "identity-token-sdk"
    trace_requests: bool = True
    log_level: str = "INFO"
    json_logs: bool = True


class TokenServiceConfig(BaseModel):
    """HTTP settings of the token service."""

    model_config = ConfigDict(frozen=True)

    timeout: Annotated[float, Field(gt=0, le=300)] = 30.0
    connect_timeout: Annotated[float, Field(gt=0, le=60)] = 10.0
    retry: RetryConfig = Field(default_factory=RetryConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)


class ServiceConfiguration(BaseModel):
    """Endpoint and credential data of one identity service binding.

    ``properties`` is a read-only view over a private copy of the mapping
    the configuration was created with.
    """

    model_config = ConfigDict(frozen=True)

    service: IdentityService
    properties: Mapping[str, str] = Field(default_factory=dict)
    legacy_mode: bool = False

    @field_validator("properties", mode="after")
    @classmethod
    def freeze_properties(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_serializer("properties")
    def serialize_properties(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)

    @property
    def client_id(self) -> str | None:
        return self.properties.get(CLIENT_ID)

    @property
    def client_secret(self) -> SecretStr | None:
        secret = self.properties.get(CLIENT_SECRET)
        return SecretStr(secret) if secret is not None else None

    @property
    def url(self) -> str | None:
        return self.properties.get(URL)

    def get_property(self, name: str) -> str | None:
        return self.properties.get(name)

    def has_property(self, name: str) -> bool:
        return name in self.properties

    @property
    def client_credentials(self) -> ClientCredentials:
        """Client id and secret of this binding.

        Raises:
            InvalidConfigError: If the client id or secret is missing.
        """
        if not self.client_id:
            raise InvalidConfigError("Client id is not configured", field=CLIENT_ID)
        if self.client_secret is None:
            raise InvalidConfigError("Client secret is not configured", field=CLIENT_SECRET)
        return ClientCredentials(client_id=self.client_id, client_secret=self.client_secret)

    def __repr__(self) -> str:
        shown = {k: ("**********" if k == CLIENT_SECRET else v) for k, v in self.properties.items()}
        return (
            f"ServiceConfiguration(service={self.service.value!r}, "
            f"properties={shown!r}, legacy_mode={self.legacy_mode!r})"
        )

    __str__ = __repr__

    @classmethod
    def from_env(cls, prefix: str = "IDENTITY_") -> Self:
        """Create a configuration from environment variables.

        Reads ``<prefix>SERVICE`` (defaults to ``xsuaa``), ``<prefix>CLIENT_ID``,
        ``<prefix>CLIENT_SECRET`` and ``<prefix>URL``.
        """

        def get_env(key: str, default: Any = None) -> Any:
            return os.environ.get(f"{prefix}{key}", default)

        service_name = get_env("SERVICE", IdentityService.XSUAA.value).lower()
        try:
            service = IdentityService(service_name)
        except ValueError as e:
            msg = f"{prefix}SERVICE must be one of {[s.value for s in IdentityService]}"
            raise InvalidConfigError(msg, field="service") from e

        client_id = get_env("CLIENT_ID")
        if not client_id:
            msg = f"{prefix}CLIENT_ID environment variable is required"
            raise InvalidConfigError(msg, field=CLIENT_ID)

        builder = ServiceConfigurationBuilder.for_service(service).with_client_id(client_id)
        if (secret := get_env("CLIENT_SECRET")) is not None:
            builder.with_client_secret(secret)
        if (url := get_env("URL")) is not None:
            builder.with_url(url)
        return builder.build()


class ServiceConfigurationBuilder:
    """Collects properties of a service binding and builds a ``ServiceConfiguration``."""

    def __init__(self, service: IdentityService) -> None:
        self._service = service
        self._legacy_mode = False
        self._properties: dict[str, str] = {}

    @classmethod
    def for_service(cls, service: IdentityService | None) -> ServiceConfigurationBuilder:
        if service is None:
            raise InvalidArgumentError("Service must not be None", argument="service")
        return cls(service)

    def with_client_id(self, client_id: str) -> Self:
        return self.with_property(CLIENT_ID, client_id)

    def with_client_secret(self, client_secret: str) -> Self:
        return self.with_property(CLIENT_SECRET, client_secret)

    def with_url(self, url: str) -> Self:
        return self.with_property(URL, url)

    def with_property(self, name: str, value: str) -> Self:
        # replaces values that were already set
        self._properties[name] = value
        return self

    def with_properties(self, properties: dict[str, str]) -> Self:
        for name, value in properties.items():
            self.with_property(name, value)
        return self

    def run_in_legacy_mode(self, legacy_mode: bool) -> Self:
        if legacy_mode and self._service is not IdentityService.XSUAA:
            msg = f"Legacy mode is not supported for service {self._service.value}"
            raise InvalidArgumentError(msg, argument="legacy_mode")
        self._legacy_mode = legacy_mode
        return self

    def build(self) -> ServiceConfiguration:
        return ServiceConfiguration(
            service=self._service,
            properties=dict(self._properties),
            legacy_mode=self._legacy_mode,
        )
