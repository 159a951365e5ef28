"""Error classes for the identity token SDK.

Implements a structured error hierarchy with error codes and correlation IDs.
Each call path exposes exactly one error kind to its caller: token building
raises ``SigningError``, token flows raise ``FlowValidationError`` before any
I/O and ``TokenFlowError`` for everything the token service reports.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the identity token SDK."""

    # Argument and configuration errors (1xxx)
    INVALID_ARGUMENT = "ARG_1001"
    INVALID_CONFIG = "ARG_1002"

    # Flow validation errors (2xxx)
    FLOW_VALIDATION = "FLOW_2001"
    TOKEN_FLOW_FAILED = "FLOW_2002"

    # Signing errors (3xxx)
    SIGNING_FAILED = "SIGN_3001"
    NO_SUCH_ALGORITHM = "SIGN_3002"
    INVALID_KEY = "SIGN_3003"
    SIGNATURE_COMPUTATION = "SIGN_3004"

    # Token service errors (4xxx)
    SERVICE_ERROR = "SRV_4001"
    SERVICE_TIMEOUT = "SRV_4002"
    SERVICE_UNAVAILABLE = "SRV_4003"

    # Resource errors (5xxx)
    CLAIMS_RESOURCE = "IO_5001"


class IdentityTokenError(Exception):
    """Base error for the SDK with structured error information."""

    def __init__(
        self,
        message: str,
        code: ErrorCode | str,
        *,
        status_code: int | None = None,
        correlation_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if isinstance(code, str) else code.value
        self.status_code = status_code
        self.correlation_id = correlation_id
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error": self.message,
            "code": self.code,
            "status_code": self.status_code,
            "correlation_id": self.correlation_id,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidArgumentError(IdentityTokenError, ValueError):
    """Malformed or absent input detected when an object is created."""

    def __init__(
        self,
        message: str,
        *,
        argument: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.INVALID_ARGUMENT,
            details={"argument": argument} if argument else None,
        )
        self.argument = argument


class InvalidConfigError(IdentityTokenError):
    """Invalid service configuration."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.INVALID_CONFIG,
            details={"field": field} if field else None,
        )


class FlowValidationError(IdentityTokenError):
    """A required token flow field was not set when the flow was executed."""

    def __init__(
        self,
        message: str,
        *,
        field: str,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.FLOW_VALIDATION,
            details={"field": field},
        )
        self.field = field


class SigningError(IdentityTokenError):
    """Token signing failed.

    Every failure raised by a signature calculator is reported through this
    single type. The original message is kept and the original exception is
    chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        algorithm: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.SIGNING_FAILED,
            details={"algorithm": algorithm} if algorithm else None,
        )


class SignatureCalculationError(IdentityTokenError):
    """Base for failures a signature calculator may raise."""


class NoSuchAlgorithmError(SignatureCalculationError):
    """The requested signature algorithm is not available."""

    def __init__(self, message: str = "No such algorithm") -> None:
        super().__init__(message, ErrorCode.NO_SUCH_ALGORITHM)


class InvalidKeyError(SignatureCalculationError):
    """The private key does not fit the signature algorithm."""

    def __init__(self, message: str = "Invalid key") -> None:
        super().__init__(message, ErrorCode.INVALID_KEY)


class SignatureComputationError(SignatureCalculationError):
    """The signature could not be computed."""

    def __init__(self, message: str = "Signature computation failed") -> None:
        super().__init__(message, ErrorCode.SIGNATURE_COMPUTATION)


class ServiceError(IdentityTokenError):
    """The token service failed: network, timeout or provider-side rejection."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SERVICE_ERROR,
        *,
        status_code: int | None = None,
        correlation_id: str | None = None,
        response_body: str | None = None,
        headers: dict[str, str] | None = None,
        cause: Exception | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if response_body:
            details["response_body"] = response_body
        if cause:
            details["cause"] = str(cause)
        super().__init__(
            message,
            code,
            status_code=status_code,
            correlation_id=correlation_id,
            details=details,
        )
        self.response_body = response_body
        self.headers = headers or {}
        if cause is not None:
            self.__cause__ = cause


class TokenFlowError(IdentityTokenError):
    """Token flow execution failed in the token service.

    Wraps the ``ServiceError`` unchanged: message, status code and
    correlation id are carried over.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        correlation_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.TOKEN_FLOW_FAILED,
            status_code=status_code,
            correlation_id=correlation_id,
            details=details,
        )

    @classmethod
    def from_service_error(cls, error: ServiceError, flow: str) -> TokenFlowError:
        """Wrap a token service failure raised while executing ``flow``."""
        return cls(
            f"Error requesting access token with {flow}: {error.message}",
            status_code=error.status_code,
            correlation_id=error.correlation_id,
            details={"flow": flow, **error.details},
        )


class ClaimsResourceError(IdentityTokenError, OSError):
    """A claims resource could not be read or parsed."""

    def __init__(
        self,
        message: str,
        *,
        resource: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.CLAIMS_RESOURCE,
            details={"resource": resource} if resource else None,
        )
        self.resource = resource
