"""Translation of HTTP failures into ``ServiceError``.

Every failure of a token endpoint request is reported as one
``ServiceError`` carrying status code, response body and a correlation ID.
"""

from __future__ import annotations

import uuid

import httpx

from ..errors import ErrorCode, ServiceError


class ErrorFactory:
    """Centralized ``ServiceError`` creation with consistent structure."""

    @staticmethod
    def generate_correlation_id() -> str:
        """Generate a unique correlation ID."""
        return str(uuid.uuid4())

    @staticmethod
    def from_http_response(
        response: httpx.Response,
        *,
        correlation_id: str | None = None,
    ) -> ServiceError:
        """Create a service error from an unsuccessful token endpoint response.

        Args:
            response: HTTP response object.
            correlation_id: Optional correlation ID for tracing.

        Returns:
            ServiceError describing the provider's answer.
        """
        status = response.status_code
        correlation_id = correlation_id or ErrorFactory.generate_correlation_id()

        description: str | None = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            description = body.get("error_description") or body.get("error")

        code = ErrorCode.SERVICE_UNAVAILABLE if status >= 500 else ErrorCode.SERVICE_ERROR
        message = f"Token endpoint responded with status {status}"
        if description:
            message = f"{message}: {description}"

        return ServiceError(
            message,
            code,
            status_code=status,
            correlation_id=correlation_id,
            response_body=response.text,
            headers=dict(response.headers),
        )

    @staticmethod
    def from_exception(
        exc: Exception,
        *,
        correlation_id: str | None = None,
    ) -> ServiceError:
        """Create a service error from an exception raised by the HTTP client.

        Args:
            exc: Original exception.
            correlation_id: Optional correlation ID for tracing.

        Returns:
            ServiceError wrapping ``exc``.
        """
        correlation_id = correlation_id or ErrorFactory.generate_correlation_id()

        if isinstance(exc, ServiceError):
            if exc.correlation_id is None:
                exc.correlation_id = correlation_id
            return exc

        if isinstance(exc, httpx.HTTPStatusError):
            return ErrorFactory.from_http_response(
                exc.response,
                correlation_id=correlation_id,
            )

        if isinstance(exc, httpx.TimeoutException):
            return ServiceError(
                f"Request timed out: {exc}",
                ErrorCode.SERVICE_TIMEOUT,
                correlation_id=correlation_id,
                cause=exc,
            )

        if isinstance(exc, httpx.ConnectError):
            return ServiceError(
                f"Connection failed: {exc}",
                ErrorCode.SERVICE_UNAVAILABLE,
                correlation_id=correlation_id,
                cause=exc,
            )

        return ServiceError(
            f"HTTP error: {exc}",
            correlation_id=correlation_id,
            cause=exc,
        )
