"""HTTP client utilities for token endpoint requests.

Provides a configured httpx client and a retrying request helper that
reports every failure as ``ServiceError``.
"""

from __future__ import annotations

import time
from contextlib import nullcontext
from typing import TYPE_CHECKING, Any

import httpx

from .core.errors import ErrorFactory
from .errors import ServiceError
from .telemetry import get_logger, trace_operation

if TYPE_CHECKING:
    from .config import RetryConfig, TokenServiceConfig

USER_AGENT = "identity-token-sdk/0.1.0 Python"


def create_http_client(config: TokenServiceConfig) -> httpx.Client:
    """Create configured sync HTTP client.

    Args:
        config: Token service configuration.

    Returns:
        Configured httpx.Client.
    """
    return httpx.Client(
        timeout=httpx.Timeout(
            connect=config.connect_timeout,
            read=config.timeout,
            write=config.timeout,
            pool=config.timeout,
        ),
        headers={
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        },
        follow_redirects=False,
    )


def should_retry_status(status_code: int) -> bool:
    """Check if status code should trigger retry."""
    return status_code == 429 or status_code >= 500


def request_with_retry(
    client: httpx.Client,
    method: str,
    url: str,
    retry_config: RetryConfig,
    *,
    trace: bool = True,
    **kwargs: Any,
) -> httpx.Response:
    """Make HTTP request, retrying on rate limiting, server and connection errors.

    Args:
        client: HTTP client.
        method: HTTP method.
        url: Request URL.
        retry_config: Retry configuration.
        trace: Whether each attempt runs in its own span.
        **kwargs: Additional request arguments.

    Returns:
        Successful (2xx) HTTP response.

    Raises:
        ServiceError: On an unsuccessful response or network failure after retries.
    """
    logger = get_logger()
    correlation_id = ErrorFactory.generate_correlation_id()
    last_error: ServiceError | None = None

    for attempt in range(retry_config.max_retries + 1):
        retryable = False
        try:
            span = (
                trace_operation(
                    "http_request",
                    attributes={"http.method": method, "http.url": url, "attempt": attempt},
                )
                if trace
                else nullcontext()
            )
            with span:
                response = client.request(method, url, **kwargs)
                if response.is_success:
                    return response
                last_error = ErrorFactory.from_http_response(
                    response, correlation_id=correlation_id
                )
                retryable = should_retry_status(response.status_code)

        except (httpx.TimeoutException, httpx.ConnectError) as e:
            last_error = ErrorFactory.from_exception(e, correlation_id=correlation_id)
            retryable = True

        except httpx.HTTPError as e:
            raise ErrorFactory.from_exception(e, correlation_id=correlation_id) from e

        if not retryable or attempt >= retry_config.max_retries:
            break

        delay = _retry_delay(last_error, retry_config, attempt)
        logger.warning(
            "Token request failed, retrying",
            attempt=attempt,
            delay=delay,
            status_code=last_error.status_code,
            error=last_error.message,
        )
        time.sleep(delay)

    raise last_error or ServiceError("Request failed after retries", correlation_id=correlation_id)


def _retry_delay(error: ServiceError, retry_config: RetryConfig, attempt: int) -> float:
    retry_after = error.headers.get("retry-after") or error.headers.get("Retry-After")
    if retry_after and retry_after.isdigit():
        return float(retry_after)
    return retry_config.get_delay(attempt)
