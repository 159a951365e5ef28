"""Core components shared by the token service implementations."""

from __future__ import annotations

from .errors import ErrorFactory

__all__ = [
    "ErrorFactory",
]
