"""Signature algorithms supported for token signing."""

from __future__ import annotations

from enum import Enum


class SignatureAlgorithm(Enum):
    """JWS signature algorithms, one per JWK key type ("kty").

    Each variant carries the key type, the value written to the JWT ``alg``
    header and used for key set lookups, and the name of the underlying
    signature primitive.
    """

    RS256 = ("RSA", "RS256", "SHA256withRSA")
    ES256 = ("EC", "ES256", "SHA256withECDSA")

    key_type: str
    native_signature: str

    def __new__(cls, key_type: str, value: str, native_signature: str) -> SignatureAlgorithm:
        member = object.__new__(cls)
        member._value_ = value
        member.key_type = key_type
        member.native_signature = native_signature
        return member

    @classmethod
    def from_value(cls, value: str | None) -> SignatureAlgorithm | None:
        """Look up an algorithm by its wire value, ``None`` if unknown."""
        for algorithm in cls:
            if algorithm.value == value:
                return algorithm
        return None

    @classmethod
    def from_type(cls, key_type: str | None) -> SignatureAlgorithm | None:
        """Look up an algorithm by its key type, ``None`` if unknown."""
        for algorithm in cls:
            if algorithm.key_type == key_type:
                return algorithm
        return None
