"""Decoded view of an encoded JWT."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import jwt
from pydantic import BaseModel, ConfigDict

from .algorithms import SignatureAlgorithm
from .config import IdentityService
from .errors import InvalidArgumentError


class Token(BaseModel):
    """An encoded token together with its decoded header and claims.

    Decoding does not verify the signature or any claim.
    """

    model_config = ConfigDict(frozen=True)

    encoded: str
    header: dict[str, Any]
    claims: dict[str, Any]
    service: IdentityService | None = None

    @classmethod
    def from_encoded(cls, encoded: str, service: IdentityService | None = None) -> Token:
        """Decode ``encoded`` without verification.

        Raises:
            InvalidArgumentError: If ``encoded`` is not a compact serialized JWT.
        """
        try:
            header = jwt.get_unverified_header(encoded)
            claims = jwt.decode(encoded, options={"verify_signature": False})
        except jwt.exceptions.DecodeError as e:
            raise InvalidArgumentError(f"Malformed token: {e}", argument="encoded") from e
        return cls(encoded=encoded, header=header, claims=claims, service=service)

    @property
    def signature_algorithm(self) -> SignatureAlgorithm | None:
        return SignatureAlgorithm.from_value(self.header.get("alg"))

    @property
    def is_signed(self) -> bool:
        return not self.encoded.endswith(".")

    @property
    def client_id(self) -> str | None:
        for claim in ("cid", "client_id", "azp"):
            if value := self.claims.get(claim):
                return value
        return None

    @property
    def scopes(self) -> list[str]:
        scope = self.claims.get("scope")
        if scope is None:
            return []
        if isinstance(scope, str):
            return scope.split()
        return list(scope)

    @property
    def expiration(self) -> datetime | None:
        exp = self.claims.get("exp")
        return datetime.fromtimestamp(exp, tz=UTC) if exp is not None else None

    def __str__(self) -> str:
        return self.encoded
