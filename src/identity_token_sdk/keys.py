"""Key pair helpers for signing test tokens."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from .algorithms import SignatureAlgorithm
from .errors import InvalidArgumentError

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.types import (
        PrivateKeyTypes,
        PublicKeyTypes,
    )


@dataclass(frozen=True)
class KeyPair:
    """An asymmetric key pair bound to the algorithm it signs with."""

    private_key: PrivateKeyTypes
    public_key: PublicKeyTypes
    algorithm: SignatureAlgorithm

    @classmethod
    def generate(
        cls,
        algorithm: SignatureAlgorithm = SignatureAlgorithm.RS256,
        *,
        key_size: int = 2048,
    ) -> KeyPair:
        """Generate a fresh key pair for ``algorithm``.

        Args:
            algorithm: Algorithm the keys are used with.
            key_size: RSA modulus size in bits, ignored for EC keys.

        Returns:
            The generated key pair.
        """
        if algorithm is SignatureAlgorithm.RS256:
            private_key: PrivateKeyTypes = rsa.generate_private_key(
                public_exponent=65537, key_size=key_size
            )
        elif algorithm is SignatureAlgorithm.ES256:
            private_key = ec.generate_private_key(ec.SECP256R1())
        else:
            msg = f"Unsupported algorithm: {algorithm}"
            raise InvalidArgumentError(msg, argument="algorithm")
        return cls(private_key, private_key.public_key(), algorithm)

    def public_key_pem(self) -> str:
        """Public key as PEM encoded SubjectPublicKeyInfo."""
        return self.public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode("ascii")


def load_private_key(pem: str | bytes, password: bytes | None = None) -> PrivateKeyTypes:
    """Load a PEM encoded private key.

    Raises:
        InvalidArgumentError: If the data is not a readable private key.
    """
    data = pem.encode("ascii") if isinstance(pem, str) else pem
    try:
        return serialization.load_pem_private_key(data, password=password)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"Invalid private key: {e}", argument="pem") from e
