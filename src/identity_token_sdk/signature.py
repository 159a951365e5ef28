"""Signature calculation for token signing.

``TokenBuilder`` never signs by itself; it delegates to a
``SignatureCalculator``. Any callable object with a matching
``calculate_signature`` method can be injected, which keeps signing
replaceable in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Protocol, runtime_checkable

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature

from .algorithms import SignatureAlgorithm
from .errors import InvalidKeyError, NoSuchAlgorithmError, SignatureComputationError

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes


@runtime_checkable
class SignatureCalculator(Protocol):
    """Computes a raw signature over a byte payload.

    Implementations report failures with ``NoSuchAlgorithmError``,
    ``InvalidKeyError`` or ``SignatureComputationError``.
    """

    def calculate_signature(
        self,
        private_key: PrivateKeyTypes,
        algorithm: SignatureAlgorithm,
        data: bytes,
    ) -> bytes:
        """Sign ``data`` with ``private_key`` using ``algorithm``."""
        ...


class CryptographySignatureCalculator:
    """Signature calculator backed by the ``cryptography`` package.

    RS256 signs with RSASSA-PKCS1-v1_5 and SHA-256. ES256 signs with ECDSA
    over P-256 and SHA-256, returning the fixed-size ``r || s`` encoding
    required by JWS (RFC 7518 section 3.4) instead of DER.
    """

    def calculate_signature(
        self,
        private_key: PrivateKeyTypes,
        algorithm: SignatureAlgorithm,
        data: bytes,
    ) -> bytes:
        if algorithm is SignatureAlgorithm.RS256:
            if not isinstance(private_key, rsa.RSAPrivateKey):
                raise InvalidKeyError(
                    f"{algorithm.native_signature} requires an RSA private key, "
                    f"got {type(private_key).__name__}"
                )
            return self._sign(
                lambda: private_key.sign(data, padding.PKCS1v15(), hashes.SHA256())
            )

        if algorithm is SignatureAlgorithm.ES256:
            if not isinstance(private_key, ec.EllipticCurvePrivateKey):
                raise InvalidKeyError(
                    f"{algorithm.native_signature} requires an EC private key, "
                    f"got {type(private_key).__name__}"
                )
            if not isinstance(private_key.curve, ec.SECP256R1):
                raise InvalidKeyError(
                    f"{algorithm.value} requires a P-256 key, got {private_key.curve.name}"
                )
            der = self._sign(lambda: private_key.sign(data, ec.ECDSA(hashes.SHA256())))
            r, s = decode_dss_signature(der)
            size = (private_key.curve.key_size + 7) // 8
            return r.to_bytes(size, "big") + s.to_bytes(size, "big")

        raise NoSuchAlgorithmError(f"Unsupported signature algorithm: {algorithm}")

    @staticmethod
    def _sign(sign: Callable[[], bytes]) -> bytes:
        try:
            return sign()
        except UnsupportedAlgorithm as e:
            raise NoSuchAlgorithmError(str(e)) from e
        except (TypeError, ValueError) as e:
            raise SignatureComputationError(str(e)) from e
