"""Builder for signed JWTs used in tests and mock identity providers.

A ``TokenBuilder`` collects header parameters and claims, produces the
compact serialization ``base64url(header).base64url(claims).base64url(signature)``
and delegates signing to a ``SignatureCalculator``. Builders hold plain
mutable state and must not be shared between threads.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Self

from cryptography.exceptions import InvalidKey, InvalidSignature, UnsupportedAlgorithm
from jwt.utils import base64url_encode

from .algorithms import SignatureAlgorithm
from .config import IdentityService
from .errors import InvalidArgumentError, SignatureCalculationError, SigningError
from .resources import load_claims
from .signature import CryptographySignatureCalculator, SignatureCalculator
from .telemetry import get_logger
from .token import Token

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

    SignatureFunction = Callable[[PrivateKeyTypes, SignatureAlgorithm, bytes], bytes]

NO_EXPIRE_DATE = datetime(2190, 12, 31, tzinfo=UTC)

# Header parameters
ALGORITHM = "alg"
TYPE = "typ"
TYPE_JWT = "JWT"

# Claims
EXPIRATION = "exp"
SCOPES = "scope"
CLIENT_ID = "client_id"
XSUAA_CLIENT_ID = "cid"
AUDIENCE = "aud"
AUTHORIZED_PARTY = "azp"
APP_ID = "app_id"

_SIGNING_FAILURES = (
    SignatureCalculationError,
    UnsupportedAlgorithm,
    InvalidKey,
    InvalidSignature,
)


class TokenBuilder:
    """Fluent builder for encoded JWTs.

    Use ``create`` to inject a signature calculator, or ``for_service`` to
    sign with ``CryptographySignatureCalculator``. Every setter overrides a
    previous value for the same name and returns the builder.
    """

    def __init__(
        self,
        service: IdentityService,
        signature_calculator: SignatureCalculator | SignatureFunction,
        client_id: str,
    ) -> None:
        self._service = service
        self._signature_calculator = signature_calculator
        self._client_id = client_id
        self._header_parameters: dict[str, str] = {}
        self._claims: dict[str, Any] = {}
        self._expiration = NO_EXPIRE_DATE
        self._signature_algorithm = SignatureAlgorithm.RS256
        self._private_key: PrivateKeyTypes | None = None
        self._scopes: list[str] = []
        self._local_scopes: list[str] = []
        self._app_id: str | None = None
        self._logger = get_logger()

    @classmethod
    def create(
        cls,
        service: IdentityService,
        signature_calculator: SignatureCalculator | SignatureFunction | None,
        client_id: str,
    ) -> TokenBuilder:
        """Create a builder for ``service`` tokens issued to ``client_id``.

        Raises:
            InvalidArgumentError: If ``signature_calculator`` is None.
        """
        if signature_calculator is None:
            raise InvalidArgumentError(
                "SignatureCalculator must not be None", argument="signature_calculator"
            )
        builder = cls(service, signature_calculator, client_id)
        builder._set_default_claims()
        return builder

    @classmethod
    def for_service(cls, service: IdentityService, client_id: str) -> TokenBuilder:
        """Create a builder that signs with the ``cryptography`` package."""
        return cls.create(service, CryptographySignatureCalculator(), client_id)

    def _set_default_claims(self) -> None:
        if self._service is IdentityService.XSUAA:
            self._claims[XSUAA_CLIENT_ID] = self._client_id
            self._claims[CLIENT_ID] = self._client_id
        else:
            self._claims[AUDIENCE] = self._client_id
            self._claims[AUTHORIZED_PARTY] = self._client_id

    def with_header_parameter(self, name: str, value: str) -> Self:
        self._header_parameters[name] = value
        return self

    def with_claim_value(self, name: str, value: str | dict[str, Any]) -> Self:
        self._claims[name] = value
        return self

    def with_claim_values(self, name: str, *values: str) -> Self:
        self._claims[name] = list(values)
        return self

    def with_claims_from_resource(self, resource: str | Path) -> Self:
        """Set all claims of the JSON object stored in ``resource``.

        Raises:
            ClaimsResourceError: If the resource cannot be read or parsed.
        """
        self._claims.update(load_claims(resource))
        return self

    def with_expiration(self, expiration: datetime) -> Self:
        if expiration.tzinfo is None:
            expiration = expiration.replace(tzinfo=UTC)
        self._expiration = expiration
        return self

    def with_signature_algorithm(self, signature_algorithm: SignatureAlgorithm) -> Self:
        self._signature_algorithm = signature_algorithm
        return self

    def with_private_key(self, private_key: PrivateKeyTypes) -> Self:
        self._private_key = private_key
        return self

    def with_scopes(self, *scopes: str) -> Self:
        if self._service is IdentityService.IAS:
            msg = f"Scopes are not supported for service {self._service.value}"
            raise InvalidArgumentError(msg, argument="scopes")
        self._scopes = list(scopes)
        return self

    def with_local_scopes(self, *scopes: str) -> Self:
        """Set scopes that are prefixed with the app id.

        Raises:
            InvalidArgumentError: If the app id has not been set.
        """
        if self._app_id is None:
            raise InvalidArgumentError(
                "Cannot create local scopes because app id has not been set",
                argument="app_id",
            )
        self._local_scopes = list(scopes)
        return self

    def with_app_id(self, app_id: str) -> Self:
        self._app_id = app_id
        return self

    def build(self) -> str:
        """Build the encoded token.

        Returns:
            The compact serialized token. Without a private key the
            signature segment is empty.

        Raises:
            SigningError: If the signature calculator fails.
        """
        header = {
            **self._header_parameters,
            ALGORITHM: self._signature_algorithm.value,
            TYPE: TYPE_JWT,
        }
        signing_input = f"{_encode_json(header)}.{_encode_json(self._build_claims())}"

        signature = ""
        if self._private_key is not None:
            signature = base64url_encode(
                self._calculate_signature(signing_input.encode("ascii"))
            ).decode("ascii")

        self._logger.debug(
            "token_built",
            service=self._service.value,
            algorithm=self._signature_algorithm.value,
            signed=bool(signature),
        )
        return f"{signing_input}.{signature}"

    def build_token(self) -> Token:
        """Build the token and return its decoded view."""
        return Token.from_encoded(self.build(), self._service)

    def _build_claims(self) -> dict[str, Any]:
        claims = dict(self._claims)
        if self._scopes or self._local_scopes:
            claims[SCOPES] = [
                *self._scopes,
                *(f"{self._app_id}.{scope}" for scope in self._local_scopes),
            ]
        if self._app_id is not None:
            claims[APP_ID] = self._app_id
        if self._expiration != NO_EXPIRE_DATE:
            claims[EXPIRATION] = int(self._expiration.timestamp())
        return claims

    def _calculate_signature(self, data: bytes) -> bytes:
        calculator = self._signature_calculator
        calculate = getattr(calculator, "calculate_signature", calculator)
        try:
            return calculate(self._private_key, self._signature_algorithm, data)
        except _SIGNING_FAILURES as e:
            raise SigningError(
                f"Error creating token signature: {e}",
                algorithm=self._signature_algorithm.value,
            ) from e


def _encode_json(value: dict[str, Any]) -> str:
    data = json.dumps(value, separators=(",", ":")).encode("utf-8")
    return base64url_encode(data).decode("ascii")
