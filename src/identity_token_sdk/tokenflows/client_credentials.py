"""Client credentials grant (RFC 6749 section 4.4)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import TokenFlow

if TYPE_CHECKING:
    from ..models import TokenResponse


class ClientCredentialsTokenFlow(TokenFlow):
    """Requests a token for the client itself, using only its credentials."""

    flow_name = "client credentials flow"

    def _request_token(self, token_endpoint: str) -> TokenResponse:
        return self._token_service.retrieve_access_token_via_client_credentials_grant(
            token_endpoint=token_endpoint,
            client_credentials=self._client_credentials,
            subdomain=self._subdomain,
            optional_parameters=self._optional_parameters,
        )
