"""Property-based tests for token flows.

Property: optional parameters and subdomains reach the token service
exactly as given.
"""

from __future__ import annotations

from unittest.mock import MagicMock

from hypothesis import given, settings
from hypothesis import strategies as st

from identity_token_sdk.endpoints import EndpointsProvider
from identity_token_sdk.models import ClientCredentials
from identity_token_sdk.token_service import TokenService
from identity_token_sdk.tokenflows import TokenFlows

TOKEN_ENDPOINT = "https://subdomain.auth.example.com/oauth/token"

parameters = st.dictionaries(st.text(min_size=1, max_size=20), st.text(max_size=40), max_size=8)
subdomains = st.none() | st.from_regex(r"[a-z][a-z0-9-]{0,20}", fullmatch=True)


def make_flows() -> tuple[TokenFlows, MagicMock]:
    token_service = MagicMock(spec=TokenService)
    endpoints_provider = MagicMock(spec=EndpointsProvider)
    endpoints_provider.token_endpoint = TOKEN_ENDPOINT
    credentials = ClientCredentials(client_id="client", client_secret="secret")
    return TokenFlows(token_service, endpoints_provider, credentials), token_service


class TestTokenFlowProperties:
    """Property tests for token flow execution."""

    @given(optional_parameters=parameters, subdomain=subdomains)
    @settings(max_examples=100)
    def test_password_flow_passes_parameters_verbatim(
        self, optional_parameters: dict[str, str], subdomain: str | None
    ) -> None:
        """Property: For any optional parameters, the service receives an equal mapping."""
        flows, token_service = make_flows()
        flow = flows.password_token_flow().username("u").password("p")
        flow.optional_parameters(optional_parameters)
        if subdomain is not None:
            flow.subdomain(subdomain)

        flow.execute()

        call = token_service.retrieve_access_token_via_password_grant.call_args
        assert call.kwargs["optional_parameters"] == optional_parameters
        assert call.kwargs["subdomain"] == subdomain

    @given(refresh_token=st.text(min_size=1, max_size=60))
    @settings(max_examples=100)
    def test_refresh_flow_passes_token_verbatim(self, refresh_token: str) -> None:
        """Property: For any refresh token, the service receives it unchanged."""
        flows, token_service = make_flows()

        flows.refresh_token_flow().refresh_token(refresh_token).execute()

        call = token_service.retrieve_access_token_via_refresh_token.call_args
        assert call.kwargs["refresh_token"] == refresh_token
