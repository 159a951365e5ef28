"""Pydantic models for the identity token SDK.

Frozen models for the values exchanged with a token endpoint.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class ClientCredentials(BaseModel):
    """OAuth 2.0 client id and secret."""

    model_config = ConfigDict(frozen=True)

    client_id: str = Field(..., min_length=1)
    client_secret: SecretStr


class TokenResponse(BaseModel):
    """OAuth 2.0 token response from the token endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: str = Field(..., min_length=1)
    expires_in: Annotated[int, Field(ge=0)]
    refresh_token: str | None = None
    token_type: str = Field(default="bearer")
    scope: str | None = None

    @property
    def scopes(self) -> list[str]:
        """Granted scopes as list."""
        if self.scope is None:
            return []
        return self.scope.split()


class TokenRequest(BaseModel):
    """OAuth 2.0 token request parameters."""

    model_config = ConfigDict(frozen=True)

    grant_type: str
    client_credentials: ClientCredentials
    username: str | None = None
    password: SecretStr | None = None
    refresh_token: str | None = None
    code: str | None = None
    redirect_uri: str | None = None
    code_verifier: str | None = None
    assertion: str | None = None
    optional_parameters: dict[str, str] | None = None

    def to_form_data(self) -> dict[str, str]:
        """Convert to form data for the token request.

        Optional parameters are applied last and may replace any standard
        parameter, including ``grant_type``.
        """
        data: dict[str, str] = {
            "grant_type": self.grant_type,
            "client_id": self.client_credentials.client_id,
            "client_secret": self.client_credentials.client_secret.get_secret_value(),
        }
        if self.username is not None:
            data["username"] = self.username
        if self.password is not None:
            data["password"] = self.password.get_secret_value()
        if self.refresh_token is not None:
            data["refresh_token"] = self.refresh_token
        if self.code is not None:
            data["code"] = self.code
        if self.redirect_uri is not None:
            data["redirect_uri"] = self.redirect_uri
        if self.code_verifier is not None:
            data["code_verifier"] = self.code_verifier
        if self.assertion is not None:
            data["assertion"] = self.assertion
        if self.optional_parameters:
            data.update(self.optional_parameters)
        return data
