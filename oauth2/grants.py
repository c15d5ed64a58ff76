"""Grant strategies.

A grant decides which endpoints a flow talks to, which parameters it sends and
how the token response is read. Flows in :mod:`oauth2.flows` call these steps
in a fixed order, so a provider with its own endpoint shape or parameter set
supplies a different grant instead of a different flow.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .errors import ConfigurationError, TokenExchangeError
from .models import CachedToken, ProtocolResponse, TokenRequestParameters
from .urls import resolve

AUTHORIZATION_PATH = "authorize"
TOKEN_PATH = "token"


def _error_detail(response: ProtocolResponse) -> str:
    error = response.body_parameters.get("error")
    description = response.body_parameters.get("error_description")
    if error and description:
        return f"{error}: {description}"
    if error:
        return error
    return response.body_parameters.get("raw", "")


class Grant(ABC):
    grant_type: str

    def __init__(self, service_uri: str, parameters: TokenRequestParameters) -> None:
        if not service_uri:
            raise ConfigurationError("Service URI is required.")
        if not parameters.client_id:
            raise ConfigurationError("Client id is required.")
        self.service_uri = service_uri
        self.parameters = parameters

    def token_endpoint(self) -> str:
        return resolve(self.service_uri, TOKEN_PATH)

    @abstractmethod
    def token_parameters(self, code: str | None = None) -> dict[str, str]:
        raise NotImplementedError

    def extract_token(self, response: ProtocolResponse, now: float) -> CachedToken:
        if not response.ok:
            detail = _error_detail(response)
            message = f"Token request failed with status {response.status_code}"
            raise TokenExchangeError(
                f"{message}: {detail}" if detail else f"{message}.",
                status_code=response.status_code,
            )

        body = response.body_parameters
        missing = [
            key for key in ("token_type", "access_token", "expires_in") if not body.get(key)
        ]
        if missing:
            raise TokenExchangeError(
                f"Token response missing {', '.join(missing)}.",
                status_code=response.status_code,
            )

        try:
            lifetime = int(body["expires_in"])
        except ValueError as error:
            raise TokenExchangeError(
                f"Token response expires_in must be an integer, got {body['expires_in']!r}.",
                status_code=response.status_code,
            ) from error

        return CachedToken(
            access_token=body["access_token"],
            token_type=body["token_type"],
            expires_at=now + lifetime,
        )


class ClientCredentialsGrant(Grant):
    grant_type = "client_credentials"

    def token_parameters(self, code: str | None = None) -> dict[str, str]:
        parameters = {
            "grant_type": self.grant_type,
            "client_id": self.parameters.client_id,
            "client_secret": self.parameters.client_secret,
        }
        if self.parameters.scope is not None:
            parameters["scope"] = self.parameters.scope
        return parameters


class AuthorizationCodeGrant(Grant):
    grant_type = "authorization_code"

    def __init__(self, service_uri: str, parameters: TokenRequestParameters) -> None:
        super().__init__(service_uri, parameters)
        if not parameters.redirect_uri:
            raise ConfigurationError("Redirect URI is required for the authorization code grant.")

    def authorization_endpoint(self) -> str:
        return resolve(self.service_uri, AUTHORIZATION_PATH)

    def authorization_parameters(self, state: str) -> dict[str, str]:
        parameters = {
            "response_type": "code",
            "client_id": self.parameters.client_id,
            "redirect_uri": self.parameters.redirect_uri,
            "state": state,
        }
        if self.parameters.scope is not None:
            parameters["scope"] = self.parameters.scope
        return parameters

    def token_parameters(self, code: str | None = None) -> dict[str, str]:
        if not code:
            raise TokenExchangeError("Authorization code is required for the token request.")
        return {
            "grant_type": self.grant_type,
            "client_id": self.parameters.client_id,
            "client_secret": self.parameters.client_secret,
            "redirect_uri": self.parameters.redirect_uri,
            "code": code,
        }

    def extract_code(self, parameters: dict[str, str]) -> str | None:
        return parameters.get("code")

    def extract_state(self, parameters: dict[str, str]) -> str | None:
        return parameters.get("state")
