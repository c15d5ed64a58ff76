from __future__ import annotations

import urllib.parse
import uuid

from oauth2.errors import ConfigurationError, MalformedServiceUriError
from oauth2.grants import ClientCredentialsGrant, Grant
from oauth2.models import CachedToken, ProtocolResponse, TokenRequestParameters

from .constants import OAUTH_TOKEN_PATH


def _is_guid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def validate_service_uri(service_uri: str) -> None:
    path = urllib.parse.urlparse(service_uri).path
    last_segment = path.rstrip("/").rsplit("/", 1)[-1]
    if last_segment and _is_guid(last_segment):
        raise MalformedServiceUriError(
            f"Service URI {service_uri!r} already ends in a tenant id; "
            "pass the tenant-less base URI."
        )


class AzureAdClientCredentialsGrant(Grant):
    """Client credentials grant against an Azure AD tenant.

    Posts to ``{service_uri}/oauth2/token`` and sends ``resource`` in place of
    ``scope``. Everything else is delegated to a plain
    :class:`~oauth2.grants.ClientCredentialsGrant`.
    """

    grant_type = ClientCredentialsGrant.grant_type

    def __init__(self, service_uri: str, parameters: TokenRequestParameters) -> None:
        validate_service_uri(service_uri)
        if not parameters.resource:
            raise ConfigurationError("Azure AD client credentials grant requires a resource.")
        super().__init__(service_uri, parameters)
        self._base = ClientCredentialsGrant(service_uri, parameters)

    def token_endpoint(self) -> str:
        parsed = urllib.parse.urlparse(self.service_uri)
        path = f"{parsed.path.rstrip('/')}/{OAUTH_TOKEN_PATH}"
        return urllib.parse.urlunparse(parsed._replace(path=path, query="", fragment=""))

    def token_parameters(self, code: str | None = None) -> dict[str, str]:
        parameters = self._base.token_parameters(code)
        parameters.pop("scope", None)
        parameters["resource"] = self.parameters.resource
        return parameters

    def extract_token(self, response: ProtocolResponse, now: float) -> CachedToken:
        return self._base.extract_token(response, now)
