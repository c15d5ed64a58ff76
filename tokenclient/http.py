from __future__ import annotations

import logging
import urllib.parse
from abc import ABC, abstractmethod

import httpx

from oauth2.errors import TransportError
from oauth2.models import ProtocolRequest, ProtocolResponse, flatten_parameters

from .constants import APP_VERSION, DEFAULT_HTTP_TIMEOUT_SECONDS, LOGGER

USER_AGENT = f"tokenclient/{APP_VERSION}"


class Transport(ABC):
    @abstractmethod
    def send(self, request: ProtocolRequest) -> ProtocolResponse:
        raise NotImplementedError

    def close(self) -> None:
        return None


def _decode_body(response: httpx.Response) -> dict[str, str]:
    content_type = response.headers.get("content-type", "")
    if not response.content:
        return {}

    if "json" in content_type:
        try:
            payload = response.json()
        except ValueError as error:
            raise TransportError(
                "Token endpoint returned malformed JSON.",
                status_code=response.status_code,
            ) from error
        if not isinstance(payload, dict):
            raise TransportError(
                "Token endpoint returned JSON that is not an object.",
                status_code=response.status_code,
            )
        return flatten_parameters(payload)

    if "x-www-form-urlencoded" in content_type or "text/plain" in content_type:
        return dict(urllib.parse.parse_qsl(response.text, keep_blank_values=True))

    # Servers that omit the content type usually still send JSON.
    try:
        payload = response.json()
    except ValueError:
        return {"raw": response.text}
    if isinstance(payload, dict):
        return flatten_parameters(payload)
    return {"raw": response.text}


class HttpxTransport(Transport):
    """Send protocol requests with a blocking ``httpx.Client``.

    Token requests go out as form-encoded POST bodies, anything else as a GET
    with the parameters in the query string. Responses are decoded from JSON
    or form encoding. Error statuses are returned, not raised, so the flow can
    read the server's ``error`` fields. Nothing is retried.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        logger: logging.Logger | None = None,
    ) -> None:
        self._own_client = client is None
        self._client = client or httpx.Client(timeout=timeout)
        self._logger = logger or LOGGER
        self._headers = {"Accept": "application/json", "User-Agent": USER_AGENT}

    def send(self, request: ProtocolRequest) -> ProtocolResponse:
        method = request.method.upper()
        self._logger.info("Token client request %s %s", method, request.url)

        try:
            if method == "POST":
                response = self._client.post(
                    request.url,
                    data=request.body_parameters,
                    params=request.query_parameters or None,
                    headers=self._headers,
                )
            else:
                response = self._client.request(
                    method,
                    request.url,
                    params={**request.query_parameters, **request.body_parameters},
                    headers=self._headers,
                )
        except httpx.HTTPError as error:
            raise TransportError(f"Token request to {request.url} failed: {error}") from error

        self._logger.info(
            "Token client response %s %s status=%s",
            method,
            request.url,
            response.status_code,
        )
        return ProtocolResponse(
            status_code=response.status_code,
            body_parameters=_decode_body(response),
            headers=dict(response.headers),
        )

    def close(self) -> None:
        if self._own_client:
            self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
