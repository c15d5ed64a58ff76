"""Token flows.

A flow owns everything that changes over its lifetime: the per-flow state
value, the authorization code and the cached token. The protocol details are
delegated to a :class:`~oauth2.grants.Grant`.

Flows are synchronous. Each instance serialises its cache check and token
exchange behind a lock, but it is meant to be driven by one caller through a
single authorization cycle and then discarded.
"""

from __future__ import annotations

import threading
import time
import uuid
from typing import Callable

from tokenclient.constants import LOGGER
from tokenclient.http import HttpxTransport, Transport
from tokenclient.tokens import WebToken, decode_token

from . import urls
from .errors import FlowStateError, InvalidStateError, MissingAuthorizationCodeError
from .grants import AuthorizationCodeGrant, Grant
from .models import CachedToken, FlowState, ProtocolRequest


class TokenFlow:
    def __init__(
        self,
        grant: Grant,
        *,
        transport: Transport | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.grant = grant
        self._own_transport = transport is None
        self._transport = transport or HttpxTransport()
        self._clock = clock
        self._flow_id = uuid.uuid4().hex
        self._state = FlowState.CREATED
        self._cached_token: CachedToken | None = None
        self._lock = threading.Lock()

    @property
    def flow_id(self) -> str:
        return self._flow_id

    @property
    def state(self) -> FlowState:
        return self._state

    @property
    def cached_token(self) -> CachedToken | None:
        return self._cached_token

    def get_access_token_string(self) -> str:
        with self._lock:
            return self._request_access_token()

    def get_access_token(self) -> WebToken:
        return decode_token(self.get_access_token_string())

    def _request_access_token(self) -> str:
        cached = self._cached_token
        if cached is not None and not cached.is_stale(self._clock()):
            LOGGER.debug(
                "Reusing cached token flow=%s expires_at=%s", self._flow_id, cached.expires_at
            )
            return cached.access_token

        parameters = self._token_parameters()
        request = ProtocolRequest(url=self.grant.token_endpoint(), body_parameters=parameters)
        LOGGER.debug(
            "Exchanging %s grant flow=%s endpoint=%s",
            parameters.get("grant_type"),
            self._flow_id,
            request.url,
        )
        now = self._clock()
        response = self._transport.send(request)
        token = self.grant.extract_token(response, now)

        self._cached_token = token
        self._state = FlowState.TOKEN_CACHED
        return token.access_token

    def _token_parameters(self) -> dict[str, str]:
        return self.grant.token_parameters()

    def close(self) -> None:
        if self._own_transport:
            self._transport.close()

    def __enter__(self) -> "TokenFlow":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ClientCredentialsFlow(TokenFlow):
    """Two-legged flow: client credentials are exchanged directly for a token."""


class AuthorizationCodeFlow(TokenFlow):
    """Three-legged authorization code flow.

    ``require_state`` controls callbacks that come back without a ``state``
    parameter. By default they are accepted and a warning is logged; set it
    to ``True`` to reject them.
    """

    grant: AuthorizationCodeGrant

    def __init__(
        self,
        grant: AuthorizationCodeGrant,
        *,
        transport: Transport | None = None,
        clock: Callable[[], float] = time.time,
        require_state: bool = False,
    ) -> None:
        super().__init__(grant, transport=transport, clock=clock)
        self.require_state = require_state
        self._authorization_code: str | None = None

    @property
    def authorization_code(self) -> str | None:
        return self._authorization_code

    def build_authorization_uri(self) -> str:
        parameters = self.grant.authorization_parameters(self.flow_id)
        return urls.compose(self.grant.authorization_endpoint(), parameters)

    def accept_callback(self, result_uri: str) -> None:
        _, parameters = urls.parse(result_uri)

        state = self.grant.extract_state(parameters)
        if state:
            self._verify_state(state)
        elif self.require_state:
            raise InvalidStateError("Callback is missing the state parameter.")
        else:
            LOGGER.warning(
                "Callback has no state parameter; skipping verification flow=%s", self.flow_id
            )

        with self._lock:
            if self._state is not FlowState.CREATED:
                raise FlowStateError(
                    f"Flow already received an authorization code (state={self._state.value})."
                )

            code = self.grant.extract_code(parameters)
            if not code:
                raise MissingAuthorizationCodeError()

            self._authorization_code = code
            self._state = FlowState.CODE_RECEIVED

    def _verify_state(self, state: str) -> None:
        if state.casefold() != self.flow_id.casefold():
            raise InvalidStateError()

    def _request_access_token(self) -> str:
        if self._state is FlowState.CREATED:
            raise FlowStateError("No authorization code received; call accept_callback first.")
        return super()._request_access_token()

    def _token_parameters(self) -> dict[str, str]:
        return self.grant.token_parameters(self._authorization_code)
