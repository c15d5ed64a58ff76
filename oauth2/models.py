from __future__ import annotations

import enum
import json
import time
from dataclasses import dataclass, field

from tokenclient.constants import TOKEN_EXPIRY_MARGIN_SECONDS


class FlowState(enum.Enum):
    CREATED = "created"
    CODE_RECEIVED = "code_received"
    TOKEN_CACHED = "token_cached"


@dataclass(frozen=True)
class TokenRequestParameters:
    client_id: str
    client_secret: str = ""
    redirect_uri: str | None = None
    scope: str | None = None
    resource: str | None = None


@dataclass
class CachedToken:
    access_token: str
    token_type: str
    expires_at: float

    def is_stale(
        self,
        now: float | None = None,
        *,
        margin: float = TOKEN_EXPIRY_MARGIN_SECONDS,
    ) -> bool:
        current = time.time() if now is None else now
        return self.expires_at < current + margin


@dataclass
class ProtocolRequest:
    url: str
    method: str = "POST"
    body_parameters: dict[str, str] = field(default_factory=dict)
    query_parameters: dict[str, str] = field(default_factory=dict)


@dataclass
class ProtocolResponse:
    status_code: int
    body_parameters: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @classmethod
    def from_payload(
        cls,
        status_code: int,
        payload: dict,
        headers: dict[str, str] | None = None,
    ) -> "ProtocolResponse":
        return cls(
            status_code=status_code,
            body_parameters=flatten_parameters(payload),
            headers=dict(headers or {}),
        )


def flatten_parameters(payload: dict) -> dict[str, str]:
    """Reduce a decoded JSON object to string keys and string values.

    Scalars are stringified, ``None`` is dropped and nested arrays or objects
    are serialised back to compact JSON.
    """
    flattened: dict[str, str] = {}
    for key, value in payload.items():
        if value is None:
            continue
        if isinstance(value, bool):
            flattened[str(key)] = "true" if value else "false"
        elif isinstance(value, (dict, list)):
            flattened[str(key)] = json.dumps(value, separators=(",", ":"))
        else:
            flattened[str(key)] = str(value)
    return flattened
