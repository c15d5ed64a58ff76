from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from oauth2.errors import ConfigurationError
from oauth2.models import TokenRequestParameters

from .constants import DEFAULT_ENV_PREFIX, DEFAULT_HTTP_TIMEOUT_SECONDS, LOGGER
from .http import HttpxTransport


def is_truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_env(key: str) -> str | None:
    raw = os.getenv(key, "").strip()
    return raw or None


def _get_env_int(key: str, default: int) -> int:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer value.")


def load_env(env_path: str | Path | None = None) -> bool:
    path = Path(env_path) if env_path is not None else Path.cwd() / ".env"
    if not path.exists():
        return False
    from dotenv import load_dotenv

    return load_dotenv(path, override=True)


def setup_logging() -> bool:
    debug_enabled = is_truthy(os.getenv("TOKENCLIENT_DEBUG"))
    if debug_enabled:
        logging.basicConfig(level=logging.INFO)
        LOGGER.setLevel(logging.INFO)
    return debug_enabled


@dataclass(frozen=True)
class ClientSettings:
    service_uri: str
    client_id: str
    client_secret: str = ""
    redirect_uri: str | None = None
    scope: str | None = None
    resource: str | None = None
    http_timeout: int = DEFAULT_HTTP_TIMEOUT_SECONDS

    def token_request_parameters(self) -> TokenRequestParameters:
        return TokenRequestParameters(
            client_id=self.client_id,
            client_secret=self.client_secret,
            redirect_uri=self.redirect_uri,
            scope=self.scope,
            resource=self.resource,
        )

    def transport(self) -> HttpxTransport:
        return HttpxTransport(timeout=self.http_timeout)


def settings_from_env(prefix: str = DEFAULT_ENV_PREFIX) -> ClientSettings:
    required = (f"{prefix}SERVICE_URI", f"{prefix}CLIENT_ID")
    missing = [key for key in required if _get_env(key) is None]
    if missing:
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

    timeout = _get_env_int(f"{prefix}HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT_SECONDS)
    if timeout <= 0:
        raise ConfigurationError(f"{prefix}HTTP_TIMEOUT must be a positive number of seconds.")

    return ClientSettings(
        service_uri=_get_env(f"{prefix}SERVICE_URI"),
        client_id=_get_env(f"{prefix}CLIENT_ID"),
        client_secret=_get_env(f"{prefix}CLIENT_SECRET") or "",
        redirect_uri=_get_env(f"{prefix}REDIRECT_URI"),
        scope=_get_env(f"{prefix}SCOPE"),
        resource=_get_env(f"{prefix}RESOURCE"),
        http_timeout=timeout,
    )
