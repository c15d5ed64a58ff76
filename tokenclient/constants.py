from __future__ import annotations

import logging

LOGGER = logging.getLogger("tokenclient")
APP_VERSION = "0.1.0"

DEFAULT_ENV_PREFIX = "OAUTH2_"
DEFAULT_HTTP_TIMEOUT_SECONDS = 30

# A cached token this close to expiry is exchanged again.
TOKEN_EXPIRY_MARGIN_SECONDS = 60
