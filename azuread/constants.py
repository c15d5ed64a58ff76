from __future__ import annotations

OAUTH_TOKEN_PATH = "oauth2/token"
