from __future__ import annotations

from dataclasses import dataclass, field

import jwt

from oauth2.errors import TokenDecodeError


@dataclass
class WebToken:
    raw: str
    issuer: str | None = None
    subject: str | None = None
    audience: str | list[str] | None = None
    expires_at: float | None = None
    claims: dict = field(default_factory=dict)

    def __str__(self) -> str:
        return self.raw


def decode_token(raw: str) -> WebToken:
    """Decode an access token into its claims without verifying the signature."""
    try:
        claims = jwt.decode(
            raw,
            options={"verify_signature": False, "verify_exp": False, "verify_aud": False},
        )
    except jwt.PyJWTError as error:
        raise TokenDecodeError(f"Access token is not a valid JWT: {error}") from error

    expires_at = claims.get("exp")
    return WebToken(
        raw=raw,
        issuer=claims.get("iss"),
        subject=claims.get("sub"),
        audience=claims.get("aud"),
        expires_at=float(expires_at) if isinstance(expires_at, (int, float)) else None,
        claims=claims,
    )
