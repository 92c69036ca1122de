"""Session token decoding.

Tokens are issued by the external session provider and signed with the
shared session secret. This module only reads them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import jwt


@dataclass(frozen=True, slots=True)
class SessionClaims:
    """Parsed and validated claims from a session JWT."""

    sub: str  # user id
    tenant_id: str | None
    role: str | None
    email: str
    tenant_slug: str | None


def decode_session_token(token: str, secret: str, algorithm: str = "HS256") -> SessionClaims:
    """Verify a session JWT and return parsed claims.

    Raises jwt.PyJWTError on invalid/expired tokens.
    """
    payload: dict[str, Any] = jwt.decode(
        token,
        secret,
        algorithms=[algorithm],
        options={"require": ["sub"], "verify_aud": False},
    )
    return SessionClaims(
        sub=str(payload["sub"]),
        tenant_id=payload.get("tenant_id"),
        role=payload.get("role"),
        email=payload.get("email", ""),
        tenant_slug=payload.get("tenant_slug"),
    )
