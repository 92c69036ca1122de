"""Tenant ids, principals and session tokens shared across tests."""

from __future__ import annotations

import jwt

from fleetgate.access.principal import Principal
from fleetgate.types import Role

TENANT_A = "aaaaaaaa-0000-0000-0000-000000000001"
TENANT_B = "bbbbbbbb-0000-0000-0000-000000000002"
SESSION_SECRET = "test-session-secret-with-enough-bytes"


def make_principal(tenant_id: str = TENANT_A, role: Role = Role.OPERATOR) -> Principal:
    return Principal(user_id=f"user-{tenant_id[:8]}-{role}", tenant_id=tenant_id, role=role)


def make_token(
    tenant_id: str | None = TENANT_A,
    role: str | None = "OPERATOR",
    sub: str = "user-1",
    secret: str = SESSION_SECRET,
) -> str:
    claims: dict[str, str] = {"sub": sub, "email": f"{sub}@example.com"}
    if tenant_id is not None:
        claims["tenant_id"] = tenant_id
    if role is not None:
        claims["role"] = role
    return jwt.encode(claims, secret, algorithm="HS256")


def auth(tenant_id: str | None = TENANT_A, role: str | None = "OPERATOR") -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(tenant_id=tenant_id, role=role)}"}
