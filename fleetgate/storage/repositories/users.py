"""User repository."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from fleetgate.access.principal import parse_role
from fleetgate.config.settings import BOOTSTRAP_ADMIN_ID, DEFAULT_TENANT_ID
from fleetgate.models.database import User
from fleetgate.types import Role

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = structlog.get_logger(__name__)


class DatabaseUserRepository:
    """Database-backed user store."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def create(
        self,
        tenant_id: str,
        email: str,
        name: str = "",
        role: Role | str = Role.VIEWER,
        user_id: str | None = None,
    ) -> User:
        async with AsyncSession(self._engine) as session:
            user = User(
                tenant_id=tenant_id,
                email=email,
                name=name or email,
                role=str(parse_role(str(role))),
                is_active=True,
            )
            if user_id:
                user.id = user_id
            session.add(user)
            await session.commit()
            await session.refresh(user)
        logger.info("user_created", user_id=user.id, tenant_id=tenant_id, role=user.role)
        return user

    async def get_by_id(self, user_id: str) -> User | None:
        async with AsyncSession(self._engine) as session:
            stmt = select(User).where(col(User.id) == user_id, col(User.is_active).is_(True))
            result = await session.execute(stmt)
            return result.scalars().first()

    async def get_by_email(self, email: str) -> User | None:
        async with AsyncSession(self._engine) as session:
            stmt = select(User).where(col(User.email) == email, col(User.is_active).is_(True))
            result = await session.execute(stmt)
            return result.scalars().first()

    async def ensure_bootstrap_admin(self) -> User:
        """Ensure the single-tenant admin user exists in the default tenant."""
        user = await self.get_by_id(BOOTSTRAP_ADMIN_ID)
        if user is not None:
            return user
        return await self.create(
            tenant_id=DEFAULT_TENANT_ID,
            email="admin@localhost",
            name="Administrator",
            role=Role.ADMIN,
            user_id=BOOTSTRAP_ADMIN_ID,
        )
