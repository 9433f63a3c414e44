"""SQLAlchemy-backed user repository."""
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lending.models import User
from lending.repositories.base import Page


class SqlUserRepository:
    """User persistence on an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: int) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_username(
        self, username: str, with_subscriptions: bool = False
    ) -> Optional[User]:
        query = select(User).where(User.username == username)
        if with_subscriptions:
            query = query.options(selectinload(User.subscribed_categories))
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def add(self, user: User) -> User:
        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)
        return user

    async def save(self, user: User) -> User:
        await self.db.flush()
        return user

    async def list_page(self, page: int, page_size: int) -> Page[User]:
        total = (await self.db.execute(select(func.count(User.id)))).scalar_one()

        query = (
            select(User)
            .order_by(User.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.db.execute(query)

        return Page(
            items=list(result.scalars().all()),
            total=total,
            page=page,
            page_size=page_size,
        )
