"""SQLAlchemy-backed category repository."""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lending.models import Category


class SqlCategoryRepository:
    """Category persistence on an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(
        self, category_id: int, with_subscribers: bool = False
    ) -> Optional[Category]:
        query = select(Category).where(Category.id == category_id)
        if with_subscribers:
            query = query.options(selectinload(Category.subscribers))
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[Category]:
        result = await self.db.execute(select(Category).where(Category.name == name))
        return result.scalar_one_or_none()

    async def add(self, category: Category) -> Category:
        self.db.add(category)
        await self.db.flush()
        await self.db.refresh(category)
        return category

    async def list_all(self) -> list[Category]:
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())
