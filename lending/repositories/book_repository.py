"""SQLAlchemy-backed book repository."""
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lending.models import Book
from lending.repositories.base import Page


class SqlBookRepository:
    """Book persistence on an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, book_id: int) -> Optional[Book]:
        result = await self.db.execute(select(Book).where(Book.id == book_id))
        return result.scalar_one_or_none()

    async def get_for_update(self, book_id: int) -> Optional[Book]:
        """SELECT ... FOR UPDATE on the book's row.

        Dialects without row locks (SQLite) drop the clause; there the
        version column makes the losing writer's UPDATE fail instead.
        """
        result = await self.db.execute(
            select(Book)
            .where(Book.id == book_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def add(self, book: Book) -> Book:
        self.db.add(book)
        await self.db.flush()
        await self.db.refresh(book)
        return book

    async def save(self, book: Book) -> Book:
        await self.db.flush()
        return book

    async def list_page(self, page: int, page_size: int) -> Page[Book]:
        total = (await self.db.execute(select(func.count(Book.id)))).scalar_one()

        query = (
            select(Book)
            .order_by(Book.id)
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

    async def list_borrowed_by(self, user_id: int) -> list[Book]:
        result = await self.db.execute(
            select(Book).where(Book.user_id == user_id).order_by(Book.id)
        )
        return list(result.scalars().all())
