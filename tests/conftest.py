"""Shared fixtures: a throwaway SQLite database per test and captured messages."""
import asyncio
from collections import defaultdict
from typing import Any, Optional

import pytest

from lending.config import settings
from lending.core.events import EventDispatcher
from lending.core.unit_of_work import UnitOfWork
from lending.database import build_engine, build_session_factory, init_db
from lending.models import Book, Category, User, UserRole
from lending.services.book_service import BookService
from lending.services.notification_service import MessageSender


class InMemoryTransport:
    """Keeps messages in one asyncio queue per queue name."""

    def __init__(self):
        self._queues: dict[str, asyncio.Queue] = defaultdict(asyncio.Queue)

    async def send(self, queue: str, payload: Any) -> None:
        await self._queues[queue].put(payload)

    def drain(self, queue: str) -> list[Any]:
        """Remove and return everything waiting on ``queue``."""
        pending = self._queues[queue]
        items = []
        while not pending.empty():
            items.append(pending.get_nowait())
        return items


@pytest.fixture
async def engine(tmp_path):
    """Set up test database."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def transport():
    return InMemoryTransport()


@pytest.fixture
def dispatcher(transport):
    dispatcher = EventDispatcher()
    MessageSender(transport).attach(dispatcher)
    return dispatcher


@pytest.fixture
def uow(session_factory, dispatcher):
    return UnitOfWork(session_factory, dispatcher)


@pytest.fixture
def add_user(session_factory):
    """Insert a user directly, skipping password hashing."""

    async def _add(
        username: str,
        role: UserRole = UserRole.CUSTOMER,
        email: Optional[str] = None,
    ) -> User:
        async with session_factory() as session:
            user = User(
                first_name=username.capitalize(),
                last_name="Tester",
                username=username,
                email=email or f"{username}@example.com",
                password_hash="not-a-real-hash",
                role=role,
            )
            session.add(user)
            await session.commit()
            return user

    return _add


@pytest.fixture
def add_category(session_factory):
    async def _add(name: str, subscribers: tuple[User, ...] = ()) -> Category:
        async with session_factory() as session:
            category = Category(name=name)
            for user in subscribers:
                category.subscribers.add(await session.merge(user))
            session.add(category)
            await session.commit()
            return category

    return _add


@pytest.fixture
def add_book(uow, transport):
    """Catalog a book through the service and forget the messages it produced."""

    async def _add(
        title: str = "Dune",
        author: str = "Frank Herbert",
        category_id: Optional[int] = None,
    ) -> Book:
        book = await uow.run(
            "books.create",
            None,
            lambda repos: BookService(repos).create(title, author, category_id),
        )
        for queue in (
            settings.info_queue,
            settings.email_info_queue,
            settings.performance_info_queue,
        ):
            transport.drain(queue)
        return book

    return _add


@pytest.fixture
def load_book(uow):
    async def _load(book_id: int) -> Optional[Book]:
        return await uow.read("books.get", None, lambda repos: repos.books.get(book_id))

    return _load
