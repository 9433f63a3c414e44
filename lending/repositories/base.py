"""Repository interfaces and paging contract.

Services depend on these protocols only; the SQLAlchemy implementations live
next to this module and are bundled per session by :class:`Repositories`.
"""
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, Optional, Protocol, TypeVar

from lending.core.exceptions import InvalidArgumentError
from lending.models import Book, Category, User

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of a listing. Page numbers start at 1."""

    items: list[T]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total else 0


def validate_page(page: int, page_size: int) -> None:
    """Reject page requests below the first page or with an empty size."""
    if page < 1:
        raise InvalidArgumentError("page index must not be less than zero", field="page")
    if page_size < 1:
        raise InvalidArgumentError("page size must not be less than one", field="page_size")


class BookRepository(Protocol):
    async def get(self, book_id: int) -> Optional[Book]:
        ...

    async def get_for_update(self, book_id: int) -> Optional[Book]:
        """Load a book holding an exclusive lock until the transaction ends."""
        ...

    async def add(self, book: Book) -> Book:
        ...

    async def save(self, book: Book) -> Book:
        ...

    async def list_page(self, page: int, page_size: int) -> Page[Book]:
        ...

    async def list_borrowed_by(self, user_id: int) -> list[Book]:
        ...


class UserRepository(Protocol):
    async def get(self, user_id: int) -> Optional[User]:
        ...

    async def get_by_username(
        self, username: str, with_subscriptions: bool = False
    ) -> Optional[User]:
        ...

    async def get_by_email(self, email: str) -> Optional[User]:
        ...

    async def add(self, user: User) -> User:
        ...

    async def save(self, user: User) -> User:
        ...

    async def list_page(self, page: int, page_size: int) -> Page[User]:
        ...


class CategoryRepository(Protocol):
    async def get(
        self, category_id: int, with_subscribers: bool = False
    ) -> Optional[Category]:
        ...

    async def get_by_name(self, name: str) -> Optional[Category]:
        ...

    async def add(self, category: Category) -> Category:
        ...

    async def list_all(self) -> list[Category]:
        ...


@dataclass
class Repositories:
    """The repositories of one unit of work, sharing a single session."""

    books: BookRepository
    users: UserRepository
    categories: CategoryRepository

    @classmethod
    def from_session(cls, session: "AsyncSession") -> "Repositories":
        from lending.repositories.book_repository import SqlBookRepository
        from lending.repositories.category_repository import SqlCategoryRepository
        from lending.repositories.user_repository import SqlUserRepository

        return cls(
            books=SqlBookRepository(session),
            users=SqlUserRepository(session),
            categories=SqlCategoryRepository(session),
        )
