"""Book lending lifecycle: cataloging, blocking, borrowing and returning."""
from datetime import date
from typing import Callable, Optional

from lending.core.events import BookSnapshot, DomainEvent, EventType, Outcome, Recipient
from lending.core.exceptions import InvalidArgumentError, NotFoundError
from lending.core.logging import get_logger
from lending.core.policy import ensure_access
from lending.models.book import Book, BookState
from lending.models.user import UserRole
from lending.repositories import Page, Repositories, validate_page

logger = get_logger("services.book")


def snapshot(book: Book) -> BookSnapshot:
    return BookSnapshot(
        id=book.id,
        title=book.title,
        author=book.author,
        category=book.category.name if book.category else None,
    )


class BookService:
    """Service for the lending lifecycle of books.

    A book is READY or BORROWED; ``blocked`` is a separate flag that stops
    new loans without touching the state. Every mutation returns the events
    to deliver once the surrounding transaction commits.
    """

    def __init__(self, repos: Repositories, today: Callable[[], date] = date.today):
        self.books = repos.books
        self.users = repos.users
        self.categories = repos.categories
        self._today = today

    async def create(
        self,
        title: str,
        author: str,
        category_id: Optional[int] = None,
    ) -> Outcome[Book]:
        """Catalog a new, unblocked, READY book."""
        category = None
        if category_id is not None:
            category = await self.categories.get(category_id, with_subscribers=True)
            if category is None:
                raise NotFoundError("Category", category_id)

        book = Book(
            title=title,
            author=author,
            blocked=False,
            state=BookState.READY,
            category=category,
        )
        book = await self.books.add(book)

        recipients: tuple[Recipient, ...] = ()
        if category is not None:
            recipients = tuple(
                Recipient(
                    email=user.email,
                    first_name=user.first_name,
                    last_name=user.last_name,
                )
                for user in sorted(category.subscribers, key=lambda u: u.id)
            )

        logger.info("Created %r", book)
        return Outcome(
            book,
            [
                DomainEvent(
                    event_type=EventType.BOOK_CREATED,
                    message=f"{book!r} has been created",
                    book=snapshot(book),
                    recipients=recipients,
                )
            ],
        )

    async def block(self, book_id: int) -> Outcome[Book]:
        """Block a book. Blocking an already blocked book is not an error."""
        book = await self.books.get(book_id)
        if book is None:
            raise NotFoundError("Book", book_id)

        book.blocked = True
        book = await self.books.save(book)

        logger.info("Blocked %r", book)
        return Outcome(
            book,
            [
                DomainEvent(
                    event_type=EventType.BOOK_BLOCKED,
                    message=f"{book!r} has been blocked",
                    book=snapshot(book),
                )
            ],
        )

    async def borrow(self, username: str, book_id: int, to_date: date) -> Outcome[Book]:
        """Lend a book to ``username`` until ``to_date``.

        The book row stays locked from the read until the transaction ends,
        so of several concurrent borrowers exactly one sees it READY.
        """
        today = self._today()
        if to_date < today:
            raise InvalidArgumentError(
                "Date 'to' cannot be before today's date", field="to_date"
            )

        book = await self.books.get_for_update(book_id)
        if book is None:
            raise NotFoundError("Book", book_id)
        if book.blocked:
            raise InvalidArgumentError(f"Book with id: {book_id} cannot be borrowed")
        if book.state == BookState.BORROWED:
            raise InvalidArgumentError(f"Book is borrowed to: {book.to_date.isoformat()}")

        user = await self.users.get_by_username(username)
        if user is None:
            raise NotFoundError("User", username, key="username")

        book.lend_to(user, today, to_date)
        book = await self.books.save(book)

        logger.info("Lent %r to %s until %s", book, username, to_date)
        return Outcome(
            book,
            [
                DomainEvent(
                    event_type=EventType.BOOK_BORROWED,
                    message=f"{book!r} has been borrowed",
                    book=snapshot(book),
                )
            ],
        )

    async def return_book(self, username: str, role: UserRole, book_id: int) -> Outcome[Book]:
        """Return a borrowed book.

        Customers may only return their own loans; employees may return any.
        """
        book = await self.books.get(book_id)
        if book is None:
            raise NotFoundError("Book", book_id)
        if book.user is None:
            raise InvalidArgumentError(f"Book with id: {book_id} is not borrowed")

        ensure_access(
            role,
            username,
            book.user.username,
            message=f"No access to book with id: {book_id}",
        )

        book.release()
        book = await self.books.save(book)

        logger.info("%r returned by %s (%s)", book, username, role.value)
        return Outcome(
            book,
            [
                DomainEvent(
                    event_type=EventType.BOOK_RETURNED,
                    message=(
                        f"{book!r} was returned by user: {username} "
                        f"with role {role.value}"
                    ),
                    book=snapshot(book),
                )
            ],
        )

    async def list_books(self, page: int, page_size: int) -> Page[Book]:
        """List books ordered by id. Pages start at 1."""
        validate_page(page, page_size)
        return await self.books.list_page(page, page_size)
