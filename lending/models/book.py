"""Book model."""
from datetime import date
from enum import Enum as PyEnum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, Date, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lending.database import Base

if TYPE_CHECKING:
    from lending.models.category import Category
    from lending.models.user import User


class BookState(str, PyEnum):
    """Lending state of a book."""
    READY = "ready"
    BORROWED = "borrowed"


class Book(Base):
    """A lendable book.

    ``state`` is BORROWED exactly when ``user``, ``from_date`` and ``to_date``
    are all set. ``blocked`` is independent of the state. The ``version``
    column is bumped on every UPDATE so that a concurrent writer on a backend
    without row locks fails instead of overwriting.
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    blocked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    state: Mapped[BookState] = mapped_column(
        Enum(BookState), default=BookState.READY, nullable=False
    )
    from_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    to_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    category_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("categories.id"), nullable=True, index=True
    )
    user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id"), nullable=True, index=True
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    category: Mapped[Optional["Category"]] = relationship(
        "Category", back_populates="books", lazy="selectin"
    )
    user: Mapped[Optional["User"]] = relationship(
        "User", back_populates="books", lazy="selectin"
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def is_borrowed(self) -> bool:
        return self.state == BookState.BORROWED

    def lend_to(self, user: "User", from_date: date, to_date: date) -> None:
        """Move the book to BORROWED, setting borrower and window together."""
        self.state = BookState.BORROWED
        self.user = user
        self.from_date = from_date
        self.to_date = to_date

    def release(self) -> None:
        """Move the book back to READY, clearing borrower and window together."""
        self.state = BookState.READY
        self.user = None
        self.from_date = None
        self.to_date = None

    def __repr__(self) -> str:
        return (
            f"<Book(id={self.id}, title={self.title}, author={self.author}, "
            f"blocked={self.blocked}, state={self.state.value})>"
        )
