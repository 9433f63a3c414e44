"""Category model."""
from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lending.database import Base
from lending.models.user import user_categories

if TYPE_CHECKING:
    from lending.models.book import Book
    from lending.models.user import User


class Category(Base):
    """Category books are cataloged under and users subscribe to."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    # Relationships
    books: Mapped[list["Book"]] = relationship("Book", back_populates="category")
    subscribers: Mapped[set["User"]] = relationship(
        "User",
        secondary=user_categories,
        back_populates="subscribed_categories",
        collection_class=set,
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name})>"
