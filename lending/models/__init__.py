"""SQLAlchemy models."""
from lending.models.book import Book, BookState
from lending.models.category import Category
from lending.models.user import User, UserRole, user_categories

__all__ = [
    # Book
    "Book",
    "BookState",
    # Category
    "Category",
    # User
    "User",
    "UserRole",
    "user_categories",
]
