"""Persistence layer."""
from lending.repositories.base import (
    BookRepository,
    CategoryRepository,
    Page,
    Repositories,
    UserRepository,
    validate_page,
)
from lending.repositories.book_repository import SqlBookRepository
from lending.repositories.category_repository import SqlCategoryRepository
from lending.repositories.user_repository import SqlUserRepository

__all__ = [
    "BookRepository",
    "CategoryRepository",
    "UserRepository",
    "Page",
    "Repositories",
    "validate_page",
    "SqlBookRepository",
    "SqlCategoryRepository",
    "SqlUserRepository",
]
