"""Business logic services."""
from lending.services.book_service import BookService
from lending.services.category_service import CategoryService
from lending.services.notification_service import (
    LoggingTransport,
    MessageSender,
    MessageTransport,
)
from lending.services.user_service import UserService

__all__ = [
    "BookService",
    "CategoryService",
    "UserService",
    "LoggingTransport",
    "MessageSender",
    "MessageTransport",
]
