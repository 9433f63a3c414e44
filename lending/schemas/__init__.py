"""Pydantic schemas."""
from lending.schemas.book import BookCreate, BookResponse
from lending.schemas.category import CategoryCreate, CategoryResponse
from lending.schemas.common import (
    BaseSchema,
    ErrorResponse,
    MessageResponse,
    PaginatedResponse,
)
from lending.schemas.message import EmailInfo, PerformanceInfo
from lending.schemas.user import Token, TokenPayload, UserCreate, UserLogin, UserResponse

__all__ = [
    "BaseSchema",
    "ErrorResponse",
    "MessageResponse",
    "PaginatedResponse",
    "BookCreate",
    "BookResponse",
    "CategoryCreate",
    "CategoryResponse",
    "EmailInfo",
    "PerformanceInfo",
    "Token",
    "TokenPayload",
    "UserCreate",
    "UserLogin",
    "UserResponse",
]
