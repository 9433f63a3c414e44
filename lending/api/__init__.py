"""API routers."""
from fastapi import APIRouter

from lending.api import auth, books, categories, users
from lending.schemas.common import ErrorResponse

api_router = APIRouter(
    prefix="/api/v1",
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)

api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(categories.router)
api_router.include_router(books.router)

__all__ = ["api_router"]
