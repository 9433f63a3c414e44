"""User API routes."""
from fastapi import APIRouter, Depends, Query, status

from lending.config import settings
from lending.core.policy import Identity
from lending.core.security import get_current_identity, require_employee
from lending.core.unit_of_work import UnitOfWork
from lending.dependencies import get_unit_of_work
from lending.models.book import Book
from lending.models.user import User
from lending.schemas.book import BookResponse
from lending.schemas.common import PaginatedResponse
from lending.schemas.user import UserCreate, UserResponse
from lending.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> User:
    """Register a new user."""
    return await uow.run(
        "users.register",
        None,
        lambda repos: UserService(repos).register(user_data),
    )


@router.get("", response_model=PaginatedResponse[UserResponse])
async def list_users(
    page: int = Query(1),
    page_size: int = Query(settings.default_page_size, le=settings.max_page_size),
    identity: Identity = Depends(require_employee),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> dict:
    """List users (employees only). Pages start at 1."""
    result = await uow.read(
        "users.list",
        identity,
        lambda repos: UserService(repos).list_users(page, page_size),
    )
    return {
        "items": result.items,
        "total": result.total,
        "page": result.page,
        "page_size": result.page_size,
        "total_pages": result.total_pages,
    }


@router.get("/{user_id}/books", response_model=list[BookResponse])
async def list_user_books(
    user_id: int,
    identity: Identity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> list[Book]:
    """Books borrowed by a user. Customers may only see their own."""
    return await uow.read(
        "users.books",
        identity,
        lambda repos: UserService(repos).list_books_for_user(
            identity.username, identity.role, user_id
        )
    )
