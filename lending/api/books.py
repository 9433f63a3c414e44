"""Book API routes."""
from datetime import date

from fastapi import APIRouter, Depends, Query, status

from lending.config import settings
from lending.core.policy import Identity
from lending.core.security import get_current_identity, require_customer, require_employee
from lending.core.unit_of_work import UnitOfWork
from lending.dependencies import get_unit_of_work
from lending.models.book import Book
from lending.schemas.book import BookCreate, BookResponse
from lending.schemas.common import PaginatedResponse
from lending.services.book_service import BookService

router = APIRouter(prefix="/books", tags=["Books"])


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def create_book(
    book_data: BookCreate,
    identity: Identity = Depends(require_employee),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> Book:
    """Catalog a new book."""
    return await uow.run(
        "books.create",
        identity,
        lambda repos: BookService(repos).create(
            book_data.title, book_data.author, book_data.category_id
        ),
    )


@router.get("", response_model=PaginatedResponse[BookResponse])
async def list_books(
    page: int = Query(1),
    page_size: int = Query(settings.default_page_size, le=settings.max_page_size),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> dict:
    """List books. Pages start at 1."""
    result = await uow.read(
        "books.list",
        None,
        lambda repos: BookService(repos).list_books(page, page_size),
    )
    return {
        "items": result.items,
        "total": result.total,
        "page": result.page,
        "page_size": result.page_size,
        "total_pages": result.total_pages,
    }


@router.patch(
    "/{book_id}/block",
    response_model=BookResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def block_book(
    book_id: int,
    identity: Identity = Depends(require_employee),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> Book:
    """Block a book from further borrowing."""
    return await uow.run(
        "books.block",
        identity,
        lambda repos: BookService(repos).block(book_id),
    )


@router.put(
    "/{book_id}/borrow",
    response_model=BookResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def borrow_book(
    book_id: int,
    to: date = Query(..., description="Last day of the loan"),
    identity: Identity = Depends(require_customer),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> Book:
    """Borrow a book until the given date."""
    return await uow.run(
        "books.borrow",
        identity,
        lambda repos: BookService(repos).borrow(identity.username, book_id, to),
    )


@router.patch(
    "/{book_id}/return",
    response_model=BookResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def return_book(
    book_id: int,
    identity: Identity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> Book:
    """Return a borrowed book."""
    return await uow.run(
        "books.return",
        identity,
        lambda repos: BookService(repos).return_book(
            identity.username, identity.role, book_id
        ),
    )
