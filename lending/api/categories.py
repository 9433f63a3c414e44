"""Category API routes."""
from fastapi import APIRouter, Depends, status

from lending.core.policy import Identity
from lending.core.security import require_customer, require_employee
from lending.core.unit_of_work import UnitOfWork
from lending.dependencies import get_unit_of_work
from lending.models.category import Category
from lending.schemas.category import CategoryCreate, CategoryResponse
from lending.schemas.common import MessageResponse
from lending.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> list[Category]:
    """List all categories."""
    return await uow.read(
        "categories.list",
        None,
        lambda repos: CategoryService(repos).list_categories(),
    )


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    identity: Identity = Depends(require_employee),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> Category:
    """Add a category."""
    return await uow.run(
        "categories.create",
        identity,
        lambda repos: CategoryService(repos).create_category(category_data.name),
    )


@router.patch(
    "/{category_id}/subscribe",
    response_model=MessageResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def subscribe(
    category_id: int,
    identity: Identity = Depends(require_customer),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> dict:
    """Subscribe the caller to a category's new-book notifications."""
    category = await uow.run(
        "categories.subscribe",
        identity,
        lambda repos: CategoryService(repos).subscribe(identity.username, category_id),
    )
    return {"message": f"Subscribed to category {category.name}"}
