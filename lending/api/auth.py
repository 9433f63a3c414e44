"""Authentication API routes."""
from fastapi import APIRouter, Depends

from lending.core.exceptions import AuthenticationError, NotFoundError
from lending.core.policy import Identity
from lending.core.security import get_current_identity
from lending.core.unit_of_work import UnitOfWork
from lending.dependencies import get_unit_of_work
from lending.models.user import User
from lending.repositories import Repositories
from lending.schemas.user import Token, UserLogin, UserResponse
from lending.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=Token)
async def login(
    credentials: UserLogin,
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> Token:
    """Login and get access token."""

    async def authenticate(repos: Repositories) -> Token:
        service = UserService(repos)
        user = await service.authenticate(credentials.username, credentials.password)
        if not user:
            raise AuthenticationError("Invalid username or password")
        return service.create_token(user)

    return await uow.read("auth.login", None, authenticate)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    identity: Identity = Depends(get_current_identity),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> User:
    """Get current user information."""

    async def load(repos: Repositories) -> User:
        user = await repos.users.get(identity.user_id)
        if user is None:
            raise NotFoundError("User", identity.user_id)
        return user

    return await uow.read("auth.me", identity, load)
