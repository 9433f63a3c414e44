"""User service: registration, authentication and per-user book listing."""
from datetime import timedelta
from typing import Optional

from lending.config import settings
from lending.core.events import DomainEvent, EventType, Outcome
from lending.core.exceptions import InvalidArgumentError, NotFoundError
from lending.core.logging import get_logger
from lending.core.policy import ensure_access
from lending.core.security import create_access_token, get_password_hash, verify_password
from lending.models.book import Book
from lending.models.user import User, UserRole
from lending.repositories import Page, Repositories, validate_page
from lending.schemas.user import Token, UserCreate

logger = get_logger("services.user")


class UserService:
    """Service for user operations."""

    def __init__(self, repos: Repositories):
        self.users = repos.users
        self.books = repos.books

    async def register(self, user_data: UserCreate) -> Outcome[User]:
        """Register a new user with a unique username and email."""
        if await self.users.get_by_username(user_data.username):
            raise InvalidArgumentError(
                f"User with username: {user_data.username} already exists",
                field="username",
            )
        if await self.users.get_by_email(user_data.email):
            raise InvalidArgumentError(
                f"User with email: {user_data.email} already exists",
                field="email",
            )

        user = User(
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            username=user_data.username,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            role=user_data.role,
        )
        user = await self.users.add(user)

        logger.info("Registered %r", user)
        return Outcome(
            user,
            [
                DomainEvent(
                    event_type=EventType.USER_REGISTERED,
                    message=f"{user!r} has been created",
                )
            ],
        )

    async def authenticate(self, username: str, password: str) -> Optional[User]:
        """Authenticate a user by username and password."""
        user = await self.users.get_by_username(username)
        if not user:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    async def list_users(self, page: int, page_size: int) -> Page[User]:
        """List users ordered by id. Pages start at 1."""
        validate_page(page, page_size)
        return await self.users.list_page(page, page_size)

    async def list_books_for_user(
        self,
        actor_username: str,
        actor_role: UserRole,
        target_user_id: int,
    ) -> list[Book]:
        """Books currently borrowed by a user, visible to that user and staff."""
        user = await self.users.get(target_user_id)
        if user is None:
            raise NotFoundError("User", target_user_id)

        ensure_access(
            actor_role,
            actor_username,
            user.username,
            message=f"No access to books of user with id: {target_user_id}",
        )
        return await self.books.list_borrowed_by(user.id)

    def create_token(self, user: User) -> Token:
        """Create an access token for a user."""
        access_token = create_access_token(
            user_id=user.id,
            username=user.username,
            email=user.email,
            role=user.role,
            expires_delta=timedelta(hours=settings.jwt_expiration_hours),
        )
        return Token(
            access_token=access_token,
            token_type="bearer",
            expires_in=settings.jwt_expiration_hours * 3600,
        )
