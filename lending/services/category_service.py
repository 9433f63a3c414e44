"""Category service: listing, creation and subscriptions."""
from lending.core.events import DomainEvent, EventType, Outcome
from lending.core.exceptions import InvalidArgumentError, NotFoundError
from lending.core.logging import get_logger
from lending.models.category import Category
from lending.repositories import Repositories

logger = get_logger("services.category")


class CategoryService:
    """Service for category operations."""

    def __init__(self, repos: Repositories):
        self.categories = repos.categories
        self.users = repos.users

    async def subscribe(self, username: str, category_id: int) -> Outcome[Category]:
        """Subscribe a user to a category; subscribing twice changes nothing."""
        user = await self.users.get_by_username(username, with_subscriptions=True)
        if user is None:
            raise NotFoundError("User", username, key="username")

        category = await self.categories.get(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)

        user.subscribed_categories.add(category)
        await self.users.save(user)

        logger.info("%s subscribed to %r", username, category)
        return Outcome(
            category,
            [
                DomainEvent(
                    event_type=EventType.CATEGORY_SUBSCRIBED,
                    message=f"{user!r} has subscribed category: {category!r}",
                )
            ],
        )

    async def list_categories(self) -> list[Category]:
        """List all categories by name."""
        return await self.categories.list_all()

    async def create_category(self, name: str) -> Outcome[Category]:
        """Create a category with a unique name."""
        if await self.categories.get_by_name(name) is not None:
            raise InvalidArgumentError(
                f"Category with name: {name} already exists", field="name"
            )
        category = await self.categories.add(Category(name=name))
        logger.info("Created %r", category)
        return Outcome(category)
