"""Category and subscription tests."""
import pytest
from sqlalchemy import func, select

from lending.config import settings
from lending.core.exceptions import InvalidArgumentError, NotFoundError
from lending.models import user_categories
from lending.services.book_service import BookService
from lending.services.category_service import CategoryService


async def subscribe(uow, username, category_id):
    return await uow.run(
        "categories.subscribe",
        None,
        lambda repos: CategoryService(repos).subscribe(username, category_id),
    )


async def count_subscriptions(session_factory, user_id, category_id) -> int:
    async with session_factory() as session:
        result = await session.execute(
            select(func.count()).select_from(user_categories).where(
                user_categories.c.user_id == user_id,
                user_categories.c.category_id == category_id,
            )
        )
        return result.scalar_one()


@pytest.mark.asyncio
async def test_subscribe_twice_keeps_one_subscription(
    uow, transport, session_factory, add_user, add_category
):
    """Test that subscribing is idempotent."""
    alice = await add_user("alice")
    category = await add_category("Fantasy")

    await subscribe(uow, "alice", category.id)
    await subscribe(uow, "alice", category.id)

    assert await count_subscriptions(session_factory, alice.id, category.id) == 1
    info = transport.drain(settings.info_queue)
    assert len(info) == 2
    assert "has subscribed category" in info[0]


@pytest.mark.asyncio
async def test_subscribe_unknown_user(uow, add_category):
    category = await add_category("Fantasy")
    with pytest.raises(NotFoundError):
        await subscribe(uow, "ghost", category.id)


@pytest.mark.asyncio
async def test_subscribe_unknown_category(uow, add_user):
    await add_user("alice")
    with pytest.raises(NotFoundError):
        await subscribe(uow, "alice", 999)


@pytest.mark.asyncio
async def test_subscriber_receives_new_book_email(uow, transport, add_user, add_category, add_book):
    await add_user("alice")
    category = await add_category("Fantasy")
    await subscribe(uow, "alice", category.id)
    transport.drain(settings.info_queue)

    await uow.run(
        "books.create",
        None,
        lambda repos: BookService(repos).create("Dune", "Frank Herbert", category.id),
    )

    emails = transport.drain(settings.email_info_queue)
    assert len(emails) == 1
    assert emails[0]["email"] == "alice@example.com"
    assert emails[0]["user_first_name"] == "Alice"


@pytest.mark.asyncio
async def test_list_categories_sorted_by_name(uow, add_category):
    await add_category("Science")
    await add_category("Fantasy")

    categories = await uow.read(
        "categories.list",
        None,
        lambda repos: CategoryService(repos).list_categories(),
    )

    assert [c.name for c in categories] == ["Fantasy", "Science"]


@pytest.mark.asyncio
async def test_create_category_rejects_duplicate_name(uow):
    create = lambda repos: CategoryService(repos).create_category("Fantasy")  # noqa: E731

    category = await uow.run("categories.create", None, create)
    assert category.id is not None

    with pytest.raises(InvalidArgumentError):
        await uow.run("categories.create", None, create)
