"""Transaction boundary tests: commit gating, retries and event delivery."""
import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from lending.config import settings
from lending.core.events import DomainEvent, EventDispatcher, EventType, Outcome
from lending.core.exceptions import ConflictError, InvalidArgumentError
from lending.core.policy import Identity
from lending.core.unit_of_work import UnitOfWork
from lending.models import Category, UserRole
from lending.services.book_service import BookService
from lending.services.category_service import CategoryService

STAFF = Identity(user_id=7, username="staff", email="staff@example.com", role=UserRole.EMPLOYEE)


def event(message: str = "something happened") -> DomainEvent:
    return DomainEvent(event_type=EventType.BOOK_CREATED, message=message)


@pytest.fixture
def received():
    return []


@pytest.fixture
def recorded_timings():
    return []


@pytest.fixture
def recording_dispatcher(received, recorded_timings):
    dispatcher = EventDispatcher()

    async def record(evt: DomainEvent) -> None:
        received.append(evt)

    async def record_timing(timing) -> None:
        recorded_timings.append(timing)

    dispatcher.subscribe(record)
    dispatcher.subscribe_timing(record_timing)
    return dispatcher


@pytest.mark.asyncio
async def test_events_dispatched_after_commit(session_factory, recording_dispatcher, received):
    uow = UnitOfWork(session_factory, recording_dispatcher)

    async def work(repos):
        category = await repos.categories.add(Category(name="Poetry"))
        assert received == []
        return Outcome(category, [event("created")])

    category = await uow.run("categories.create", STAFF, work)

    assert [e.message for e in received] == ["created"]
    stored = await uow.read(
        "categories.get", None, lambda repos: repos.categories.get(category.id)
    )
    assert stored.name == "Poetry"


@pytest.mark.asyncio
async def test_failed_operation_rolls_back_and_dispatches_nothing(
    session_factory, recording_dispatcher, received, recorded_timings
):
    """Test that an error discards both the writes and the events."""
    uow = UnitOfWork(session_factory, recording_dispatcher)

    async def work(repos):
        await repos.categories.add(Category(name="Poetry"))
        raise InvalidArgumentError("nope")

    with pytest.raises(InvalidArgumentError):
        await uow.run("categories.create", STAFF, work)

    assert received == []
    assert recorded_timings == []
    missing = await uow.read(
        "categories.get", None, lambda repos: repos.categories.get_by_name("Poetry")
    )
    assert missing is None


@pytest.mark.asyncio
async def test_stale_data_is_retried(session_factory, recording_dispatcher, received):
    uow = UnitOfWork(session_factory, recording_dispatcher, max_attempts=3)
    attempts = []

    async def work(repos):
        attempts.append(1)
        if len(attempts) < 2:
            raise StaleDataError("row changed underneath us")
        return Outcome("done", [event()])

    result = await uow.run("books.borrow", STAFF, work)

    assert result == "done"
    assert len(attempts) == 2
    assert len(received) == 1


@pytest.mark.asyncio
async def test_retries_exhausted_raise_conflict(session_factory, recording_dispatcher, received):
    uow = UnitOfWork(session_factory, recording_dispatcher, max_attempts=2)
    attempts = []

    async def work(repos):
        attempts.append(1)
        raise StaleDataError("row changed underneath us")

    with pytest.raises(ConflictError) as exc_info:
        await uow.run("books.borrow", STAFF, work)

    assert len(attempts) == 2
    assert exc_info.value.status_code == 409
    assert exc_info.value.details == {"attempts": 2}
    assert received == []


@pytest.mark.asyncio
async def test_failing_handler_does_not_fail_operation(session_factory, received):
    dispatcher = EventDispatcher()

    async def broken(evt: DomainEvent) -> None:
        raise RuntimeError("queue is down")

    async def record(evt: DomainEvent) -> None:
        received.append(evt)

    dispatcher.subscribe(broken)
    dispatcher.subscribe(record)
    uow = UnitOfWork(session_factory, dispatcher)

    async def work(repos):
        return Outcome(42, [event()])

    assert await uow.run("books.block", STAFF, work) == 42
    assert len(received) == 1


@pytest.mark.asyncio
async def test_events_are_stamped_with_operation_and_actor(
    session_factory, recording_dispatcher, received
):
    uow = UnitOfWork(session_factory, recording_dispatcher)

    async def work(repos):
        return Outcome(None, [event("stamped")])

    await uow.run("books.block", STAFF, work)

    [stamped] = received
    assert stamped.operation == "books.block"
    assert stamped.actor == STAFF


@pytest.mark.asyncio
async def test_integrity_error_is_retried(session_factory, recording_dispatcher, received):
    """Test that losing a unique-key race is retried like a stale write."""
    uow = UnitOfWork(session_factory, recording_dispatcher, max_attempts=3)
    attempts = []

    async def work(repos):
        attempts.append(1)
        if len(attempts) < 2:
            raise IntegrityError(
                "INSERT INTO user_categories", {}, Exception("duplicate key")
            )
        return Outcome("subscribed", [event()])

    assert await uow.run("categories.subscribe", STAFF, work) == "subscribed"
    assert len(attempts) == 2
    assert len(received) == 1


@pytest.mark.asyncio
async def test_write_without_events_reports_timing(uow, transport):
    await uow.run(
        "categories.create",
        STAFF,
        lambda repos: CategoryService(repos).create_category("Poetry"),
    )

    assert transport.drain(settings.info_queue) == []
    [performance] = transport.drain(settings.performance_info_queue)
    assert performance["operation"] == "categories.create"
    assert performance["user_id"] == 7


@pytest.mark.asyncio
async def test_read_reports_timing(uow, transport):
    page = await uow.read(
        "books.list", STAFF, lambda repos: BookService(repos).list_books(1, 10)
    )

    assert page.items == []
    [performance] = transport.drain(settings.performance_info_queue)
    assert performance["operation"] == "books.list"
    assert performance["email"] == "staff@example.com"


@pytest.mark.asyncio
async def test_failed_read_reports_no_timing(uow, transport):
    with pytest.raises(InvalidArgumentError):
        await uow.read(
            "books.list", STAFF, lambda repos: BookService(repos).list_books(0, 10)
        )
    assert transport.drain(settings.performance_info_queue) == []


@pytest.mark.asyncio
async def test_each_call_reports_one_timing(
    session_factory, recording_dispatcher, recorded_timings
):
    uow = UnitOfWork(session_factory, recording_dispatcher)

    async def work(repos):
        return Outcome(None, [event("first"), event("second")])

    await uow.run("books.block", STAFF, work)

    assert len(recorded_timings) == 1
    assert recorded_timings[0].actor == STAFF
    assert recorded_timings[0].duration_ms >= 0
