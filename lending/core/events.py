"""Domain events returned by the services and dispatched after commit."""
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from lending.core.logging import get_logger
from lending.core.policy import Identity

logger = get_logger("events")

T = TypeVar("T")


class EventType(str, Enum):
    """Domain event types."""
    BOOK_CREATED = "book_created"
    BOOK_BLOCKED = "book_blocked"
    BOOK_BORROWED = "book_borrowed"
    BOOK_RETURNED = "book_returned"
    CATEGORY_SUBSCRIBED = "category_subscribed"
    USER_REGISTERED = "user_registered"


@dataclass(frozen=True)
class BookSnapshot:
    """Book fields captured while the session is still open."""

    id: int
    title: str
    author: str
    category: Optional[str] = None


@dataclass(frozen=True)
class Recipient:
    """A subscriber to be emailed about a new book."""

    email: str
    first_name: str
    last_name: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    """Something that happened to the catalog, ready for delivery.

    ``operation`` and ``actor`` stay empty inside the services; the unit of
    work fills them in once the transaction has committed.
    """

    event_type: EventType
    message: str
    book: Optional[BookSnapshot] = None
    recipients: tuple[Recipient, ...] = ()
    actor: Optional[Identity] = None
    operation: Optional[str] = None
    occurred_at: datetime = field(default_factory=_utcnow)

    def stamped(self, operation: str, actor: Optional[Identity] = None) -> "DomainEvent":
        """Return a copy naming the operation that produced it and its caller."""
        return replace(self, operation=operation, actor=self.actor or actor)


@dataclass(frozen=True)
class OperationTiming:
    """How long one completed unit-of-work call took, and who made it."""

    operation: str
    started_at: datetime
    duration_ms: float
    actor: Optional[Identity] = None


@dataclass
class Outcome(Generic[T]):
    """A service result together with the events it wants delivered."""

    value: T
    events: list[DomainEvent] = field(default_factory=list)


EventHandler = Callable[[DomainEvent], Awaitable[None]]
TimingHandler = Callable[[OperationTiming], Awaitable[None]]


class EventDispatcher:
    """Fan committed events out to registered handlers.

    Delivery is best effort: a failing handler is logged and skipped, and
    never fails the operation that produced the event, nor the handlers after
    it. Operation timings go to their own set of handlers.
    """

    def __init__(self):
        self._handlers: list[EventHandler] = []
        self._timing_handlers: list[TimingHandler] = []

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    async def publish(self, event: DomainEvent) -> None:
        for handler in list(self._handlers):
            try:
                await handler(event)
            except Exception:
                logger.exception(
                    "Delivery of %s event failed in %r",
                    event.event_type.value,
                    handler,
                )

    async def publish_all(self, events: list[DomainEvent]) -> None:
        for event in events:
            await self.publish(event)

    def subscribe_timing(self, handler: TimingHandler) -> None:
        self._timing_handlers.append(handler)

    async def publish_timing(self, timing: OperationTiming) -> None:
        for handler in list(self._timing_handlers):
            try:
                await handler(timing)
            except Exception:
                logger.exception(
                    "Delivery of timing for %s failed in %r",
                    timing.operation,
                    handler,
                )
