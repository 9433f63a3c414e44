"""Turns committed domain events and operation timings into queue messages."""
import json
from typing import Any, Optional, Protocol

from lending.config import settings
from lending.core.events import DomainEvent, EventDispatcher, OperationTiming
from lending.core.logging import get_logger
from lending.schemas.message import EmailInfo, PerformanceInfo

logger = get_logger("services.notification")


class MessageTransport(Protocol):
    """Where queue messages end up."""

    async def send(self, queue: str, payload: Any) -> None:
        ...


class LoggingTransport:
    """Writes every message to the log."""

    async def send(self, queue: str, payload: Any) -> None:
        logger.info("[%s] %s", queue, json.dumps(payload, default=str))


class MessageSender:
    """Publishes the info, email and performance messages."""

    def __init__(
        self,
        transport: MessageTransport,
        info_queue: Optional[str] = None,
        email_info_queue: Optional[str] = None,
        performance_info_queue: Optional[str] = None,
    ):
        self.transport = transport
        self.info_queue = info_queue or settings.info_queue
        self.email_info_queue = email_info_queue or settings.email_info_queue
        self.performance_info_queue = (
            performance_info_queue or settings.performance_info_queue
        )

    def attach(self, dispatcher: EventDispatcher) -> None:
        """Subscribe each kind of message as its own handler."""
        dispatcher.subscribe(self.send_info)
        dispatcher.subscribe(self.send_email_info)
        dispatcher.subscribe_timing(self.send_performance_info)

    async def send_info(self, event: DomainEvent) -> None:
        await self.transport.send(self.info_queue, event.message)

    async def send_email_info(self, event: DomainEvent) -> None:
        """One message per subscriber of the new book's category."""
        if event.book is None:
            return
        for recipient in event.recipients:
            message = EmailInfo(
                book_id=event.book.id,
                book_title=event.book.title,
                book_author=event.book.author,
                book_category=event.book.category,
                email=recipient.email,
                user_first_name=recipient.first_name,
                user_last_name=recipient.last_name,
            )
            await self.transport.send(self.email_info_queue, message.model_dump(mode="json"))

    async def send_performance_info(self, timing: OperationTiming) -> None:
        # Anonymous calls (registration, login) are recorded against user 0
        actor = timing.actor
        message = PerformanceInfo(
            user_id=actor.user_id if actor else 0,
            email=actor.email if actor else "unknown",
            execution_time_ms=timing.duration_ms,
            operation=timing.operation,
            started_at=timing.started_at,
        )
        await self.transport.send(
            self.performance_info_queue, message.model_dump(mode="json")
        )
