"""Transaction boundary around service calls."""
from typing import Awaitable, Callable, Optional, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from lending.config import settings
from lending.core.events import EventDispatcher, OperationTiming, Outcome
from lending.core.exceptions import ConflictError
from lending.core.logging import OperationTimer, get_logger
from lending.core.policy import Identity
from lending.repositories import Repositories

logger = get_logger("unit_of_work")

T = TypeVar("T")

# Lost races: a concurrent UPDATE bumped the version, or a concurrent INSERT
# took the unique key first. A fresh attempt sees the winner's row.
RETRYABLE_ERRORS = (StaleDataError, IntegrityError)


class UnitOfWork:
    """Run one service operation per transaction and deliver its events.

    Events returned by the operation are dispatched only after the commit
    succeeds; a rollback discards them. When the operation loses a race with
    a concurrent writer it is retried on a fresh session, at most
    ``max_attempts`` times in total. Every call that completes, read or
    write, publishes one :class:`OperationTiming`.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        dispatcher: EventDispatcher,
        max_attempts: Optional[int] = None,
    ):
        self._session_factory = session_factory
        self._dispatcher = dispatcher
        self.max_attempts = max_attempts or settings.lock_retry_attempts

    async def run(
        self,
        operation: str,
        identity: Optional[Identity],
        work: Callable[[Repositories], Awaitable[Outcome[T]]],
    ) -> T:
        """Execute ``work`` in a transaction, commit, then dispatch its events."""
        timer = OperationTimer(operation)

        for attempt in range(1, self.max_attempts + 1):
            async with self._session_factory() as session:
                try:
                    outcome = await work(Repositories.from_session(session))
                    await session.commit()
                except RETRYABLE_ERRORS as e:
                    await session.rollback()
                    logger.warning(
                        "%s lost a concurrent update (attempt %d/%d): %s",
                        operation,
                        attempt,
                        self.max_attempts,
                        type(e).__name__,
                    )
                    continue
                except Exception:
                    await session.rollback()
                    raise

            await self._dispatcher.publish_all(
                [event.stamped(operation, identity) for event in outcome.events]
            )
            await self._publish_timing(timer, identity)
            return outcome.value

        raise ConflictError(
            f"{operation} kept conflicting with concurrent updates",
            attempts=self.max_attempts,
        )

    async def read(
        self,
        operation: str,
        identity: Optional[Identity],
        work: Callable[[Repositories], Awaitable[T]],
    ) -> T:
        """Execute a read-only ``work``; nothing is committed and no events go out."""
        timer = OperationTimer(operation)
        async with self._session_factory() as session:
            result = await work(Repositories.from_session(session))
        await self._publish_timing(timer, identity)
        return result

    async def _publish_timing(
        self, timer: OperationTimer, identity: Optional[Identity]
    ) -> None:
        await self._dispatcher.publish_timing(
            OperationTiming(
                operation=timer.operation,
                started_at=timer.started_at,
                duration_ms=timer.elapsed_ms(),
                actor=identity,
            )
        )
