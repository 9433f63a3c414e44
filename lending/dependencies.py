"""Application-wide wiring of the unit of work and notification delivery."""
from lending.core.events import EventDispatcher
from lending.core.unit_of_work import UnitOfWork
from lending.database import AsyncSessionLocal
from lending.services.notification_service import LoggingTransport, MessageSender

dispatcher = EventDispatcher()
message_sender = MessageSender(LoggingTransport())
message_sender.attach(dispatcher)

unit_of_work = UnitOfWork(AsyncSessionLocal, dispatcher)


def get_unit_of_work() -> UnitOfWork:
    """
    Dependency provider for the UnitOfWork.
    """
    return unit_of_work
