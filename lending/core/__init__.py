"""Core utilities."""
from lending.core.events import (
    BookSnapshot,
    DomainEvent,
    EventDispatcher,
    EventType,
    OperationTiming,
    Outcome,
    Recipient,
)
from lending.core.exceptions import (
    AccessDeniedError,
    AppException,
    AuthenticationError,
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
)
from lending.core.logging import OperationTimer, get_logger, setup_logging
from lending.core.policy import (
    Identity,
    can_access,
    ensure_access,
    ensure_role,
    is_employee_tier,
)

__all__ = [
    # Events
    "BookSnapshot",
    "DomainEvent",
    "EventDispatcher",
    "EventType",
    "OperationTiming",
    "Outcome",
    "Recipient",
    # Policy
    "Identity",
    "can_access",
    "ensure_access",
    "ensure_role",
    "is_employee_tier",
    # Logging
    "OperationTimer",
    "get_logger",
    "setup_logging",
    # Exceptions
    "AppException",
    "AccessDeniedError",
    "AuthenticationError",
    "ConflictError",
    "InvalidArgumentError",
    "NotFoundError",
]
