"""Payloads published to the notification queues."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class EmailInfo(BaseModel):
    """Tells one subscriber about a book added to their category."""

    book_id: int
    book_title: str
    book_author: str
    book_category: Optional[str] = None
    email: str
    user_first_name: str
    user_last_name: str


class PerformanceInfo(BaseModel):
    """How long an operation took and who ran it."""

    user_id: int
    email: str
    execution_time_ms: float
    operation: str
    started_at: datetime
