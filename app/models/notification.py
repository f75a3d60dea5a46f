"""
In-app notification model - SQLModel version
"""
from typing import Optional
from enum import Enum
from sqlmodel import Field, Column, JSON
from sqlalchemy import String, ForeignKey

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse


class NotificationEvent(str, Enum):
    """Events emitted by the workflow"""
    APPLICATION_SUBMITTED = "APPLICATION_SUBMITTED"
    APPLICATION_APPROVED = "APPLICATION_APPROVED"
    APPLICATION_REJECTED = "APPLICATION_REJECTED"
    APPLICATION_STATUS_CHANGED = "APPLICATION_STATUS_CHANGED"
    STEP_COMPLETED = "STEP_COMPLETED"
    INTERVIEW_SCHEDULED = "INTERVIEW_SCHEDULED"
    INTERVIEW_UPDATED = "INTERVIEW_UPDATED"
    OFFER_RECEIVED = "OFFER_RECEIVED"
    OFFER_UPDATED = "OFFER_UPDATED"
    FEEDBACK_RECORDED = "FEEDBACK_RECORDED"


class Notification(TimestampMixin, IDMixin, SQLModelBase, table=True):
    """Notification table"""
    __tablename__ = "notifications"

    user_id: str = Field(
        sa_column=Column(String, ForeignKey("users.id"), index=True, nullable=False),
        description="Recipient user ID"
    )
    event_type: str = Field(..., max_length=40, description="Event type")
    title: str = Field(..., max_length=200, description="Title")
    message: str = Field(..., description="Message body")
    data: Optional[dict] = Field(default=None, sa_column=Column(JSON), description="Event payload")
    is_read: bool = Field(default=False, index=True, description="Read flag")


class NotificationResponse(TimestampResponse):
    user_id: str
    event_type: str
    title: str
    message: str
    data: Optional[dict] = None
    is_read: bool
