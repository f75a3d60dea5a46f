"""
Supervisor feedback model - SQLModel version
"""
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import String, ForeignKey

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse


class Feedback(TimestampMixin, IDMixin, SQLModelBase, table=True):
    """Feedback table"""
    __tablename__ = "feedback"

    application_id: str = Field(
        sa_column=Column(String, ForeignKey("applications.id"), index=True, nullable=False),
        description="Application ID"
    )
    supervisor_id: str = Field(
        sa_column=Column(String, ForeignKey("users.id"), nullable=False),
        description="Supervisor user ID"
    )
    rating: int = Field(..., ge=1, le=5, description="Rating 1-5")
    comments: Optional[str] = Field(None, description="Comments")


class FeedbackResponse(TimestampResponse):
    application_id: str
    supervisor_id: str
    rating: int
    comments: Optional[str]
