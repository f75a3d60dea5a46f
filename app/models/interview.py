"""
Interview model - SQLModel version
"""
from datetime import datetime
from typing import Optional
from enum import Enum
from sqlmodel import Field, Column
from sqlalchemy import String, ForeignKey

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse


class InterviewMode(str, Enum):
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"
    PHONE = "PHONE"


class InterviewStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    RESCHEDULED = "RESCHEDULED"


class InterviewType(str, Enum):
    TECHNICAL = "TECHNICAL"
    HR = "HR"
    MANAGER = "MANAGER"
    FINAL = "FINAL"


# ==================== Table model ====================

class Interview(TimestampMixin, IDMixin, SQLModelBase, table=True):
    """Interview table"""
    __tablename__ = "interviews"

    application_id: str = Field(
        sa_column=Column(String, ForeignKey("applications.id"), index=True, nullable=False),
        description="Application ID"
    )
    interviewer_id: str = Field(
        sa_column=Column(String, ForeignKey("users.id"), nullable=False),
        description="Interviewer user ID"
    )
    student_id: str = Field(
        sa_column=Column(String, ForeignKey("users.id"), index=True, nullable=False),
        description="Student user ID"
    )

    scheduled_datetime: datetime = Field(..., description="Scheduled start")
    duration_minutes: int = Field(60, ge=1, description="Duration")
    mode: str = Field(InterviewMode.ONLINE.value, description="Interview mode")
    meeting_link: Optional[str] = Field(None, description="Meeting link")
    location: Optional[str] = Field(None, description="Location")
    status: str = Field(InterviewStatus.SCHEDULED.value, index=True, description="Interview status")
    interview_type: str = Field(InterviewType.TECHNICAL.value, description="Interview type")
    notes: Optional[str] = Field(None, description="Notes")

    # Outcome
    feedback: Optional[str] = Field(None, description="Interviewer feedback")
    rating: Optional[int] = Field(None, ge=1, le=5, description="Rating 1-5")

    def __repr__(self) -> str:
        return f"<Interview(id={self.id}, status={self.status})>"


# ==================== Response schemas ====================

class InterviewResponse(TimestampResponse):
    """Interview response"""
    application_id: str
    interviewer_id: str
    student_id: str
    scheduled_datetime: datetime
    duration_minutes: int
    mode: str
    meeting_link: Optional[str]
    location: Optional[str]
    status: str
    interview_type: str
    notes: Optional[str]
    feedback: Optional[str]
    rating: Optional[int]
