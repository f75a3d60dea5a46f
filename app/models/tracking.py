"""
Tracking step model - SQLModel version

One row per named step of the fixed application checklist
"""
from datetime import datetime
from typing import Optional
from enum import Enum
from sqlmodel import Field, Column, UniqueConstraint
from sqlalchemy import String, ForeignKey

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse


class StepStatus(str, Enum):
    """Tracking step status"""
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    SKIPPED = "SKIPPED"


class TrackingStepName(str, Enum):
    """The ten checklist steps, in ledger order"""
    APPLICATION_SUBMITTED = "Application Submitted"
    RESUME_REVIEW = "Resume Review"
    DOCUMENT_VERIFICATION = "Document Verification"
    MENTOR_REVIEW = "Mentor Review"
    EMPLOYER_REVIEW = "Employer Review"
    INTERVIEW_SCHEDULING = "Interview Scheduling"
    INTERVIEW_PROCESS = "Interview Process"
    FEEDBACK_COLLECTION = "Feedback Collection"
    FINAL_DECISION = "Final Decision"
    OFFER_PROCESSING = "Offer Processing"


TRACKING_STEPS = tuple(step.value for step in TrackingStepName)


# ==================== Table model ====================

class TrackingStep(TimestampMixin, IDMixin, SQLModelBase, table=True):
    """Tracking step table"""
    __tablename__ = "tracking_steps"
    __table_args__ = (
        UniqueConstraint("application_id", "step", name="uq_tracking_step_application_step"),
    )

    application_id: str = Field(
        sa_column=Column(String, ForeignKey("applications.id"), index=True, nullable=False),
        description="Application ID"
    )
    step: str = Field(..., max_length=50, description="Step name")
    position: int = Field(..., ge=0, description="Ledger order")
    status: str = Field(StepStatus.PENDING.value, description="Step status")
    completed_at: Optional[datetime] = Field(None, description="Completed at")
    notes: Optional[str] = Field(None, description="Notes")
    actor_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String, ForeignKey("users.id"), nullable=True),
        description="User who actioned the step"
    )

    @property
    def is_completed(self) -> bool:
        return self.status == StepStatus.COMPLETED.value

    def __repr__(self) -> str:
        return f"<TrackingStep(step={self.step}, status={self.status})>"


# ==================== Response schemas ====================

class TrackingStepResponse(TimestampResponse):
    """Tracking step response"""
    application_id: str
    step: str
    position: int
    status: str
    completed_at: Optional[datetime]
    notes: Optional[str]
    actor_id: Optional[str]
