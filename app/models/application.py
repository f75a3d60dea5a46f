"""
Application model - SQLModel version

An Application is a student's request to be considered for one internship
posting. It is the owner of the tracking ledger, interviews, offers and
feedback, and is never hard-deleted.
"""
from datetime import datetime
from typing import Optional, List
from enum import Enum
from sqlmodel import Field, Column, UniqueConstraint
from sqlalchemy import String, ForeignKey

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse, utc_now


class ApplicationStatus(str, Enum):
    """Application status"""
    APPLIED = "APPLIED"                    # submitted, awaiting mentor
    MENTOR_APPROVED = "MENTOR_APPROVED"    # forwarded to employer
    MENTOR_REJECTED = "MENTOR_REJECTED"    # terminal
    INTERVIEWED = "INTERVIEWED"
    OFFERED = "OFFERED"
    NOT_OFFERED = "NOT_OFFERED"            # terminal
    OFFER_ACCEPTED = "OFFER_ACCEPTED"
    OFFER_REJECTED = "OFFER_REJECTED"      # terminal
    COMPLETED = "COMPLETED"                # terminal


# ==================== Table model ====================

class Application(TimestampMixin, IDMixin, SQLModelBase, table=True):
    """Application table"""
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("student_id", "internship_id", name="uq_application_student_internship"),
    )

    # Foreign keys
    student_id: str = Field(
        sa_column=Column(String, ForeignKey("users.id"), index=True, nullable=False),
        description="Student user ID"
    )
    internship_id: str = Field(
        sa_column=Column(String, ForeignKey("internships.id"), index=True, nullable=False),
        description="Internship ID"
    )

    # Status
    status: str = Field(ApplicationStatus.APPLIED.value, index=True, description="Application status")
    applied_at: datetime = Field(default_factory=utc_now, nullable=False, description="Submitted at")

    # Mentor review
    mentor_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String, ForeignKey("users.id"), nullable=True),
        description="Reviewing mentor ID"
    )
    mentor_approved_at: Optional[datetime] = Field(None, description="Mentor decision time")

    # Later milestones
    interviewed_at: Optional[datetime] = Field(None, description="Interview completed at")
    offer_made_at: Optional[datetime] = Field(None, description="Offer made at")
    offer_accepted_at: Optional[datetime] = Field(None, description="Offer accepted at")
    completed_at: Optional[datetime] = Field(None, description="Internship completed at")

    notes: Optional[str] = Field(None, description="Latest transition notes")

    def __repr__(self) -> str:
        return f"<Application(id={self.id}, status={self.status})>"


# ==================== Request schemas ====================

class ApplicationCreate(SQLModelBase):
    """Submit application request"""
    internship_id: str = Field(..., min_length=1, description="Internship ID")


class ApplicationTransition(SQLModelBase):
    """Generic status change request"""
    status: ApplicationStatus = Field(..., description="Target status")
    notes: Optional[str] = Field(None, description="Notes recorded on the tracking step")


class MentorDecision(SQLModelBase):
    """Mentor approve/reject body"""
    comments: Optional[str] = Field(None, description="Mentor comments")


class ApplicationComplete(SQLModelBase):
    """Complete internship request"""
    performance_rating: Optional[int] = Field(None, ge=1, le=5, description="Performance rating 1-5")
    comments: Optional[str] = Field(None, description="Supervisor comments")


# ==================== Response schemas ====================

class ApplicationResponse(TimestampResponse):
    """Application response"""
    student_id: str
    internship_id: str
    status: str
    applied_at: datetime
    mentor_id: Optional[str]
    mentor_approved_at: Optional[datetime]
    interviewed_at: Optional[datetime]
    offer_made_at: Optional[datetime]
    offer_accepted_at: Optional[datetime]
    completed_at: Optional[datetime]
    notes: Optional[str]

    # Related info
    internship_title: Optional[str] = None
    company_name: Optional[str] = None
    student_name: Optional[str] = None
    student_department: Optional[str] = None


class ApplicationDetailResponse(ApplicationResponse):
    """Application detail with owned sub-records"""
    tracking_steps: List[dict] = []
    interviews: List[dict] = []
    offers: List[dict] = []
    feedback: List[dict] = []
