"""
Placement offer model - SQLModel version

Offer status has no transition rules of its own: any status may follow any
other. Only the student's accept/reject response is gated.
"""
from datetime import datetime
from typing import Optional
from enum import Enum
from sqlmodel import Field, Column
from sqlalchemy import String, ForeignKey

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse, utc_now


class OfferStatus(str, Enum):
    DRAFT = "DRAFT"
    EXTENDED = "EXTENDED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"
    EXPIRED = "EXPIRED"


class OfferType(str, Enum):
    INTERNSHIP = "INTERNSHIP"
    PLACEMENT = "PLACEMENT"
    FULL_TIME = "FULL_TIME"


# ==================== Table model ====================

class Offer(TimestampMixin, IDMixin, SQLModelBase, table=True):
    """Offer table"""
    __tablename__ = "offers"

    application_id: str = Field(
        sa_column=Column(String, ForeignKey("applications.id"), index=True, nullable=False),
        description="Application ID"
    )
    student_id: str = Field(
        sa_column=Column(String, ForeignKey("users.id"), index=True, nullable=False),
        description="Student user ID"
    )
    company_id: str = Field(..., description="Offering company (posting user) ID")

    position_title: Optional[str] = Field(None, max_length=150, description="Position title")
    offer_type: str = Field(OfferType.INTERNSHIP.value, description="Offer type")
    offer_details: Optional[str] = Field(None, description="Offer details")
    offer_status: str = Field(OfferStatus.DRAFT.value, index=True, description="Offer status")
    offer_date: datetime = Field(default_factory=utc_now, description="Offer date")
    response_deadline: datetime = Field(..., description="Response deadline")

    # Student response
    acceptance_date: Optional[datetime] = Field(None, description="Accepted at")
    rejection_date: Optional[datetime] = Field(None, description="Rejected at")
    rejection_reason: Optional[str] = Field(None, description="Rejection reason")

    # Contract
    contract_signed: bool = Field(False, description="Contract signed")
    contract_details: Optional[str] = Field(None, description="Contract details")

    def __repr__(self) -> str:
        return f"<Offer(id={self.id}, status={self.offer_status})>"


# ==================== Response schemas ====================

class OfferResponse(TimestampResponse):
    """Offer response"""
    application_id: str
    student_id: str
    company_id: str
    position_title: Optional[str]
    offer_type: str
    offer_details: Optional[str]
    offer_status: str
    offer_date: datetime
    response_deadline: datetime
    acceptance_date: Optional[datetime]
    rejection_date: Optional[datetime]
    rejection_reason: Optional[str]
    contract_signed: bool
    contract_details: Optional[str]
