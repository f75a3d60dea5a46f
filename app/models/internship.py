"""
Internship posting model - SQLModel version

Model and schemas live together
"""
from datetime import datetime
from typing import Optional, List
from sqlmodel import Field, Column, JSON
from sqlalchemy import String, ForeignKey
from pydantic import model_validator

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse


# ==================== Base fields ====================

class InternshipBase(SQLModelBase):
    """Posting fields - used for create and inheritance"""
    title: str = Field(..., min_length=1, max_length=150, description="Posting title", index=True)
    description: str = Field(..., min_length=1, description="Role description")
    company_name: str = Field(..., min_length=1, max_length=150, description="Company")
    location: Optional[str] = Field(None, max_length=150, description="Location")
    required_skills: List[str] = Field(default_factory=list, sa_column=Column(JSON), description="Required skills")
    eligible_departments: List[str] = Field(default_factory=list, sa_column=Column(JSON), description="Eligible departments")
    stipend_min: Optional[int] = Field(None, ge=0, description="Minimum stipend")
    stipend_max: Optional[int] = Field(None, ge=0, description="Maximum stipend")
    is_placement: bool = Field(False, description="Placement rather than internship")
    duration_weeks: Optional[int] = Field(None, ge=1, description="Duration in weeks")
    application_deadline: Optional[datetime] = Field(None, description="Application deadline")


# ==================== Table model ====================

class Internship(InternshipBase, TimestampMixin, IDMixin, table=True):
    """Posting table"""
    __tablename__ = "internships"

    posted_by: str = Field(
        sa_column=Column(String, ForeignKey("users.id"), index=True, nullable=False),
        description="Posting user ID"
    )
    is_active: bool = Field(default=True, index=True, description="Accepting applications")

    def accepts_department(self, department: Optional[str]) -> bool:
        """An empty eligibility list admits every department"""
        if not self.eligible_departments:
            return True
        return department in self.eligible_departments

    def __repr__(self) -> str:
        return f"<Internship(id={self.id}, title={self.title})>"


# ==================== Request schemas ====================

class InternshipCreate(InternshipBase):
    """Create posting request"""
    required_skills: List[str] = Field(..., min_length=1)
    eligible_departments: List[str] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_stipend_range(self):
        if self.stipend_min is not None and self.stipend_max is not None:
            if self.stipend_min > self.stipend_max:
                raise ValueError("Minimum stipend cannot be greater than maximum stipend")
        return self


class InternshipUpdate(SQLModelBase):
    """Update posting request - every field optional"""
    title: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    company_name: Optional[str] = Field(None, min_length=1, max_length=150)
    location: Optional[str] = None
    required_skills: Optional[List[str]] = None
    eligible_departments: Optional[List[str]] = None
    stipend_min: Optional[int] = Field(None, ge=0)
    stipend_max: Optional[int] = Field(None, ge=0)
    is_placement: Optional[bool] = None
    duration_weeks: Optional[int] = Field(None, ge=1)
    application_deadline: Optional[datetime] = None
    is_active: Optional[bool] = None


# ==================== Response schemas ====================

class InternshipResponse(TimestampResponse):
    """Posting response"""
    title: str
    description: str
    company_name: str
    location: Optional[str]
    required_skills: List[str]
    eligible_departments: List[str]
    stipend_min: Optional[int]
    stipend_max: Optional[int]
    is_placement: bool
    duration_weeks: Optional[int]
    application_deadline: Optional[datetime]
    posted_by: str
    is_active: bool
    application_count: int = Field(0, description="Number of applications")
