"""
User model

Students, staff, department mentors and employers
"""
from typing import Optional
from enum import Enum
from sqlmodel import Field

from .base import SQLModelBase, TimestampMixin, IDMixin, TimestampResponse


class UserRole(str, Enum):
    """User roles"""
    STUDENT = "STUDENT"
    STAFF = "STAFF"
    MENTOR = "MENTOR"
    EMPLOYER = "EMPLOYER"


# ==================== Base fields ====================

class UserBase(SQLModelBase):
    """User fields shared by create and read"""
    username: str = Field(..., min_length=3, max_length=30, description="Login name", index=True, unique=True)
    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: str = Field(..., max_length=120, description="Email address")
    role: UserRole = Field(..., description="Role")
    department: Optional[str] = Field(None, max_length=100, description="Department", index=True)


# ==================== Table model ====================

class User(UserBase, TimestampMixin, IDMixin, table=True):
    """User table"""
    __tablename__ = "users"

    role: str = Field(..., index=True, description="Role")
    is_active: bool = Field(default=True, description="Account enabled")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role={self.role})>"


# ==================== Request schemas ====================

class UserCreate(UserBase):
    """Create user request"""
    pass


# ==================== Response schemas ====================

class UserResponse(TimestampResponse):
    """User response"""
    username: str
    name: str
    email: str
    role: str
    department: Optional[str]
    is_active: bool
