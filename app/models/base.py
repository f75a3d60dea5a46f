"""
SQLModel base classes

Shared fields and mixins
"""
import uuid
from datetime import datetime, timezone
from typing import Optional
from sqlmodel import SQLModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SQLModelBase(SQLModel):
    """
    SQLModel base configuration

    Every schema class inherits from this
    """
    model_config = {
        "from_attributes": True,
        "populate_by_name": True,
        "str_strip_whitespace": True,
        "use_enum_values": True,
    }


class TimestampMixin(SQLModel):
    """Timestamp mixin - for table models"""
    created_at: datetime = Field(
        default_factory=utc_now,
        nullable=False,
        description="Created at"
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        nullable=False,
        sa_column_kwargs={"onupdate": utc_now},
        description="Updated at"
    )


class IDMixin(SQLModel):
    """ID mixin - for table models"""
    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        primary_key=True,
        description="Primary key"
    )


class TimestampResponse(SQLModelBase):
    """Response base with timestamps"""
    id: str
    created_at: datetime
    updated_at: datetime
