"""
Pydantic Schemas

Request payloads that are not backed by a table. Table-backed request and
response schemas live next to their models in app.models.
"""
from .base import BaseSchema
from .tracking import (
    CompleteStepData,
    ScheduleInterviewData,
    UpdateInterviewStatusData,
    CreateOfferData,
    UpdateOfferStatusData,
    RecordFeedbackData,
    MarkResumeViewedData,
    CompleteStepAction,
    ScheduleInterviewAction,
    UpdateInterviewStatusAction,
    CreateOfferAction,
    UpdateOfferStatusAction,
    RecordFeedbackAction,
    MarkResumeViewedAction,
    TrackingAction,
    TrackingRequest,
    OfferDecision,
)

__all__ = [
    # Base
    "BaseSchema",
    # Tracking action payloads
    "CompleteStepData",
    "ScheduleInterviewData",
    "UpdateInterviewStatusData",
    "CreateOfferData",
    "UpdateOfferStatusData",
    "RecordFeedbackData",
    "MarkResumeViewedData",
    # Tracking actions
    "CompleteStepAction",
    "ScheduleInterviewAction",
    "UpdateInterviewStatusAction",
    "CreateOfferAction",
    "UpdateOfferStatusAction",
    "RecordFeedbackAction",
    "MarkResumeViewedAction",
    "TrackingAction",
    "TrackingRequest",
    # Offers
    "OfferDecision",
]
