"""
Tracking action schemas

`POST /api/tracking` carries `{action, data}`. Each action has its own
validated payload; the `action` field picks the variant.
"""
from datetime import datetime
from typing import Annotated, Literal, Optional, Union
from pydantic import Field, RootModel

from app.models.interview import InterviewMode, InterviewStatus, InterviewType
from app.models.offer import OfferStatus, OfferType
from .base import BaseSchema


# ==================== Action payloads ====================

class CompleteStepData(BaseSchema):
    step_id: str = Field(..., min_length=1, description="Tracking step ID")
    notes: Optional[str] = Field(None, description="Notes")


class ScheduleInterviewData(BaseSchema):
    application_id: str = Field(..., min_length=1, description="Application ID")
    interviewer_id: str = Field(..., min_length=1, description="Interviewer user ID")
    scheduled_datetime: datetime = Field(..., description="Scheduled start")
    student_id: Optional[str] = Field(None, description="Must be the applicant when given")
    duration_minutes: Optional[int] = Field(None, ge=1, le=600, description="Duration in minutes")
    mode: InterviewMode = InterviewMode.ONLINE
    meeting_link: Optional[str] = None
    location: Optional[str] = None
    status: InterviewStatus = InterviewStatus.SCHEDULED
    interview_type: InterviewType = InterviewType.TECHNICAL
    notes: Optional[str] = None


class UpdateInterviewStatusData(BaseSchema):
    interview_id: str = Field(..., min_length=1, description="Interview ID")
    status: InterviewStatus = Field(..., description="New interview status")
    feedback: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)


class CreateOfferData(BaseSchema):
    application_id: str = Field(..., min_length=1, description="Application ID")
    student_id: Optional[str] = Field(None, description="Must be the applicant when given")
    company_id: Optional[str] = Field(None, description="Defaults to the posting user")
    position_title: Optional[str] = Field(None, description="Defaults to the posting title")
    offer_type: OfferType = OfferType.INTERNSHIP
    offer_details: Optional[str] = None
    offer_status: OfferStatus = OfferStatus.DRAFT
    offer_date: Optional[datetime] = None
    response_deadline: Optional[datetime] = None
    contract_signed: bool = False
    contract_details: Optional[str] = None


class UpdateOfferStatusData(BaseSchema):
    offer_id: str = Field(..., min_length=1, description="Offer ID")
    status: OfferStatus = Field(..., description="New offer status")
    acceptance_date: Optional[datetime] = None
    rejection_date: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    contract_signed: Optional[bool] = None
    contract_details: Optional[str] = None


class RecordFeedbackData(BaseSchema):
    application_id: str = Field(..., min_length=1, description="Application ID")
    supervisor_id: Optional[str] = Field(None, description="Defaults to the acting user")
    rating: int = Field(..., ge=1, le=5, description="Rating 1-5")
    comments: Optional[str] = None


class MarkResumeViewedData(BaseSchema):
    application_id: str = Field(..., min_length=1, description="Application ID")


# ==================== Action envelopes ====================

class CompleteStepAction(BaseSchema):
    action: Literal["complete_step"]
    data: CompleteStepData


class ScheduleInterviewAction(BaseSchema):
    action: Literal["schedule_interview"]
    data: ScheduleInterviewData


class UpdateInterviewStatusAction(BaseSchema):
    action: Literal["update_interview_status"]
    data: UpdateInterviewStatusData


class CreateOfferAction(BaseSchema):
    action: Literal["create_offer"]
    data: CreateOfferData


class UpdateOfferStatusAction(BaseSchema):
    action: Literal["update_offer_status"]
    data: UpdateOfferStatusData


class RecordFeedbackAction(BaseSchema):
    action: Literal["record_feedback"]
    data: RecordFeedbackData


class MarkResumeViewedAction(BaseSchema):
    action: Literal["mark_resume_viewed"]
    data: MarkResumeViewedData


TrackingAction = Annotated[
    Union[
        CompleteStepAction,
        ScheduleInterviewAction,
        UpdateInterviewStatusAction,
        CreateOfferAction,
        UpdateOfferStatusAction,
        RecordFeedbackAction,
        MarkResumeViewedAction,
    ],
    Field(discriminator="action"),
]


# ==================== Other requests ====================

class OfferDecision(BaseSchema):
    """Student response to an extended offer"""
    response: Literal["ACCEPTED", "REJECTED"]
    reason: Optional[str] = None


class TrackingRequest(RootModel[TrackingAction]):
    """Request body of POST /api/tracking"""
    pass
