"""
Tracking API routes

POST /api/tracking takes `{action, data}` and dispatches on `action`.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.response import success_response, DictResponse
from app.core.security import CurrentUser, get_current_user, require_roles
from app.crud import application_crud, tracking_crud
from app.models.base import utc_now
from app.models.feedback import FeedbackResponse
from app.models.interview import InterviewResponse
from app.models.offer import OfferResponse
from app.models.tracking import TrackingStepResponse
from app.models.user import UserRole
from app.schemas.tracking import (
    CompleteStepData,
    CreateOfferData,
    MarkResumeViewedData,
    RecordFeedbackData,
    ScheduleInterviewData,
    TrackingRequest,
    UpdateInterviewStatusData,
    UpdateOfferStatusData,
)
from app.services import records, tracking_ledger
from .applications import build_application_response

router = APIRouter()

REALTIME_LIMIT = 50


def _step(step) -> dict:
    return TrackingStepResponse.model_validate(step).model_dump()


async def _complete_step(db: AsyncSession, actor: CurrentUser, data: CompleteStepData) -> dict:
    step = await tracking_crud.get_or_raise(db, data.step_id)
    await records.authorize(db, actor, step.application_id)
    step = await tracking_ledger.complete_step(db, step.id, data.notes, actor.id)
    return _step(step)


async def _schedule_interview(db: AsyncSession, actor: CurrentUser, data: ScheduleInterviewData) -> dict:
    interview = await records.schedule_interview(db, actor, data)
    return InterviewResponse.model_validate(interview).model_dump()


async def _update_interview_status(db: AsyncSession, actor: CurrentUser, data: UpdateInterviewStatusData) -> dict:
    interview = await records.update_interview_status(db, actor, data)
    return InterviewResponse.model_validate(interview).model_dump()


async def _create_offer(db: AsyncSession, actor: CurrentUser, data: CreateOfferData) -> dict:
    offer = await records.create_offer(db, actor, data)
    return OfferResponse.model_validate(offer).model_dump()


async def _update_offer_status(db: AsyncSession, actor: CurrentUser, data: UpdateOfferStatusData) -> dict:
    offer = await records.update_offer_status(db, actor, data)
    return OfferResponse.model_validate(offer).model_dump()


async def _record_feedback(db: AsyncSession, actor: CurrentUser, data: RecordFeedbackData) -> dict:
    feedback = await records.record_feedback(db, actor, data)
    return FeedbackResponse.model_validate(feedback).model_dump()


async def _mark_resume_viewed(db: AsyncSession, actor: CurrentUser, data: MarkResumeViewedData) -> dict:
    step = await records.mark_resume_viewed(db, actor, data)
    return _step(step)


ACTIONS = {
    "complete_step": (_complete_step, "Step completed"),
    "schedule_interview": (_schedule_interview, "Interview scheduled"),
    "update_interview_status": (_update_interview_status, "Interview updated"),
    "create_offer": (_create_offer, "Offer created"),
    "update_offer_status": (_update_offer_status, "Offer updated"),
    "record_feedback": (_record_feedback, "Feedback recorded"),
    "mark_resume_viewed": (_mark_resume_viewed, "Resume marked as viewed"),
}


@router.post("", summary="Perform tracking action", response_model=DictResponse)
async def perform_tracking_action(
    payload: TrackingRequest,
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(require_roles(
        UserRole.STAFF.value, UserRole.MENTOR.value, UserRole.EMPLOYER.value
    )),
):
    """
    Run one tracking action

    Actions: complete_step, schedule_interview, update_interview_status,
    create_offer, update_offer_status, record_feedback, mark_resume_viewed
    """
    request = payload.root
    handler, message = ACTIONS[request.action]
    result = await handler(db, actor, request.data)
    return success_response(data={"action": request.action, "result": result}, message=message)


@router.get("", summary="Get application tracking", response_model=DictResponse)
async def get_tracking(
    application_id: str = Query(..., description="Application ID"),
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(get_current_user),
):
    """
    Tracking steps, interviews, offers and resume view status of one application
    """
    await records.authorize(db, actor, application_id)

    steps = await tracking_ledger.get_steps(db, application_id)
    interviews = await records.get_interviews(db, application_id)
    offers = await records.get_offers(db, application_id)
    resume_status = await tracking_ledger.resume_view_status(db, application_id)

    return success_response(data={
        "application_id": application_id,
        "tracking_steps": [_step(s) for s in steps],
        "interviews": [InterviewResponse.model_validate(i).model_dump() for i in interviews],
        "offers": [OfferResponse.model_validate(o).model_dump() for o in offers],
        "resume_status": resume_status,
    })


@router.get("/realtime", summary="Live tracking overview", response_model=DictResponse)
async def get_realtime_tracking(
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(get_current_user),
):
    """
    The caller's visible applications with their tracking steps embedded
    """
    rows = await application_crud.get_multi_scoped(
        db, role=actor.role, user_id=actor.id, department=actor.department, limit=REALTIME_LIMIT
    )
    steps = await tracking_crud.get_by_applications(db, [row[0].id for row in rows])

    steps_by_application = {}
    for step in steps:
        steps_by_application.setdefault(step.application_id, []).append(_step(step))

    applications = []
    for row in rows:
        item = build_application_response(row).model_dump()
        item["tracking_steps"] = steps_by_application.get(item["id"], [])
        applications.append(item)

    return success_response(data={
        "applications": applications,
        "last_updated": utc_now(),
    })
