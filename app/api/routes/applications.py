"""
Application API routes

Submission, role-scoped listing and the status workflow endpoints
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.response import (
    success_response,
    paged_response,
    ResponseModel,
    PagedResponseModel,
    DictResponse,
)
from app.core.exceptions import NotFoundException
from app.core.security import CurrentUser, get_current_user, require_roles
from app.crud import application_crud
from app.crud.application import ApplicationRow
from app.models.application import (
    ApplicationStatus,
    ApplicationCreate,
    ApplicationTransition,
    MentorDecision,
    ApplicationComplete,
    ApplicationResponse,
    ApplicationDetailResponse,
)
from app.models.feedback import FeedbackResponse
from app.models.interview import InterviewResponse
from app.models.offer import OfferResponse
from app.models.tracking import TrackingStepResponse
from app.models.user import UserRole
from app.services import application_workflow, tracking_ledger, records

router = APIRouter()


def build_application_response(row: ApplicationRow, schema=ApplicationResponse):
    application, student_name, student_department, internship_title, company_name = row
    response = schema.model_validate(application)
    response.student_name = student_name
    response.student_department = student_department
    response.internship_title = internship_title
    response.company_name = company_name
    return response


async def _response_for(db: AsyncSession, application_id: str) -> dict:
    row = await application_crud.get_detail(db, application_id)
    return build_application_response(row).model_dump()


@router.post("", summary="Submit application", response_model=ResponseModel[ApplicationResponse])
async def create_application(
    data: ApplicationCreate,
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(require_roles(UserRole.STUDENT.value)),
):
    """
    Apply to an internship; seeds the ten-step tracking ledger
    """
    application = await application_workflow.submit_application(db, actor, data.internship_id)
    return success_response(
        data=await _response_for(db, application.id),
        message="Application submitted successfully"
    )


@router.get("", summary="List applications", response_model=PagedResponseModel[ApplicationResponse])
async def get_applications(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Page size"),
    status: Optional[ApplicationStatus] = Query(None, description="Status filter"),
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(get_current_user),
):
    """
    List the applications visible to the caller's role
    """
    skip = (page - 1) * page_size
    status_value = status.value if status else None
    scope = {"role": actor.role, "user_id": actor.id, "department": actor.department}

    rows = await application_crud.get_multi_scoped(
        db, status=status_value, skip=skip, limit=page_size, **scope
    )
    total = await application_crud.count_scoped(db, status=status_value, **scope)

    items = [build_application_response(row).model_dump() for row in rows]
    return paged_response(items, total, page, page_size)


@router.get("/stats/overview", summary="Application statistics", response_model=DictResponse)
async def get_stats_overview(
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(require_roles(UserRole.STAFF.value, UserRole.MENTOR.value)),
):
    """
    Counts per status within the caller's scope
    """
    counts = await application_crud.count_by_status(
        db, role=actor.role, user_id=actor.id, department=actor.department
    )
    stats = {status.value: counts.get(status.value, 0) for status in ApplicationStatus}
    stats["total"] = sum(counts.values())
    return success_response(data=stats)


@router.get("/{application_id}", summary="Get application detail", response_model=ResponseModel[ApplicationDetailResponse])
async def get_application(
    application_id: str,
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(get_current_user),
):
    """
    Application with its tracking steps, interviews, offers and feedback
    """
    row = await application_crud.get_detail(db, application_id)
    if not row:
        raise NotFoundException(f"Application not found: {application_id}")
    await records.authorize(db, actor, application_id)

    response = build_application_response(row, ApplicationDetailResponse)
    response.tracking_steps = [
        TrackingStepResponse.model_validate(s).model_dump()
        for s in await tracking_ledger.get_steps(db, application_id)
    ]
    response.interviews = [
        InterviewResponse.model_validate(i).model_dump()
        for i in await records.get_interviews(db, application_id)
    ]
    response.offers = [
        OfferResponse.model_validate(o).model_dump()
        for o in await records.get_offers(db, application_id)
    ]
    response.feedback = [
        FeedbackResponse.model_validate(f).model_dump()
        for f in await records.get_feedback(db, application_id)
    ]
    return success_response(data=response.model_dump())


@router.put("/{application_id}/approve", summary="Mentor approves", response_model=ResponseModel[ApplicationResponse])
async def approve_application(
    application_id: str,
    data: Optional[MentorDecision] = None,
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(require_roles(UserRole.MENTOR.value)),
):
    comments = data.comments if data else None
    await application_workflow.approve(db, application_id, actor, comments)
    return success_response(
        data=await _response_for(db, application_id),
        message="Application approved"
    )


@router.put("/{application_id}/reject", summary="Mentor rejects", response_model=ResponseModel[ApplicationResponse])
async def reject_application(
    application_id: str,
    data: Optional[MentorDecision] = None,
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(require_roles(UserRole.MENTOR.value)),
):
    comments = data.comments if data else None
    await application_workflow.reject(db, application_id, actor, comments)
    return success_response(
        data=await _response_for(db, application_id),
        message="Application rejected"
    )


@router.put("/{application_id}/status", summary="Change application status", response_model=ResponseModel[ApplicationResponse])
async def update_application_status(
    application_id: str,
    data: ApplicationTransition,
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(get_current_user),
):
    """
    Generic transition; the workflow decides whether the caller may take it
    """
    await application_workflow.transition(db, application_id, actor, data.status, data.notes)
    return success_response(
        data=await _response_for(db, application_id),
        message="Application status updated"
    )


@router.post("/{application_id}/complete", summary="Complete internship", response_model=ResponseModel[ApplicationResponse])
async def complete_application(
    application_id: str,
    data: Optional[ApplicationComplete] = None,
    db: AsyncSession = Depends(get_db),
    actor: CurrentUser = Depends(require_roles(UserRole.EMPLOYER.value, UserRole.STAFF.value)),
):
    data = data or ApplicationComplete()
    await application_workflow.complete(
        db, application_id, actor,
        performance_rating=data.performance_rating,
        comments=data.comments,
    )
    return success_response(
        data=await _response_for(db, application_id),
        message="Internship marked as completed"
    )
