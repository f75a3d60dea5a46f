"""
Interview, offer and feedback records

Sub-records hang off an application and are created as side effects of
tracking actions. Creating them also moves the matching checklist steps.
"""
from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (
    ForbiddenException,
    IllegalTransitionException,
    NotFoundException,
    ValidationException,
)
from app.core.security import CurrentUser
from app.crud import feedback_crud, interview_crud, offer_crud, user_crud
from app.models.application import Application, ApplicationStatus
from app.models.base import as_utc, utc_now
from app.models.feedback import Feedback
from app.models.interview import Interview
from app.models.internship import Internship
from app.models.notification import NotificationEvent
from app.models.offer import Offer, OfferStatus
from app.models.tracking import TrackingStepName
from app.models.user import User, UserRole
from app.schemas.tracking import (
    CreateOfferData,
    MarkResumeViewedData,
    RecordFeedbackData,
    ScheduleInterviewData,
    UpdateInterviewStatusData,
    UpdateOfferStatusData,
)
from .notifications import notification_hook
from .tracking import tracking_ledger
from .workflow import application_workflow

SchemaType = TypeVar("SchemaType", bound=BaseModel)


def parse(schema: Type[SchemaType], data: SchemaType | Dict[str, Any]) -> SchemaType:
    """Validate a raw payload; field errors become a ValidationException"""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        errors = [
            {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in exc.errors()
        ]
        raise ValidationException("Invalid request data", data={"errors": errors}) from exc


async def authorize(
    db: AsyncSession, actor: CurrentUser, application_id: str
) -> Tuple[Application, Optional[User], Optional[Internship]]:
    """Load an application and check the actor's authority over it"""
    context = await application_workflow.load_context(db, application_id)
    application_workflow.check_authority(actor, *context)
    return context


def check_student(application: Application, student_id: Optional[str]) -> None:
    """An explicit student_id must name the applicant"""
    if student_id and student_id != application.student_id:
        raise ValidationException(
            "student_id does not match the applicant",
            data={"errors": [{"loc": "student_id", "msg": "must be the applicant", "type": "value_error"}]},
        )


# ==================== Interviews ====================

async def schedule_interview(
    db: AsyncSession,
    actor: CurrentUser,
    data: ScheduleInterviewData | Dict[str, Any],
) -> Interview:
    """Book an interview and complete the Interview Scheduling step"""
    data = parse(ScheduleInterviewData, data)
    application, _, internship = await authorize(db, actor, data.application_id)

    if not await user_crud.get(db, data.interviewer_id):
        raise NotFoundException(f"Interviewer not found: {data.interviewer_id}")
    check_student(application, data.student_id)

    values = data.model_dump(exclude={"student_id", "duration_minutes"})
    values["student_id"] = application.student_id
    values["duration_minutes"] = data.duration_minutes or settings.default_interview_minutes
    interview = await interview_crud.create(db, obj_in=values)

    await tracking_ledger.complete_named_step(
        db, application.id, TrackingStepName.INTERVIEW_SCHEDULING,
        notes=data.notes, actor_id=actor.id,
    )
    logger.info(f"Interview {interview.id} scheduled for application {application.id}")

    await notification_hook.notify(
        db,
        interview.student_id,
        NotificationEvent.INTERVIEW_SCHEDULED.value,
        {
            "application_id": application.id,
            "interview_id": interview.id,
            "internship_title": internship.title if internship else None,
            "scheduled_datetime": interview.scheduled_datetime,
            "mode": interview.mode,
            "meeting_link": interview.meeting_link,
            "location": interview.location,
        },
    )
    return interview


async def update_interview_status(
    db: AsyncSession,
    actor: CurrentUser,
    data: UpdateInterviewStatusData | Dict[str, Any],
) -> Interview:
    data = parse(UpdateInterviewStatusData, data)
    interview = await interview_crud.get_or_raise(db, data.interview_id)
    await authorize(db, actor, interview.application_id)

    interview = await interview_crud.update(db, db_obj=interview, obj_in={
        "status": data.status,
        "feedback": data.feedback,
        "rating": data.rating,
    })
    logger.info(f"Interview {interview.id} status -> {interview.status} by {actor.id}")

    await notification_hook.notify(
        db,
        interview.student_id,
        NotificationEvent.INTERVIEW_UPDATED.value,
        {"interview_id": interview.id, "application_id": interview.application_id, "status": interview.status},
    )
    return interview


async def get_interviews(db: AsyncSession, application_id: str) -> List[Interview]:
    return await interview_crud.get_by_application(db, application_id)


# ==================== Offers ====================

async def create_offer(
    db: AsyncSession,
    actor: CurrentUser,
    data: CreateOfferData | Dict[str, Any],
) -> Offer:
    """
    Create an offer for an application

    An INTERVIEWED application is moved to OFFERED by the acting user first;
    an application that is already OFFERED or OFFER_ACCEPTED just gains
    another offer. Any other status cannot receive an offer.
    """
    data = parse(CreateOfferData, data)
    application, _, internship = await authorize(db, actor, data.application_id)
    check_student(application, data.student_id)

    if application.status == ApplicationStatus.INTERVIEWED.value:
        application = await application_workflow.transition(
            db, application.id, actor, ApplicationStatus.OFFERED
        )
    elif application.status not in (ApplicationStatus.OFFERED.value, ApplicationStatus.OFFER_ACCEPTED.value):
        raise IllegalTransitionException(
            f"Cannot create an offer for an application in status {application.status}",
            data={"current_status": application.status},
        )

    now = utc_now()
    offer = await offer_crud.create(db, obj_in={
        "application_id": application.id,
        "student_id": application.student_id,
        "company_id": data.company_id or (internship.posted_by if internship else actor.id),
        "position_title": data.position_title or (internship.title if internship else None),
        "offer_type": data.offer_type,
        "offer_details": data.offer_details,
        "offer_status": data.offer_status,
        "offer_date": data.offer_date or now,
        "response_deadline": data.response_deadline or now + timedelta(days=settings.offer_response_days),
        "contract_signed": data.contract_signed,
        "contract_details": data.contract_details,
    })

    await tracking_ledger.start_named_step(db, application.id, TrackingStepName.OFFER_PROCESSING, actor_id=actor.id)
    logger.info(f"Offer {offer.id} created for application {application.id} ({offer.offer_status})")

    await notification_hook.notify(
        db,
        offer.student_id,
        NotificationEvent.OFFER_RECEIVED.value,
        {
            "application_id": application.id,
            "offer_id": offer.id,
            "internship_title": offer.position_title,
            "offer_status": offer.offer_status,
            "response_deadline": offer.response_deadline,
        },
    )
    return offer


async def update_offer_status(
    db: AsyncSession,
    actor: CurrentUser,
    data: UpdateOfferStatusData | Dict[str, Any],
) -> Offer:
    """Set an offer's status; statuses may follow one another freely"""
    data = parse(UpdateOfferStatusData, data)
    offer = await offer_crud.get_or_raise(db, data.offer_id)
    await authorize(db, actor, offer.application_id)

    values = data.model_dump(exclude={"offer_id", "status"}, exclude_none=True)
    values["offer_status"] = data.status
    if data.status == OfferStatus.ACCEPTED.value and not data.acceptance_date:
        values["acceptance_date"] = utc_now()
    if data.status == OfferStatus.REJECTED.value and not data.rejection_date:
        values["rejection_date"] = utc_now()
    offer = await offer_crud.update(db, db_obj=offer, obj_in=values)
    logger.info(f"Offer {offer.id} status -> {offer.offer_status} by {actor.id}")

    await notification_hook.notify(
        db,
        offer.student_id,
        NotificationEvent.OFFER_UPDATED.value,
        {"offer_id": offer.id, "application_id": offer.application_id, "status": offer.offer_status},
    )
    return offer


async def respond_to_offer(
    db: AsyncSession,
    actor: CurrentUser,
    offer_id: str,
    response: str,
    reason: Optional[str] = None,
) -> Offer:
    """Student accepts or rejects an extended offer before its deadline"""
    if actor.role != UserRole.STUDENT.value:
        raise ForbiddenException("Only students can respond to offers")

    offer = await offer_crud.get(db, offer_id)
    if not offer:
        raise NotFoundException(f"Offer not found: {offer_id}")
    if offer.student_id != actor.id:
        raise ForbiddenException("This offer belongs to another student")
    if offer.offer_status != OfferStatus.EXTENDED.value:
        raise ValidationException(
            f"Offer is not awaiting a response (status {offer.offer_status})",
            data={"offer_status": offer.offer_status},
        )

    now = utc_now()
    if as_utc(offer.response_deadline) < now:
        raise ValidationException("The response deadline for this offer has passed")

    if response == OfferStatus.ACCEPTED.value:
        offer.offer_status = OfferStatus.ACCEPTED.value
        offer.acceptance_date = now
        target = ApplicationStatus.OFFER_ACCEPTED
    else:
        offer.offer_status = OfferStatus.REJECTED.value
        offer.rejection_date = now
        offer.rejection_reason = reason
        target = ApplicationStatus.OFFER_REJECTED
    await db.flush()

    await application_workflow.transition(db, offer.application_id, actor, target, notes=reason)

    await notification_hook.notify(
        db,
        offer.company_id,
        NotificationEvent.OFFER_UPDATED.value,
        {"offer_id": offer.id, "application_id": offer.application_id, "status": offer.offer_status},
    )
    await db.refresh(offer)
    return offer


async def get_offers(db: AsyncSession, application_id: str) -> List[Offer]:
    return await offer_crud.get_by_application(db, application_id)


# ==================== Feedback ====================

async def record_feedback(
    db: AsyncSession,
    actor: CurrentUser,
    data: RecordFeedbackData | Dict[str, Any],
) -> Feedback:
    data = parse(RecordFeedbackData, data)
    application, _, _ = await authorize(db, actor, data.application_id)

    feedback = await feedback_crud.create(db, obj_in={
        "application_id": application.id,
        "supervisor_id": data.supervisor_id or actor.id,
        "rating": data.rating,
        "comments": data.comments,
    })
    await tracking_ledger.complete_named_step(
        db, application.id, TrackingStepName.FEEDBACK_COLLECTION,
        notes=data.comments, actor_id=actor.id,
    )
    logger.info(f"Feedback {feedback.id} recorded for application {application.id}")

    await notification_hook.notify(
        db,
        application.student_id,
        NotificationEvent.FEEDBACK_RECORDED.value,
        {"application_id": application.id, "rating": feedback.rating},
    )
    return feedback


async def get_feedback(db: AsyncSession, application_id: str) -> List[Feedback]:
    return await feedback_crud.get_by_application(db, application_id)


# ==================== Resume ====================

async def mark_resume_viewed(
    db: AsyncSession,
    actor: CurrentUser,
    data: MarkResumeViewedData | Dict[str, Any],
):
    data = parse(MarkResumeViewedData, data)
    application, _, _ = await authorize(db, actor, data.application_id)
    return await tracking_ledger.mark_resume_viewed(db, application.id, actor.id)
