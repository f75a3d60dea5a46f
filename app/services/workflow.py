"""
Application status workflow

The status of an application only moves along the edges in TRANSITIONS.
Each edge names the roles allowed to take it, the checklist step it
completes, the timestamp it stamps and the event it notifies.

A transition is checked in this order:
    1. the application exists
    2. (current, target) is an edge
    3. the actor's role may take the edge
    4. the actor has authority over this application
       (mentor of the student's department, poster of the internship,
       the applicant themselves; staff always)
Only then are status, timestamps and the ledger written.
"""
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    ConflictException,
    ForbiddenException,
    IllegalTransitionException,
    NotFoundException,
    ValidationException,
)
from app.core.security import CurrentUser
from app.crud import application_crud, feedback_crud, internship_crud, user_crud
from app.models.application import Application, ApplicationStatus
from app.models.base import as_utc, utc_now
from app.models.internship import Internship
from app.models.notification import NotificationEvent
from app.models.tracking import TrackingStepName
from app.models.user import User, UserRole
from .notifications import notification_hook
from .tracking import tracking_ledger

S = ApplicationStatus
R = UserRole


@dataclass(frozen=True)
class Edge:
    roles: FrozenSet[str]
    step: Optional[str] = None
    stamp: Optional[str] = None
    event: str = NotificationEvent.APPLICATION_STATUS_CHANGED.value


def _roles(*roles: UserRole) -> FrozenSet[str]:
    return frozenset(role.value for role in roles)


TRANSITIONS: Dict[Tuple[str, str], Edge] = {
    (S.APPLIED.value, S.MENTOR_APPROVED.value): Edge(
        _roles(R.MENTOR), TrackingStepName.MENTOR_REVIEW.value, "mentor_approved_at",
        NotificationEvent.APPLICATION_APPROVED.value,
    ),
    (S.APPLIED.value, S.MENTOR_REJECTED.value): Edge(
        _roles(R.MENTOR), TrackingStepName.MENTOR_REVIEW.value, "mentor_approved_at",
        NotificationEvent.APPLICATION_REJECTED.value,
    ),
    (S.MENTOR_APPROVED.value, S.INTERVIEWED.value): Edge(
        _roles(R.EMPLOYER, R.STAFF), TrackingStepName.INTERVIEW_PROCESS.value, "interviewed_at",
    ),
    (S.INTERVIEWED.value, S.OFFERED.value): Edge(
        _roles(R.EMPLOYER, R.STAFF), TrackingStepName.FINAL_DECISION.value, "offer_made_at",
    ),
    (S.INTERVIEWED.value, S.NOT_OFFERED.value): Edge(
        _roles(R.EMPLOYER, R.STAFF), TrackingStepName.FINAL_DECISION.value,
    ),
    (S.OFFERED.value, S.OFFER_ACCEPTED.value): Edge(
        _roles(R.STUDENT), TrackingStepName.OFFER_PROCESSING.value, "offer_accepted_at",
    ),
    (S.OFFERED.value, S.OFFER_REJECTED.value): Edge(
        _roles(R.STUDENT), TrackingStepName.OFFER_PROCESSING.value,
    ),
    (S.OFFER_ACCEPTED.value, S.COMPLETED.value): Edge(
        _roles(R.EMPLOYER, R.STAFF), stamp="completed_at",
    ),
}


def allowed_targets(current: str) -> list:
    return [target for source, target in TRANSITIONS if source == current]


class ApplicationWorkflow:
    """Submits applications and moves them through the status workflow"""

    async def load_context(
        self, db: AsyncSession, application_id: str
    ) -> Tuple[Application, Optional[User], Optional[Internship]]:
        application = await application_crud.get_or_raise(db, application_id)
        student = await user_crud.get(db, application.student_id)
        internship = await internship_crud.get(db, application.internship_id)
        return application, student, internship

    def check_authority(
        self,
        actor: CurrentUser,
        application: Application,
        student: Optional[User],
        internship: Optional[Internship],
    ) -> None:
        """Raise Forbidden unless the actor may act on this application"""
        role = actor.role
        if role == R.STAFF.value:
            return
        if role == R.MENTOR.value:
            student_department = student.department if student else None
            if not actor.department or actor.department != student_department:
                raise ForbiddenException("Mentors can only act on applications from their own department")
        elif role == R.EMPLOYER.value:
            if internship is None or internship.posted_by != actor.id:
                raise ForbiddenException("Employers can only act on applications to their own postings")
        elif role == R.STUDENT.value:
            if application.student_id != actor.id:
                raise ForbiddenException("Students can only act on their own applications")
        else:
            raise ForbiddenException("Insufficient permissions")

    async def submit_application(
        self,
        db: AsyncSession,
        actor: CurrentUser,
        internship_id: str,
    ) -> Application:
        """Create an APPLIED application with a freshly seeded ledger"""
        student = await user_crud.get(db, actor.id)
        if not student:
            raise NotFoundException("Student profile not found")

        internship = await internship_crud.get(db, internship_id)
        if not internship or not internship.is_active:
            raise NotFoundException(f"Internship not found or inactive: {internship_id}")

        deadline = as_utc(internship.application_deadline)
        if deadline is not None and deadline < utc_now():
            raise ValidationException("The application deadline for this internship has passed")

        if not internship.accepts_department(student.department):
            raise ValidationException(
                "Your department is not eligible for this internship",
                data={"department": student.department, "eligible_departments": internship.eligible_departments},
            )

        if await application_crud.exists(db, student.id, internship.id):
            raise ConflictException("You have already applied to this internship")

        application = await application_crud.create(db, obj_in={
            "student_id": student.id,
            "internship_id": internship.id,
            "status": ApplicationStatus.APPLIED.value,
        })
        await tracking_ledger.initialize(db, application.id, actor_id=student.id)
        logger.info(f"Application {application.id} submitted by {student.id} for {internship.id}")

        await notification_hook.notify(
            db,
            student.id,
            NotificationEvent.APPLICATION_SUBMITTED.value,
            {"application_id": application.id, "internship_title": internship.title},
        )
        return application

    async def transition(
        self,
        db: AsyncSession,
        application_id: str,
        actor: CurrentUser,
        target_status: ApplicationStatus | str,
        notes: Optional[str] = None,
    ) -> Application:
        """Move an application along one edge of the workflow"""
        target = ApplicationStatus(target_status).value
        application, student, internship = await self.load_context(db, application_id)
        current = application.status

        edge = TRANSITIONS.get((current, target))
        if edge is None:
            raise IllegalTransitionException(
                f"Cannot change status from {current} to {target}",
                data={"current_status": current, "allowed": allowed_targets(current)},
            )
        if actor.role not in edge.roles:
            raise IllegalTransitionException(
                f"Role {actor.role} cannot change status from {current} to {target}",
                data={"current_status": current, "allowed_roles": sorted(edge.roles)},
            )
        self.check_authority(actor, application, student, internship)

        now = utc_now()
        application.status = target
        if edge.stamp:
            setattr(application, edge.stamp, now)
        if actor.role == R.MENTOR.value and edge.stamp == "mentor_approved_at":
            application.mentor_id = actor.id
        if notes is not None:
            application.notes = notes
        await db.flush()

        if edge.step:
            await tracking_ledger.complete_named_step(db, application.id, edge.step, notes=notes, actor_id=actor.id)

        logger.info(f"Application {application.id}: {current} -> {target} by {actor.role} {actor.id}")

        # The student hears about every move except their own; those go to the poster
        recipient = application.student_id
        if actor.id == application.student_id and internship is not None:
            recipient = internship.posted_by
        await notification_hook.notify(
            db,
            recipient,
            edge.event,
            {
                "application_id": application.id,
                "internship_title": internship.title if internship else None,
                "from_status": current,
                "to_status": target,
                "notes": notes,
            },
        )

        await db.refresh(application)
        return application

    async def approve(
        self, db: AsyncSession, application_id: str, actor: CurrentUser, comments: Optional[str] = None
    ) -> Application:
        return await self.transition(db, application_id, actor, ApplicationStatus.MENTOR_APPROVED, comments)

    async def reject(
        self, db: AsyncSession, application_id: str, actor: CurrentUser, comments: Optional[str] = None
    ) -> Application:
        return await self.transition(db, application_id, actor, ApplicationStatus.MENTOR_REJECTED, comments)

    async def complete(
        self,
        db: AsyncSession,
        application_id: str,
        actor: CurrentUser,
        performance_rating: Optional[int] = None,
        comments: Optional[str] = None,
    ) -> Application:
        """Mark the internship completed, optionally recording a performance rating"""
        application = await self.transition(db, application_id, actor, ApplicationStatus.COMPLETED, comments)
        if performance_rating is not None:
            await feedback_crud.create(db, obj_in={
                "application_id": application.id,
                "supervisor_id": actor.id,
                "rating": performance_rating,
                "comments": comments,
            })
            await tracking_ledger.complete_named_step(
                db, application.id, TrackingStepName.FEEDBACK_COLLECTION, notes=comments, actor_id=actor.id
            )
        return application


application_workflow = ApplicationWorkflow()
