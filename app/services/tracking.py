"""
Tracking step ledger

Every application owns the same ten-step checklist. Steps are created
together when the application is submitted, the first one already
completed, and are never deleted. Steps can be completed in any order.
"""
from typing import Any, Dict, List, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundException
from app.crud import application_crud, tracking_crud, user_crud
from app.models.base import utc_now
from app.models.notification import NotificationEvent
from app.models.tracking import TrackingStep, StepStatus, TrackingStepName, TRACKING_STEPS
from .notifications import notification_hook


class TrackingLedger:
    """Operations on an application's tracking steps"""

    async def initialize(
        self,
        db: AsyncSession,
        application_id: str,
        actor_id: Optional[str] = None,
    ) -> List[TrackingStep]:
        """Seed the checklist; a ledger that already exists is returned as is"""
        if await tracking_crud.count_by_application(db, application_id):
            return await tracking_crud.get_by_application(db, application_id)

        now = utc_now()
        steps = []
        for position, name in enumerate(TRACKING_STEPS):
            first = position == 0
            step = TrackingStep(
                application_id=application_id,
                step=name,
                position=position,
                status=StepStatus.COMPLETED.value if first else StepStatus.PENDING.value,
                completed_at=now if first else None,
                actor_id=actor_id if first else None,
            )
            db.add(step)
            steps.append(step)
        await db.flush()
        logger.info(f"Tracking ledger initialized for application {application_id}")
        return steps

    async def _complete(
        self,
        db: AsyncSession,
        step: TrackingStep,
        notes: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> bool:
        """Mark a step completed; returns False when it already was"""
        first_time = not step.is_completed
        step.status = StepStatus.COMPLETED.value
        if step.completed_at is None:
            step.completed_at = utc_now()
        if notes is not None:
            step.notes = notes
        if actor_id is not None:
            step.actor_id = actor_id
        await db.flush()
        await db.refresh(step)
        return first_time

    async def complete_step(
        self,
        db: AsyncSession,
        step_id: str,
        notes: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> TrackingStep:
        """
        Complete a step by ID

        Completing an already completed step keeps its original
        completed_at and only refreshes notes and actor.
        """
        step = await tracking_crud.get_or_raise(db, step_id)

        if await self._complete(db, step, notes, actor_id):
            logger.info(f"Step '{step.step}' completed for application {step.application_id}")
            application = await application_crud.get(db, step.application_id)
            if application:
                await notification_hook.notify(
                    db,
                    application.student_id,
                    NotificationEvent.STEP_COMPLETED.value,
                    {"application_id": application.id, "step": step.step, "notes": notes},
                )
        return step

    async def update_step(
        self,
        db: AsyncSession,
        step_id: str,
        status: StepStatus | str,
        notes: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> TrackingStep:
        """Set any step status; completed_at is cleared only when reopening a step"""
        step = await tracking_crud.get_or_raise(db, step_id)

        status = StepStatus(status).value
        if status == StepStatus.COMPLETED.value:
            await self._complete(db, step, notes, actor_id)
            return step

        if status in (StepStatus.PENDING.value, StepStatus.IN_PROGRESS.value):
            step.completed_at = None
        step.status = status
        if notes is not None:
            step.notes = notes
        if actor_id is not None:
            step.actor_id = actor_id
        await db.flush()
        await db.refresh(step)
        return step

    async def _named(self, db: AsyncSession, application_id: str, name: TrackingStepName | str) -> TrackingStep:
        name = TrackingStepName(name).value
        step = await tracking_crud.get_step(db, application_id, name)
        if not step:
            raise NotFoundException(f"Tracking step '{name}' not found for application {application_id}")
        return step

    async def complete_named_step(
        self,
        db: AsyncSession,
        application_id: str,
        name: TrackingStepName | str,
        notes: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> TrackingStep:
        step = await self._named(db, application_id, name)
        await self._complete(db, step, notes, actor_id)
        return step

    async def start_named_step(
        self,
        db: AsyncSession,
        application_id: str,
        name: TrackingStepName | str,
        actor_id: Optional[str] = None,
    ) -> TrackingStep:
        """Move a pending step to IN_PROGRESS; finished steps are left alone"""
        step = await self._named(db, application_id, name)
        if step.status == StepStatus.PENDING.value:
            step.status = StepStatus.IN_PROGRESS.value
            if actor_id is not None:
                step.actor_id = actor_id
            await db.flush()
            await db.refresh(step)
        return step

    async def get_steps(self, db: AsyncSession, application_id: str) -> List[TrackingStep]:
        return await tracking_crud.get_by_application(db, application_id)

    async def mark_resume_viewed(
        self,
        db: AsyncSession,
        application_id: str,
        viewer_id: str,
    ) -> TrackingStep:
        return await self.complete_named_step(
            db,
            application_id,
            TrackingStepName.RESUME_REVIEW,
            notes="Resume viewed by employer",
            actor_id=viewer_id,
        )

    async def resume_view_status(self, db: AsyncSession, application_id: str) -> Dict[str, Any]:
        """{viewed, viewed_at, viewer} from the Resume Review step"""
        step = await tracking_crud.get_step(db, application_id, TrackingStepName.RESUME_REVIEW.value)
        if not step or not step.is_completed:
            return {"viewed": False}

        viewer = None
        if step.actor_id:
            user = await user_crud.get(db, step.actor_id)
            viewer = user.name if user else None
        return {"viewed": True, "viewed_at": step.completed_at, "viewer": viewer}


tracking_ledger = TrackingLedger()
