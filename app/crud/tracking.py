"""
Tracking step CRUD operations
"""
from typing import Optional, List
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.tracking import TrackingStep
from .base import CRUDBase


class CRUDTrackingStep(CRUDBase[TrackingStep]):
    """Tracking step CRUD"""

    async def get_by_application(
        self,
        db: AsyncSession,
        application_id: str
    ) -> List[TrackingStep]:
        """All steps of one application in ledger order"""
        result = await db.execute(
            select(self.model)
            .where(self.model.application_id == application_id)
            .order_by(self.model.position)
        )
        return list(result.scalars().all())

    async def get_by_applications(
        self,
        db: AsyncSession,
        application_ids: List[str]
    ) -> List[TrackingStep]:
        if not application_ids:
            return []
        result = await db.execute(
            select(self.model)
            .where(self.model.application_id.in_(application_ids))
            .order_by(self.model.application_id, self.model.position)
        )
        return list(result.scalars().all())

    async def get_step(
        self,
        db: AsyncSession,
        application_id: str,
        step: str
    ) -> Optional[TrackingStep]:
        result = await db.execute(
            select(self.model).where(
                self.model.application_id == application_id,
                self.model.step == step,
            )
        )
        return result.scalar_one_or_none()

    async def count_by_application(self, db: AsyncSession, application_id: str) -> int:
        result = await db.execute(
            select(func.count())
            .select_from(self.model)
            .where(self.model.application_id == application_id)
        )
        return result.scalar() or 0


tracking_crud = CRUDTrackingStep(TrackingStep, "Tracking step")
