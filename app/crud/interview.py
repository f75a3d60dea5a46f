"""
Interview CRUD operations
"""
from typing import List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.interview import Interview
from .base import CRUDBase


class CRUDInterview(CRUDBase[Interview]):
    """Interview CRUD"""

    async def get_by_application(
        self,
        db: AsyncSession,
        application_id: str
    ) -> List[Interview]:
        """Interviews of one application, earliest slot first"""
        result = await db.execute(
            select(self.model)
            .where(self.model.application_id == application_id)
            .order_by(self.model.scheduled_datetime)
        )
        return list(result.scalars().all())


interview_crud = CRUDInterview(Interview)
