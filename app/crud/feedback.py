"""
Feedback CRUD operations
"""
from typing import List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.feedback import Feedback
from .base import CRUDBase


class CRUDFeedback(CRUDBase[Feedback]):
    """Feedback CRUD"""

    async def get_by_application(
        self,
        db: AsyncSession,
        application_id: str
    ) -> List[Feedback]:
        result = await db.execute(
            select(self.model)
            .where(self.model.application_id == application_id)
            .order_by(self.model.created_at.desc())
        )
        return list(result.scalars().all())


feedback_crud = CRUDFeedback(Feedback)
