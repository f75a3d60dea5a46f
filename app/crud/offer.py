"""
Offer CRUD operations
"""
from typing import List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.offer import Offer
from .base import CRUDBase


class CRUDOffer(CRUDBase[Offer]):
    """Offer CRUD"""

    async def get_by_application(
        self,
        db: AsyncSession,
        application_id: str
    ) -> List[Offer]:
        result = await db.execute(
            select(self.model)
            .where(self.model.application_id == application_id)
            .order_by(self.model.created_at.desc())
        )
        return list(result.scalars().all())


offer_crud = CRUDOffer(Offer)
