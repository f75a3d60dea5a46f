"""
Internship posting CRUD operations
"""
from typing import Optional, List
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.internship import Internship
from .base import CRUDBase


class CRUDInternship(CRUDBase[Internship]):
    """Internship posting CRUD"""

    def _filtered(self, query, *, active_only: bool, posted_by: Optional[str], keyword: Optional[str]):
        if active_only:
            query = query.where(self.model.is_active == True)
        if posted_by:
            query = query.where(self.model.posted_by == posted_by)
        if keyword:
            pattern = f"%{keyword}%"
            query = query.where(
                self.model.title.ilike(pattern) | self.model.company_name.ilike(pattern)
            )
        return query

    async def get_filtered(
        self,
        db: AsyncSession,
        *,
        active_only: bool = True,
        posted_by: Optional[str] = None,
        keyword: Optional[str] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[Internship]:
        """Filtered page of postings, newest first"""
        query = self._filtered(
            select(self.model), active_only=active_only, posted_by=posted_by, keyword=keyword
        )
        query = query.order_by(self.model.created_at.desc()).offset(skip).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def count_filtered(
        self,
        db: AsyncSession,
        *,
        active_only: bool = True,
        posted_by: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> int:
        query = self._filtered(
            select(func.count()).select_from(self.model),
            active_only=active_only, posted_by=posted_by, keyword=keyword,
        )
        result = await db.execute(query)
        return result.scalar() or 0

    async def deactivate(self, db: AsyncSession, *, db_obj: Internship) -> Internship:
        """Postings are never hard-deleted; they stop accepting applications"""
        db_obj.is_active = False
        await db.flush()
        await db.refresh(db_obj)
        return db_obj


internship_crud = CRUDInternship(Internship)
