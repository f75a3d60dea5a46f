"""
Notification CRUD operations
"""
from typing import List
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.notification import Notification
from .base import CRUDBase


class CRUDNotification(CRUDBase[Notification]):
    """Notification CRUD"""

    async def get_by_user(
        self,
        db: AsyncSession,
        user_id: str,
        *,
        unread_only: bool = False,
        skip: int = 0,
        limit: int = 100
    ) -> List[Notification]:
        query = select(self.model).where(self.model.user_id == user_id)
        if unread_only:
            query = query.where(self.model.is_read == False)
        query = query.order_by(self.model.created_at.desc()).offset(skip).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def count_by_user(
        self,
        db: AsyncSession,
        user_id: str,
        *,
        unread_only: bool = False
    ) -> int:
        query = select(func.count()).select_from(self.model).where(self.model.user_id == user_id)
        if unread_only:
            query = query.where(self.model.is_read == False)
        result = await db.execute(query)
        return result.scalar() or 0

    async def mark_read(self, db: AsyncSession, *, db_obj: Notification) -> Notification:
        db_obj.is_read = True
        await db.flush()
        await db.refresh(db_obj)
        return db_obj


notification_crud = CRUDNotification(Notification)
