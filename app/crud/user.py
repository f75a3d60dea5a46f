"""
User CRUD operations
"""
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from .base import CRUDBase


class CRUDUser(CRUDBase[User]):
    """User CRUD"""

    async def get_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        result = await db.execute(
            select(self.model).where(self.model.username == username)
        )
        return result.scalar_one_or_none()


user_crud = CRUDUser(User)
