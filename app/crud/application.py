"""
Application CRUD operations

List queries are scoped by the caller's role:
students see their own applications, mentors see applications from students
of their department, employers see applications to their postings and staff
see everything.
"""
from typing import Optional, List, Dict, Tuple, Any
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.application import Application
from app.models.internship import Internship
from app.models.user import User, UserRole
from .base import CRUDBase

# (application, student_name, student_department, internship_title, company_name)
ApplicationRow = Tuple[Application, Optional[str], Optional[str], Optional[str], Optional[str]]


class CRUDApplication(CRUDBase[Application]):
    """Application CRUD"""

    def _joined(self, *columns: Any):
        return (
            select(*columns)
            .select_from(self.model)
            .join(User, User.id == self.model.student_id)
            .join(Internship, Internship.id == self.model.internship_id)
        )

    def _scope(
        self,
        query,
        role: str,
        user_id: str,
        department: Optional[str] = None,
    ):
        if role == UserRole.STUDENT.value:
            return query.where(self.model.student_id == user_id)
        if role == UserRole.MENTOR.value:
            return query.where(User.department == department)
        if role == UserRole.EMPLOYER.value:
            return query.where(Internship.posted_by == user_id)
        return query

    async def get_detail(self, db: AsyncSession, id: str) -> Optional[ApplicationRow]:
        """Fetch one application with student and posting display fields"""
        result = await db.execute(
            self._joined(
                self.model, User.name, User.department, Internship.title, Internship.company_name
            ).where(self.model.id == id)
        )
        row = result.first()
        return tuple(row) if row else None

    async def get_multi_scoped(
        self,
        db: AsyncSession,
        *,
        role: str,
        user_id: str,
        department: Optional[str] = None,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[ApplicationRow]:
        """Role-scoped page of applications, newest first"""
        query = self._joined(
            self.model, User.name, User.department, Internship.title, Internship.company_name
        )
        query = self._scope(query, role, user_id, department)
        if status:
            query = query.where(self.model.status == status)
        query = query.order_by(self.model.applied_at.desc()).offset(skip).limit(limit)
        result = await db.execute(query)
        return [tuple(row) for row in result.all()]

    async def count_scoped(
        self,
        db: AsyncSession,
        *,
        role: str,
        user_id: str,
        department: Optional[str] = None,
        status: Optional[str] = None,
    ) -> int:
        query = self._scope(self._joined(func.count(self.model.id)), role, user_id, department)
        if status:
            query = query.where(self.model.status == status)
        result = await db.execute(query)
        return result.scalar() or 0

    async def count_by_status(
        self,
        db: AsyncSession,
        *,
        role: str,
        user_id: str,
        department: Optional[str] = None,
    ) -> Dict[str, int]:
        """Application counts grouped by status"""
        query = self._scope(
            self._joined(self.model.status, func.count(self.model.id)),
            role, user_id, department,
        ).group_by(self.model.status)
        result = await db.execute(query)
        return {status: count for status, count in result.all()}

    async def count_by_internship(self, db: AsyncSession, internship_id: str) -> int:
        result = await db.execute(
            select(func.count())
            .select_from(self.model)
            .where(self.model.internship_id == internship_id)
        )
        return result.scalar() or 0

    async def exists(
        self,
        db: AsyncSession,
        student_id: str,
        internship_id: str
    ) -> bool:
        """Whether the student already applied to the posting"""
        result = await db.execute(
            select(func.count())
            .select_from(self.model)
            .where(
                self.model.student_id == student_id,
                self.model.internship_id == internship_id,
            )
        )
        return (result.scalar() or 0) > 0


application_crud = CRUDApplication(Application)
