"""
Test configuration

Fixtures: in-memory database, HTTP test client and a test data factory
"""
from typing import AsyncGenerator, Optional
from dataclasses import dataclass, field

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import app.models  # noqa: F401  registers every table on SQLModel.metadata
from app.core.database import get_db
from app.core.security import create_access_token
from app.crud import user_crud
from app.main import create_app

# In-memory SQLite; StaticPool keeps the single connection alive for the test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ========== Test data factory ==========

def auth(user: dict) -> dict:
    """Authorization header for a user dict as returned by the API"""
    token = create_access_token(user["id"], user["role"], user.get("department"), user.get("name"))
    return {"Authorization": f"Bearer {token}"}


@dataclass
class DataFactory:
    """
    Test data factory

    Builds users, postings and applications through the API so tests do not
    repeat setup code. Field changes only need updating here.
    """
    client: AsyncClient
    staff: dict
    _counter: int = field(default=0, repr=False)

    def _next_id(self) -> str:
        """Unique suffix to avoid collisions"""
        self._counter += 1
        return str(self._counter)

    async def create_user(self, role: str, department: Optional[str] = None, **overrides) -> dict:
        suffix = self._next_id()
        data = {
            "username": f"{role.lower()}{suffix}",
            "name": f"Test {role.title()} {suffix}",
            "email": f"{role.lower()}{suffix}@example.edu",
            "role": role,
            "department": department,
            **overrides
        }
        resp = await self.client.post("/api/users", json=data, headers=auth(self.staff))
        assert resp.status_code == 200, f"create user failed: {resp.text}"
        return resp.json()["data"]

    async def create_student(self, department: str = "CS", **overrides) -> dict:
        return await self.create_user("STUDENT", department, **overrides)

    async def create_mentor(self, department: str = "CS", **overrides) -> dict:
        return await self.create_user("MENTOR", department, **overrides)

    async def create_employer(self, **overrides) -> dict:
        return await self.create_user("EMPLOYER", **overrides)

    async def create_internship(self, employer: Optional[dict] = None, **overrides) -> dict:
        """Create a posting; creates the employer when none is given"""
        if employer is None:
            employer = await self.create_employer()
        suffix = self._next_id()
        data = {
            "title": f"Backend Intern {suffix}",
            "description": "Build and maintain internal APIs",
            "company_name": f"Acme {suffix}",
            "location": "Remote",
            "required_skills": ["Python", "SQL"],
            "eligible_departments": ["CS", "IT"],
            "stipend_min": 1000,
            "stipend_max": 2000,
            **overrides
        }
        resp = await self.client.post("/api/internships", json=data, headers=auth(employer))
        assert resp.status_code == 200, f"create internship failed: {resp.text}"
        return resp.json()["data"]

    async def create_application(
        self,
        student: Optional[dict] = None,
        internship: Optional[dict] = None,
    ) -> dict:
        """Submit an application, creating the student and posting when missing"""
        if student is None:
            student = await self.create_student()
        if internship is None:
            internship = await self.create_internship()
        resp = await self.client.post(
            "/api/applications",
            json={"internship_id": internship["id"]},
            headers=auth(student),
        )
        assert resp.status_code == 200, f"create application failed: {resp.text}"
        return resp.json()["data"]

    async def setup_pipeline(self, department: str = "CS") -> dict:
        """Student, mentor, employer, posting and a submitted application"""
        employer = await self.create_employer()
        internship = await self.create_internship(employer)
        student = await self.create_student(department)
        mentor = await self.create_mentor(department)
        application = await self.create_application(student, internship)
        return {
            "employer": employer,
            "internship": internship,
            "student": student,
            "mentor": mentor,
            "application": application,
        }

    async def set_status(self, application_id: str, actor: dict, status: str, notes: Optional[str] = None):
        resp = await self.client.put(
            f"/api/applications/{application_id}/status",
            json={"status": status, "notes": notes},
            headers=auth(actor),
        )
        assert resp.status_code == 200, f"status change failed: {resp.text}"
        return resp.json()["data"]

    async def track(self, actor: dict, action: str, **data):
        """POST /api/tracking, returns the raw response"""
        return await self.client.post(
            "/api/tracking",
            json={"action": action, "data": data},
            headers=auth(actor),
        )


# ========== Database and client ==========

@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Fresh database per test

    Tables are created before and the engine disposed after each test
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP test client

    get_db is overridden to the test session
    """
    app = create_app()

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def staff_user(db_session: AsyncSession) -> dict:
    """Bootstrap staff account, created directly since POST /api/users needs one"""
    staff = await user_crud.create(db_session, obj_in={
        "username": "placement_office",
        "name": "Placement Office",
        "email": "office@example.edu",
        "role": "STAFF",
        "department": None,
    })
    await db_session.commit()
    return {"id": staff.id, "role": staff.role, "department": staff.department, "name": staff.name}


@pytest_asyncio.fixture
async def factory(client: AsyncClient, staff_user: dict) -> DataFactory:
    """Test data factory instance"""
    return DataFactory(client=client, staff=staff_user)
