"""
Tracking ledger tests
"""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundException
from app.crud import user_crud
from app.models.tracking import TRACKING_STEPS
from app.services import tracking_ledger

# The ledger only needs an application id; SQLite does not enforce foreign keys here
APP_ID = "app-1"


@pytest.mark.asyncio
async def test_initialize_is_idempotent(db_session: AsyncSession):
    app_id = APP_ID
    steps = await tracking_ledger.initialize(db_session, app_id)
    assert [s.step for s in steps] == list(TRACKING_STEPS)

    again = await tracking_ledger.initialize(db_session, app_id)
    assert [s.id for s in again] == [s.id for s in steps]


@pytest.mark.asyncio
async def test_complete_step_keeps_first_completed_at(db_session: AsyncSession):
    app_id = APP_ID
    steps = await tracking_ledger.initialize(db_session, app_id)
    target = steps[2]

    first = await tracking_ledger.complete_step(db_session, target.id, "Checked")
    stamp = first.completed_at
    assert stamp is not None

    second = await tracking_ledger.complete_step(db_session, target.id)
    assert second.completed_at == stamp
    assert second.notes == "Checked"

    with pytest.raises(NotFoundException):
        await tracking_ledger.complete_step(db_session, "missing")


@pytest.mark.asyncio
async def test_update_step(db_session: AsyncSession):
    app_id = APP_ID
    steps = await tracking_ledger.initialize(db_session, app_id)
    step = steps[4]

    step = await tracking_ledger.update_step(db_session, step.id, "IN_PROGRESS")
    assert step.status == "IN_PROGRESS" and step.completed_at is None

    step = await tracking_ledger.update_step(db_session, step.id, "COMPLETED", notes="Done")
    assert step.completed_at is not None

    step = await tracking_ledger.update_step(db_session, step.id, "SKIPPED")
    assert step.status == "SKIPPED"
    assert step.completed_at is not None

    step = await tracking_ledger.update_step(db_session, step.id, "PENDING")
    assert step.completed_at is None


@pytest.mark.asyncio
async def test_steps_complete_in_any_order(db_session: AsyncSession):
    app_id = APP_ID
    await tracking_ledger.initialize(db_session, app_id)

    step = await tracking_ledger.complete_named_step(db_session, app_id, "Offer Processing")
    assert step.status == "COMPLETED"

    steps = await tracking_ledger.get_steps(db_session, app_id)
    done = [s.step for s in steps if s.status == "COMPLETED"]
    assert done == ["Application Submitted", "Offer Processing"]

    with pytest.raises(NotFoundException):
        await tracking_ledger.complete_named_step(db_session, "other-app", "Offer Processing")


@pytest.mark.asyncio
async def test_resume_view_status(db_session: AsyncSession):
    app_id = APP_ID
    await tracking_ledger.initialize(db_session, app_id)
    viewer = await user_crud.create(db_session, obj_in={
        "username": "recruiter",
        "name": "Rita Recruiter",
        "email": "rita@example.edu",
        "role": "EMPLOYER",
    })

    assert await tracking_ledger.resume_view_status(db_session, app_id) == {"viewed": False}

    await tracking_ledger.mark_resume_viewed(db_session, app_id, viewer.id)
    status = await tracking_ledger.resume_view_status(db_session, app_id)
    assert status["viewed"] is True
    assert status["viewed_at"] is not None
    assert status["viewer"] == "Rita Recruiter"
