"""
Tracking API tests

POST /api/tracking actions and the tracking read endpoints
"""
import pytest
from httpx import AsyncClient

from tests.conftest import DataFactory, auth


async def get_tracking(client: AsyncClient, application_id: str, actor: dict) -> dict:
    resp = await client.get("/api/tracking", params={"application_id": application_id}, headers=auth(actor))
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


@pytest.mark.asyncio
async def test_complete_step_twice_keeps_first_timestamp(client: AsyncClient, factory: DataFactory):
    pipeline = await factory.setup_pipeline()
    application_id = pipeline["application"]["id"]
    employer = pipeline["employer"]

    tracking = await get_tracking(client, application_id, employer)
    step = next(s for s in tracking["tracking_steps"] if s["step"] == "Document Verification")
    assert step["status"] == "PENDING"
    assert step["completed_at"] is None

    resp = await factory.track(employer, "complete_step", step_id=step["id"], notes="Transcript verified")
    assert resp.status_code == 200
    first = resp.json()["data"]["result"]
    assert first["status"] == "COMPLETED"
    assert first["completed_at"] is not None
    assert first["notes"] == "Transcript verified"
    assert first["actor_id"] == employer["id"]

    resp = await factory.track(employer, "complete_step", step_id=step["id"])
    assert resp.status_code == 200
    second = resp.json()["data"]["result"]
    assert second["status"] == "COMPLETED"
    assert second["completed_at"] == first["completed_at"]


@pytest.mark.asyncio
async def test_complete_unknown_step_is_404(client: AsyncClient, factory: DataFactory):
    resp = await factory.track(factory.staff, "complete_step", step_id="missing")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_unknown_action_is_400(client: AsyncClient, factory: DataFactory):
    resp = await factory.track(factory.staff, "delete_everything", application_id="x")
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_students_cannot_post_actions(client: AsyncClient, factory: DataFactory):
    pipeline = await factory.setup_pipeline()
    resp = await factory.track(
        pipeline["student"], "mark_resume_viewed", application_id=pipeline["application"]["id"]
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_schedule_interview(client: AsyncClient, factory: DataFactory):
    pipeline = await factory.setup_pipeline()
    application_id = pipeline["application"]["id"]
    employer = pipeline["employer"]

    resp = await factory.track(
        employer,
        "schedule_interview",
        application_id=application_id,
        interviewer_id=employer["id"],
        scheduled_datetime="2030-01-15T10:00:00Z",
        mode="ONLINE",
        meeting_link="https://meet.example.com/abc",
    )
    assert resp.status_code == 200, resp.text
    interview = resp.json()["data"]["result"]
    assert interview["student_id"] == pipeline["student"]["id"]
    assert interview["duration_minutes"] == 60
    assert interview["status"] == "SCHEDULED"
    assert interview["interview_type"] == "TECHNICAL"

    tracking = await get_tracking(client, application_id, employer)
    assert len(tracking["interviews"]) == 1
    steps = {s["step"]: s["status"] for s in tracking["tracking_steps"]}
    assert steps["Interview Scheduling"] == "COMPLETED"


@pytest.mark.asyncio
async def test_schedule_interview_requires_interviewer(client: AsyncClient, factory: DataFactory):
    """Missing interviewer_id is a validation error and no interview is stored"""
    pipeline = await factory.setup_pipeline()
    application_id = pipeline["application"]["id"]

    resp = await factory.track(
        pipeline["employer"],
        "schedule_interview",
        application_id=application_id,
        scheduled_datetime="2030-01-15T10:00:00Z",
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False

    tracking = await get_tracking(client, application_id, pipeline["employer"])
    assert tracking["interviews"] == []
    steps = {s["step"]: s["status"] for s in tracking["tracking_steps"]}
    assert steps["Interview Scheduling"] == "PENDING"


@pytest.mark.asyncio
async def test_actions_respect_authority(client: AsyncClient, factory: DataFactory):
    pipeline = await factory.setup_pipeline("CS")
    stranger = await factory.create_employer()
    it_mentor = await factory.create_mentor("IT")

    application_id = pipeline["application"]["id"]
    employer = pipeline["employer"]

    for actor in (stranger, it_mentor):
        resp = await factory.track(actor, "mark_resume_viewed", application_id=application_id)
        assert resp.status_code == 403

    # Existing interviews and offers belong to the posting's employer too
    resp = await factory.track(
        employer, "schedule_interview",
        application_id=application_id,
        interviewer_id=employer["id"],
        scheduled_datetime="2030-01-15T10:00:00Z",
    )
    interview_id = resp.json()["data"]["result"]["id"]

    resp = await client.put(f"/api/applications/{application_id}/approve", headers=auth(pipeline["mentor"]))
    assert resp.status_code == 200
    await factory.set_status(application_id, employer, "INTERVIEWED")
    resp = await factory.track(employer, "create_offer", application_id=application_id)
    offer_id = resp.json()["data"]["result"]["id"]

    for actor in (stranger, it_mentor):
        resp = await factory.track(actor, "update_interview_status", interview_id=interview_id, status="CANCELLED")
        assert resp.status_code == 403
        resp = await factory.track(actor, "update_offer_status", offer_id=offer_id, status="WITHDRAWN")
        assert resp.status_code == 403

    tracking = await get_tracking(client, application_id, employer)
    assert tracking["interviews"][0]["status"] == "SCHEDULED"
    assert tracking["offers"][0]["offer_status"] == "DRAFT"


@pytest.mark.asyncio
async def test_mark_resume_viewed(client: AsyncClient, factory: DataFactory):
    pipeline = await factory.setup_pipeline()
    application_id = pipeline["application"]["id"]
    employer = pipeline["employer"]

    tracking = await get_tracking(client, application_id, pipeline["student"])
    assert tracking["resume_status"] == {"viewed": False}

    resp = await factory.track(employer, "mark_resume_viewed", application_id=application_id)
    assert resp.status_code == 200
    assert resp.json()["data"]["result"]["step"] == "Resume Review"

    tracking = await get_tracking(client, application_id, pipeline["student"])
    status = tracking["resume_status"]
    assert status["viewed"] is True
    assert status["viewed_at"] is not None
    assert status["viewer"] == employer["name"]


@pytest.mark.asyncio
async def test_record_feedback(client: AsyncClient, factory: DataFactory):
    pipeline = await factory.setup_pipeline()
    application_id = pipeline["application"]["id"]

    resp = await factory.track(
        pipeline["employer"], "record_feedback",
        application_id=application_id, rating=4, comments="Solid communicator",
    )
    assert resp.status_code == 200
    feedback = resp.json()["data"]["result"]
    assert feedback["rating"] == 4
    assert feedback["supervisor_id"] == pipeline["employer"]["id"]

    resp = await factory.track(pipeline["employer"], "record_feedback", application_id=application_id, rating=6)
    assert resp.status_code == 400

    tracking = await get_tracking(client, application_id, pipeline["employer"])
    steps = {s["step"]: s["status"] for s in tracking["tracking_steps"]}
    assert steps["Feedback Collection"] == "COMPLETED"


@pytest.mark.asyncio
async def test_update_interview_status(client: AsyncClient, factory: DataFactory):
    pipeline = await factory.setup_pipeline()
    employer = pipeline["employer"]
    resp = await factory.track(
        employer, "schedule_interview",
        application_id=pipeline["application"]["id"],
        interviewer_id=employer["id"],
        scheduled_datetime="2030-01-15T10:00:00Z",
        duration_minutes=45,
    )
    interview = resp.json()["data"]["result"]
    assert interview["duration_minutes"] == 45

    resp = await factory.track(
        employer, "update_interview_status",
        interview_id=interview["id"], status="COMPLETED", feedback="Strong fundamentals", rating=4,
    )
    assert resp.status_code == 200
    updated = resp.json()["data"]["result"]
    assert updated["status"] == "COMPLETED"
    assert updated["rating"] == 4

    resp = await factory.track(employer, "update_interview_status", interview_id="missing", status="CANCELLED")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_realtime_overview(client: AsyncClient, factory: DataFactory):
    cs = await factory.setup_pipeline("CS")
    await factory.setup_pipeline("IT")

    resp = await client.get("/api/tracking/realtime", headers=auth(cs["student"]))
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["last_updated"]
    assert len(data["applications"]) == 1
    assert len(data["applications"][0]["tracking_steps"]) == 10

    resp = await client.get("/api/tracking/realtime", headers=auth(factory.staff))
    assert len(resp.json()["data"]["applications"]) == 2


@pytest.mark.asyncio
async def test_tracking_for_unknown_application_is_404(client: AsyncClient, factory: DataFactory):
    resp = await client.get("/api/tracking", params={"application_id": "missing"}, headers=auth(factory.staff))
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_schedule_interview_rejects_other_student(client: AsyncClient, factory: DataFactory):
    pipeline = await factory.setup_pipeline()
    application_id = pipeline["application"]["id"]
    employer = pipeline["employer"]
    other = await factory.create_student()

    resp = await factory.track(
        employer, "schedule_interview",
        application_id=application_id,
        interviewer_id=employer["id"],
        scheduled_datetime="2030-01-15T10:00:00Z",
        student_id=other["id"],
    )
    assert resp.status_code == 400
    assert resp.json()["data"]["errors"][0]["loc"] == "student_id"

    tracking = await get_tracking(client, application_id, employer)
    assert tracking["interviews"] == []

    resp = await client.get("/api/notifications", headers=auth(other))
    assert resp.json()["data"]["total"] == 0

    # Naming the applicant explicitly is fine
    resp = await factory.track(
        employer, "schedule_interview",
        application_id=application_id,
        interviewer_id=employer["id"],
        scheduled_datetime="2030-01-15T10:00:00Z",
        student_id=pipeline["student"]["id"],
    )
    assert resp.status_code == 200
