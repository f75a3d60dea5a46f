"""
Notification tests

In-app notifications produced by the workflow, and channel failure handling
"""
import pytest
from httpx import AsyncClient

from app.services import notification_hook, InAppChannel
from app.services import notifications
from tests.conftest import DataFactory, auth


class BrokenChannel:
    name = "broken"

    async def send(self, *args, **kwargs):
        raise RuntimeError("smtp down")


@pytest.mark.asyncio
async def test_workflow_events_notify_student(client: AsyncClient, factory: DataFactory):
    pipeline = await factory.setup_pipeline()
    student = pipeline["student"]
    await client.put(f"/api/applications/{pipeline['application']['id']}/approve", headers=auth(pipeline["mentor"]))

    resp = await client.get("/api/notifications", headers=auth(student))
    assert resp.status_code == 200
    items = resp.json()["data"]["items"]
    events = {n["event_type"] for n in items}
    assert {"APPLICATION_SUBMITTED", "APPLICATION_APPROVED"} <= events
    assert all(n["user_id"] == student["id"] for n in items)
    approved = next(n for n in items if n["event_type"] == "APPLICATION_APPROVED")
    assert pipeline["internship"]["title"] in approved["message"]
    assert approved["data"]["to_status"] == "MENTOR_APPROVED"

    # Other users see none of them
    resp = await client.get("/api/notifications", headers=auth(pipeline["mentor"]))
    assert resp.json()["data"]["total"] == 0


@pytest.mark.asyncio
async def test_mark_read(client: AsyncClient, factory: DataFactory):
    pipeline = await factory.setup_pipeline()
    student = pipeline["student"]

    resp = await client.get("/api/notifications", params={"unread_only": True}, headers=auth(student))
    notification = resp.json()["data"]["items"][0]
    assert notification["is_read"] is False

    resp = await client.put(f"/api/notifications/{notification['id']}/read", headers=auth(pipeline["mentor"]))
    assert resp.status_code == 404

    resp = await client.put(f"/api/notifications/{notification['id']}/read", headers=auth(student))
    assert resp.status_code == 200
    assert resp.json()["data"]["is_read"] is True

    resp = await client.get("/api/notifications", params={"unread_only": True}, headers=auth(student))
    assert resp.json()["data"]["total"] == 0


@pytest.mark.asyncio
async def test_channel_failure_does_not_undo_transition(client: AsyncClient, factory: DataFactory, monkeypatch):
    pipeline = await factory.setup_pipeline()
    application_id = pipeline["application"]["id"]

    monkeypatch.setattr(notification_hook, "channels", [BrokenChannel(), InAppChannel()])

    resp = await client.put(f"/api/applications/{application_id}/approve", headers=auth(pipeline["mentor"]))
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "MENTOR_APPROVED"

    resp = await client.get(f"/api/applications/{application_id}", headers=auth(factory.staff))
    assert resp.json()["data"]["status"] == "MENTOR_APPROVED"

    resp = await client.get("/api/notifications", headers=auth(pipeline["student"]))
    events = [n["event_type"] for n in resp.json()["data"]["items"]]
    assert "APPLICATION_APPROVED" in events


@pytest.mark.asyncio
async def test_bad_in_app_row_does_not_undo_transition(client: AsyncClient, factory: DataFactory, monkeypatch):
    """A notification insert that fails is rolled back alone"""
    pipeline = await factory.setup_pipeline()
    application_id = pipeline["application"]["id"]

    # title is NOT NULL, so the in-app insert fails at flush
    monkeypatch.setattr(notifications, "render", lambda event_type, payload: (None, None))
    monkeypatch.setattr(notification_hook, "channels", [InAppChannel()])

    resp = await client.put(f"/api/applications/{application_id}/approve", headers=auth(pipeline["mentor"]))
    assert resp.status_code == 200
    monkeypatch.undo()

    resp = await client.get(f"/api/applications/{application_id}", headers=auth(factory.staff))
    assert resp.json()["data"]["status"] == "MENTOR_APPROVED"

    resp = await client.get("/api/notifications", headers=auth(pipeline["student"]))
    events = [n["event_type"] for n in resp.json()["data"]["items"]]
    assert "APPLICATION_SUBMITTED" in events
    assert "APPLICATION_APPROVED" not in events
