"""
User directory API tests
"""
import pytest
from httpx import AsyncClient

from tests.conftest import DataFactory, auth


@pytest.mark.asyncio
async def test_user_flow(client: AsyncClient, factory: DataFactory):
    student = await factory.create_student("CS", name="Alice Doe")
    assert student["role"] == "STUDENT"
    assert student["department"] == "CS"
    assert student["is_active"] is True

    resp = await client.get("/api/users/me", headers=auth(student))
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Alice Doe"

    mentor = await factory.create_mentor("CS")
    resp = await client.get(f"/api/users/{student['id']}", headers=auth(mentor))
    assert resp.status_code == 200
    assert resp.json()["data"]["username"] == student["username"]

    resp = await client.get(f"/api/users/{mentor['id']}", headers=auth(student))
    assert resp.status_code == 403

    resp = await client.get("/api/users/missing", headers=auth(factory.staff))
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_create_user_rules(client: AsyncClient, factory: DataFactory):
    student = await factory.create_student(username="alice")

    data = {"username": "alice", "name": "Other", "email": "other@example.edu", "role": "STUDENT"}
    resp = await client.post("/api/users", json=data, headers=auth(factory.staff))
    assert resp.status_code == 409

    data = {"username": "bob", "name": "Bob", "email": "bob@example.edu", "role": "STUDENT"}
    resp = await client.post("/api/users", json=data, headers=auth(student))
    assert resp.status_code == 403

    data = {"username": "carol", "name": "Carol", "email": "carol@example.edu", "role": "ADMIN"}
    resp = await client.post("/api/users", json=data, headers=auth(factory.staff))
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_bad_tokens_are_rejected(client: AsyncClient, factory: DataFactory):
    resp = await client.get("/api/users/me")
    assert resp.status_code == 401
    assert resp.json()["error"]

    resp = await client.get("/api/users/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401
