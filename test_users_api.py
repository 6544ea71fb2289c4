"""HTTP tests for user sync and push token registration."""
from sqlalchemy import func, select

from lms_chat.models import User
from lms_chat.services.user_service import UserService


def test_sync_user_creates_then_updates_single_row(client, run_db):
    first = client.post("/api/sync-user", json={
        "firebase_uid": "u1",
        "email": "old@example.com",
        "full_name": "Old Name",
        "role": "student",
    })
    assert first.status_code == 200
    assert first.json()["role"] == "student"

    second = client.post("/api/sync-user", json={
        "firebase_uid": "u1",
        "email": "new@example.com",
        "full_name": "New Name",
        "role": "instructor",
    })
    assert second.status_code == 200
    # Role is not overwritten on conflict
    assert second.json() == {"user_id": first.json()["user_id"], "role": "student"}

    async def load(session):
        count = await session.scalar(select(func.count(User.user_id)).where(User.firebase_uid == "u1"))
        user = (await session.execute(select(User).where(User.firebase_uid == "u1"))).scalar_one()
        return count, user.email, user.full_name, user.status

    assert run_db(load) == (1, "new@example.com", "New Name", "active")


def test_distinct_identities_get_distinct_ids(sync_user):
    first = sync_user("u1")
    second = sync_user("u2", role="instructor")
    assert first["user_id"] != second["user_id"]
    assert second["role"] == "instructor"


def test_save_fcm_token_unknown_user(client):
    response = client.post("/api/save-fcm-token", json={"firebase_uid": "ghost", "fcm_token": "tok"})
    assert response.status_code == 404
    assert response.json() == {"detail": "User not found"}


def test_save_fcm_token_stores_token(client, sync_user, run_db):
    user_id = sync_user("u2", role="instructor")["user_id"]

    response = client.post("/api/save-fcm-token", json={"firebase_uid": "u2", "fcm_token": "device-1"})
    assert response.status_code == 200
    assert response.json() == {"success": True}

    async def token(session):
        return await UserService(session).get_fcm_token(user_id)

    assert run_db(token) == "device-1"
