"""Conversation directory: create-or-get and listing with unread counts."""
from lms_chat.services.chat_service import ChatService


def create_chat(client, student_uid, instructor_uid):
    response = client.post("/api/chats", json={
        "student_firebase_uid": student_uid,
        "instructor_firebase_uid": instructor_uid,
    })
    assert response.status_code == 200, response.text
    return response.json()


def test_create_or_get_chat_is_new_only_once(client, sync_user):
    sync_user("u1")
    sync_user("u2", role="instructor")

    first = create_chat(client, "u1", "u2")
    assert first["isNew"] is True

    again = create_chat(client, "u1", "u2")
    assert again == {"chat_id": first["chat_id"], "isNew": False}


def test_pair_is_ordered(client, sync_user):
    sync_user("u1")
    sync_user("u2", role="instructor")

    forward = create_chat(client, "u1", "u2")
    backward = create_chat(client, "u2", "u1")
    assert backward["isNew"] is True
    assert backward["chat_id"] != forward["chat_id"]


def test_create_chat_with_unknown_participant(client, sync_user):
    sync_user("u1")
    response = client.post("/api/chats", json={
        "student_firebase_uid": "u1",
        "instructor_firebase_uid": "ghost",
    })
    assert response.status_code == 404
    assert response.json() == {"detail": "Users not found"}


def test_list_chats_unknown_user(client):
    response = client.get("/api/chats", params={"firebase_uid": "ghost"})
    assert response.status_code == 404


def test_list_chats_counterparts_and_unread_counts(client, sync_user, run_db):
    student = sync_user("u1", full_name="Student One")["user_id"]
    first_instructor = sync_user("t1", full_name="Instructor One", role="instructor")["user_id"]
    second_instructor = sync_user("t2", full_name="Instructor Two", role="instructor")["user_id"]
    older = create_chat(client, "u1", "t1")["chat_id"]
    newer = create_chat(client, "u1", "t2")["chat_id"]

    async def seed(session):
        service = ChatService(session)
        await service.save_message(older, first_instructor, student, "one")
        await service.save_message(older, first_instructor, student, "two")
        await service.save_message(older, student, first_instructor, "reply")
        await service.save_message(newer, second_instructor, student, "hello")
        await service.mark_read(newer, student)

    run_db(seed)

    response = client.get("/api/chats", params={"firebase_uid": "u1"})
    assert response.status_code == 200
    chats = response.json()
    assert [chat["chat_id"] for chat in chats] == [newer, older]
    by_id = {chat["chat_id"]: chat for chat in chats}
    assert by_id[older]["recipient_name"] == "Instructor One"
    assert by_id[older]["recipient_uid"] == "t1"
    assert by_id[older]["unread_count"] == 2
    assert by_id[newer]["recipient_name"] == "Instructor Two"
    assert by_id[newer]["unread_count"] == 0

    # Seen from the instructor side the counterpart is the student
    instructor_view = client.get("/api/chats", params={"firebase_uid": "t1"}).json()
    assert instructor_view == [{
        "chat_id": older,
        "created_at": instructor_view[0]["created_at"],
        "recipient_name": "Student One",
        "recipient_uid": "u1",
        "unread_count": 1,
    }]
