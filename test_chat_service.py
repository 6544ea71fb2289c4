"""Service-level tests against an in-memory database."""
from sqlalchemy import func, select

from lms_chat.models import Message, User
from lms_chat.services.chat_service import ChatService
from lms_chat.services.identity_service import IdentityService
from lms_chat.services.user_service import UserService


async def make_users(session):
    users = UserService(session)
    student, _ = await users.sync_user("s1", "s1@example.com", "Sam Student", "student")
    instructor, _ = await users.sync_user("i1", "i1@example.com", "Ivy Instructor", "instructor")
    return student, instructor


async def test_identity_resolution(session):
    student, _ = await make_users(session)
    identity = IdentityService(session)

    assert await identity.resolve("s1") == student
    assert await identity.resolve("nobody") is None
    assert await identity.resolve(None) is None
    assert await identity.resolve_pair("s1", "nobody") == (student, None)


async def test_sync_user_upserts(session):
    users = UserService(session)
    first_id, _ = await users.sync_user("s1", "a@example.com", "A", "student")
    second_id, role = await users.sync_user("s1", "b@example.com", "B", "admin")

    assert first_id == second_id
    assert role == "student"
    assert await session.scalar(select(func.count(User.user_id))) == 1
    assert await users.get_display_name(first_id) == "B"


async def test_get_or_create_chat(session):
    student, instructor = await make_users(session)
    chats = ChatService(session)

    chat_id, created = await chats.get_or_create_chat(student, instructor)
    assert created is True
    assert await chats.get_or_create_chat(student, instructor) == (chat_id, False)


async def test_save_message_defaults_to_unread(session):
    student, instructor = await make_users(session)
    chats = ChatService(session)
    chat_id, _ = await chats.get_or_create_chat(student, instructor)

    saved = await chats.save_message(chat_id, student, instructor, None)
    assert saved.text == ""
    assert saved.is_read is False
    assert saved.created_at is not None


async def test_mark_read_counts_changed_rows(session):
    student, instructor = await make_users(session)
    chats = ChatService(session)
    chat_id, _ = await chats.get_or_create_chat(student, instructor)
    await chats.save_message(chat_id, student, instructor, "one")
    await chats.save_message(chat_id, student, instructor, "two")

    assert await chats.mark_read(chat_id, instructor) == 2
    assert await chats.mark_read(chat_id, instructor) == 0


async def test_mark_all_read_repairs_every_message(session):
    student, instructor = await make_users(session)
    chats = ChatService(session)
    chat_id, _ = await chats.get_or_create_chat(student, instructor)
    await chats.save_message(chat_id, student, instructor, "one")
    await chats.save_message(chat_id, instructor, student, "two")

    await chats.mark_all_read()

    unread = await session.scalar(
        select(func.count(Message.message_id)).where(Message.is_read == False)
    )
    assert unread == 0


async def test_unread_count_matches_unread_rows(session):
    student, instructor = await make_users(session)
    chats = ChatService(session)
    chat_id, _ = await chats.get_or_create_chat(student, instructor)
    for text in ("a", "b", "c"):
        await chats.save_message(chat_id, instructor, student, text)
    await chats.save_message(chat_id, student, instructor, "reply")

    [row] = await chats.list_chats(student)
    expected = await session.scalar(
        select(func.count(Message.message_id)).where(
            Message.chat_id == chat_id,
            Message.receiver_id == student,
            Message.is_read == False,
        )
    )
    assert row.unread_count == expected == 3
    assert row.recipient_uid == "i1"
