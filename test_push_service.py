"""Push composition and fire-and-forget dispatch."""
import logging

import pytest

from lms_chat.services.push_service import (
    FirebasePushProvider,
    PushDispatcher,
    PushNotification,
    build_chat_notification,
    create_push_dispatcher,
)


@pytest.fixture
def push_provider(make_push_provider):
    # Every app in this module talks to a provider that always fails
    return make_push_provider(fail=True)


def test_notification_body_variants():
    with_text = build_chat_notification("tok", "Sam", "hello", False, 3, "u1")
    attachment_only = build_chat_notification("tok", "Sam", "", True, 3, "u1")
    empty = build_chat_notification("tok", None, None, False, 3, "u1")

    assert (with_text.title, with_text.body) == ("Sam", "hello")
    assert attachment_only.body == "Sent an attachment"
    assert (empty.title, empty.body) == ("New Message", "New Message")
    assert with_text.data == {"chat_id": "3", "sender_uid": "u1"}


def test_dispatcher_without_provider_is_disabled(settings):
    dispatcher = create_push_dispatcher(settings)
    assert dispatcher.enabled is False
    assert dispatcher.dispatch(PushNotification(token="tok", title="t", body="b")) is None


def test_firebase_provider_chosen_when_credentials_configured(settings):
    settings.firebase_credentials_path = "/etc/lms/service-account.json"
    dispatcher = create_push_dispatcher(settings)
    assert isinstance(dispatcher.provider, FirebasePushProvider)


async def test_dispatch_failure_is_logged_not_raised(push_provider, caplog):
    dispatcher = PushDispatcher(push_provider)

    with caplog.at_level(logging.ERROR, logger="lms_chat.services.push_service"):
        task = dispatcher.dispatch(PushNotification(token="tok", title="t", body="b"))
        await dispatcher.drain()

    assert task.done() and task.exception() is None
    assert "FCM unavailable" in caplog.text


async def test_drain_waits_for_delivery(make_push_provider):
    provider = make_push_provider()
    dispatcher = PushDispatcher(provider)
    dispatcher.dispatch(PushNotification(token="tok", title="t", body="b"))
    await dispatcher.drain()
    assert [n.token for n in provider.sent] == ["tok"]


def test_delivery_survives_push_failure(client, sync_user):
    sync_user("u1")
    sync_user("u2", role="instructor")
    client.post("/api/save-fcm-token", json={"firebase_uid": "u2", "fcm_token": "device-u2"})
    chat_id = client.post("/api/chats", json={
        "student_firebase_uid": "u1",
        "instructor_firebase_uid": "u2",
    }).json()["chat_id"]

    with client.websocket_connect("/ws") as ws:
        ws.send_json({"type": "join_chat", "data": chat_id})
        ws.send_json({"type": "send_message", "data": {
            "chat_id": chat_id,
            "text": "still delivered",
            "sender_firebase_uid": "u1",
            "receiver_firebase_uid": "u2",
        }})
        assert ws.receive_json()["data"]["text"] == "still delivered"

    assert [m["text"] for m in client.get(f"/api/messages/{chat_id}").json()] == ["still delivered"]
