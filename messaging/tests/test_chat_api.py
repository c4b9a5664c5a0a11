"""
REST tests for direct messaging under ``/api/chat/``.
"""
import pytest

from messaging.models import Message
from messaging.services import mark_read, persist_message


@pytest.mark.django_db
def test_send_and_history(auth_client, other_client, user, other_user):
    resp = auth_client.post(
        "/api/chat/send/",
        {"receiver": other_user.pk, "message": "  hello there  "},
        content_type="application/json",
    )
    assert resp.status_code == 201
    sent = resp.json()["message"]
    assert sent["message"] == "hello there"
    assert sent["sender"]["id"] == user.pk
    assert sent["read"] is False
    assert sent["conversation_key"] == f"{min(user.pk, other_user.pk)}-{max(user.pk, other_user.pk)}"

    assert other_client.get("/api/chat/unread-count/").json()["unread_count"] == 1

    # reading the history marks the partner's messages read
    history = other_client.get(f"/api/chat/messages/{user.pk}/")
    assert history.status_code == 200
    messages = history.json()["messages"]
    assert [m["message"] for m in messages] == ["hello there"]
    assert messages[0]["read"] is True
    assert other_client.get("/api/chat/unread-count/").json()["unread_count"] == 0


@pytest.mark.django_db
def test_history_is_chronological(auth_client, user, other_user):
    persist_message(user.pk, other_user.pk, "one")
    persist_message(other_user.pk, user.pk, "two")
    persist_message(user.pk, other_user.pk, "three")

    messages = auth_client.get(f"/api/chat/messages/{other_user.pk}/").json()["messages"]
    assert [m["message"] for m in messages] == ["one", "two", "three"]
    # only messages addressed to the reader are marked
    assert Message.objects.get(message="one").read is False
    assert Message.objects.get(message="two").read is True


@pytest.mark.django_db
def test_history_with_unknown_user(auth_client):
    resp = auth_client.get("/api/chat/messages/999999/")
    assert resp.status_code == 404
    assert resp.json()["error"] == "User not found"


@pytest.mark.django_db
def test_send_validation(auth_client, other_user):
    missing = auth_client.post("/api/chat/send/", {"message": "hi"}, content_type="application/json")
    assert missing.status_code == 400
    assert missing.json()["error"] == "Receiver and message are required"

    too_long = auth_client.post(
        "/api/chat/send/",
        {"receiver": other_user.pk, "message": "x" * 1001},
        content_type="application/json",
    )
    assert too_long.status_code == 400
    assert too_long.json()["error"] == "Message cannot exceed 1000 characters"

    nobody = auth_client.post(
        "/api/chat/send/", {"receiver": 999999, "message": "hi"}, content_type="application/json"
    )
    assert nobody.status_code == 404
    assert nobody.json()["error"] == "Receiver not found"
    assert not Message.objects.exists()


@pytest.mark.django_db
def test_conversations(auth_client, user, other_user, make_user):
    third = make_user("u3@example.com", "User Three")
    persist_message(other_user.pk, user.pk, "from two")
    persist_message(other_user.pk, user.pk, "again from two")
    persist_message(user.pk, third.pk, "to three")

    conversations = auth_client.get("/api/chat/conversations/").json()["conversations"]
    assert [c["partner"]["id"] for c in conversations] == [third.pk, other_user.pk]
    assert conversations[0]["unread_count"] == 0
    assert conversations[1]["unread_count"] == 2
    assert conversations[1]["last_message"]["message"] == "again from two"


@pytest.mark.django_db
def test_only_sender_deletes(auth_client, other_client, user, other_user):
    message = persist_message(user.pk, other_user.pk, "oops")

    denied = other_client.delete(f"/api/chat/messages/{message.pk}/")
    assert denied.status_code == 403
    assert denied.json()["error"] == "Not authorized to delete this message"

    ok = auth_client.delete(f"/api/chat/messages/{message.pk}/")
    assert ok.status_code == 200
    assert not Message.objects.filter(pk=message.pk).exists()

    gone = auth_client.delete(f"/api/chat/messages/{message.pk}/")
    assert gone.status_code == 404


@pytest.mark.django_db
def test_search_users(auth_client, other_user):
    empty = auth_client.get("/api/chat/search-users/")
    assert empty.status_code == 400
    assert empty.json()["error"] == "Search query is required"

    found = auth_client.get("/api/chat/search-users/", {"query": "two"})
    assert [u["id"] for u in found.json()["users"]] == [other_user.pk]

    itself = auth_client.get("/api/chat/search-users/", {"query": "one"})
    assert itself.json()["users"] == []


@pytest.mark.django_db
def test_chat_requires_auth(client):
    assert client.get("/api/chat/conversations/").status_code == 401


@pytest.mark.django_db
def test_reading_history_only_clears_the_readers_side(auth_client, other_client, user, other_user):
    persist_message(user.pk, other_user.pk, "ping")
    persist_message(other_user.pk, user.pk, "pong")

    def unread_with(client, partner):
        conversations = client.get("/api/chat/conversations/").json()["conversations"]
        return next(c["unread_count"] for c in conversations if c["partner"]["id"] == partner.pk)

    assert unread_with(auth_client, other_user) == 1
    assert unread_with(other_client, user) == 1

    other_client.get(f"/api/chat/messages/{user.pk}/")

    assert unread_with(other_client, user) == 0
    assert unread_with(auth_client, other_user) == 1


@pytest.mark.django_db
def test_mark_read_only_touches_messages_addressed_to_reader(user, other_user):
    outbound = persist_message(user.pk, other_user.pk, "mine")
    inbound = persist_message(other_user.pk, user.pk, "theirs")

    assert mark_read([outbound.pk, inbound.pk, "junk"], user.pk) == 1

    outbound.refresh_from_db()
    inbound.refresh_from_db()
    assert outbound.read is False
    assert inbound.read is True
