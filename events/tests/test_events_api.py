"""
API tests for the events app.

Covers event CRUD with creator-only mutation, the public listing filters,
RSVP toggling against capacity, bookmarks, status changes and image
uploads.
"""
import io

import pytest
from django.test import Client
from PIL import Image

from events.models import Event, EventRegistration
from events.services import toggle_attend

EVENT = {
    "title": "Kickoff",
    "description": "Welcome",
    "location": "Town Hall",
    "date": "2030-01-15",
    "time": "18:00",
    "category": "Music",
}


def _create_event(client, **extra):
    resp = client.post("/api/events/", {**EVENT, **extra}, content_type="application/json")
    assert resp.status_code == 201, resp.content
    return resp.json()["event"]


@pytest.mark.django_db
def test_event_crud(auth_client, user):
    """Create, list, update and delete an event."""
    event = _create_event(auth_client)
    assert event["created_by"]["id"] == user.pk
    assert event["image"] == "🎵"
    assert event["is_user_created"] is True
    assert event["attendees_count"] == 0
    assert event["status"] == "published"

    list_resp = auth_client.get("/api/events/")
    assert list_resp.status_code == 200
    ids = [e["id"] for e in list_resp.json()["events"]]
    assert event["id"] in ids

    update_resp = auth_client.put(
        f"/api/events/{event['id']}/", {"title": "Renamed", "category": "Food"}, content_type="application/json"
    )
    assert update_resp.status_code == 200
    updated = update_resp.json()["event"]
    assert updated["title"] == "Renamed"
    assert updated["image"] == "🍽️"
    assert updated["location"] == "Town Hall"

    delete_resp = auth_client.delete(f"/api/events/{event['id']}/")
    assert delete_resp.status_code == 200
    assert delete_resp.json()["event"]["id"] == event["id"]
    assert not Event.objects.filter(pk=event["id"]).exists()


@pytest.mark.django_db
def test_create_requires_fields_and_auth(auth_client):
    resp = auth_client.post("/api/events/", {"title": "No place"}, content_type="application/json")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing required fields: title, location, date, and time are required"

    anon = Client().post("/api/events/", EVENT, content_type="application/json")
    assert anon.status_code == 401


@pytest.mark.django_db
def test_only_creator_can_mutate(auth_client, other_client):
    event = _create_event(auth_client)

    upd = other_client.put(f"/api/events/{event['id']}/", {"title": "Mine now"}, content_type="application/json")
    assert upd.status_code == 403
    assert upd.json()["error"] == "Not authorized to update this event"

    dele = other_client.delete(f"/api/events/{event['id']}/")
    assert dele.status_code == 403
    assert dele.json()["error"] == "Not authorized to delete this event"

    status_resp = other_client.patch(
        f"/api/events/{event['id']}/status/", {"status": "cancelled"}, content_type="application/json"
    )
    assert status_resp.status_code == 403

    # ownership is checked before the body
    bogus = other_client.patch(
        f"/api/events/{event['id']}/status/", {"status": "bogus"}, content_type="application/json"
    )
    assert bogus.status_code == 403
    assert Event.objects.get(pk=event["id"]).status == "published"


@pytest.mark.django_db
def test_ownerless_event_is_editable_by_any_user(other_client):
    event = Event.objects.create(title="Seeded", location="Park", date="2030-02-01", time="10:00")
    resp = other_client.put(f"/api/events/{event.pk}/", {"title": "Adopted"}, content_type="application/json")
    assert resp.status_code == 200
    assert resp.json()["event"]["title"] == "Adopted"


@pytest.mark.django_db
def test_listing_defaults_to_published_and_filters(auth_client):
    _create_event(auth_client, title="Jazz night", category="Music")
    _create_event(auth_client, title="Five a side", category="Sports")
    draft = _create_event(auth_client, title="Secret", category="Music")
    auth_client.patch(f"/api/events/{draft['id']}/status/", {"status": "draft"}, content_type="application/json")

    anon = Client()
    titles = [e["title"] for e in anon.get("/api/events/").json()["events"]]
    assert "Secret" not in titles
    assert len(titles) == 2

    music = anon.get("/api/events/", {"category": "Music"}).json()
    assert [e["title"] for e in music["events"]] == ["Jazz night"]

    everything = anon.get("/api/events/", {"category": "All"}).json()
    assert everything["count"] == 2

    drafts = anon.get("/api/events/", {"status": "draft"}).json()
    assert [e["title"] for e in drafts["events"]] == ["Secret"]

    search = anon.get("/api/events/", {"search": "jazz"}).json()
    assert search["count"] == 1

    by_title = anon.get("/api/events/", {"sort_by": "title", "order": "desc"}).json()
    assert [e["title"] for e in by_title["events"]] == ["Jazz night", "Five a side"]


@pytest.mark.django_db
def test_attend_toggles(auth_client, user):
    event = _create_event(auth_client)

    joined = auth_client.patch(f"/api/events/{event['id']}/attend/")
    assert joined.status_code == 200
    assert joined.json()["attending"] is True
    assert joined.json()["event"]["attendees_count"] == 1
    assert joined.json()["event"]["is_attending"] is True

    left = auth_client.patch(f"/api/events/{event['id']}/attend/")
    assert left.json()["attending"] is False
    assert left.json()["event"]["attendees_count"] == 0
    assert not EventRegistration.objects.filter(event_id=event["id"], user=user).exists()


@pytest.mark.django_db
def test_capacity_is_enforced(auth_client, other_client, make_user, client_for):
    event = _create_event(auth_client, capacity=2)

    first = auth_client.patch(f"/api/events/{event['id']}/attend/")
    assert first.json()["spots_remaining"] == 1

    second = other_client.patch(f"/api/events/{event['id']}/attend/")
    assert second.status_code == 200
    assert second.json()["spots_remaining"] == 0
    assert second.json()["event"]["is_full"] is True

    third_user = make_user("u3@example.com", "User Three")
    third = client_for(third_user).patch(f"/api/events/{event['id']}/attend/")
    assert third.status_code == 400
    body = third.json()
    assert body["success"] is False
    assert body["error"] == "Event is at full capacity"
    assert body["message"] == "This event has reached its maximum capacity of 2 attendees"
    assert body["is_full"] is True
    assert body["capacity"] == 2
    assert body["spots_remaining"] == 0
    assert Event.objects.get(pk=event["id"]).attendees_count == 2

    # leaving frees the slot again
    auth_client.patch(f"/api/events/{event['id']}/attend/")
    retry = client_for(third_user).patch(f"/api/events/{event['id']}/attend/")
    assert retry.status_code == 200
    assert retry.json()["attending"] is True


@pytest.mark.django_db
def test_capacity_cannot_drop_below_attendees(auth_client, other_client, make_user, client_for):
    event = _create_event(auth_client, capacity=5)
    auth_client.patch(f"/api/events/{event['id']}/attend/")
    other_client.patch(f"/api/events/{event['id']}/attend/")
    client_for(make_user("u3@example.com", "User Three")).patch(f"/api/events/{event['id']}/attend/")

    resp = auth_client.patch(f"/api/events/{event['id']}/", {"capacity": 1}, content_type="application/json")
    assert resp.status_code == 400
    assert resp.json()["error"] == "capacity: Capacity cannot be lower than the current number of attendees (3)"
    assert Event.objects.get(pk=event["id"]).capacity == 5

    ok = auth_client.patch(f"/api/events/{event['id']}/", {"capacity": 3}, content_type="application/json")
    assert ok.status_code == 200
    assert ok.json()["event"]["is_full"] is True


@pytest.mark.django_db
def test_toggle_attend_keeps_count_in_sync(user, other_user):
    event = Event.objects.create(title="Sync", location="Here", date="d", time="t", capacity=5)
    toggle_attend(event.pk, user)
    toggle_attend(event.pk, other_user)
    result = toggle_attend(event.pk, user)
    assert result.attending is False
    event.refresh_from_db()
    assert event.attendees_count == event.registrations.count() == 1
    assert result.spots_remaining == 4


@pytest.mark.django_db
def test_attend_unknown_event(auth_client):
    resp = auth_client.patch("/api/events/999999/attend/")
    assert resp.status_code == 404
    assert resp.json()["error"] == "Event not found"


@pytest.mark.django_db
def test_save_toggles(auth_client, user):
    event = _create_event(auth_client)

    saved = auth_client.post(f"/api/events/{event['id']}/save/")
    assert saved.json()["saved"] is True
    assert user.saved_events.filter(pk=event["id"]).exists()

    detail = auth_client.get(f"/api/events/{event['id']}/").json()["event"]
    assert detail["is_saved"] is True

    unsaved = auth_client.post(f"/api/events/{event['id']}/save/")
    assert unsaved.json()["saved"] is False
    assert not user.saved_events.exists()


@pytest.mark.django_db
def test_delete_removes_event_from_user_lists(auth_client, other_client, other_user):
    event = _create_event(auth_client)
    other_client.patch(f"/api/events/{event['id']}/attend/")
    other_client.post(f"/api/events/{event['id']}/save/")

    auth_client.delete(f"/api/events/{event['id']}/")
    assert not other_user.events_attending.exists()
    assert not other_user.saved_events.exists()


@pytest.mark.django_db
def test_status_validation(auth_client):
    event = _create_event(auth_client)
    bad = auth_client.patch(
        f"/api/events/{event['id']}/status/", {"status": "archived"}, content_type="application/json"
    )
    assert bad.status_code == 400
    assert "Invalid status value" in bad.json()["error"]

    ok = auth_client.patch(
        f"/api/events/{event['id']}/status/", {"status": "cancelled"}, content_type="application/json"
    )
    assert ok.status_code == 200
    assert ok.json()["event"]["status"] == "cancelled"


def _png(name="pic.png"):
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), "red").save(buf, format="PNG")
    buf.seek(0)
    buf.name = name
    return buf


@pytest.mark.django_db
def test_upload_image(auth_client):
    missing = auth_client.post("/api/events/upload-image/", {})
    assert missing.status_code == 400
    assert missing.json()["error"] == "No image file provided"

    resp = auth_client.post("/api/events/upload-image/", {"image": _png()})
    assert resp.status_code == 200
    body = resp.json()
    assert body["filename"].startswith("events/")
    assert body["image_url"].startswith("http://testserver/media/events/")
