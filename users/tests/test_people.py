"""
Tests for the people directory under ``/api/users/``: recommendations,
search, the extended profile and avatar uploads.
"""
import io

import pytest
from PIL import Image

from events.models import Event, EventBookmark, EventRegistration
from groups.models import Group, GroupMembership
from users.services import recommend_users


def _event(title="Meetup"):
    return Event.objects.create(title=title, location="Hall", date="2030-03-01", time="19:00")


def _group(creator, name):
    group = Group.objects.create(name=name, description="d", creator=creator)
    GroupMembership.objects.create(group=group, user=creator, role=GroupMembership.ROLE_ADMIN)
    return group


@pytest.mark.django_db
def test_recommendation_scores(user, make_user):
    shares_event = make_user("event@example.com", "Event Friend")
    shares_group = make_user("group@example.com", "Group Friend")
    shares_both = make_user("both@example.com", "Best Friend")
    make_user("stranger@example.com", "Stranger")

    event = _event()
    EventRegistration.objects.create(event=event, user=user)
    EventBookmark.objects.create(event=event, user=shares_event)
    EventRegistration.objects.create(event=event, user=shares_both)

    group = _group(user, "Chess Club")
    GroupMembership.objects.create(group=group, user=shares_group)
    GroupMembership.objects.create(group=group, user=shares_both)

    ranked = [(u.email, score) for u, score in recommend_users(user)]
    assert ranked == [
        ("both@example.com", 3),
        ("group@example.com", 2),
        ("event@example.com", 1),
    ]


@pytest.mark.django_db
def test_group_score_counts_every_shared_group(user, make_user):
    friend = make_user("friend@example.com", "Friend")
    for name in ("Runners", "Cyclists"):
        group = _group(user, name)
        GroupMembership.objects.create(group=group, user=friend)

    event = _event()
    EventRegistration.objects.create(event=event, user=user)
    EventBookmark.objects.create(event=event, user=friend)

    assert [(u.pk, score) for u, score in recommend_users(user)] == [(friend.pk, 5)]


@pytest.mark.django_db
def test_recommendation_fallback_and_inactive_users(user, make_user):
    active = make_user("active@example.com", "Active")
    make_user("gone@example.com", "Gone", is_active=False)

    ranked = recommend_users(user)
    assert [(u.pk, score) for u, score in ranked] == [(active.pk, 1)]


@pytest.mark.django_db
def test_no_fallback_for_group_members(user, make_user):
    make_user("stranger@example.com", "Stranger")
    _group(user, "Solo")

    assert recommend_users(user) == []


@pytest.mark.django_db
def test_recommendations_endpoint(auth_client, other_user):
    resp = auth_client.get("/api/users/recommendations/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 1
    assert body["users"][0]["id"] == other_user.pk
    assert body["users"][0]["score"] == 1
    assert "password" not in str(body)


@pytest.mark.django_db
def test_search(auth_client, user, make_user):
    make_user("maria@example.com", "Maria Santos")
    make_user("mark@example.com", "Mark Twain")
    make_user("hidden@example.com", "Maria Hidden", is_active=False)

    short = auth_client.get("/api/users/search/", {"query": "m"})
    assert short.json() == {"success": True, "users": []}

    resp = auth_client.get("/api/users/search/", {"query": "mar"})
    names = [u["name"] for u in resp.json()["users"]]
    assert names == ["Maria Santos", "Mark Twain"]

    by_email = auth_client.get("/api/users/search/", {"query": "u1@"})
    assert by_email.json()["users"] == []


@pytest.mark.django_db
def test_extended_profile(auth_client, user):
    event = _event("Picnic")
    EventBookmark.objects.create(event=event, user=user)
    _group(user, "Gardeners")

    resp = auth_client.get(f"/api/users/{user.pk}/")
    assert resp.status_code == 200
    profile = resp.json()["user"]
    assert [e["title"] for e in profile["saved_events"]] == ["Picnic"]
    assert profile["events_attending"] == []
    assert [g["name"] for g in profile["groups"]] == ["Gardeners"]

    missing = auth_client.get("/api/users/999999/")
    assert missing.status_code == 404


def _png():
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), "blue").save(buf, format="PNG")
    buf.seek(0)
    buf.name = "me.png"
    return buf


@pytest.mark.django_db
def test_upload_avatar(auth_client, user):
    missing = auth_client.post("/api/users/upload-avatar/", {})
    assert missing.status_code == 400
    assert missing.json()["error"] == "No avatar file provided"

    resp = auth_client.post("/api/users/upload-avatar/", {"avatar": _png()})
    assert resp.status_code == 200
    url = resp.json()["avatar_url"]
    assert "/media/avatars/" in url
    assert resp.json()["user"]["avatar"] == url

    user.profile.refresh_from_db()
    assert user.profile.avatar == url


@pytest.mark.django_db
def test_upload_avatar_rejects_non_images(auth_client):
    text = io.BytesIO(b"not an image")
    text.name = "notes.txt"
    resp = auth_client.post("/api/users/upload-avatar/", {"avatar": text})
    assert resp.status_code == 400
    assert resp.json()["success"] is False
