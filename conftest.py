"""
Common test fixtures for the API tests.

Provides a user factory and Django test clients authenticated with a
JWT access token obtained through the real login endpoint.
"""
import pytest
from django.contrib.auth.models import User
from django.test import Client

PASSWORD = "pass12345"


@pytest.fixture
def make_user(db):
    """Create an active user with a profile name."""
    def _make(email, name="Test User", password=PASSWORD, **extra):
        user = User.objects.create_user(username=email, email=email, password=password, **extra)
        user.profile.full_name = name
        user.profile.save()
        return user
    return _make


@pytest.fixture
def user(make_user):
    return make_user("u1@example.com", "User One")


@pytest.fixture
def other_user(make_user):
    return make_user("u2@example.com", "User Two")


def login(client, email, password=PASSWORD):
    resp = client.post(
        "/api/auth/login/",
        {"email": email, "password": password},
        content_type="application/json",
    )
    assert resp.status_code == 200, resp.content
    client.defaults["HTTP_AUTHORIZATION"] = f"Bearer {resp.json()['token']}"
    return client


@pytest.fixture
def auth_client(client, user):
    """Authenticate the Django test client as ``user``."""
    return login(client, user.email)


@pytest.fixture
def other_client(other_user):
    """A second, independent client authenticated as ``other_user``."""
    return login(Client(), other_user.email)


@pytest.fixture
def client_for(db):
    """Build a fresh client logged in as the given user."""
    def _client(some_user):
        return login(Client(), some_user.email)
    return _client
