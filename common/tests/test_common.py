import pytest

from common.exceptions import first_error_message
from common.lifespan import LifespanApp


def test_first_error_message_flattens_details():
    assert first_error_message(["Top level"]) == "Top level"
    assert first_error_message({"name": ["Too short"]}) == "name: Too short"
    assert first_error_message({"non_field_errors": ["Broken"]}) == "Broken"
    assert first_error_message({"detail": "Not found."}) == "Not found."
    assert first_error_message({}) == ""


@pytest.mark.asyncio
async def test_lifespan_runs_shutdown_hooks():
    calls = []

    async def async_hook():
        calls.append("async")

    app = LifespanApp(on_startup=[lambda: calls.append("start")], on_shutdown=[async_hook])
    inbox = [{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}]
    sent = []

    async def receive():
        return inbox.pop(0)

    async def send(message):
        sent.append(message["type"])

    await app({"type": "lifespan"}, receive, send)
    assert calls == ["start", "async"]
    assert sent == ["lifespan.startup.complete", "lifespan.shutdown.complete"]


@pytest.mark.asyncio
async def test_lifespan_reports_failed_startup():
    def boom():
        raise RuntimeError("no redis")

    app = LifespanApp(on_startup=[boom])
    sent = []

    async def receive():
        return {"type": "lifespan.startup"}

    async def send(message):
        sent.append(message)

    await app({"type": "lifespan"}, receive, send)
    assert sent == [{"type": "lifespan.startup.failed", "message": "no redis"}]


@pytest.mark.django_db
def test_health(client):
    resp = client.get("/api/health/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "OK"
