from messaging.presence import PresenceRegistry


def test_register_and_resolve():
    presence = PresenceRegistry()
    assert presence.register(1, "conn-a") is None
    assert presence.resolve(1) == "conn-a"


def test_last_registration_wins():
    presence = PresenceRegistry()
    presence.register(1, "conn-a")
    assert presence.register(1, "conn-b") == "conn-a"
    assert presence.resolve(1) == "conn-b"

    # the stale connection no longer speaks for anyone
    assert presence.unregister("conn-a") is None
    assert presence.resolve(1) == "conn-b"


def test_connection_rebound_to_other_user():
    presence = PresenceRegistry()
    presence.register(1, "conn-a")
    presence.register(2, "conn-a")
    assert presence.resolve(1) is None
    assert presence.resolve(2) == "conn-a"
    # conn-a now unregisters user 2, not user 1
    assert presence.unregister("conn-a") == 2


def test_unregister_and_clear():
    presence = PresenceRegistry()
    presence.register(1, "conn-a")
    presence.register(2, "conn-b")

    assert presence.unregister("conn-a") == 1
    assert presence.resolve(1) is None
    assert presence.unregister("unknown") is None

    presence.clear()
    assert presence.resolve(2) is None
    assert presence.unregister("conn-b") is None


def test_reregister_same_connection_is_idempotent():
    presence = PresenceRegistry()
    presence.register(1, "conn-a")
    assert presence.register(1, "conn-a") is None
    assert presence.resolve(1) == "conn-a"
    assert presence.unregister("conn-a") == 1
    assert presence.unregister("conn-a") is None
