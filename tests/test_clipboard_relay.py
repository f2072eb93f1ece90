"""Clipboard relay: sync and latest."""

from datetime import datetime, timedelta, timezone

import pytest

from clipconnect.config import Settings
from clipconnect.exceptions import InvalidInput, NotFound, SessionNotFound
from clipconnect.models.clipboard import ClipboardItem
from clipconnect.services.clipboard_relay import ClipboardRelay
from clipconnect.services.session_registry import SessionRegistry


def test_latest_returns_most_recent_sync(registry, relay):
    session_id = registry.create_session()["session_id"]
    relay.sync(session_id, "hello")
    relay.sync(session_id, "world")

    result = relay.latest(session_id)
    assert result["content"] == "world"
    assert result["from_device"] is None
    assert result["timestamp"].tzinfo == timezone.utc


def test_sync_is_append_only(store, registry, relay):
    session_id = registry.create_session()["session_id"]
    for text in ("a", "b", "c"):
        relay.sync(session_id, text)

    items = store.find_all(ClipboardItem, session_id=session_id)
    assert sorted(i.content for i in items) == ["a", "b", "c"]
    assert relay.latest(session_id)["content"] == "c"


def test_latest_is_scoped_per_session(registry, relay):
    first = registry.create_session()["session_id"]
    second = registry.create_session()["session_id"]
    relay.sync(first, "for first")
    relay.sync(second, "for second")

    assert relay.latest(first)["content"] == "for first"
    assert relay.latest(second)["content"] == "for second"


def test_from_device_is_kept(registry, relay):
    session_id = registry.create_session()["session_id"]
    relay.sync(session_id, "copied", from_device="phone-1")
    assert relay.latest(session_id)["from_device"] == "phone-1"


@pytest.mark.parametrize(
    "session_id,content",
    [("", "x"), (None, "x"), ("ses_1", ""), ("ses_1", None), (42, "x")],
)
def test_sync_rejects_missing_fields(relay, session_id, content):
    with pytest.raises(InvalidInput):
        relay.sync(session_id, content)


def test_latest_requires_session_id(relay):
    with pytest.raises(InvalidInput):
        relay.latest(None)


def test_latest_with_no_items_is_not_found(registry, relay):
    session_id = registry.create_session()["session_id"]
    with pytest.raises(NotFound):
        relay.latest(session_id)
    with pytest.raises(NotFound):
        relay.latest("ses_never_existed")


def test_latest_after_end_session_is_not_found(registry, relay):
    session_id = registry.create_session()["session_id"]
    relay.sync(session_id, "secret")
    registry.end_session(session_id)
    with pytest.raises(NotFound):
        relay.latest(session_id)


def test_sync_accepts_unknown_session_by_default(relay):
    assert relay.sync("ses_unknown", "orphan") == {"success": True}


def test_sync_can_require_live_session(store):
    settings = Settings(sync_requires_session=True)
    registry = SessionRegistry(store, settings)
    relay = ClipboardRelay(store, settings)

    with pytest.raises(SessionNotFound):
        relay.sync("ses_unknown", "orphan")

    session_id = registry.create_session()["session_id"]
    assert relay.sync(session_id, "ok") == {"success": True}


def test_latest_reports_offset_timestamps_in_utc(store, relay, monkeypatch):
    seoul = timezone(timedelta(hours=9))
    stored = ClipboardItem(
        session_id="ses_tz",
        content="from seoul",
        created_at=datetime(2026, 3, 1, 18, 0, tzinfo=seoul),
    )
    monkeypatch.setattr(store, "query_latest", lambda model, order_key, **f: stored)

    result = relay.latest("ses_tz")
    assert result["timestamp"] == datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
    assert result["timestamp"].utcoffset() == timedelta(0)
