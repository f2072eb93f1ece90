"""Record store behaviour over SQLite."""

from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import OperationalError

from clipconnect.exceptions import StorageError, UniqueViolation
from clipconnect.models.clipboard import ClipboardItem
from clipconnect.models.session import RelaySession, SessionDevice


def test_insert_assigns_generated_columns(store):
    session = store.insert(RelaySession(code="STORE1"))
    assert session.id.startswith("ses_")
    assert session.created_at is not None
    assert store.find(RelaySession, code="STORE1").id == session.id


def test_duplicate_code_raises_unique_violation(store):
    store.insert(RelaySession(code="DUPE22"))
    with pytest.raises(UniqueViolation):
        store.insert(RelaySession(code="DUPE22"))
    assert len(store.find_all(RelaySession)) == 1


def test_append_unique_is_a_set_append(store):
    assert store.append_unique(SessionDevice(session_id="ses_1", device_id="d1")) is True
    assert store.append_unique(SessionDevice(session_id="ses_1", device_id="d1")) is False
    assert store.append_unique(SessionDevice(session_id="ses_2", device_id="d1")) is True
    assert len(store.find_all(SessionDevice, session_id="ses_1")) == 1


def test_query_latest_breaks_timestamp_ties_by_insert_order(store):
    same_instant = datetime(2026, 1, 1, tzinfo=timezone.utc)
    store.insert(ClipboardItem(session_id="ses_1", content="first", created_at=same_instant))
    store.insert(ClipboardItem(session_id="ses_1", content="second", created_at=same_instant))

    latest = store.query_latest(ClipboardItem, "created_at", session_id="ses_1")
    assert latest.content == "second"


def test_query_latest_orders_by_timestamp(store):
    store.insert(ClipboardItem(session_id="ses_1", content="newer", created_at=datetime(2026, 1, 2)))
    store.insert(ClipboardItem(session_id="ses_1", content="older", created_at=datetime(2026, 1, 1)))
    assert store.query_latest(ClipboardItem, "created_at", session_id="ses_1").content == "newer"


def test_update_and_delete_report_row_counts(store):
    session = store.insert(RelaySession(code="UPD8TE"))
    assert store.update(RelaySession, {"id": session.id}, {"key_material": "k2"}) == 1
    assert store.find(RelaySession, id=session.id).key_material == "k2"
    assert store.delete(RelaySession, id=session.id) == 1
    assert store.delete(RelaySession, id=session.id) == 0


def test_driver_errors_become_storage_error(store):
    with store.engine.connect() as conn:
        conn.exec_driver_sql("DROP TABLE clipboard_items")
        conn.commit()

    with pytest.raises(StorageError) as excinfo:
        store.insert(ClipboardItem(session_id="ses_1", content="x"))
    assert not isinstance(excinfo.value, UniqueViolation)
    assert isinstance(excinfo.value.__cause__, OperationalError)


def test_ping(store):
    assert store.ping() is True


def test_timestamp_columns_keep_their_offset():
    for column in (
        ClipboardItem.__table__.c.created_at,
        RelaySession.__table__.c.created_at,
        SessionDevice.__table__.c.joined_at,
    ):
        assert column.type.timezone is True
        assert column.nullable is False
    assert ClipboardItem.__table__.c.created_at.index is True
