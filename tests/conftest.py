import os
import tempfile

# Setup environment for testing (before any clipconnect import)
os.environ["CLIPCONNECT_DATA_DIR"] = tempfile.mkdtemp()
os.environ["CLIPCONNECT_DATABASE_URL"] = "sqlite://"
os.environ["CLIPCONNECT_RATE_LIMIT_PER_MINUTE"] = "0"
os.environ["CLIPCONNECT_SESSION_MODE"] = "key"

import pytest
from fastapi.testclient import TestClient

from clipconnect.config import Settings
from clipconnect.database import create_db_engine, init_db
from clipconnect.services.clipboard_relay import ClipboardRelay
from clipconnect.services.session_registry import SessionRegistry
from clipconnect.store import RecordStore


@pytest.fixture
def store():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield RecordStore(engine)
    engine.dispose()


@pytest.fixture
def key_settings():
    return Settings(session_mode="key", code_strategy="check_then_insert")


@pytest.fixture
def roster_settings():
    return Settings(session_mode="roster", code_strategy="insert_detect_conflict")


def scripted_codes(*codes):
    """Code factory returning ``codes`` in order, repeating the last one."""
    remaining = list(codes)
    calls = []

    def factory():
        code = remaining.pop(0) if len(remaining) > 1 else remaining[0]
        calls.append(code)
        return code

    factory.calls = calls
    return factory


@pytest.fixture
def registry(store, key_settings):
    return SessionRegistry(store, key_settings)


@pytest.fixture
def relay(store, key_settings):
    return ClipboardRelay(store, key_settings)


@pytest.fixture
def client():
    from clipconnect.main import app

    with TestClient(app) as c:
        yield c
