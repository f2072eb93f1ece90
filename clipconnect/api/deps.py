"""Common API dependencies: the shared registry and relay instances."""

from fastapi import Request

from clipconnect.services.clipboard_relay import ClipboardRelay
from clipconnect.services.session_registry import SessionRegistry
from clipconnect.store import RecordStore


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


def get_relay(request: Request) -> ClipboardRelay:
    return request.app.state.relay
