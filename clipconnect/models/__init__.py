"""ClipConnect Database Models."""

from clipconnect.models.session import RelaySession, SessionDevice
from clipconnect.models.clipboard import ClipboardItem

__all__ = [
    "RelaySession",
    "SessionDevice",
    "ClipboardItem",
]
