"""Clipboard relay: append entries to a session and serve the newest one."""

import logging
from datetime import timezone
from typing import Optional

from clipconnect.config import Settings
from clipconnect.exceptions import InvalidInput, NotFound, SessionNotFound
from clipconnect.models.clipboard import ClipboardItem
from clipconnect.models.session import RelaySession
from clipconnect.store import RecordStore

logger = logging.getLogger(__name__)


class ClipboardRelay:
    def __init__(self, store: RecordStore, settings: Settings):
        self._store = store
        self._settings = settings

    def sync(self, session_id, content, from_device: Optional[str] = None) -> dict:
        """Append a clipboard entry. Earlier entries are never touched."""
        if not isinstance(session_id, str) or not session_id:
            raise InvalidInput("Invalid sessionId or clip")
        if not isinstance(content, str) or not content:
            raise InvalidInput("Invalid sessionId or clip")

        if self._settings.sync_requires_session:
            if self._store.find(RelaySession, id=session_id) is None:
                raise SessionNotFound()

        item = ClipboardItem(
            session_id=session_id,
            content=content,
            from_device=from_device if isinstance(from_device, str) and from_device else None,
        )
        self._store.insert(item)
        logger.debug("Synced %d chars to session %s", len(content), session_id)
        return {"success": True}

    def latest(self, session_id) -> dict:
        if not isinstance(session_id, str) or not session_id:
            raise InvalidInput("Missing sessionId")

        item = self._store.query_latest(ClipboardItem, "created_at", session_id=session_id)
        if item is None:
            raise NotFound()

        created_at = item.created_at
        if created_at.tzinfo is None:
            # SQLite drops the offset; stored values are UTC
            created_at = created_at.replace(tzinfo=timezone.utc)
        else:
            created_at = created_at.astimezone(timezone.utc)

        return {
            "content": item.content,
            "from_device": item.from_device,
            "timestamp": created_at,
        }
