"""Session registry: pairing code allocation, join and teardown.

A session is created with a unique short code. In "key" mode it also gets a
random key blob that is handed back to every device that joins; in "roster"
mode the ids of joining devices are recorded instead.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from clipconnect.config import Settings
from clipconnect.exceptions import (
    CodeGenerationExhausted,
    InvalidInput,
    SessionNotFound,
    StorageError,
    UniqueViolation,
)
from clipconnect.models.clipboard import ClipboardItem
from clipconnect.models.session import RelaySession, SessionDevice
from clipconnect.store import RecordStore
from clipconnect.utils.codes import generate_code, generate_key_material

logger = logging.getLogger(__name__)


@dataclass
class Allocated:
    session: RelaySession


@dataclass
class Exhausted:
    attempts: int


CodeAllocation = Union[Allocated, Exhausted]


class SessionRegistry:
    def __init__(
        self,
        store: RecordStore,
        settings: Settings,
        code_factory: Optional[Callable[[], str]] = None,
    ):
        self._store = store
        self._settings = settings
        self._code_factory = code_factory or (
            lambda: generate_code(settings.code_length, settings.code_alphabet)
        )

    # --- Create ---

    def allocate(self, key_material: Optional[str] = None) -> CodeAllocation:
        """Insert a session under a fresh code, retrying on collision.

        Storage errors other than a code collision are raised immediately.
        """
        if self._settings.code_strategy == "check_then_insert":
            return self._allocate_check_then_insert(key_material)
        return self._allocate_insert_detect_conflict(key_material)

    def _allocate_check_then_insert(self, key_material: Optional[str]) -> CodeAllocation:
        max_attempts = self._settings.max_code_attempts
        for attempt in range(1, max_attempts + 1):
            code = self._code_factory()
            if self._store.find(RelaySession, code=code) is not None:
                logger.debug("Code %s already taken (attempt %d/%d)", code, attempt, max_attempts)
                continue
            try:
                session = self._store.insert(RelaySession(code=code, key_material=key_material))
            except UniqueViolation:
                # Taken between the check and the insert
                logger.debug("Code %s claimed concurrently (attempt %d/%d)", code, attempt, max_attempts)
                continue
            return Allocated(session)
        return Exhausted(max_attempts)

    def _allocate_insert_detect_conflict(self, key_material: Optional[str]) -> CodeAllocation:
        max_attempts = self._settings.max_code_attempts
        for attempt in range(1, max_attempts + 1):
            code = self._code_factory()
            try:
                session = self._store.insert(RelaySession(code=code, key_material=key_material))
            except UniqueViolation:
                logger.debug("Code %s collided on insert (attempt %d/%d)", code, attempt, max_attempts)
                continue
            return Allocated(session)
        return Exhausted(max_attempts)

    def create_session(self) -> dict:
        """Create a session. Returns session_id, code and, in key mode, key_material."""
        key_material = None
        if self._settings.issues_keys:
            key_material = generate_key_material(self._settings.key_bytes)

        outcome = self.allocate(key_material)
        if isinstance(outcome, Exhausted):
            logger.error("Code generation exhausted after %d attempts", outcome.attempts)
            raise CodeGenerationExhausted(outcome.attempts)

        session = outcome.session
        logger.info("Session %s created with code %s", session.id, session.code)
        result = {"session_id": session.id, "code": session.code}
        if self._settings.issues_keys:
            result["key_material"] = session.key_material
        return result

    # --- Join ---

    def join_session(self, code, device_id: Optional[str] = None) -> dict:
        """Look up a session by code and, in roster mode, record the device."""
        if not isinstance(code, str) or len(code) != self._settings.code_length:
            raise InvalidInput("Invalid code")

        session = self._store.find(RelaySession, code=code.upper())
        if session is None:
            raise SessionNotFound()

        if self._settings.tracks_devices and isinstance(device_id, str) and device_id:
            added = self._store.append_unique(SessionDevice(session_id=session.id, device_id=device_id))
            if added:
                logger.info("Device %s joined session %s", device_id, session.id)
        else:
            logger.info("Session %s joined", session.id)

        result = {"session_id": session.id}
        if self._settings.issues_keys:
            result["key_material"] = session.key_material
        return result

    def list_devices(self, session_id: str) -> list[str]:
        rows = self._store.find_all(SessionDevice, session_id=session_id)
        return [row.device_id for row in rows]

    # --- End ---

    def end_session(self, session_id) -> dict:
        """Delete a session together with its clipboard items and roster.

        Not transactional: items go first, and a failure there does not stop
        the session delete. A failed session delete leaves the session live.
        """
        if not isinstance(session_id, str) or not session_id:
            raise InvalidInput("Missing sessionId")

        for model in (ClipboardItem, SessionDevice):
            try:
                self._store.delete(model, session_id=session_id)
            except StorageError:
                logger.warning("Cleanup of %s for session %s failed", model.__tablename__, session_id)

        deleted = self._store.delete(RelaySession, id=session_id)
        if not deleted:
            raise SessionNotFound()

        logger.info("Session %s ended", session_id)
        return {"success": True}
