"""
Server-side session storage behind the session cookie.

SessionStore is the interface the authorization gate talks to. The in-memory
store keeps sessions for the life of the process (default, and what tests
use); the database store keeps them in the sessions table so they survive
restarts and are shared between instances.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventory.core.config import settings
from inventory.core.database import InventoryStoreError, SessionLocal
from inventory.models import SessionRecord
from inventory.schemas.auth import SessionData

logger = logging.getLogger(__name__)


class SessionStore(ABC):
    """Key/value repository mapping an opaque token to SessionData."""

    @abstractmethod
    def get(self, token: str) -> SessionData | None:
        """Return the session for token, or None when the token is unknown."""

    @abstractmethod
    def save(self, token: str, data: SessionData) -> None:
        """Create or replace the session for token."""

    @abstractmethod
    def refresh(self, token: str, data: SessionData) -> bool:
        """
        Replace the cached fields of an existing session; never creates one.

        Returns False when the token is gone (e.g. logged out meanwhile).
        """

    @abstractmethod
    def delete(self, token: str) -> bool:
        """Remove the session; return True if one existed."""


class InMemorySessionStore(SessionStore):
    """Process-local store. Sessions are lost on restart."""

    def __init__(self) -> None:
        self._sessions: dict[str, SessionData] = {}
        self._lock = threading.Lock()

    def get(self, token: str) -> SessionData | None:
        return self._sessions.get(token)

    def save(self, token: str, data: SessionData) -> None:
        with self._lock:
            self._sessions[token] = data

    def refresh(self, token: str, data: SessionData) -> bool:
        with self._lock:
            if token not in self._sessions:
                return False
            self._sessions[token] = data
            return True

    def delete(self, token: str) -> bool:
        with self._lock:
            return self._sessions.pop(token, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)


class DatabaseSessionStore(SessionStore):
    """Store backed by the sessions table; each call uses its own short DB session."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get(self, token: str) -> SessionData | None:
        db = self._session_factory()
        try:
            record = db.get(SessionRecord, token)
            if record is None:
                return None
            return SessionData(
                user_id=record.user_id,
                username=record.username,
                role_id=record.role_id,
                role_name=record.role_name,
                created_at=record.created_at,
            )
        except SQLAlchemyError as e:
            logger.error("Failed to read session: %s", e)
            raise InventoryStoreError("Could not read session.", cause=e) from e
        finally:
            db.close()

    def save(self, token: str, data: SessionData) -> None:
        db = self._session_factory()
        try:
            record = db.get(SessionRecord, token)
            if record is None:
                record = SessionRecord(token=token, created_at=data.created_at)
                db.add(record)
            record.user_id = data.user_id
            record.username = data.username
            record.role_id = data.role_id
            record.role_name = data.role_name
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to save session: %s", e)
            raise InventoryStoreError("Could not save session.", cause=e) from e
        finally:
            db.close()

    def refresh(self, token: str, data: SessionData) -> bool:
        stmt = (
            update(SessionRecord)
            .where(SessionRecord.token == token)
            .values(
                user_id=data.user_id,
                username=data.username,
                role_id=data.role_id,
                role_name=data.role_name,
            )
        )
        db = self._session_factory()
        try:
            result = db.execute(stmt)
            db.commit()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to refresh session: %s", e)
            raise InventoryStoreError("Could not refresh session.", cause=e) from e
        finally:
            db.close()

    def delete(self, token: str) -> bool:
        db = self._session_factory()
        try:
            result = db.execute(delete(SessionRecord).where(SessionRecord.token == token))
            db.commit()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to delete session: %s", e)
            raise InventoryStoreError("Could not delete session.", cause=e) from e
        finally:
            db.close()


_memory_store = InMemorySessionStore()


def get_session_store() -> SessionStore:
    """Dependency: the configured session store (override in tests)."""
    if settings.SESSION_BACKEND == "database":
        return DatabaseSessionStore(SessionLocal)
    return _memory_store
