"""Session purge: delete database-backed sessions older than SESSION_MAX_AGE_SECONDS."""

import logging
from datetime import datetime, timezone, timedelta
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from inventory.models import SessionRecord

if TYPE_CHECKING:
    from inventory.core.config import Settings

logger = logging.getLogger(__name__)


def purge_expired_sessions(session: Session, settings: "Settings") -> int:
    """
    Delete sessions whose cookie has already expired on the client side.

    Returns the number of rows deleted. Idempotent: safe to run repeatedly.
    Does nothing for the in-memory backend, which has no rows to purge.
    """
    if settings.SESSION_BACKEND != "database":
        logger.info("Session backend is %r; nothing to purge.", settings.SESSION_BACKEND)
        return 0

    cutoff = datetime.now(timezone.utc) - timedelta(seconds=settings.SESSION_MAX_AGE_SECONDS)
    deleted_count = (
        session.query(SessionRecord)
        .filter(SessionRecord.created_at < cutoff)
        .delete(synchronize_session=False)
    )
    session.commit()

    if deleted_count > 0:
        logger.info(
            "Session purge: cutoff=%s, sessions_deleted=%s",
            cutoff.isoformat(),
            deleted_count,
        )
    return deleted_count
