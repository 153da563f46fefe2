"""
CLI entrypoint for the session purge job. Run from cron, e.g.:

  python -m inventory.session_purge

Or hourly: 0 * * * * cd /path/to/inventory && .venv/bin/python -m inventory.session_purge
"""

import logging
import sys

from inventory.core.config import get_settings
from inventory.core.database import SessionLocal
from inventory.services.session_purge import purge_expired_sessions

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Run the purge: delete sessions older than SESSION_MAX_AGE_SECONDS."""
    settings = get_settings()
    db = SessionLocal()
    try:
        sessions_deleted = purge_expired_sessions(db, settings)
        logger.info("Session purge completed: sessions_deleted=%s", sessions_deleted)
        return 0
    except Exception as e:
        logger.exception("Session purge failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
