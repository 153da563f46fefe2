"""User lookups for login and for re-verifying sessions on each request."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventory.core.database import InventoryStoreError
from inventory.core.security import verify_password
from inventory.models import Role, User
from inventory.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)


def _user_with_role():
    return select(
        User.id,
        User.username,
        User.password_hash,
        Role.id.label("role_id"),
        Role.name.label("role_name"),
    ).join(Role, User.role_id == Role.id)


def _to_current_user(row) -> CurrentUser:
    return CurrentUser(
        id=row.id,
        username=row.username,
        role_id=row.role_id,
        role_name=row.role_name,
    )


def load_current_user(db: Session, user_id: int) -> CurrentUser | None:
    """
    Fetch the user's current username and role by id.

    Returns None when the user (or its role) no longer exists.
    Raises InventoryStoreError when the query fails.
    """
    try:
        row = db.execute(_user_with_role().where(User.id == user_id)).first()
    except SQLAlchemyError as e:
        raise InventoryStoreError("Could not verify session user.", cause=e) from e
    if row is None:
        return None
    return _to_current_user(row)


def authenticate(db: Session, username: str, password: str) -> CurrentUser | None:
    """
    Check username/password against the users table.

    Returns the user on success and None for an unknown user or wrong password.
    Raises InventoryStoreError when the query fails.
    """
    try:
        row = db.execute(_user_with_role().where(User.username == username)).first()
    except SQLAlchemyError as e:
        raise InventoryStoreError("Could not look up user.", cause=e) from e
    if row is None:
        logger.info("Login failed: unknown username %r", username)
        return None
    if not verify_password(password, row.password_hash):
        logger.info("Login failed: wrong password for %r", username)
        return None
    return _to_current_user(row)
