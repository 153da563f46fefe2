"""ORM models for application users and their roles (auth and RBAC)."""

from sqlalchemy import Column, ForeignKey, Integer, String

from inventory.models.base import Base

ROLE_ADMINISTRATOR = "Administrator"
ROLE_MANAGER = "Manager"
ROLE_STANDARD_USER = "Standard User"

ROLE_NAMES = (ROLE_ADMINISTRATOR, ROLE_MANAGER, ROLE_STANDARD_USER)


class Role(Base):
    """Authorization level; name is one of ROLE_NAMES."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(64), nullable=False, unique=True)


class User(Base):
    """
    User account for session login and role-based access control.

    password_hash holds a bcrypt hash, never the plain password.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
