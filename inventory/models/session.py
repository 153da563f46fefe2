"""ORM model for server-side login sessions (database session backend)."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func

from inventory.models.base import Base


class SessionRecord(Base):
    """One row per live login; removed on logout or when the user no longer exists."""

    __tablename__ = "sessions"

    token = Column(String(128), primary_key=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    username = Column(String(255), nullable=False)
    role_id = Column(Integer, nullable=False)
    role_name = Column(String(64), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
