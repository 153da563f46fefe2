"""SQLAlchemy ORM models."""

from inventory.models.base import Base
from inventory.models.product import Category, Product
from inventory.models.session import SessionRecord
from inventory.models.user import Role, User

__all__ = ["Base", "Category", "Product", "Role", "SessionRecord", "User"]
