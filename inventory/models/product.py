"""ORM models for products and their categories."""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, String

from inventory.models.base import Base

# Largest value the 32-bit stock_quantity column can hold.
MAX_STOCK_QUANTITY = 2_147_483_647


class Category(Base):
    """Product category (e.g. Beverages, Stationery)."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)


class Product(Base):
    """
    Stocked product.

    stock_quantity never goes below zero: withdrawals go through the guarded
    update in inventory.services.stock and the table carries a CHECK as well.
    """

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("unit_price >= 0", name="ck_products_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    unit_price = Column(Numeric(10, 2), nullable=False)
    stock_quantity = Column(Integer, nullable=False, default=0)
