"""Aggregate figures for the inventory summary page."""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventory.core.database import InventoryStoreError
from inventory.models import Category, Product
from inventory.schemas.inventory import CategoryStock, InventorySummary, LowStockItem


def build_inventory_summary(db: Session, low_stock_threshold: int) -> InventorySummary:
    """
    Total stock value, product count, stock per category and low-stock items.

    Low-stock items are products with stock_quantity strictly below the threshold,
    lowest first. Raises InventoryStoreError when any query fails.
    """
    total_stock = func.sum(Product.stock_quantity).label("total_stock")
    try:
        total_value = db.scalar(select(func.sum(Product.unit_price * Product.stock_quantity)))
        total_products = db.scalar(select(func.count(Product.id)))
        by_category = db.execute(
            select(Category.name.label("category_name"), total_stock)
            .join(Category, Product.category_id == Category.id)
            .group_by(Category.name)
            .order_by(total_stock.desc(), Category.name)
        ).all()
        low_stock = db.execute(
            select(Product.name, Product.stock_quantity)
            .where(Product.stock_quantity < low_stock_threshold)
            .order_by(Product.stock_quantity.asc(), Product.name)
        ).all()
    except SQLAlchemyError as e:
        raise InventoryStoreError("Could not build inventory summary.", cause=e) from e

    return InventorySummary(
        total_value=Decimal(str(total_value or 0)),
        total_products=total_products or 0,
        stock_by_category=[
            CategoryStock(category_name=row.category_name, total_stock=row.total_stock or 0)
            for row in by_category
        ],
        low_stock_items=[
            LowStockItem(name=row.name, stock_quantity=row.stock_quantity) for row in low_stock
        ],
    )
