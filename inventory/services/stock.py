"""Product listing, product creation and the guarded stock withdrawal."""

import logging

from sqlalchemy import insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventory.core.database import InventoryStoreError
from inventory.models import Category, Product
from inventory.models.product import MAX_STOCK_QUANTITY
from inventory.schemas.inventory import CategoryOption, NewProduct, ProductRow

logger = logging.getLogger(__name__)


def list_products(db: Session) -> list[ProductRow]:
    """All products with their category name, ordered by product name."""
    stmt = (
        select(
            Product.id,
            Product.name,
            Product.unit_price,
            Product.stock_quantity,
            Category.name.label("category_name"),
        )
        .join(Category, Product.category_id == Category.id)
        .order_by(Product.name, Product.id)
    )
    try:
        rows = db.execute(stmt).all()
    except SQLAlchemyError as e:
        raise InventoryStoreError("Could not load products.", cause=e) from e
    return [ProductRow.model_validate(row) for row in rows]


def list_categories(db: Session) -> list[CategoryOption]:
    """All categories ordered by name, for the add-product form."""
    try:
        rows = db.execute(select(Category.id, Category.name).order_by(Category.name)).all()
    except SQLAlchemyError as e:
        raise InventoryStoreError("Could not load categories.", cause=e) from e
    return [CategoryOption.model_validate(row) for row in rows]


def category_exists(db: Session, category_id: int) -> bool:
    try:
        return db.get(Category, category_id) is not None
    except SQLAlchemyError as e:
        raise InventoryStoreError("Could not load categories.", cause=e) from e


def add_product(db: Session, product: NewProduct) -> int:
    """Insert a product and return its id."""
    stmt = insert(Product).values(
        name=product.name,
        category_id=product.category_id,
        unit_price=product.unit_price,
        stock_quantity=product.stock_quantity,
    )
    try:
        result = db.execute(stmt)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InventoryStoreError("Could not add the product.", cause=e) from e
    return result.inserted_primary_key[0]


def withdraw_stock(db: Session, product_id: int, quantity: int) -> bool:
    """
    Take quantity units out of a product's stock.

    The check and the decrement are one conditional UPDATE, so two concurrent
    withdrawals cannot both pass the check and drive stock negative. Returns
    True when the row was updated, False when stock was insufficient or the
    product does not exist (nothing is changed in either case). A quantity
    above MAX_STOCK_QUANTITY is always insufficient.

    Raises ValueError for a non-positive quantity and InventoryStoreError when
    the update fails.
    """
    if quantity <= 0:
        raise ValueError("quantity must be greater than zero")
    if quantity > MAX_STOCK_QUANTITY:
        # No row can hold this much; the driver may not even bind the value.
        logger.info(
            "Withdrawal refused: product_id=%s quantity=%s exceeds any stock", product_id, quantity
        )
        return False

    stmt = (
        update(Product)
        .where(Product.id == product_id, Product.stock_quantity >= quantity)
        .values(stock_quantity=Product.stock_quantity - quantity)
        .execution_options(synchronize_session=False)
    )
    try:
        result = db.execute(stmt)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InventoryStoreError("Could not update stock.", cause=e) from e

    if result.rowcount == 0:
        logger.info(
            "Withdrawal refused: product_id=%s quantity=%s (insufficient stock or unknown product)",
            product_id,
            quantity,
        )
        return False
    return True
