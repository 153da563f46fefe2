"""Pydantic schemas shared by services, routes and templates."""

from inventory.schemas.auth import CurrentUser, SessionData
from inventory.schemas.health import HealthResponse
from inventory.schemas.inventory import (
    CategoryOption,
    CategoryStock,
    InventorySummary,
    LowStockItem,
    NewProduct,
    ProductRow,
)

__all__ = [
    "CategoryOption",
    "CategoryStock",
    "CurrentUser",
    "HealthResponse",
    "InventorySummary",
    "LowStockItem",
    "NewProduct",
    "ProductRow",
    "SessionData",
]
