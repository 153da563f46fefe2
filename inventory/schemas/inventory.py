"""Row schemas passed from the inventory services to the templates."""

from decimal import Decimal

from pydantic import BaseModel


class CategoryOption(BaseModel):
    """Category entry for the add-product select box."""

    id: int
    name: str

    class Config:
        from_attributes = True


class ProductRow(BaseModel):
    """Product with its category name, as listed on the dashboard and draw-stock form."""

    id: int
    name: str
    unit_price: Decimal
    stock_quantity: int
    category_name: str

    class Config:
        from_attributes = True


class NewProduct(BaseModel):
    """Validated add-product form input."""

    name: str
    category_id: int
    unit_price: Decimal
    stock_quantity: int


class CategoryStock(BaseModel):
    category_name: str
    total_stock: int


class LowStockItem(BaseModel):
    name: str
    stock_quantity: int


class InventorySummary(BaseModel):
    """Aggregates shown on the summary page."""

    total_value: Decimal
    total_products: int
    stock_by_category: list[CategoryStock]
    low_stock_items: list[LowStockItem]

    @property
    def total_value_display(self) -> str:
        return f"{self.total_value:.2f}"
