"""CSH Inventory: server-rendered inventory management with session login and role checks."""

__version__ = "0.1.0"
