from .inventory_item import InventoryItem
from .stock_adjustment import StockAdjustment
from .stock_ledger import StockLedgerEntry

__all__ = ["InventoryItem", "StockAdjustment", "StockLedgerEntry"]
