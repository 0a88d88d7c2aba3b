from .order import Order
from .order_line import OrderLine
from .order_status_history import OrderStatusHistory

__all__ = ["Order", "OrderLine", "OrderStatusHistory"]
