from .fulfillment import EmptyOrderError, OutOfStockError, pay_order, void_order
from .order_calculator import recalculate, save_pricing
from .order_lifecycle import (
    InvalidOrderTransitionError,
    OrderNotMutableError,
    can_transition,
    ensure_mutable,
    validate_transition,
)
from .order_service import (
    OrderLineNotFoundError,
    OrderNotFoundError,
    ProductUnavailableError,
    add_line,
    apply_coupon,
    create_order,
    remove_coupon,
    remove_line,
    update_line,
)

__all__ = [
    "create_order",
    "add_line",
    "update_line",
    "remove_line",
    "apply_coupon",
    "remove_coupon",
    "pay_order",
    "void_order",
    "recalculate",
    "save_pricing",
    "can_transition",
    "validate_transition",
    "ensure_mutable",
    "EmptyOrderError",
    "InvalidOrderTransitionError",
    "OrderLineNotFoundError",
    "OrderNotFoundError",
    "OrderNotMutableError",
    "OutOfStockError",
    "ProductUnavailableError",
]
