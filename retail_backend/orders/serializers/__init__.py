from .order import (
    AddLineSerializer,
    ApplyCouponSerializer,
    CreateOrderSerializer,
    OrderDetailSerializer,
    OrderLineSerializer,
    OrderListSerializer,
    OrderStatusHistorySerializer,
    UpdateLineSerializer,
    VoidOrderSerializer,
)

__all__ = [
    "AddLineSerializer",
    "ApplyCouponSerializer",
    "CreateOrderSerializer",
    "OrderDetailSerializer",
    "OrderLineSerializer",
    "OrderListSerializer",
    "OrderStatusHistorySerializer",
    "UpdateLineSerializer",
    "VoidOrderSerializer",
]
