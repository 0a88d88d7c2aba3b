from .coupon import CouponSerializer, CouponWriteSerializer
from .discount import (
    ActiveFlagSerializer,
    DiscountDetailSerializer,
    DiscountLinkCategorySerializer,
    DiscountLinkProductSerializer,
    DiscountListSerializer,
    DiscountWriteSerializer,
)

__all__ = [
    "ActiveFlagSerializer",
    "CouponSerializer",
    "CouponWriteSerializer",
    "DiscountDetailSerializer",
    "DiscountLinkCategorySerializer",
    "DiscountLinkProductSerializer",
    "DiscountListSerializer",
    "DiscountWriteSerializer",
]
