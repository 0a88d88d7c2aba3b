from .coupon import CouponViewSet
from .discount import DiscountViewSet

__all__ = ["CouponViewSet", "DiscountViewSet"]
