from .coupon import Coupon, CouponRedemption
from .discount import Discount, DiscountCategory, DiscountProduct

__all__ = [
    "Discount",
    "DiscountCategory",
    "DiscountProduct",
    "Coupon",
    "CouponRedemption",
]
