from .coupon_redemption import (
    CouponAlreadyAppliedError,
    CouponNotApplicableError,
    CouponNotFoundError,
    CouponUsageLimitError,
    RedemptionNotFoundError,
    redeem_coupon,
    release_coupon,
)
from .discount_engine import (
    ActiveDiscount,
    DiscountChoice,
    best_discount_for_line,
    choose_discount,
    load_active_discounts,
    order_has_coupon,
)

__all__ = [
    "ActiveDiscount",
    "DiscountChoice",
    "best_discount_for_line",
    "choose_discount",
    "load_active_discounts",
    "order_has_coupon",
    "redeem_coupon",
    "release_coupon",
    "CouponAlreadyAppliedError",
    "CouponNotApplicableError",
    "CouponNotFoundError",
    "CouponUsageLimitError",
    "RedemptionNotFoundError",
]
