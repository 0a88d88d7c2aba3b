# discounts/services/coupon_redemption.py

"""
COUPON REDEMPTION TRACKER

Enforces the one-coupon-per-order rule and the coupon usage caps.
Callers (orders.services.order_service) hold the order row lock and
re-price the order afterwards; this module only creates/deletes the
redemption row.

Checks, in order:
- blank code                              -> ValidationFailedError
- order already has a redemption          -> CouponAlreadyAppliedError
- unknown code                            -> CouponNotFoundError
- coupon inactive / discount inactive     -> CouponNotApplicableError
- discount outside its validity window    -> CouponNotApplicableError
- total usage cap met                     -> CouponUsageLimitError
- per-customer cap met (resolved customer) -> CouponUsageLimitError
"""

from __future__ import annotations

import logging

from django.db import transaction

from core.clock import resolve_clock
from core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from customers.models import Customer
from discounts.models import Coupon, CouponRedemption

logger = logging.getLogger("discounts")


class CouponNotApplicableError(ValidationFailedError):
    """Coupon cannot be applied right now."""


class CouponAlreadyAppliedError(ConflictError):
    """A coupon is already applied to this order."""


class CouponUsageLimitError(ConflictError):
    """Coupon usage limit reached."""


class CouponNotFoundError(NotFoundError):
    """Coupon not found."""


class RedemptionNotFoundError(NotFoundError):
    """No coupon applied to this order."""


def normalize_code(code) -> str:
    return (code or "").strip()


@transaction.atomic
def redeem_coupon(*, order, code, customer_id=None, clock=None) -> CouponRedemption:
    """
    Create the redemption for `order`.

    customer_id overrides order.customer_id for the per-customer cap and is
    stored on the redemption.
    """
    code = normalize_code(code)
    if not code:
        raise ValidationFailedError("Coupon code is required.")

    if CouponRedemption.objects.filter(order_id=order.pk).exists():
        raise CouponAlreadyAppliedError()

    # lock the coupon so concurrent orders cannot overrun its caps
    coupon = (
        Coupon.objects.select_for_update()
        .select_related("discount")
        .filter(code=code)
        .first()
    )
    if coupon is None:
        raise CouponNotFoundError()

    if not coupon.is_active:
        raise CouponNotApplicableError("Coupon is inactive.")

    discount = coupon.discount
    if not discount.is_active:
        raise CouponNotApplicableError("Discount is inactive.")

    now = resolve_clock(clock).now()
    if discount.starts_at is not None and discount.starts_at > now:
        raise CouponNotApplicableError("Discount not started.")
    if discount.ends_at is not None and discount.ends_at < now:
        raise CouponNotApplicableError("Discount expired.")

    if coupon.usage_limit_total is not None:
        used = CouponRedemption.objects.filter(coupon=coupon).count()
        if used >= coupon.usage_limit_total:
            raise CouponUsageLimitError("Coupon usage limit reached.")

    if customer_id is not None and not Customer.objects.filter(pk=customer_id).exists():
        raise NotFoundError("Customer not found.")

    resolved_customer_id = customer_id if customer_id is not None else order.customer_id

    if coupon.usage_limit_per_customer is not None and resolved_customer_id is not None:
        used_by_customer = CouponRedemption.objects.filter(
            coupon=coupon, customer_id=resolved_customer_id
        ).count()
        if used_by_customer >= coupon.usage_limit_per_customer:
            raise CouponUsageLimitError("Per-customer coupon limit reached.")

    redemption = CouponRedemption.objects.create(
        coupon=coupon,
        order_id=order.pk,
        customer_id=resolved_customer_id,
        redeemed_at=now,
    )

    logger.info(
        "Coupon redeemed",
        extra={"order_id": order.pk, "coupon_id": coupon.id, "customer_id": resolved_customer_id},
    )
    return redemption


@transaction.atomic
def release_coupon(*, order) -> None:
    redemption = CouponRedemption.objects.select_for_update().filter(order_id=order.pk).first()
    if redemption is None:
        raise RedemptionNotFoundError()

    coupon_id = redemption.coupon_id
    redemption.delete()

    logger.info("Coupon released", extra={"order_id": order.pk, "coupon_id": coupon_id})
