# discounts/services/coupon_admin.py

"""
COUPON ADMINISTRATION

- Coupons can only be created under a Coupon-scope discount.
- Codes are trimmed; duplicates are a ConflictError (case-sensitive match).
"""

from __future__ import annotations

from django.db import IntegrityError, transaction

from audit.services import record_audit
from core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from discounts.models import Coupon, Discount
from discounts.services.coupon_redemption import normalize_code


class DuplicateCouponCodeError(ConflictError):
    """Coupon code already exists."""


def _limit(value, *, field_name: str):
    if value is None or value == "":
        return None
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise ValidationFailedError(f"{field_name} must be an integer")
    if limit < 0:
        raise ValidationFailedError(f"{field_name} must be non-negative")
    return limit


def _snapshot(coupon: Coupon) -> dict:
    return {
        "discount_id": coupon.discount_id,
        "code": coupon.code,
        "usage_limit_total": coupon.usage_limit_total,
        "usage_limit_per_customer": coupon.usage_limit_per_customer,
        "is_active": coupon.is_active,
    }


def _save_unique(coupon: Coupon, **kwargs) -> None:
    # the unique index is the final arbiter for concurrent creates
    try:
        with transaction.atomic():
            coupon.save(**kwargs)
    except IntegrityError as exc:
        raise DuplicateCouponCodeError() from exc


@transaction.atomic
def create_coupon(
    *,
    discount_id,
    code,
    usage_limit_total=None,
    usage_limit_per_customer=None,
    is_active: bool = True,
    user=None,
) -> Coupon:
    discount = Discount.objects.filter(pk=discount_id).first()
    if discount is None:
        raise ValidationFailedError("Discount not found.")
    if discount.scope != Discount.Scope.COUPON:
        raise ValidationFailedError("Discount scope must be 'Coupon' for coupons.")

    code = normalize_code(code)
    if not code:
        raise ValidationFailedError("Code required.")
    if Coupon.objects.filter(code=code).exists():
        raise DuplicateCouponCodeError()

    coupon = Coupon(
        discount=discount,
        code=code,
        usage_limit_total=_limit(usage_limit_total, field_name="usage_limit_total"),
        usage_limit_per_customer=_limit(usage_limit_per_customer, field_name="usage_limit_per_customer"),
        is_active=bool(is_active),
    )
    _save_unique(coupon)

    record_audit(entity_name="Coupon", entity_id=coupon.id, action="Create", user=user, changes=_snapshot(coupon))
    return coupon


@transaction.atomic
def update_coupon(
    *,
    coupon_id,
    code,
    usage_limit_total=None,
    usage_limit_per_customer=None,
    is_active: bool = True,
    user=None,
) -> Coupon:
    coupon = Coupon.objects.select_for_update().filter(pk=coupon_id).first()
    if coupon is None:
        raise NotFoundError("Coupon not found.")

    code = normalize_code(code)
    if not code:
        raise ValidationFailedError("Code required.")
    if code != coupon.code and Coupon.objects.filter(code=code).exclude(pk=coupon.pk).exists():
        raise DuplicateCouponCodeError()

    before = _snapshot(coupon)
    coupon.code = code
    coupon.usage_limit_total = _limit(usage_limit_total, field_name="usage_limit_total")
    coupon.usage_limit_per_customer = _limit(usage_limit_per_customer, field_name="usage_limit_per_customer")
    coupon.is_active = bool(is_active)
    _save_unique(coupon)

    record_audit(
        entity_name="Coupon",
        entity_id=coupon.id,
        action="Update",
        user=user,
        changes={"before": before, "after": _snapshot(coupon)},
    )
    return coupon


@transaction.atomic
def set_coupon_active(*, coupon_id, is_active: bool, user=None) -> Coupon:
    coupon = Coupon.objects.select_for_update().filter(pk=coupon_id).first()
    if coupon is None:
        raise NotFoundError("Coupon not found.")

    coupon.is_active = bool(is_active)
    coupon.save(update_fields=["is_active"])

    record_audit(
        entity_name="Coupon",
        entity_id=coupon.id,
        action="Activate" if coupon.is_active else "Deactivate",
        user=user,
    )
    return coupon
