# discounts/services/discount_engine.py

"""
======================================================
PATH: discounts/services/discount_engine.py
======================================================
DISCOUNT SELECTION ENGINE (READ + COMPUTE ONLY)

For one order line, pick the single best discount:

1) Candidates: active discounts whose validity window contains "now"
   (missing bounds are unbounded), matched by scope:
     GLOBAL   -> always
     CATEGORY -> product's category is linked
     PRODUCT  -> product is linked
     COUPON   -> the order has ANY coupon redemption
2) Amount: PERCENT -> base * value / 100, rounded half-even to 2dp
           AMOUNT  -> min(value, base)
   where base = unit_price * quantity
3) Higher amount wins; exact tie -> lower priority; still tied -> lowest id.
4) Result clamped to [0, base].

Discounts never combine (is_stackable is not read).
Nothing here writes to the database.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Iterable, Optional, Sequence

from django.db.models import Q

from core.clock import resolve_clock
from core.money import TWOPLACES, ZERO
from discounts.models import CouponRedemption, Discount

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class ActiveDiscount:
    """Immutable pricing view of one Discount row plus its scope links."""

    id: int
    type: str
    scope: str
    value: Decimal
    priority: int
    category_ids: frozenset
    product_ids: frozenset

    @classmethod
    def from_model(cls, discount: Discount) -> "ActiveDiscount":
        return cls(
            id=discount.id,
            type=discount.type,
            scope=discount.scope,
            value=Decimal(discount.value),
            priority=int(discount.priority or 0),
            category_ids=frozenset(link.category_id for link in discount.category_links.all()),
            product_ids=frozenset(link.product_id for link in discount.product_links.all()),
        )


@dataclass(frozen=True)
class DiscountChoice:
    discount_id: Optional[int]
    amount: Decimal


NO_DISCOUNT = DiscountChoice(discount_id=None, amount=ZERO)


def load_active_discounts(*, clock=None) -> list[ActiveDiscount]:
    """
    Active discounts valid at clock.now(), in id order ("first seen" order).
    Read without locks.
    """
    now = resolve_clock(clock).now()
    qs = (
        Discount.objects.filter(is_active=True)
        .filter(Q(starts_at__isnull=True) | Q(starts_at__lte=now))
        .filter(Q(ends_at__isnull=True) | Q(ends_at__gte=now))
        .prefetch_related("category_links", "product_links")
        .order_by("id")
    )
    return [ActiveDiscount.from_model(d) for d in qs]


def order_has_coupon(order) -> bool:
    if order is None or order.pk is None:
        return False
    return CouponRedemption.objects.filter(order_id=order.pk).exists()


def _matches_scope(discount: ActiveDiscount, *, product_id, category_id, has_coupon: bool) -> bool:
    scope = discount.scope
    if scope == Discount.Scope.GLOBAL:
        return True
    if scope == Discount.Scope.CATEGORY:
        return category_id is not None and category_id in discount.category_ids
    if scope == Discount.Scope.PRODUCT:
        return product_id in discount.product_ids
    if scope == Discount.Scope.COUPON:
        # any redemption on the order qualifies, not only this discount's coupon
        return has_coupon
    return False


def discount_amount(discount: ActiveDiscount, base: Decimal) -> Decimal:
    if discount.type == Discount.Type.PERCENT:
        return (base * discount.value / HUNDRED).quantize(TWOPLACES, rounding=ROUND_HALF_EVEN)
    if discount.type == Discount.Type.AMOUNT:
        return min(discount.value, base)
    return ZERO


def choose_discount(
    *,
    unit_price,
    quantity: int,
    product_id,
    category_id,
    has_coupon: bool,
    discounts: Iterable[ActiveDiscount],
) -> DiscountChoice:
    """Pure selection over an already-loaded catalog."""
    unit_price = Decimal(unit_price)
    if quantity <= 0 or unit_price <= 0:
        return NO_DISCOUNT

    base = unit_price * quantity

    best = ZERO
    best_priority: Optional[int] = None
    best_id: Optional[int] = None

    for discount in discounts:
        if not _matches_scope(discount, product_id=product_id, category_id=category_id, has_coupon=has_coupon):
            continue

        candidate = discount_amount(discount, base)
        if candidate > best or (candidate == best and (best_priority is None or discount.priority < best_priority)):
            best = candidate
            best_priority = discount.priority
            best_id = discount.id

    if best < ZERO:
        best = ZERO
    if best > base:
        best = base

    return DiscountChoice(discount_id=best_id, amount=best.quantize(TWOPLACES))


def best_discount_for_line(
    order,
    line,
    *,
    discounts: Optional[Sequence[ActiveDiscount]] = None,
    has_coupon: Optional[bool] = None,
    clock=None,
) -> Decimal:
    """
    Best discount amount for one line, >= 0 and <= unit_price * quantity.

    `discounts` / `has_coupon` let the recalculator load the catalog once per
    order; when omitted they are loaded here.
    """
    quantity = int(line.quantity or 0)
    unit_price = Decimal(line.unit_price or 0)
    if quantity <= 0 or unit_price <= 0:
        return ZERO

    if discounts is None:
        discounts = load_active_discounts(clock=clock)
    if has_coupon is None:
        has_coupon = order_has_coupon(order)

    product = line.product
    choice = choose_discount(
        unit_price=unit_price,
        quantity=quantity,
        product_id=product.pk,
        category_id=product.category_id,
        has_coupon=has_coupon,
        discounts=discounts,
    )
    return choice.amount
