# orders/tests/test_pricing.py

from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

from django.test import TestCase, override_settings

from catalog.models import Category
from catalog.services import create_product
from core.clock import FixedClock
from core.exceptions import ValidationFailedError
from discounts.models import Coupon, CouponRedemption, Discount
from discounts.services import CouponAlreadyAppliedError, RedemptionNotFoundError
from orders.models import Order, OrderLine
from orders.services import (
    OrderLineNotFoundError,
    ProductUnavailableError,
    add_line,
    apply_coupon,
    create_order,
    recalculate,
    remove_coupon,
    remove_line,
    update_line,
)
from orders.services.order_calculator import LineProductMissingError
from orders.services.order_numbers import base_order_number
from orders.services.order_service import load_lines


def _global_percent(value, *, priority=0, **kwargs):
    return Discount.objects.create(
        name=f"{value}% off",
        type=Discount.Type.PERCENT,
        value=Decimal(value),
        scope=Discount.Scope.GLOBAL,
        priority=priority,
        **kwargs,
    )


class OrderPricingTests(TestCase):
    """
    GUARANTEES:
    - Line discount comes from the best single discount
    - grand_total == max(0, subtotal - discount_total + tax_total), tax_total == 0
    - Re-running the recalculation changes nothing
    - Catalog price changes never reach existing lines
    """

    def setUp(self):
        self.clock = FixedClock(datetime(2024, 6, 1, 12, 0, tzinfo=dt_timezone.utc))
        self.product = create_product(name="Notebook", unit_price="10.00")
        self.order = create_order(clock=self.clock)

    def _reload(self):
        return Order.objects.get(pk=self.order.pk)

    # =====================================================
    # SCENARIOS
    # =====================================================

    def test_single_global_percent_discount(self):
        _global_percent("10", priority=1)

        line = add_line(order_id=self.order.id, product_id=self.product.id, quantity=3, clock=self.clock)

        self.assertEqual(line.line_discount, Decimal("3.00"))
        self.assertEqual(line.line_total, Decimal("27.00"))
        order = self._reload()
        self.assertEqual(order.subtotal, Decimal("30.00"))
        self.assertEqual(order.discount_total, Decimal("3.00"))
        self.assertEqual(order.tax_total, Decimal("0.00"))
        self.assertEqual(order.grand_total, Decimal("27.00"))

    def test_amount_beats_percent_on_higher_value(self):
        Discount.objects.create(
            name="Five off",
            type=Discount.Type.AMOUNT,
            value=Decimal("5"),
            scope=Discount.Scope.GLOBAL,
            priority=2,
        )
        _global_percent("10", priority=1)

        line = add_line(order_id=self.order.id, product_id=self.product.id, quantity=4, clock=self.clock)

        self.assertEqual(line.line_discount, Decimal("5.00"))
        self.assertEqual(line.line_total, Decimal("35.00"))

    def test_category_discount_only_hits_linked_lines(self):
        category = Category.objects.create(name="Stationery")
        pen = create_product(name="Pen", unit_price="2.00", category_id=category.id)
        discount = Discount.objects.create(
            name="Stationery week",
            type=Discount.Type.PERCENT,
            value=Decimal("50"),
            scope=Discount.Scope.CATEGORY,
        )
        discount.category_links.create(category=category)

        add_line(order_id=self.order.id, product_id=pen.id, quantity=2, clock=self.clock)
        add_line(order_id=self.order.id, product_id=self.product.id, quantity=1, clock=self.clock)

        order = self._reload()
        self.assertEqual(order.subtotal, Decimal("14.00"))
        self.assertEqual(order.discount_total, Decimal("2.00"))
        self.assertEqual(order.grand_total, Decimal("12.00"))

    # =====================================================
    # INVARIANTS
    # =====================================================

    def test_recalculation_is_idempotent(self):
        _global_percent("15")
        add_line(order_id=self.order.id, product_id=self.product.id, quantity=3, clock=self.clock)

        order = self._reload()
        lines = load_lines(order)
        first = (order.subtotal, order.discount_total, order.grand_total, [l.line_total for l in lines])

        recalculate(order, lines, clock=self.clock)
        recalculate(order, lines, clock=self.clock)
        second = (order.subtotal, order.discount_total, order.grand_total, [l.line_total for l in lines])

        self.assertEqual(first, second)

    def test_totals_invariant_holds_after_every_change(self):
        _global_percent("12.5")
        line = add_line(order_id=self.order.id, product_id=self.product.id, quantity=3, clock=self.clock)
        update_line(order_id=self.order.id, line_id=line.id, quantity=7, clock=self.clock)

        order = self._reload()
        self.assertEqual(order.tax_total, Decimal("0.00"))
        self.assertEqual(order.grand_total, max(Decimal("0"), order.subtotal - order.discount_total))
        self.assertEqual(
            order.subtotal,
            sum((l.unit_price * l.quantity for l in order.lines.all()), Decimal("0")),
        )
        self.assertEqual(order.discount_total, sum((l.line_discount for l in order.lines.all()), Decimal("0")))

    def test_line_keeps_price_snapshot(self):
        line = add_line(order_id=self.order.id, product_id=self.product.id, quantity=1, clock=self.clock)
        self.product.unit_price = Decimal("99.00")
        self.product.name = "Renamed"
        self.product.save()

        update_line(order_id=self.order.id, line_id=line.id, quantity=2, clock=self.clock)

        line.refresh_from_db()
        self.assertEqual(line.unit_price, Decimal("10.00"))
        self.assertEqual(line.product_name_snapshot, "Notebook")
        self.assertEqual(self._reload().subtotal, Decimal("20.00"))

    def test_expired_discount_is_ignored(self):
        _global_percent("10", ends_at=self.clock.now() - timedelta(seconds=1))

        line = add_line(order_id=self.order.id, product_id=self.product.id, quantity=1, clock=self.clock)

        self.assertEqual(line.line_discount, Decimal("0.00"))

    # =====================================================
    # LINE MUTATIONS
    # =====================================================

    def test_remove_line_reprices(self):
        first = add_line(order_id=self.order.id, product_id=self.product.id, quantity=1, clock=self.clock)
        add_line(order_id=self.order.id, product_id=self.product.id, quantity=2, clock=self.clock)

        order = remove_line(order_id=self.order.id, line_id=first.id, clock=self.clock)

        self.assertEqual(order.subtotal, Decimal("20.00"))
        self.assertEqual(OrderLine.objects.filter(order=self.order).count(), 1)

    def test_remove_unknown_line_is_not_found(self):
        with self.assertRaises(OrderLineNotFoundError):
            remove_line(order_id=self.order.id, line_id=12345)

    def test_invalid_quantity_rejected(self):
        for qty in (0, -1, "2.5", None):
            with self.subTest(qty=qty):
                with self.assertRaises(ValidationFailedError):
                    add_line(order_id=self.order.id, product_id=self.product.id, quantity=qty)

        self.assertFalse(OrderLine.objects.exists())

    def test_inactive_product_cannot_be_added(self):
        self.product.is_active = False
        self.product.save()

        with self.assertRaises(ProductUnavailableError):
            add_line(order_id=self.order.id, product_id=self.product.id, quantity=1)

    def test_deleted_product_fails_repricing(self):
        doomed = create_product(name="Doomed", unit_price="1.00")
        line = add_line(order_id=self.order.id, product_id=doomed.id, quantity=1, clock=self.clock)
        doomed.delete()

        with self.assertRaises(LineProductMissingError):
            update_line(order_id=self.order.id, line_id=line.id, quantity=2, clock=self.clock)

        line.refresh_from_db()
        self.assertEqual(line.quantity, 1)


class OrderCouponTests(TestCase):
    """
    GUARANTEES:
    - One coupon per order
    - Coupon-scope discounts apply while any coupon is on the order
    - Removing the coupon re-prices without it
    """

    def setUp(self):
        self.clock = FixedClock(datetime(2024, 6, 1, 12, 0, tzinfo=dt_timezone.utc))
        self.product = create_product(name="Headphones", unit_price="50.00")
        _global_percent("10")
        self.coupon_discount = Discount.objects.create(
            name="VIP",
            type=Discount.Type.PERCENT,
            value=Decimal("20"),
            scope=Discount.Scope.COUPON,
        )
        self.coupon = Coupon.objects.create(discount=self.coupon_discount, code="VIP20")
        self.order = create_order(clock=self.clock)
        add_line(order_id=self.order.id, product_id=self.product.id, quantity=1, clock=self.clock)

    def test_apply_and_remove_coupon_reprices(self):
        order = apply_coupon(order_id=self.order.id, code="VIP20", clock=self.clock)
        self.assertEqual(order.discount_total, Decimal("10.00"))
        self.assertEqual(order.grand_total, Decimal("40.00"))

        order = remove_coupon(order_id=self.order.id, clock=self.clock)
        self.assertEqual(order.discount_total, Decimal("5.00"))
        self.assertEqual(order.grand_total, Decimal("45.00"))
        self.assertFalse(CouponRedemption.objects.exists())

    def test_only_one_coupon_per_order(self):
        Coupon.objects.create(discount=self.coupon_discount, code="VIP20B")
        apply_coupon(order_id=self.order.id, code="VIP20", clock=self.clock)

        with self.assertRaises(CouponAlreadyAppliedError):
            apply_coupon(order_id=self.order.id, code="VIP20B", clock=self.clock)

        self.assertEqual(CouponRedemption.objects.filter(order=self.order).count(), 1)

    def test_any_coupon_unlocks_every_coupon_discount(self):
        small = Discount.objects.create(
            name="Small",
            type=Discount.Type.PERCENT,
            value=Decimal("1"),
            scope=Discount.Scope.COUPON,
        )
        Coupon.objects.create(discount=small, code="SMALL1")

        order = apply_coupon(order_id=self.order.id, code="SMALL1", clock=self.clock)

        # the VIP 20% wins even though only SMALL1 was redeemed
        self.assertEqual(order.discount_total, Decimal("10.00"))

    def test_blank_code_rejected_before_lookup(self):
        with self.assertRaises(ValidationFailedError):
            apply_coupon(order_id=999999, code="  ")

    def test_remove_without_coupon_is_not_found(self):
        with self.assertRaises(RedemptionNotFoundError):
            remove_coupon(order_id=self.order.id)


class OrderNumberTests(TestCase):
    def setUp(self):
        self.clock = FixedClock(datetime(2024, 6, 1, 12, 0, 0, 123456, tzinfo=dt_timezone.utc))

    def test_format_is_prefix_and_utc_milliseconds(self):
        self.assertEqual(base_order_number(self.clock.now()), "ORD-20240601120000123")

    @override_settings(ORDER_NUMBER_PREFIX="TST")
    def test_prefix_is_configurable(self):
        self.assertTrue(base_order_number(self.clock.now()).startswith("TST-"))

    def test_same_millisecond_gets_suffix(self):
        first = create_order(clock=self.clock)
        second = create_order(clock=self.clock)
        third = create_order(clock=self.clock)

        self.assertEqual(first.order_number, "ORD-20240601120000123")
        self.assertEqual(second.order_number, "ORD-20240601120000123-2")
        self.assertEqual(third.order_number, "ORD-20240601120000123-3")

    def test_new_order_is_unpaid_and_zero(self):
        order = create_order(clock=self.clock)

        self.assertEqual(order.status, Order.STATUS_UNPAID)
        self.assertEqual(order.grand_total, Decimal("0.00"))
        self.assertEqual(order.created_at, self.clock.now())
