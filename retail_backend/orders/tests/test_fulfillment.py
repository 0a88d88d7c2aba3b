# orders/tests/test_fulfillment.py

from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase

from audit.models import AuditLog
from catalog.services import create_product
from core.clock import FixedClock
from core.exceptions import InsufficientStockError
from discounts.models import Discount
from inventory.models import InventoryItem, StockLedgerEntry
from inventory.services import InventoryMissingError, adjust_stock
from orders.models import Order, OrderStatusHistory
from orders.services import (
    EmptyOrderError,
    InvalidOrderTransitionError,
    OrderNotMutableError,
    OutOfStockError,
    add_line,
    apply_coupon,
    create_order,
    pay_order,
    remove_line,
    void_order,
)

User = get_user_model()


class FulfillmentTestBase(TestCase):
    def setUp(self):
        self.clock = FixedClock(datetime(2024, 6, 1, 12, 0, tzinfo=dt_timezone.utc))
        self.cashier = User.objects.create_user(
            email="cashier@example.com",
            password="pass12345",
            role=User.ROLE_CASHIER,
        )
        self.soap = create_product(name="Soap", unit_price="2.50")
        self.towel = create_product(name="Towel", unit_price="8.00")
        adjust_stock(product_id=self.soap.id, quantity_delta=10, clock=self.clock)
        adjust_stock(product_id=self.towel.id, quantity_delta=5, clock=self.clock)
        self.order = create_order(clock=self.clock)

    def _on_hand(self, product):
        return InventoryItem.objects.get(product=product).quantity_on_hand

    def _order_ledger(self):
        return StockLedgerEntry.objects.filter(ref_type=StockLedgerEntry.RefType.ORDER)


class PayOrderTests(FulfillmentTestBase):
    """
    GUARANTEES:
    - Paying debits each product exactly once, with one ORDER ledger row per line
    - Any shortfall rejects the whole payment; nothing is debited
    - PAID is terminal
    """

    def test_pay_debits_stock_and_records_history(self):
        add_line(order_id=self.order.id, product_id=self.soap.id, quantity=2, clock=self.clock)
        add_line(order_id=self.order.id, product_id=self.towel.id, quantity=3, clock=self.clock)

        order = pay_order(order_id=self.order.id, changed_by=self.cashier, clock=self.clock)

        self.assertEqual(order.status, Order.STATUS_PAID)
        self.assertEqual(self._on_hand(self.soap), 8)
        self.assertEqual(self._on_hand(self.towel), 2)

        entries = list(self._order_ledger().order_by("id"))
        self.assertEqual(len(entries), 2)
        self.assertEqual([e.quantity_delta for e in entries], [-2, -3])
        self.assertTrue(all(e.ref_id == order.id for e in entries))
        self.assertEqual({e.product_id for e in entries}, {self.soap.id, self.towel.id})

        history = OrderStatusHistory.objects.get(order=order)
        self.assertEqual(history.from_status, Order.STATUS_UNPAID)
        self.assertEqual(history.to_status, Order.STATUS_PAID)
        self.assertEqual(history.changed_by, self.cashier)
        self.assertEqual(history.changed_at, self.clock.now())

    def test_insufficient_stock_rolls_back_everything(self):
        adjust_stock(product_id=self.towel.id, quantity_delta=-2, clock=self.clock)
        add_line(order_id=self.order.id, product_id=self.towel.id, quantity=5, clock=self.clock)

        with self.assertRaises(InsufficientStockError) as ctx:
            pay_order(order_id=self.order.id, clock=self.clock)

        self.assertEqual(ctx.exception.available, 3)
        self.assertEqual(ctx.exception.requested, 5)
        self.assertEqual(self._on_hand(self.towel), 3)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_UNPAID)
        self.assertFalse(self._order_ledger().exists())
        self.assertFalse(OrderStatusHistory.objects.exists())

    def test_shortfall_on_second_product_debits_nothing(self):
        add_line(order_id=self.order.id, product_id=self.soap.id, quantity=1, clock=self.clock)
        add_line(order_id=self.order.id, product_id=self.towel.id, quantity=6, clock=self.clock)

        with self.assertRaises(OutOfStockError):
            pay_order(order_id=self.order.id, clock=self.clock)

        self.assertEqual(self._on_hand(self.soap), 10)
        self.assertEqual(self._on_hand(self.towel), 5)

    def test_same_product_on_two_lines_is_summed(self):
        add_line(order_id=self.order.id, product_id=self.towel.id, quantity=3, clock=self.clock)
        add_line(order_id=self.order.id, product_id=self.towel.id, quantity=3, clock=self.clock)

        with self.assertRaises(OutOfStockError) as ctx:
            pay_order(order_id=self.order.id, clock=self.clock)

        self.assertEqual(ctx.exception.requested, 6)
        self.assertEqual(self._on_hand(self.towel), 5)

    def test_empty_order_cannot_be_paid(self):
        with self.assertRaises(EmptyOrderError):
            pay_order(order_id=self.order.id, clock=self.clock)

    def test_missing_inventory_row_rejects_payment(self):
        add_line(order_id=self.order.id, product_id=self.soap.id, quantity=1, clock=self.clock)
        InventoryItem.objects.filter(product=self.soap).delete()

        with self.assertRaises(InventoryMissingError):
            pay_order(order_id=self.order.id, clock=self.clock)

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_UNPAID)

    def test_paid_order_cannot_be_paid_or_voided_again(self):
        add_line(order_id=self.order.id, product_id=self.soap.id, quantity=1, clock=self.clock)
        pay_order(order_id=self.order.id, clock=self.clock)

        with self.assertRaises(InvalidOrderTransitionError):
            pay_order(order_id=self.order.id, clock=self.clock)
        with self.assertRaises(InvalidOrderTransitionError):
            void_order(order_id=self.order.id, clock=self.clock)

        self.assertEqual(self._order_ledger().count(), 1)
        self.assertEqual(self._on_hand(self.soap), 9)

    def test_pay_reprices_against_current_discounts(self):
        Discount.objects.create(
            name="Flash",
            type=Discount.Type.PERCENT,
            value=Decimal("20"),
            scope=Discount.Scope.GLOBAL,
            ends_at=self.clock.now() + timedelta(minutes=5),
        )
        add_line(order_id=self.order.id, product_id=self.towel.id, quantity=1, clock=self.clock)
        self.order.refresh_from_db()
        self.assertEqual(self.order.discount_total, Decimal("1.60"))

        self.clock.advance(minutes=10)
        order = pay_order(order_id=self.order.id, clock=self.clock)

        self.assertEqual(order.discount_total, Decimal("0.00"))
        self.assertEqual(order.grand_total, Decimal("8.00"))

    def test_two_orders_competing_for_last_unit(self):
        candle = create_product(name="Candle", unit_price="3.00")
        adjust_stock(product_id=candle.id, quantity_delta=1, clock=self.clock)

        first = create_order(clock=self.clock)
        second = create_order(clock=self.clock)
        add_line(order_id=first.id, product_id=candle.id, quantity=1, clock=self.clock)
        add_line(order_id=second.id, product_id=candle.id, quantity=1, clock=self.clock)

        pay_order(order_id=first.id, clock=self.clock)
        with self.assertRaises(InsufficientStockError):
            pay_order(order_id=second.id, clock=self.clock)

        self.assertEqual(self._on_hand(candle), 0)
        self.assertEqual(self._order_ledger().filter(product=candle).count(), 1)
        second.refresh_from_db()
        self.assertEqual(second.status, Order.STATUS_UNPAID)

    def test_pay_service_leaves_auditing_to_callers(self):
        add_line(order_id=self.order.id, product_id=self.soap.id, quantity=1, clock=self.clock)

        with self.captureOnCommitCallbacks(execute=True):
            pay_order(order_id=self.order.id, changed_by=self.cashier, clock=self.clock)

        self.assertFalse(AuditLog.objects.filter(entity_name="Order").exists())


class TerminalOrderTests(FulfillmentTestBase):
    def setUp(self):
        super().setUp()
        self.line = add_line(order_id=self.order.id, product_id=self.soap.id, quantity=2, clock=self.clock)
        pay_order(order_id=self.order.id, clock=self.clock)
        self.order.refresh_from_db()

    def test_paid_order_rejects_line_and_coupon_changes(self):
        with self.assertRaises(OrderNotMutableError):
            add_line(order_id=self.order.id, product_id=self.soap.id, quantity=1)
        with self.assertRaises(OrderNotMutableError):
            remove_line(order_id=self.order.id, line_id=self.line.id)
        with self.assertRaises(OrderNotMutableError):
            apply_coupon(order_id=self.order.id, code="ANY")

    def test_model_guard_blocks_pricing_edits(self):
        self.order.grand_total = Decimal("999.00")
        with self.assertRaises(ValidationError):
            self.order.save()

        self.order.refresh_from_db()
        self.assertEqual(self.order.grand_total, Decimal("5.00"))

    def test_model_guard_blocks_status_edits(self):
        self.order.status = Order.STATUS_UNPAID
        with self.assertRaises(ValidationError):
            self.order.save()

    def test_history_is_append_only(self):
        history = OrderStatusHistory.objects.get(order=self.order)
        history.reason = "edited"
        with self.assertRaises(ValidationError):
            history.save()
        with self.assertRaises(ValidationError):
            history.delete()


class VoidOrderTests(FulfillmentTestBase):
    def test_void_unpaid_order_leaves_stock_untouched(self):
        add_line(order_id=self.order.id, product_id=self.soap.id, quantity=4, clock=self.clock)
        ledger_before = StockLedgerEntry.objects.count()

        order = void_order(order_id=self.order.id, changed_by=self.cashier, reason="Customer left", clock=self.clock)

        self.assertEqual(order.status, Order.STATUS_VOIDED)
        self.assertEqual(self._on_hand(self.soap), 10)
        self.assertEqual(StockLedgerEntry.objects.count(), ledger_before)

        history = OrderStatusHistory.objects.get(order=order)
        self.assertEqual(history.to_status, Order.STATUS_VOIDED)
        self.assertEqual(history.reason, "Customer left")

    def test_voided_order_cannot_be_paid(self):
        add_line(order_id=self.order.id, product_id=self.soap.id, quantity=1, clock=self.clock)
        void_order(order_id=self.order.id, clock=self.clock)

        with self.assertRaises(InvalidOrderTransitionError):
            pay_order(order_id=self.order.id, clock=self.clock)

    def test_unknown_actor_recorded_as_null(self):
        void_order(order_id=self.order.id, clock=self.clock)

        self.assertIsNone(OrderStatusHistory.objects.get(order=self.order).changed_by)
