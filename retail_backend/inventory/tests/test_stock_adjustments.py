# inventory/tests/test_stock_adjustments.py

from datetime import datetime, timezone as dt_timezone

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase

from audit.models import AuditLog
from catalog.services import create_product
from core.clock import FixedClock
from inventory.models import InventoryItem, StockAdjustment, StockLedgerEntry
from inventory.services import InventoryMissingError, StockAdjustmentError, adjust_stock

User = get_user_model()


class AdjustStockTests(TestCase):
    """
    GUARANTEES:
    - Every adjustment writes one StockAdjustment and one ADJUSTMENT ledger row
    - The ledger row references the adjustment by id
    - Negative deltas are applied even if stock goes below zero
    - Zero / non-integer deltas and missing snapshots are rejected
    """

    def setUp(self):
        self.user = User.objects.create_user(
            email="manager@example.com",
            password="pass12345",
            role=User.ROLE_MANAGER,
        )
        self.product = create_product(name="Milk", unit_price="1.20")
        self.clock = FixedClock(datetime(2024, 5, 1, 9, 30, tzinfo=dt_timezone.utc))

    def test_positive_adjustment_writes_ledger(self):
        result = adjust_stock(
            product_id=self.product.id,
            quantity_delta=10,
            note="Delivery",
            user=self.user,
            clock=self.clock,
        )

        item = InventoryItem.objects.get(product=self.product)
        self.assertEqual(item.quantity_on_hand, 10)
        self.assertEqual(result.item.quantity_on_hand, 10)

        entry = StockLedgerEntry.objects.get(product=self.product)
        self.assertEqual(entry.ref_type, StockLedgerEntry.RefType.ADJUSTMENT)
        self.assertEqual(entry.ref_id, result.adjustment.id)
        self.assertEqual(entry.quantity_delta, 10)
        self.assertEqual(entry.reason, "Delivery")
        self.assertEqual(entry.occurred_at, self.clock.now())
        self.assertEqual(result.adjustment.created_by, self.user)

    def test_negative_adjustment_may_go_below_zero(self):
        adjust_stock(product_id=self.product.id, quantity_delta=2)

        with self.assertLogs("inventory", level="WARNING"):
            adjust_stock(product_id=self.product.id, quantity_delta=-5, note="Damaged")

        item = InventoryItem.objects.get(product=self.product)
        self.assertEqual(item.quantity_on_hand, -3)
        self.assertEqual(StockLedgerEntry.objects.filter(product=self.product).count(), 2)

    def test_zero_delta_rejected(self):
        with self.assertRaises(StockAdjustmentError):
            adjust_stock(product_id=self.product.id, quantity_delta=0)

        self.assertFalse(StockAdjustment.objects.exists())
        self.assertFalse(StockLedgerEntry.objects.exists())

    def test_non_integer_delta_rejected(self):
        with self.assertRaises(StockAdjustmentError):
            adjust_stock(product_id=self.product.id, quantity_delta="1.5")

    def test_missing_snapshot_is_not_found(self):
        InventoryItem.objects.filter(product=self.product).delete()

        with self.assertRaises(InventoryMissingError):
            adjust_stock(product_id=self.product.id, quantity_delta=1)

        self.assertFalse(StockLedgerEntry.objects.exists())

    def test_adjustment_is_audited(self):
        with self.captureOnCommitCallbacks(execute=True):
            adjust_stock(product_id=self.product.id, quantity_delta=4, user=self.user)

        log = AuditLog.objects.get(entity_name="InventoryItem", action="Adjust")
        self.assertEqual(log.user, self.user)
        self.assertIn('"after":4', log.changes_json)


class LedgerImmutabilityTests(TestCase):
    def setUp(self):
        self.product = create_product(name="Bread", unit_price="2.00")
        self.entry = adjust_stock(product_id=self.product.id, quantity_delta=3).ledger_entry

    def test_ledger_entry_cannot_be_edited(self):
        self.entry.quantity_delta = 300
        with self.assertRaises(ValidationError):
            self.entry.save()

        self.entry.refresh_from_db()
        self.assertEqual(self.entry.quantity_delta, 3)

    def test_ledger_entry_cannot_be_deleted(self):
        with self.assertRaises(ValidationError):
            self.entry.delete()

        self.assertTrue(StockLedgerEntry.objects.filter(pk=self.entry.pk).exists())

    def test_zero_delta_entry_is_invalid(self):
        with self.assertRaises(ValidationError):
            StockLedgerEntry.objects.create(
                product=self.product,
                ref_type=StockLedgerEntry.RefType.ADJUSTMENT,
                ref_id=1,
                quantity_delta=0,
            )

    def test_adjustment_cannot_be_edited(self):
        adjustment = StockAdjustment.objects.get()
        adjustment.note = "changed"
        with self.assertRaises(ValidationError):
            adjustment.save()
