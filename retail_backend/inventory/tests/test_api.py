# inventory/tests/test_api.py

from datetime import datetime, timezone as dt_timezone

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from catalog.services import create_product
from core.clock import FixedClock
from inventory.models import StockLedgerEntry
from inventory.services import adjust_stock

User = get_user_model()


class InventoryApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.manager = User.objects.create_user(
            email="manager@example.com",
            password="pass12345",
            role=User.ROLE_MANAGER,
        )
        self.cashier = User.objects.create_user(
            email="cashier@example.com",
            password="pass12345",
            role=User.ROLE_CASHIER,
        )
        self.product = create_product(name="Eggs", unit_price="3.00")

    def test_manager_adjusts_stock(self):
        self.client.force_authenticate(user=self.manager)
        res = self.client.post(
            "/api/inventory/adjust/",
            {"product_id": self.product.id, "quantity_delta": 12, "note": "Count"},
            format="json",
        )

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["quantity_on_hand"], 12)
        self.assertEqual(res.data["adjustment"]["quantity_delta"], 12)

    def test_cashier_cannot_adjust(self):
        self.client.force_authenticate(user=self.cashier)
        res = self.client.post(
            "/api/inventory/adjust/",
            {"product_id": self.product.id, "quantity_delta": 12},
            format="json",
        )

        self.assertEqual(res.status_code, 403)
        self.assertFalse(StockLedgerEntry.objects.exists())

    def test_zero_delta_is_400(self):
        self.client.force_authenticate(user=self.manager)
        res = self.client.post(
            "/api/inventory/adjust/",
            {"product_id": self.product.id, "quantity_delta": 0},
            format="json",
        )

        self.assertEqual(res.status_code, 400)

    def test_unknown_product_is_404(self):
        self.client.force_authenticate(user=self.manager)
        res = self.client.post(
            "/api/inventory/adjust/",
            {"product_id": 99999, "quantity_delta": 1},
            format="json",
        )

        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.data["error"]["code"], "NOT_FOUND")

    def test_cashier_reads_item_by_product_id(self):
        adjust_stock(product_id=self.product.id, quantity_delta=5)

        self.client.force_authenticate(user=self.cashier)
        res = self.client.get(f"/api/inventory/items/{self.product.id}/")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["quantity_on_hand"], 5)
        self.assertEqual(res.data["product_name"], "Eggs")

    def test_ledger_filters_by_ref_type(self):
        adjust_stock(product_id=self.product.id, quantity_delta=5)

        self.client.force_authenticate(user=self.cashier)
        res = self.client.get("/api/inventory/ledger/", {"ref_type": "ADJUSTMENT", "product": self.product.id})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["count"], 1)

        res = self.client.get("/api/inventory/ledger/", {"ref_type": "ORDER"})
        self.assertEqual(res.data["count"], 0)

    def test_ledger_date_range_includes_the_end_day(self):
        adjust_stock(
            product_id=self.product.id,
            quantity_delta=4,
            clock=FixedClock(datetime(2024, 6, 1, 12, 0, tzinfo=dt_timezone.utc)),
        )
        adjust_stock(
            product_id=self.product.id,
            quantity_delta=2,
            clock=FixedClock(datetime(2024, 6, 2, 8, 0, tzinfo=dt_timezone.utc)),
        )

        self.client.force_authenticate(user=self.cashier)
        res = self.client.get("/api/inventory/ledger/", {"date_from": "2024-06-01", "date_to": "2024-06-01"})

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["quantity_delta"], 4)
