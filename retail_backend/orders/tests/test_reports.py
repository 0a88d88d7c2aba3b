# orders/tests/test_reports.py

from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from catalog.models import Category
from catalog.services import create_product
from core.clock import FixedClock
from discounts.models import Discount
from inventory.services import adjust_stock
from orders.services import add_line, create_order, pay_order, void_order
from orders.services import reports

User = get_user_model()


class SalesReportTests(TestCase):
    """Only PAID orders count; days are UTC days of payment."""

    def setUp(self):
        self.category = Category.objects.create(name="Drinks")
        self.tea = create_product(name="Tea", unit_price="3.00", category_id=self.category.id)
        self.cake = create_product(name="Cake", unit_price="5.00")
        adjust_stock(product_id=self.tea.id, quantity_delta=100)
        adjust_stock(product_id=self.cake.id, quantity_delta=100)
        Discount.objects.create(
            name="Drinks promo",
            type=Discount.Type.AMOUNT,
            value=Decimal("1.00"),
            scope=Discount.Scope.GLOBAL,
        )

        self._sale(datetime(2024, 6, 1, 10, 0, tzinfo=dt_timezone.utc), [(self.tea, 2)])
        self._sale(datetime(2024, 6, 1, 23, 59, tzinfo=dt_timezone.utc), [(self.cake, 1)])
        self._sale(datetime(2024, 6, 2, 8, 0, tzinfo=dt_timezone.utc), [(self.tea, 1), (self.cake, 2)])

        # neither of these may show up
        clock = FixedClock(datetime(2024, 6, 1, 11, 0, tzinfo=dt_timezone.utc))
        unpaid = create_order(clock=clock)
        add_line(order_id=unpaid.id, product_id=self.tea.id, quantity=9, clock=clock)
        voided = create_order(clock=clock)
        add_line(order_id=voided.id, product_id=self.tea.id, quantity=9, clock=clock)
        void_order(order_id=voided.id, clock=clock)

    def _sale(self, at, items):
        clock = FixedClock(at)
        order = create_order(clock=clock)
        for product, qty in items:
            add_line(order_id=order.id, product_id=product.id, quantity=qty, clock=clock)
        return pay_order(order_id=order.id, clock=clock)

    def test_sales_by_day(self):
        rows = reports.sales_by_day(date_from=date(2024, 6, 1), date_to=date(2024, 6, 2))

        self.assertEqual([r["date"] for r in rows], [date(2024, 6, 1), date(2024, 6, 2)])
        first, second = rows
        self.assertEqual(first["orders_count"], 2)
        self.assertEqual(first["subtotal"], Decimal("11.00"))
        self.assertEqual(first["discount_total"], Decimal("2.00"))
        self.assertEqual(first["grand_total"], Decimal("9.00"))
        self.assertEqual(second["orders_count"], 1)
        self.assertEqual(second["grand_total"], Decimal("11.00"))

    def test_range_is_inclusive_and_bounded(self):
        rows = reports.sales_by_day(date_from=date(2024, 6, 2), date_to=date(2024, 6, 2))

        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["date"], date(2024, 6, 2))

    def test_sales_by_product(self):
        rows = reports.sales_by_product(date_from=date(2024, 6, 1), date_to=date(2024, 6, 2))

        by_name = {r["product_name"]: r for r in rows}
        self.assertEqual(by_name["Tea"]["quantity_sold"], 3)
        self.assertEqual(by_name["Tea"]["revenue"], Decimal("7.00"))
        self.assertEqual(by_name["Cake"]["quantity_sold"], 3)
        self.assertEqual(by_name["Cake"]["revenue"], Decimal("13.00"))
        self.assertEqual(rows[0]["product_name"], "Cake")

    def test_sales_by_product_category_filter(self):
        rows = reports.sales_by_product(
            date_from=date(2024, 6, 1),
            date_to=date(2024, 6, 2),
            category_id=self.category.id,
        )

        self.assertEqual([r["product_name"] for r in rows], ["Tea"])

    def test_discount_impact(self):
        rows = reports.discount_impact(date_from=date(2024, 6, 1), date_to=date(2024, 6, 2))

        self.assertEqual(
            [(r["date"], r["discount_total"]) for r in rows],
            [(date(2024, 6, 1), Decimal("2.00")), (date(2024, 6, 2), Decimal("2.00"))],
        )


class ReportApiTests(TestCase):
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

    def test_manager_gets_empty_report(self):
        self.client.force_authenticate(user=self.manager)
        res = self.client.get("/api/reports/sales-by-day/", {"date_from": "2024-06-01", "date_to": "2024-06-02"})

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data, [])

    def test_bad_date_is_400(self):
        self.client.force_authenticate(user=self.manager)
        res = self.client.get("/api/reports/discount-impact/", {"date_from": "06/01/2024"})

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "VALIDATION_ERROR")

    def test_cashier_forbidden(self):
        self.client.force_authenticate(user=self.cashier)

        self.assertEqual(self.client.get("/api/reports/sales-by-product/").status_code, 403)
