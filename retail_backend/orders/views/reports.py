# orders/views/reports.py

"""
PATH: orders/views/reports.py

SALES REPORTS (PAID ORDERS)

- GET /api/reports/sales-by-day/?date_from=YYYY-MM-DD&date_to=YYYY-MM-DD
- GET /api/reports/sales-by-product/?date_from=&date_to=&category=<id>
- GET /api/reports/discount-impact/?date_from=&date_to=

Defaults to the last 30 days (UTC).
"""

from __future__ import annotations

from datetime import datetime

from drf_spectacular.utils import OpenApiParameter, OpenApiTypes, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.api_errors import error_response
from orders.services import reports
from permissions.roles import CAP_REPORTS_VIEW, HasCapability

DATE_PARAMS = [
    OpenApiParameter(name="date_from", type=OpenApiTypes.DATE, required=False, description="YYYY-MM-DD (inclusive)"),
    OpenApiParameter(name="date_to", type=OpenApiTypes.DATE, required=False, description="YYYY-MM-DD (inclusive)"),
]


class InvalidReportParam(Exception):
    """Report query parameter could not be parsed."""


def _parse_report_date(date_str: str | None):
    """
    Accepts YYYY-MM-DD. Missing -> None (service default).
    """
    if not date_str:
        return None
    try:
        return datetime.strptime(date_str.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise InvalidReportParam(f"Invalid date '{date_str}'. Use YYYY-MM-DD.")


def _money(x) -> str:
    return f"{x:.2f}"


class _ReportView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_REPORTS_VIEW

    def _range(self, request):
        return (
            _parse_report_date(request.query_params.get("date_from")),
            _parse_report_date(request.query_params.get("date_to")),
        )

    def _bad_request(self, exc):
        return error_response(code="VALIDATION_ERROR", message=str(exc), http_status=status.HTTP_400_BAD_REQUEST)


class SalesByDayReportView(_ReportView):
    @extend_schema(parameters=DATE_PARAMS, description="Paid order totals per UTC day.")
    def get(self, request):
        try:
            date_from, date_to = self._range(request)
        except InvalidReportParam as exc:
            return self._bad_request(exc)

        rows = reports.sales_by_day(date_from=date_from, date_to=date_to)
        return Response(
            [
                {
                    "date": row["date"].isoformat(),
                    "orders_count": row["orders_count"],
                    "subtotal": _money(row["subtotal"]),
                    "discount_total": _money(row["discount_total"]),
                    "tax_total": _money(row["tax_total"]),
                    "grand_total": _money(row["grand_total"]),
                }
                for row in rows
            ]
        )


class SalesByProductReportView(_ReportView):
    @extend_schema(
        parameters=DATE_PARAMS + [OpenApiParameter(name="category", type=OpenApiTypes.INT, required=False)],
        description="Quantity sold and revenue per product, highest revenue first.",
    )
    def get(self, request):
        try:
            date_from, date_to = self._range(request)
        except InvalidReportParam as exc:
            return self._bad_request(exc)

        category = (request.query_params.get("category") or "").strip()
        category_id = int(category) if category.isdigit() else None

        rows = reports.sales_by_product(date_from=date_from, date_to=date_to, category_id=category_id)
        return Response(
            [
                {
                    "product_id": row["product_id"],
                    "product_name": row["product_name"],
                    "quantity_sold": row["quantity_sold"],
                    "revenue": _money(row["revenue"]),
                }
                for row in rows
            ]
        )


class DiscountImpactReportView(_ReportView):
    @extend_schema(parameters=DATE_PARAMS, description="Total discount granted per UTC day.")
    def get(self, request):
        try:
            date_from, date_to = self._range(request)
        except InvalidReportParam as exc:
            return self._bad_request(exc)

        rows = reports.discount_impact(date_from=date_from, date_to=date_to)
        return Response(
            [{"date": row["date"].isoformat(), "discount_total": _money(row["discount_total"])} for row in rows]
        )
