# orders/urls.py

from django.urls import path
from rest_framework.routers import SimpleRouter

from orders.views import (
    DiscountImpactReportView,
    OrderViewSet,
    SalesByDayReportView,
    SalesByProductReportView,
)

app_name = "orders"

router = SimpleRouter()
router.register(r"", OrderViewSet, basename="order")

urlpatterns = router.urls

report_urlpatterns = [
    path("sales-by-day/", SalesByDayReportView.as_view(), name="sales-by-day"),
    path("sales-by-product/", SalesByProductReportView.as_view(), name="sales-by-product"),
    path("discount-impact/", DiscountImpactReportView.as_view(), name="discount-impact"),
]
