from .order import OrderViewSet
from .reports import DiscountImpactReportView, SalesByDayReportView, SalesByProductReportView

__all__ = [
    "OrderViewSet",
    "SalesByDayReportView",
    "SalesByProductReportView",
    "DiscountImpactReportView",
]
