# discounts/urls.py

from rest_framework.routers import SimpleRouter

from discounts.views import CouponViewSet, DiscountViewSet

app_name = "discounts"

discount_router = SimpleRouter()
discount_router.register(r"", DiscountViewSet, basename="discount")

coupon_router = SimpleRouter()
coupon_router.register(r"", CouponViewSet, basename="coupon")

urlpatterns = discount_router.urls
coupon_urlpatterns = coupon_router.urls
