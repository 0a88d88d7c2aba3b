# customers/urls.py

from rest_framework.routers import SimpleRouter

from customers.views import CustomerViewSet

app_name = "customers"

router = SimpleRouter()
router.register(r"", CustomerViewSet, basename="customer")

urlpatterns = router.urls
