# audit/urls.py

from rest_framework.routers import SimpleRouter

from audit.views import AuditLogViewSet

app_name = "audit"

router = SimpleRouter()
router.register(r"", AuditLogViewSet, basename="audit-log")

urlpatterns = router.urls
