# customers/views.py

from django.db.models import Q
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from audit.services import record_audit
from customers.models import Customer
from customers.serializers import CustomerSerializer
from permissions.roles import CAP_ORDERS_SELL, CAP_ORDERS_VIEW, HasCapability


class CustomerViewSet(viewsets.ModelViewSet):
    """
    Customers are looked up and created at the till.

    - Reads: orders.view
    - Writes: orders.sell
    - DELETE deactivates instead of removing the row (orders keep their FK).
    """

    serializer_class = CustomerSerializer

    def get_permissions(self):
        if self.action in {"list", "retrieve"}:
            self.required_capability = CAP_ORDERS_VIEW
        else:
            self.required_capability = CAP_ORDERS_SELL
        return [IsAuthenticated(), HasCapability()]

    def get_queryset(self):
        qs = Customer.objects.all()
        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(
                Q(first_name__icontains=q) | Q(last_name__icontains=q) | Q(email__icontains=q)
            )
        return qs

    def perform_create(self, serializer):
        customer = serializer.save()
        record_audit(
            entity_name="Customer",
            entity_id=customer.id,
            action="Create",
            user=self.request.user,
            changes=CustomerSerializer(customer).data,
        )

    def perform_update(self, serializer):
        customer = serializer.save()
        record_audit(
            entity_name="Customer",
            entity_id=customer.id,
            action="Update",
            user=self.request.user,
            changes=serializer.validated_data,
        )

    def perform_destroy(self, instance):
        instance.is_active = False
        instance.save(update_fields=["is_active", "updated_at"])
        record_audit(
            entity_name="Customer",
            entity_id=instance.id,
            action="Deactivate",
            user=self.request.user,
        )
