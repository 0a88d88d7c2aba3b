# orders/views/order.py

"""
ORDER API

- POST   /api/orders/                              create (optional customer_id)
- GET    /api/orders/                              list (status, customer, q, date_from, date_to)
- GET    /api/orders/{id}/                         detail with lines
- POST   /api/orders/{id}/items/                   add line
- PATCH  /api/orders/{id}/items/{line_id}/         change quantity
- DELETE /api/orders/{id}/items/{line_id}/         remove line
- POST   /api/orders/{id}/coupon/                  apply coupon
- DELETE /api/orders/{id}/coupon/                  remove coupon
- POST   /api/orders/{id}/pay/
- POST   /api/orders/{id}/void/
- GET    /api/orders/{id}/history/

All writes go through orders.services; responses return the re-read order.
Create, pay and void are audited here, after the service call commits.
"""

from django.db.models import Count, Q
from django_filters import rest_framework as filters
from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from audit.services import record_audit
from orders.models import Order
from orders.serializers import (
    AddLineSerializer,
    ApplyCouponSerializer,
    CreateOrderSerializer,
    OrderDetailSerializer,
    OrderListSerializer,
    OrderStatusHistorySerializer,
    UpdateLineSerializer,
    VoidOrderSerializer,
)
from orders.services import (
    add_line,
    apply_coupon,
    create_order,
    pay_order,
    remove_coupon,
    remove_line,
    update_line,
    void_order,
)
from permissions.roles import (
    CAP_ORDERS_SELL,
    CAP_ORDERS_VIEW,
    CAP_ORDERS_VOID,
    HasCapability,
)


class OrderFilter(filters.FilterSet):
    status = filters.ChoiceFilter(choices=Order.STATUS_CHOICES)
    customer = filters.NumberFilter(field_name="customer_id")
    q = filters.CharFilter(method="filter_q")
    date_from = filters.DateFilter(field_name="created_at__date", lookup_expr="gte")
    date_to = filters.DateFilter(field_name="created_at__date", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["status", "customer", "q", "date_from", "date_to"]

    def filter_q(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        cond = Q(order_number__icontains=value)
        if value.isdigit():
            cond |= Q(pk=int(value))
        return queryset.filter(cond)


class OrderViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    filterset_class = OrderFilter
    lookup_value_regex = r"\d+"

    _VIEW_ACTIONS = {"list", "retrieve", "history"}
    _VOID_ACTIONS = {"void"}

    def get_permissions(self):
        if self.action in self._VIEW_ACTIONS:
            self.required_capability = CAP_ORDERS_VIEW
        elif self.action in self._VOID_ACTIONS:
            self.required_capability = CAP_ORDERS_VOID
        else:
            self.required_capability = CAP_ORDERS_SELL
        return [IsAuthenticated(), HasCapability()]

    def get_serializer_class(self):
        if self.action == "list":
            return OrderListSerializer
        return OrderDetailSerializer

    def get_queryset(self):
        if self.action == "list":
            return Order.objects.annotate(line_count=Count("lines")).order_by("-created_at", "-id")
        return Order.objects.select_related("coupon_redemption__coupon").prefetch_related("lines")

    def _audit(self, order, action_name, **changes):
        record_audit(
            entity_name="Order",
            entity_id=order.id,
            action=action_name,
            user=self.request.user,
            changes={"order_number": order.order_number, **changes},
        )

    def _detail(self, order_id, *, http_status=status.HTTP_200_OK):
        order = (
            Order.objects.select_related("coupon_redemption__coupon")
            .prefetch_related("lines")
            .get(pk=order_id)
        )
        return Response(OrderDetailSerializer(order).data, status=http_status)

    @extend_schema(request=CreateOrderSerializer, responses={201: OrderDetailSerializer})
    def create(self, request):
        ser = CreateOrderSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        customer_id = ser.validated_data.get("customer_id")
        order = create_order(customer_id=customer_id)
        self._audit(order, "Create", customer_id=customer_id)
        return self._detail(order.id, http_status=status.HTTP_201_CREATED)

    @extend_schema(request=AddLineSerializer, responses={201: OrderDetailSerializer})
    @action(detail=True, methods=["post"], url_path="items")
    def items(self, request, pk=None):
        ser = AddLineSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        add_line(
            order_id=pk,
            product_id=ser.validated_data["product_id"],
            quantity=ser.validated_data["quantity"],
        )
        return self._detail(pk, http_status=status.HTTP_201_CREATED)

    @extend_schema(request=UpdateLineSerializer, responses={200: OrderDetailSerializer})
    @action(detail=True, methods=["patch", "put", "delete"], url_path=r"items/(?P<line_id>\d+)")
    def item(self, request, pk=None, line_id=None):
        if request.method == "DELETE":
            remove_line(order_id=pk, line_id=int(line_id))
            return self._detail(pk)

        ser = UpdateLineSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        update_line(order_id=pk, line_id=int(line_id), quantity=ser.validated_data["quantity"])
        return self._detail(pk)

    @extend_schema(request=ApplyCouponSerializer, responses={200: OrderDetailSerializer})
    @action(detail=True, methods=["post", "delete"], url_path="coupon")
    def coupon(self, request, pk=None):
        if request.method == "DELETE":
            remove_coupon(order_id=pk)
            return self._detail(pk)

        ser = ApplyCouponSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        apply_coupon(
            order_id=pk,
            code=ser.validated_data["code"],
            customer_id=ser.validated_data.get("customer_id"),
        )
        return self._detail(pk)

    @extend_schema(request=None, responses={200: OrderDetailSerializer})
    @action(detail=True, methods=["post"], url_path="pay")
    def pay(self, request, pk=None):
        order = pay_order(order_id=pk, changed_by=request.user)
        self._audit(
            order,
            "Pay",
            grand_total=str(order.grand_total),
            lines=order.lines.count(),
        )
        return self._detail(pk)

    @extend_schema(request=VoidOrderSerializer, responses={200: OrderDetailSerializer})
    @action(detail=True, methods=["post"], url_path="void")
    def void(self, request, pk=None):
        ser = VoidOrderSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        order = void_order(order_id=pk, changed_by=request.user, reason=ser.validated_data.get("reason", ""))
        self._audit(order, "Void", reason=(ser.validated_data.get("reason") or "").strip()[:200])
        return self._detail(pk)

    @extend_schema(responses={200: OrderStatusHistorySerializer(many=True)})
    @action(detail=True, methods=["get"], url_path="history")
    def history(self, request, pk=None):
        order = self.get_object()
        rows = order.status_history.select_related("changed_by").order_by("changed_at", "id")
        return Response(OrderStatusHistorySerializer(rows, many=True).data)
