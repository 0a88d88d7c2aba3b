# inventory/views/inventory.py

"""
INVENTORY API

- GET  /api/inventory/items/                 snapshot list (q, active, low=<n>)
- GET  /api/inventory/items/{product_id}/    one snapshot, looked up by product
- POST /api/inventory/adjust/                manual adjustment
- GET  /api/inventory/ledger/                stock movements
"""

from django_filters import rest_framework as filters
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from inventory.models import InventoryItem, StockLedgerEntry
from inventory.serializers import (
    InventoryItemSerializer,
    StockAdjustmentCreateSerializer,
    StockAdjustmentSerializer,
    StockLedgerEntrySerializer,
)
from inventory.services import adjust_stock
from permissions.roles import CAP_INVENTORY_ADJUST, CAP_INVENTORY_VIEW, HasCapability


class InventoryItemViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = InventoryItemSerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_INVENTORY_VIEW
    lookup_field = "product_id"
    lookup_value_regex = r"\d+"

    def get_queryset(self):
        qs = InventoryItem.objects.select_related("product")
        params = self.request.query_params

        q = (params.get("q") or "").strip()
        if q:
            qs = qs.filter(product__name__icontains=q)

        active = (params.get("active") or "").strip().lower()
        if active in {"true", "1"}:
            qs = qs.filter(product__is_active=True)
        elif active in {"false", "0"}:
            qs = qs.filter(product__is_active=False)

        low = (params.get("low") or "").strip()
        if low.lstrip("-").isdigit():
            qs = qs.filter(quantity_on_hand__lte=int(low))

        return qs.order_by("product__name", "product_id")

    @extend_schema(
        parameters=[
            OpenApiParameter("q", str, description="Product name contains"),
            OpenApiParameter("active", bool),
            OpenApiParameter("low", int, description="Only items with quantity_on_hand <= low"),
        ]
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)


class StockAdjustView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_INVENTORY_ADJUST

    @extend_schema(request=StockAdjustmentCreateSerializer, responses={201: StockAdjustmentSerializer})
    def post(self, request):
        ser = StockAdjustmentCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        result = adjust_stock(
            product_id=data["product_id"],
            quantity_delta=data["quantity_delta"],
            note=data.get("note"),
            user=request.user,
        )

        return Response(
            {
                "adjustment": StockAdjustmentSerializer(result.adjustment).data,
                "quantity_on_hand": result.item.quantity_on_hand,
            },
            status=status.HTTP_201_CREATED,
        )


class StockLedgerFilter(filters.FilterSet):
    product = filters.NumberFilter(field_name="product_id")
    ref_type = filters.ChoiceFilter(choices=StockLedgerEntry.RefType.choices)
    ref_id = filters.NumberFilter(field_name="ref_id")
    date_from = filters.DateFilter(field_name="occurred_at__date", lookup_expr="gte")
    date_to = filters.DateFilter(field_name="occurred_at__date", lookup_expr="lte")

    class Meta:
        model = StockLedgerEntry
        fields = ["product", "ref_type", "ref_id", "date_from", "date_to"]


class StockLedgerViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = StockLedgerEntry.objects.select_related("product").order_by("-occurred_at", "-id")
    serializer_class = StockLedgerEntrySerializer
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_INVENTORY_VIEW
    filterset_class = StockLedgerFilter
