# catalog/views/product.py

"""
PRODUCT VIEWSET

- Reads: any authenticated user (POS needs product search).
- Writes: catalog.edit; routed through catalog.services so the inventory
  snapshot and audit trail stay consistent.
"""

from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from catalog.models import Product
from catalog.serializers import ProductActiveSerializer, ProductSerializer, ProductWriteSerializer
from catalog.services import create_product, set_product_active, update_product
from permissions.roles import CAP_CATALOG_EDIT, HasCapability


class ProductViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    serializer_class = ProductSerializer
    lookup_value_regex = r"\d+"

    def get_permissions(self):
        if self.action in {"list", "retrieve"}:
            return [IsAuthenticated()]

        self.required_capability = CAP_CATALOG_EDIT
        return [IsAuthenticated(), HasCapability()]

    def get_queryset(self):
        qs = Product.objects.select_related("category", "inventory_item")

        params = self.request.query_params
        q = (params.get("q") or "").strip()
        if q:
            cond = Q(name__icontains=q)
            if q.isdigit():
                cond |= Q(pk=int(q))
            qs = qs.filter(cond)

        active = (params.get("active") or "").strip().lower()
        if active in {"true", "1"}:
            qs = qs.filter(is_active=True)
        elif active in {"false", "0"}:
            qs = qs.filter(is_active=False)

        category = (params.get("category") or "").strip()
        if category.isdigit():
            qs = qs.filter(category_id=int(category))

        return qs.order_by("name", "id")

    @extend_schema(
        parameters=[
            OpenApiParameter("q", str, description="Name contains, or exact id"),
            OpenApiParameter("active", bool),
            OpenApiParameter("category", int),
        ]
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(request=ProductWriteSerializer, responses={201: ProductSerializer})
    def create(self, request, *args, **kwargs):
        ser = ProductWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        product = create_product(
            name=data["name"],
            unit_price=data["unit_price"],
            category_id=data.get("category"),
            description=data.get("description", ""),
            user=request.user,
        )
        product = self.get_queryset().get(pk=product.pk)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ProductWriteSerializer, responses={200: ProductSerializer})
    def update(self, request, *args, **kwargs):
        ser = ProductWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        product = update_product(
            product_id=kwargs["pk"],
            name=data["name"],
            unit_price=data["unit_price"],
            category_id=data.get("category"),
            description=data.get("description", ""),
            user=request.user,
        )
        product = self.get_queryset().get(pk=product.pk)
        return Response(ProductSerializer(product).data)

    @extend_schema(request=ProductActiveSerializer, responses={200: ProductSerializer})
    @action(detail=True, methods=["put"], url_path="active")
    def active(self, request, pk=None):
        ser = ProductActiveSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        product = set_product_active(
            product_id=pk,
            is_active=ser.validated_data["is_active"],
            user=request.user,
        )
        product = self.get_queryset().get(pk=product.pk)
        return Response(ProductSerializer(product).data)
