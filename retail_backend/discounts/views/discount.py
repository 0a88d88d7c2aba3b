# discounts/views/discount.py

"""
DISCOUNT ADMIN API

- GET    /api/discounts/                         ?include_inactive=&q=
- POST   /api/discounts/
- GET    /api/discounts/{id}/
- PUT    /api/discounts/{id}/
- PUT    /api/discounts/{id}/active/             {"value": bool}
- POST   /api/discounts/{id}/categories/         {"category_id": n}
- DELETE /api/discounts/{id}/categories/{cid}/
- POST   /api/discounts/{id}/products/           {"product_id": n}
- DELETE /api/discounts/{id}/products/{pid}/
"""

from django.db.models import Count
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from discounts.models import Discount
from discounts.serializers import (
    ActiveFlagSerializer,
    DiscountDetailSerializer,
    DiscountLinkCategorySerializer,
    DiscountLinkProductSerializer,
    DiscountListSerializer,
    DiscountWriteSerializer,
)
from discounts.services import discount_admin
from permissions.roles import CAP_DISCOUNTS_MANAGE, HasCapability


def _truthy(value) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes"}


class DiscountViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    lookup_value_regex = r"\d+"
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_DISCOUNTS_MANAGE

    def get_serializer_class(self):
        if self.action == "list":
            return DiscountListSerializer
        return DiscountDetailSerializer

    def get_queryset(self):
        if self.action == "list":
            qs = Discount.objects.annotate(
                category_count=Count("category_links", distinct=True),
                product_count=Count("product_links", distinct=True),
                coupon_count=Count("coupons", distinct=True),
            )
            params = self.request.query_params
            if not _truthy(params.get("include_inactive")):
                qs = qs.filter(is_active=True)
            q = (params.get("q") or "").strip()
            if q:
                qs = qs.filter(name__icontains=q)
            return qs.order_by("priority", "name", "id")

        return Discount.objects.prefetch_related("category_links", "product_links")

    def _detail(self, discount_id, *, http_status=status.HTTP_200_OK):
        discount = Discount.objects.prefetch_related("category_links", "product_links").get(pk=discount_id)
        return Response(DiscountDetailSerializer(discount).data, status=http_status)

    @extend_schema(
        parameters=[
            OpenApiParameter("include_inactive", bool),
            OpenApiParameter("q", str, description="Name contains"),
        ]
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(request=DiscountWriteSerializer, responses={201: DiscountDetailSerializer})
    def create(self, request):
        ser = DiscountWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        discount = discount_admin.create_discount(data=ser.validated_data, user=request.user)
        return self._detail(discount.id, http_status=status.HTTP_201_CREATED)

    @extend_schema(request=DiscountWriteSerializer, responses={200: DiscountDetailSerializer})
    def update(self, request, pk=None):
        ser = DiscountWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        discount = discount_admin.update_discount(discount_id=pk, data=ser.validated_data, user=request.user)
        return self._detail(discount.id)

    @extend_schema(request=ActiveFlagSerializer, responses={200: DiscountDetailSerializer})
    @action(detail=True, methods=["put"], url_path="active")
    def active(self, request, pk=None):
        ser = ActiveFlagSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        discount = discount_admin.set_discount_active(
            discount_id=pk, is_active=ser.validated_data["value"], user=request.user
        )
        return self._detail(discount.id)

    @extend_schema(request=DiscountLinkCategorySerializer, responses={200: DiscountDetailSerializer})
    @action(detail=True, methods=["post"], url_path="categories")
    def link_category(self, request, pk=None):
        ser = DiscountLinkCategorySerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        discount_admin.link_category(
            discount_id=pk, category_id=ser.validated_data["category_id"], user=request.user
        )
        return self._detail(pk)

    @extend_schema(request=None, responses={204: None})
    @action(detail=True, methods=["delete"], url_path=r"categories/(?P<category_id>\d+)")
    def unlink_category(self, request, pk=None, category_id=None):
        discount_admin.unlink_category(discount_id=pk, category_id=int(category_id), user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=DiscountLinkProductSerializer, responses={200: DiscountDetailSerializer})
    @action(detail=True, methods=["post"], url_path="products")
    def link_product(self, request, pk=None):
        ser = DiscountLinkProductSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        discount_admin.link_product(
            discount_id=pk, product_id=ser.validated_data["product_id"], user=request.user
        )
        return self._detail(pk)

    @extend_schema(request=None, responses={204: None})
    @action(detail=True, methods=["delete"], url_path=r"products/(?P<product_id>\d+)")
    def unlink_product(self, request, pk=None, product_id=None):
        discount_admin.unlink_product(discount_id=pk, product_id=int(product_id), user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)
