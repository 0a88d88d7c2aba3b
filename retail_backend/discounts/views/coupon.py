# discounts/views/coupon.py

from django.db.models import Count
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api_errors import error_response
from discounts.models import Coupon
from discounts.serializers import ActiveFlagSerializer, CouponSerializer, CouponWriteSerializer
from discounts.services import coupon_admin
from permissions.roles import CAP_DISCOUNTS_MANAGE, HasCapability


class CouponViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Coupon admin API.
    List rows carry redemption_count.
    """

    serializer_class = CouponSerializer
    lookup_value_regex = r"\d+"
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_DISCOUNTS_MANAGE

    def get_queryset(self):
        qs = Coupon.objects.select_related("discount").annotate(redemption_count=Count("redemptions"))

        if self.action == "list":
            params = self.request.query_params
            discount_id = (params.get("discount") or "").strip()
            if discount_id.isdigit():
                qs = qs.filter(discount_id=int(discount_id))
            if (params.get("include_inactive") or "").strip().lower() not in {"1", "true", "yes"}:
                qs = qs.filter(is_active=True)
            q = (params.get("q") or "").strip()
            if q:
                qs = qs.filter(code__icontains=q)

        return qs.order_by("code")

    def _detail(self, coupon_id, *, http_status=status.HTTP_200_OK):
        coupon = self.get_queryset().get(pk=coupon_id)
        return Response(CouponSerializer(coupon).data, status=http_status)

    @extend_schema(
        parameters=[
            OpenApiParameter("discount", int),
            OpenApiParameter("include_inactive", bool),
            OpenApiParameter("q", str, description="Code contains"),
        ]
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(request=CouponWriteSerializer, responses={201: CouponSerializer})
    def create(self, request):
        ser = CouponWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        if not data.get("discount_id"):
            return error_response(
                code="VALIDATION_ERROR",
                message="discount_id is required",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        coupon = coupon_admin.create_coupon(
            discount_id=data["discount_id"],
            code=data["code"],
            usage_limit_total=data.get("usage_limit_total"),
            usage_limit_per_customer=data.get("usage_limit_per_customer"),
            is_active=data.get("is_active", True),
            user=request.user,
        )
        return self._detail(coupon.id, http_status=status.HTTP_201_CREATED)

    @extend_schema(request=CouponWriteSerializer, responses={200: CouponSerializer})
    def update(self, request, pk=None):
        ser = CouponWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        coupon = coupon_admin.update_coupon(
            coupon_id=pk,
            code=data["code"],
            usage_limit_total=data.get("usage_limit_total"),
            usage_limit_per_customer=data.get("usage_limit_per_customer"),
            is_active=data.get("is_active", True),
            user=request.user,
        )
        return self._detail(coupon.id)

    @extend_schema(request=ActiveFlagSerializer, responses={200: CouponSerializer})
    @action(detail=True, methods=["put"], url_path="active")
    def active(self, request, pk=None):
        ser = ActiveFlagSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        coupon = coupon_admin.set_coupon_active(
            coupon_id=pk, is_active=ser.validated_data["value"], user=request.user
        )
        return self._detail(coupon.id)
