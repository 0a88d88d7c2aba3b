# discounts/services/discount_admin.py

"""
DISCOUNT ADMINISTRATION

Back-office writes for discounts and their scope links.
Validation mirrors the model: non-blank name, known type/scope, value >= 0.
Linking is idempotent; unlinking a missing link is NotFound.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional

from django.db import transaction

from audit.services import record_audit
from catalog.models import Category, Product
from core.exceptions import NotFoundError, ValidationFailedError
from discounts.models import Discount, DiscountCategory, DiscountProduct

DISCOUNT_FIELDS = (
    "name",
    "type",
    "value",
    "scope",
    "is_stackable",
    "priority",
    "starts_at",
    "ends_at",
    "min_basket_subtotal",
    "max_total_discount",
)


class DiscountValidationError(ValidationFailedError):
    """Invalid discount fields."""


def _choice(value, choices, *, field_name: str) -> str:
    raw = (value or "").strip()
    for choice in choices:
        if raw.lower() == choice.lower():
            return choice
    raise DiscountValidationError(f"Invalid {field_name}: {value!r}")


def _decimal_or_none(value, *, field_name: str) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise DiscountValidationError(f"{field_name} must be a valid decimal")


def _clean(data: dict) -> dict:
    name = (data.get("name") or "").strip()
    if not name:
        raise DiscountValidationError("Discount name is required.")

    value = _decimal_or_none(data.get("value"), field_name="value")
    if value is None or value < 0:
        raise DiscountValidationError("value must be non-negative.")

    starts_at = data.get("starts_at")
    ends_at = data.get("ends_at")
    if starts_at and ends_at and starts_at > ends_at:
        raise DiscountValidationError("starts_at must not be after ends_at.")

    return {
        "name": name,
        "type": _choice(data.get("type"), Discount.Type.values, field_name="type"),
        "value": value,
        "scope": _choice(data.get("scope"), Discount.Scope.values, field_name="scope"),
        "is_stackable": bool(data.get("is_stackable", False)),
        "priority": int(data.get("priority") or 0),
        "starts_at": starts_at,
        "ends_at": ends_at,
        "min_basket_subtotal": _decimal_or_none(data.get("min_basket_subtotal"), field_name="min_basket_subtotal"),
        "max_total_discount": _decimal_or_none(data.get("max_total_discount"), field_name="max_total_discount"),
    }


def _snapshot(discount: Discount) -> dict:
    return {field: getattr(discount, field) for field in DISCOUNT_FIELDS + ("is_active",)}


def _get_locked(discount_id) -> Discount:
    discount = Discount.objects.select_for_update().filter(pk=discount_id).first()
    if discount is None:
        raise NotFoundError("Discount not found.")
    return discount


@transaction.atomic
def create_discount(*, data: dict, user=None) -> Discount:
    fields = _clean(data)
    discount = Discount.objects.create(is_active=True, **fields)

    record_audit(entity_name="Discount", entity_id=discount.id, action="Create", user=user, changes=_snapshot(discount))
    return discount


@transaction.atomic
def update_discount(*, discount_id, data: dict, user=None) -> Discount:
    fields = _clean(data)
    discount = _get_locked(discount_id)

    before = _snapshot(discount)
    for key, value in fields.items():
        setattr(discount, key, value)
    discount.save()

    record_audit(
        entity_name="Discount",
        entity_id=discount.id,
        action="Update",
        user=user,
        changes={"before": before, "after": _snapshot(discount)},
    )
    return discount


@transaction.atomic
def set_discount_active(*, discount_id, is_active: bool, user=None) -> Discount:
    discount = _get_locked(discount_id)
    discount.is_active = bool(is_active)
    discount.save(update_fields=["is_active"])

    record_audit(
        entity_name="Discount",
        entity_id=discount.id,
        action="Activate" if discount.is_active else "Deactivate",
        user=user,
    )
    return discount


@transaction.atomic
def link_category(*, discount_id, category_id, user=None) -> DiscountCategory:
    discount = _get_locked(discount_id)
    if not Category.objects.filter(pk=category_id, is_active=True).exists():
        raise DiscountValidationError("Category not found or inactive.")

    link, created = DiscountCategory.objects.get_or_create(discount=discount, category_id=category_id)
    if created:
        record_audit(
            entity_name="Discount",
            entity_id=discount.id,
            action="LinkCategory",
            user=user,
            changes={"category_id": category_id},
        )
    return link


@transaction.atomic
def unlink_category(*, discount_id, category_id, user=None) -> None:
    deleted, _ = DiscountCategory.objects.filter(discount_id=discount_id, category_id=category_id).delete()
    if not deleted:
        raise NotFoundError("Category link not found.")

    record_audit(
        entity_name="Discount",
        entity_id=discount_id,
        action="UnlinkCategory",
        user=user,
        changes={"category_id": category_id},
    )


@transaction.atomic
def link_product(*, discount_id, product_id, user=None) -> DiscountProduct:
    discount = _get_locked(discount_id)
    if not Product.objects.filter(pk=product_id).exists():
        raise DiscountValidationError("Product not found.")

    link, created = DiscountProduct.objects.get_or_create(discount=discount, product_id=product_id)
    if created:
        record_audit(
            entity_name="Discount",
            entity_id=discount.id,
            action="LinkProduct",
            user=user,
            changes={"product_id": product_id},
        )
    return link


@transaction.atomic
def unlink_product(*, discount_id, product_id, user=None) -> None:
    deleted, _ = DiscountProduct.objects.filter(discount_id=discount_id, product_id=product_id).delete()
    if not deleted:
        raise NotFoundError("Product link not found.")

    record_audit(
        entity_name="Discount",
        entity_id=discount_id,
        action="UnlinkProduct",
        user=user,
        changes={"product_id": product_id},
    )
