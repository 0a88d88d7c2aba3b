# catalog/services/products.py

"""
PRODUCT SERVICE

- Creating a product also creates its inventory snapshot (qty 0),
  in the same transaction, so every sellable product has exactly one row.
- Create / update / activation changes are audited after commit.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from django.db import transaction

from audit.services import record_audit
from catalog.models import Category, Product
from core.exceptions import NotFoundError, ValidationFailedError
from core.money import money
from inventory.models import InventoryItem

logger = logging.getLogger("catalog")


class CatalogError(ValidationFailedError):
    """Product or category data rejected."""


def _resolve_category(category_id) -> Optional[Category]:
    if category_id in (None, ""):
        return None
    category = Category.objects.filter(pk=category_id, is_active=True).first()
    if category is None:
        raise CatalogError("Category not found or inactive.")
    return category


def _clean_fields(*, name, unit_price) -> tuple[str, Decimal]:
    name = (name or "").strip()
    if not name:
        raise CatalogError("Product name is required.")
    try:
        price = money(unit_price)
    except ValueError:
        raise CatalogError("unit_price must be a valid decimal.")
    if price < 0:
        raise CatalogError("unit_price must be non-negative.")
    return name, price


def _snapshot(product: Product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "category_id": product.category_id,
        "unit_price": str(product.unit_price),
        "is_active": product.is_active,
    }


@transaction.atomic
def create_product(*, name, unit_price, category_id=None, description="", user=None) -> Product:
    name, price = _clean_fields(name=name, unit_price=unit_price)
    category = _resolve_category(category_id)

    product = Product.objects.create(
        name=name,
        unit_price=price,
        category=category,
        description=(description or "").strip(),
        is_active=True,
    )
    InventoryItem.objects.create(product=product, quantity_on_hand=0)

    record_audit(
        entity_name="Product",
        entity_id=product.id,
        action="Create",
        user=user,
        changes=_snapshot(product),
    )
    logger.info("Product created", extra={"product_id": product.id})
    return product


@transaction.atomic
def update_product(*, product_id, name, unit_price, category_id=None, description="", user=None) -> Product:
    product = Product.objects.select_for_update().filter(pk=product_id).first()
    if product is None:
        raise NotFoundError("Product not found.")

    name, price = _clean_fields(name=name, unit_price=unit_price)
    category = _resolve_category(category_id)

    before = _snapshot(product)
    product.name = name
    product.unit_price = price
    product.category = category
    product.description = (description or "").strip()
    product.save(update_fields=["name", "unit_price", "category", "description", "updated_at"])

    record_audit(
        entity_name="Product",
        entity_id=product.id,
        action="Update",
        user=user,
        changes={"before": before, "after": _snapshot(product)},
    )
    return product


@transaction.atomic
def set_product_active(*, product_id, is_active: bool, user=None) -> Product:
    product = Product.objects.select_for_update().filter(pk=product_id).first()
    if product is None:
        raise NotFoundError("Product not found.")

    if product.is_active != bool(is_active):
        product.is_active = bool(is_active)
        product.save(update_fields=["is_active", "updated_at"])
        record_audit(
            entity_name="Product",
            entity_id=product.id,
            action="Activate" if product.is_active else "Deactivate",
            user=user,
            changes={"is_active": product.is_active},
        )
    return product
