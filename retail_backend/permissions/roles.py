# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS (STAFF JOB ROLES)
# =========================================================
ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_CASHIER = "cashier"
ROLE_USER = "user"


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views protect capabilities, not raw roles.
CAP_ORDERS_VIEW = "orders.view"
CAP_ORDERS_SELL = "orders.sell"       # create/edit orders, coupons, pay
CAP_ORDERS_VOID = "orders.void"

CAP_INVENTORY_VIEW = "inventory.view"
CAP_INVENTORY_ADJUST = "inventory.adjust"

CAP_CATALOG_EDIT = "catalog.edit"
CAP_DISCOUNTS_MANAGE = "discounts.manage"

CAP_REPORTS_VIEW = "reports.view"
CAP_AUDIT_VIEW = "audit.view"

ALL_CAPABILITIES = {
    CAP_ORDERS_VIEW,
    CAP_ORDERS_SELL,
    CAP_ORDERS_VOID,
    CAP_INVENTORY_VIEW,
    CAP_INVENTORY_ADJUST,
    CAP_CATALOG_EDIT,
    CAP_DISCOUNTS_MANAGE,
    CAP_REPORTS_VIEW,
    CAP_AUDIT_VIEW,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_MANAGER: {
        CAP_ORDERS_VIEW,
        CAP_ORDERS_SELL,
        CAP_ORDERS_VOID,
        CAP_INVENTORY_VIEW,
        CAP_INVENTORY_ADJUST,
        CAP_CATALOG_EDIT,
        CAP_DISCOUNTS_MANAGE,
        CAP_REPORTS_VIEW,
    },
    ROLE_CASHIER: {
        CAP_ORDERS_VIEW,
        CAP_ORDERS_SELL,
        CAP_INVENTORY_VIEW,
    },
    ROLE_USER: set(),
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def effective_capabilities_for(request, user) -> set[str]:
    """
    Capabilities granted by the user's role.
    Superusers get everything regardless of role.
    """
    if getattr(user, "is_superuser", False):
        return set(ALL_CAPABILITIES)

    role = get_user_role(user)
    return set(ROLE_CAPABILITIES.get(role, set()))


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_ORDERS_VOID
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_capability", None)
        if not required:
            # deny-by-default
            return False

        caps = effective_capabilities_for(request, user)
        return required in caps

