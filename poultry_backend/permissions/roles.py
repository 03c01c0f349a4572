# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission

from finance.services.exceptions import ForbiddenError


# =========================================================
# ROLE CONSTANTS
# =========================================================
# Supplied by the auth layer on every request (User.role).
ROLE_ADMIN = "admin"
ROLE_OWNER = "owner"
ROLE_STAFF = "staff"

# Only these roles may touch the ledger or the reconciliation reports.
LEDGER_ROLES = frozenset({ROLE_ADMIN, ROLE_OWNER})


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views protect capabilities, not raw roles.
CAP_LEDGER_OPERATE = "ledger.operate"      # drafts, finalize, payments, collect
CAP_LEDGER_REPORT = "ledger.report"        # receivables, stock and cash reports
CAP_INVENTORY_RECORD = "inventory.record"  # sites, incoming, mortality, shipments
CAP_CUSTOMERS_MANAGE = "customers.manage"

ALL_CAPABILITIES = {
    CAP_LEDGER_OPERATE,
    CAP_LEDGER_REPORT,
    CAP_INVENTORY_RECORD,
    CAP_CUSTOMERS_MANAGE,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_OWNER: {
        *ALL_CAPABILITIES,
    },
    ROLE_STAFF: set(),
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def effective_capabilities_for(user) -> set[str]:
    if user is None or not getattr(user, "is_authenticated", False):
        return set()
    return set(ROLE_CAPABILITIES.get(get_user_role(user), set()))


def assert_ledger_access(actor) -> None:
    """
    Service-level guard used by every ledger and reconciliation operation.

    HTTP permissions already filter requests, but services are also called
    from management commands and tests, so they check the role themselves.
    """
    if actor is None or not getattr(actor, "is_authenticated", False):
        raise ForbiddenError("Authentication required.")

    if get_user_role(actor) not in LEDGER_ROLES:
        raise ForbiddenError("Only admin or owner may perform ledger operations.")


def actor_display_name(actor) -> str:
    if actor is None:
        return ""
    full = f"{getattr(actor, 'first_name', '') or ''} {getattr(actor, 'last_name', '') or ''}".strip()
    return full or getattr(actor, "username", None) or getattr(actor, "email", "") or ""


# =========================================================
# Capability Permission
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        required_capability = CAP_LEDGER_OPERATE
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_capability", None)
        if not required:
            # deny-by-default
            return False

        return required in effective_capabilities_for(user)
