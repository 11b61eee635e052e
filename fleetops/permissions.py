"""
Role hierarchy and permission flags.

Each application role has a hierarchy level (1 = customer ... 8 = owner) and a fixed set of
permission flags. A user's effective permissions come from their highest-level role, while
a single flag check passes if any of their roles grants it.
"""

import logging
from typing import Iterable

logger = logging.getLogger(__name__)

CAN_VIEW_USERS = "can_view_users"
CAN_MANAGE_USERS = "can_manage_users"
CAN_ASSIGN_ROLES = "can_assign_roles"
CAN_VIEW_INVENTORY = "can_view_inventory"
CAN_MANAGE_INVENTORY = "can_manage_inventory"
CAN_VIEW_WORK_ORDERS = "can_view_work_orders"
CAN_MANAGE_WORK_ORDERS = "can_manage_work_orders"
CAN_VIEW_REPORTS = "can_view_reports"
CAN_MANAGE_SETTINGS = "can_manage_settings"

PERMISSION_NAMES = (
    CAN_VIEW_USERS,
    CAN_MANAGE_USERS,
    CAN_ASSIGN_ROLES,
    CAN_VIEW_INVENTORY,
    CAN_MANAGE_INVENTORY,
    CAN_VIEW_WORK_ORDERS,
    CAN_MANAGE_WORK_ORDERS,
    CAN_VIEW_REPORTS,
    CAN_MANAGE_SETTINGS,
)

DEFAULT_ROLE = "customer"

ROLE_HIERARCHY = {
    "customer": 1,
    "reception": 2,
    "deckhand": 3,
    "technician": 3,
    "other_staff": 3,
    "yard": 3,
    "truck_driver": 3,
    "welder": 4,
    "crane_operator": 4,
    "rigger": 4,
    "diver": 4,
    "boson": 4,
    "marketing": 4,
    "parts_manager": 4,
    "marine_engineer": 4,
    "dispatch": 5,
    "office_admin": 5,
    "service_advisor": 5,
    "mate": 5,
    "chief_engineer": 5,
    "fishing_master": 5,
    "yard_manager_assistant": 5,
    "mechanic_manager_assistant": 5,
    "yard_manager": 6,
    "mechanic_manager": 6,
    "manager": 6,
    "operations_manager": 7,
    "captain": 7,
    "admin": 7,
    "developer": 8,
    "owner": 8,
}

# Recurring flag sets
_FIELD_CREW = {CAN_VIEW_INVENTORY, CAN_VIEW_WORK_ORDERS, CAN_MANAGE_WORK_ORDERS}
_LEAD = {CAN_VIEW_USERS, CAN_VIEW_INVENTORY, CAN_MANAGE_INVENTORY, CAN_VIEW_WORK_ORDERS, CAN_MANAGE_WORK_ORDERS, CAN_VIEW_REPORTS}
_MANAGER = _LEAD | {CAN_MANAGE_USERS}
_EVERYTHING = set(PERMISSION_NAMES)

ROLE_PERMISSIONS = {
    "customer": {CAN_VIEW_WORK_ORDERS},
    "reception": {CAN_VIEW_USERS, CAN_VIEW_INVENTORY, CAN_VIEW_WORK_ORDERS},
    "technician": _FIELD_CREW | {CAN_VIEW_USERS},
    "marine_engineer": _FIELD_CREW | {CAN_VIEW_USERS},
    "deckhand": _FIELD_CREW,
    "truck_driver": _FIELD_CREW,
    "welder": _FIELD_CREW,
    "crane_operator": _FIELD_CREW,
    "rigger": _FIELD_CREW,
    "diver": _FIELD_CREW,
    "other_staff": {CAN_VIEW_INVENTORY, CAN_VIEW_WORK_ORDERS},
    "yard": {CAN_VIEW_INVENTORY, CAN_VIEW_WORK_ORDERS},
    "marketing": {CAN_VIEW_USERS, CAN_VIEW_REPORTS},
    "service_advisor": {CAN_VIEW_USERS, CAN_VIEW_INVENTORY, CAN_VIEW_WORK_ORDERS, CAN_MANAGE_WORK_ORDERS, CAN_VIEW_REPORTS},
    "dispatch": {CAN_VIEW_USERS, CAN_VIEW_INVENTORY, CAN_VIEW_WORK_ORDERS, CAN_MANAGE_WORK_ORDERS, CAN_VIEW_REPORTS},
    "office_admin": {
        CAN_VIEW_USERS,
        CAN_VIEW_INVENTORY,
        CAN_VIEW_WORK_ORDERS,
        CAN_MANAGE_WORK_ORDERS,
        CAN_VIEW_REPORTS,
        CAN_MANAGE_SETTINGS,
    },
    "parts_manager": _LEAD,
    "boson": _LEAD,
    "mate": _LEAD,
    "chief_engineer": _LEAD,
    "fishing_master": _LEAD,
    "yard_manager_assistant": _LEAD,
    "mechanic_manager_assistant": _LEAD,
    "yard_manager": _MANAGER,
    "mechanic_manager": _MANAGER,
    "manager": _MANAGER | {CAN_MANAGE_SETTINGS},
    "operations_manager": _MANAGER | {CAN_MANAGE_SETTINGS},
    "captain": _MANAGER | {CAN_MANAGE_SETTINGS},
    "admin": _EVERYTHING,
    "developer": _EVERYTHING,
    "owner": _EVERYTHING,
}


def role_level(role: str) -> int:
    return ROLE_HIERARCHY.get(role, 0)


def permissions_for_role(role: str) -> dict[str, bool]:
    granted = ROLE_PERMISSIONS.get(role, set())
    return {name: name in granted for name in PERMISSION_NAMES}


def highest_role(roles: Iterable[str]) -> str:
    """The highest-level known role; ties keep the first one seen"""
    best = DEFAULT_ROLE
    best_level = 0
    for role in roles:
        level = role_level(role)
        if level > best_level:
            best, best_level = role, level
    return best


def effective_permissions(roles: Iterable[str]) -> dict[str, bool]:
    """Permissions of the highest role held; users without roles are treated as customers"""
    return permissions_for_role(highest_role(list(roles)))


def has_permission(roles: Iterable[str], permission: str) -> bool:
    if permission not in PERMISSION_NAMES:
        raise ValueError(f"Unknown permission: {permission}")
    return any(permission in ROLE_PERMISSIONS.get(role, set()) for role in roles)


def can_assign_role(assigner_roles: Iterable[str], target_role: str) -> bool:
    """
    Whether a user holding `assigner_roles` may grant `target_role`.

    The assigner needs the can_assign_roles flag and must sit at or above the level of the
    role being handed out, so an admin cannot mint owners.
    """
    assigner_roles = list(assigner_roles)
    if target_role not in ROLE_HIERARCHY:
        return False
    if not has_permission(assigner_roles, CAN_ASSIGN_ROLES):
        return False
    assigner_level = max((role_level(r) for r in assigner_roles), default=0)
    return assigner_level >= role_level(target_role)
