import pytest

from fleetops.permissions import (
    CAN_ASSIGN_ROLES,
    CAN_MANAGE_INVENTORY,
    CAN_MANAGE_SETTINGS,
    CAN_VIEW_WORK_ORDERS,
    PERMISSION_NAMES,
    ROLE_HIERARCHY,
    ROLE_PERMISSIONS,
    can_assign_role,
    effective_permissions,
    has_permission,
    highest_role,
    role_level,
)


def test_every_role_has_a_permission_set():
    assert set(ROLE_HIERARCHY) == set(ROLE_PERMISSIONS)
    for granted in ROLE_PERMISSIONS.values():
        assert granted <= set(PERMISSION_NAMES)


def test_hierarchy_bounds():
    assert role_level("customer") == 1
    assert role_level("owner") == 8
    assert role_level("not-a-role") == 0


def test_highest_role_wins():
    assert highest_role(["technician", "captain", "reception"]) == "captain"


def test_no_roles_means_customer():
    permissions = effective_permissions([])
    assert permissions[CAN_VIEW_WORK_ORDERS] is True
    assert not any(value for name, value in permissions.items() if name != CAN_VIEW_WORK_ORDERS)


def test_effective_permissions_follow_highest_role():
    permissions = effective_permissions(["deckhand", "admin"])
    assert all(permissions.values())


def test_has_permission_any_role():
    assert has_permission(["customer", "parts_manager"], CAN_MANAGE_INVENTORY)
    assert not has_permission(["customer", "technician"], CAN_MANAGE_SETTINGS)


def test_has_permission_unknown_flag():
    with pytest.raises(ValueError):
        has_permission(["owner"], "can_launch_rockets")


class TestCanAssignRole:
    def test_owner_can_assign_anything(self):
        assert can_assign_role(["owner"], "owner")
        assert can_assign_role(["owner"], "technician")

    def test_admin_cannot_mint_owners(self):
        assert has_permission(["admin"], CAN_ASSIGN_ROLES)
        assert not can_assign_role(["admin"], "owner")
        assert can_assign_role(["admin"], "captain")

    def test_needs_assign_flag(self):
        # managers outrank technicians but cannot hand out roles
        assert not can_assign_role(["manager"], "technician")

    def test_unknown_target_role(self):
        assert not can_assign_role(["owner"], "emperor")
