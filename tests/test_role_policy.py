"""
Tests for the role hierarchy checks.
"""

import itertools

import pytest

from restoreview.application.services.role_policy import (
    ROLE_LEVELS,
    VALID_ROLES,
    can_change_role,
    check_block,
    check_role_change,
    role_level,
)
from restoreview.config import get_settings
from restoreview.core.exceptions import ForbiddenError, ValidationError
from restoreview.domain.models.user import User

_ids = itertools.count(1)


def person(role, email=None):
    uid = next(_ids)
    return User(id=uid, name=f"{role}-{uid}", email=email or f"{role}{uid}@example.com", role=role)


def head():
    return person("head_admin", get_settings().HEAD_ADMIN_EMAIL)


class TestLevels:
    def test_levels_are_ordered(self):
        assert ROLE_LEVELS == {"head_admin": 100, "admin": 80, "manager": 50, "user": 10}

    def test_unknown_role_is_zero(self):
        assert role_level("superuser") == 0
        assert role_level(None) == 0

    @pytest.mark.parametrize("actor_role, target_role", list(itertools.product(VALID_ROLES, VALID_ROLES)))
    def test_can_change_role_matrix(self, actor_role, target_role):
        expected = role_level(target_role) < role_level(actor_role)
        assert can_change_role(actor_role, target_role) is expected
        if role_level(target_role) >= role_level(actor_role):
            assert can_change_role(actor_role, target_role) is False


class TestRoleChange:
    def test_invalid_role_is_validation_error(self):
        with pytest.raises(ValidationError):
            check_role_change(head(), person("user"), "owner")

    def test_manager_without_restaurant_is_validation_error(self):
        with pytest.raises(ValidationError):
            check_role_change(head(), person("user"), "manager", restaurant_exists=None)

    def test_validation_precedes_hierarchy(self):
        # A user acting on an admin would fail Rule 1, but the bad role is reported first
        with pytest.raises(ValidationError):
            check_role_change(person("user"), person("admin"), "wizard")

    def test_cannot_touch_equal_or_higher(self):
        with pytest.raises(ForbiddenError, match="Insufficient rights") as exc:
            check_role_change(person("admin"), person("admin"), "user")
        assert "equal to or higher than yours" in exc.value.details

    def test_cannot_assign_own_level(self):
        with pytest.raises(ForbiddenError) as exc:
            check_role_change(person("manager"), person("user"), "manager", restaurant_exists=True)
        assert "assign a role" in exc.value.details

    @pytest.mark.parametrize("target_role", ["user", "manager"])
    def test_admin_cannot_create_admins(self, target_role):
        with pytest.raises(ForbiddenError):
            check_role_change(person("admin"), person(target_role), "admin")

    @pytest.mark.parametrize("new_role", ["manager", "admin", "head_admin"])
    def test_manager_may_only_set_user(self, new_role):
        with pytest.raises(ForbiddenError):
            check_role_change(person("manager"), person("user"), new_role, restaurant_exists=True)

    def test_manager_demoting_to_user_passes(self):
        check_role_change(person("manager"), person("user"), "user")

    def test_admin_can_appoint_manager(self):
        check_role_change(person("admin"), person("user"), "manager", restaurant_exists=True)

    def test_head_admin_can_appoint_admin(self):
        check_role_change(head(), person("manager"), "admin")

    def test_protected_identity_even_with_lower_role(self):
        # Head admin email on a demoted row is still untouchable by others
        target = person("user", get_settings().HEAD_ADMIN_EMAIL)
        with pytest.raises(ForbiddenError, match="Protected account"):
            check_role_change(person("head_admin"), target, "manager", restaurant_exists=True)


class TestBlock:
    @pytest.mark.parametrize("reason", [None, "", "   \t"])
    def test_blank_reason_rejected(self, reason):
        with pytest.raises(ValidationError):
            check_block(head(), person("user"), reason)

    def test_reason_is_stripped(self):
        assert check_block(person("admin"), person("user"), "  spam  ") == "spam"

    @pytest.mark.parametrize("actor_role", VALID_ROLES)
    def test_head_admin_cannot_be_blocked_by_anyone_else(self, actor_role):
        with pytest.raises(ForbiddenError):
            check_block(person(actor_role), head(), "spam")

    def test_other_head_admin_account_cannot_block_protected_one(self):
        target = person("user", get_settings().HEAD_ADMIN_EMAIL)
        with pytest.raises(ForbiddenError, match="Protected account"):
            check_block(person("head_admin"), target, "spam")

    def test_admin_cannot_block_admin(self):
        with pytest.raises(ForbiddenError):
            check_block(person("admin"), person("admin"), "spam")

    def test_manager_can_block_user(self):
        assert check_block(person("manager"), person("user"), "spam") == "spam"
