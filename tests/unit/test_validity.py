"""Unit tests for rolekeeper.services.bootstrap.validity."""
import pytest

from rolekeeper.core.errors import ErrorCode
from rolekeeper.db.models.user import RoleEnum
from rolekeeper.services.bootstrap.validity import (
    BOOTSTRAP_USERS,
    REQUIRED_ROLES,
    DatabaseValidityChecker,
    find_violation,
    is_role_unique,
    is_user_unique,
)
from tests.conftest import (
    BrokenStore,
    InMemoryRoleStore,
    InMemoryUserStore,
    bootstrap_users,
    full_catalog,
    make_catalog,
    make_user,
)


# ─── Constants ────────────────────────────────────────────────────────────────

def test_required_roles_in_privilege_order():
    assert REQUIRED_ROLES == ("ROLE_GUEST", "ROLE_USER", "ROLE_ADMIN", "ROLE_SUPERADMIN")


def test_bootstrap_users_pair_with_roles():
    assert [name for name, _ in BOOTSTRAP_USERS] == ["guest", "user", "admin", "superadmin"]
    assert [role for _, role in BOOTSTRAP_USERS] == list(REQUIRED_ROLES)


# ─── is_role_unique ───────────────────────────────────────────────────────────

def test_role_unique_when_present_once():
    assert is_role_unique("ROLE_USER", full_catalog()) is True


def test_role_not_unique_when_missing():
    assert is_role_unique("ROLE_USER", make_catalog("ROLE_GUEST")) is False


def test_role_not_unique_when_duplicated():
    assert is_role_unique("ROLE_USER", make_catalog("ROLE_USER", "ROLE_USER")) is False


# ─── is_user_unique ───────────────────────────────────────────────────────────

def test_user_unique_with_role():
    catalog = full_catalog()
    users = [make_user("admin", *catalog[:3])]
    assert is_user_unique("admin", "ROLE_ADMIN", users) is True


def test_user_without_expected_role_does_not_count():
    catalog = full_catalog()
    users = [make_user("admin", catalog[0])]
    assert is_user_unique("admin", "ROLE_ADMIN", users) is False


def test_duplicate_usernames_with_role_fail():
    catalog = full_catalog()
    users = [make_user("admin", catalog[2]), make_user("admin", catalog[2])]
    assert is_user_unique("admin", "ROLE_ADMIN", users) is False


def test_duplicate_username_without_role_is_ignored():
    catalog = full_catalog()
    users = [make_user("admin", catalog[2]), make_user("admin", catalog[0])]
    assert is_user_unique("admin", "ROLE_ADMIN", users) is True


# ─── find_violation ───────────────────────────────────────────────────────────

def test_no_violation_for_complete_data():
    catalog = full_catalog()
    assert find_violation(catalog, bootstrap_users(catalog)) is None


@pytest.mark.parametrize("missing", [role.value for role in RoleEnum])
def test_missing_role_is_reported(missing):
    catalog = full_catalog()
    remaining = [role for role in catalog if role.name != missing]
    violation = find_violation(remaining, bootstrap_users(catalog))
    assert violation is not None
    assert violation.code == ErrorCode.SEED_VALIDATION_FAILED
    assert violation.check == f"role:{missing}"


def test_duplicate_role_is_reported():
    catalog = full_catalog()
    roles = catalog + make_catalog("ROLE_ADMIN")
    violation = find_violation(roles, bootstrap_users(catalog))
    assert violation is not None
    assert violation.check == "role:ROLE_ADMIN"


def test_roles_checked_before_users():
    violation = find_violation(make_catalog("ROLE_GUEST"), [])
    assert violation.check == "role:ROLE_USER"


@pytest.mark.parametrize("username", ["guest", "user", "admin", "superadmin"])
def test_missing_bootstrap_user_is_reported(username):
    catalog = full_catalog()
    users = [user for user in bootstrap_users(catalog) if user.username != username]
    violation = find_violation(catalog, users)
    assert violation is not None
    assert violation.check == f"user:{username}"


def test_extra_users_do_not_invalidate():
    catalog = full_catalog()
    users = bootstrap_users(catalog) + [make_user("someone.else42", catalog[3])]
    assert find_violation(catalog, users) is None


# ─── DatabaseValidityChecker ──────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_checker_valid():
    catalog = full_catalog()
    checker = DatabaseValidityChecker(
        InMemoryRoleStore(catalog), InMemoryUserStore(bootstrap_users(catalog))
    )
    assert await checker.is_valid() is True


@pytest.mark.asyncio
async def test_checker_invalid_without_superadmin_role_regardless_of_users():
    catalog = full_catalog()
    checker = DatabaseValidityChecker(
        InMemoryRoleStore(catalog[:3]), InMemoryUserStore(bootstrap_users(catalog))
    )
    assert await checker.is_valid() is False


@pytest.mark.asyncio
async def test_checker_invalid_on_empty_database():
    checker = DatabaseValidityChecker(InMemoryRoleStore(), InMemoryUserStore())
    assert await checker.is_valid() is False


@pytest.mark.asyncio
async def test_checker_treats_read_fault_as_invalid():
    checker = DatabaseValidityChecker(BrokenStore(), InMemoryUserStore())
    assert await checker.is_valid() is False
