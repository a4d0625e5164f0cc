from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from recognition_system.core.enums import Role, UserStatus
from recognition_system.core.exceptions import AuthorizationError, NotFound, ValidationError


def test_first_registered_user_becomes_admin(container):
    svc = container.user_service
    first = svc.register(name="Founder", email="Founder@Example.com")
    second = svc.register(name="Hire", email="hire@example.com", department="Ops")

    assert first.role == Role.ADMIN
    assert first.email == "founder@example.com"
    assert second.role == Role.EMPLOYEE
    assert second.department == "Ops"


def test_duplicate_email_is_rejected(container, people):
    with pytest.raises(ValidationError):
        container.user_service.add_user(name="Other Alice", email="ALICE@example.com")


@pytest.mark.parametrize(
    "name, email",
    [("", "x@example.com"), ("   ", "x@example.com"), ("X", "not-an-email"), ("X", "")],
)
def test_add_user_validates_input(container, name, email):
    with pytest.raises(ValidationError):
        container.user_service.add_user(name=name, email=email)


def test_update_user_changes_fields(container, people):
    updated = container.user_service.update_user(people.bob.user_id, name="Robert", department="Platform")

    assert updated.name == "Robert"
    assert container.user_service.get_user(people.bob.user_id).department == "Platform"


def test_update_user_rejects_taken_email(container, people):
    with pytest.raises(ValidationError):
        container.user_service.update_user(people.bob.user_id, email="alice@example.com")
    assert container.user_service.get_user(people.bob.user_id).email == "bob@example.com"


def test_toggle_status_deactivates_and_reactivates(container, people):
    svc = container.user_service

    assert svc.toggle_status(people.carol.user_id).status == UserStatus.INACTIVE
    with pytest.raises(AuthorizationError):
        svc.require_active(people.carol.user_id)

    assert svc.toggle_status(people.carol.user_id).status == UserStatus.ACTIVE
    assert svc.require_active(people.carol.user_id).user_id == people.carol.user_id


def test_list_employees_skips_admins(container, people):
    svc = container.user_service
    svc.set_status(people.dave.user_id, UserStatus.INACTIVE)

    assert {u.name for u in svc.list_employees()} == {"Alice", "Bob", "Carol", "Dave"}
    assert {u.name for u in svc.list_employees(active_only=True)} == {"Alice", "Bob", "Carol"}


def test_unknown_user(container):
    assert container.user_service.get_user(123) is None
    with pytest.raises(NotFound):
        container.user_service.toggle_status(123)


def test_concurrent_first_registrations_make_one_admin(container):
    svc = container.user_service

    def attempt(i):
        return svc.register(name=f"User {i}", email=f"user{i}@example.com")

    with ThreadPoolExecutor(max_workers=8) as pool:
        users = list(pool.map(attempt, range(16)))

    assert [u.role for u in users].count(Role.ADMIN) == 1
    assert [u.role for u in svc.list_users()].count(Role.ADMIN) == 1


@pytest.mark.parametrize("department", [7, ["Ops"], {"name": "Ops"}])
def test_non_text_department_is_rejected(container, department):
    with pytest.raises(ValidationError):
        container.user_service.add_user(name="X", email="x@example.com", department=department)
