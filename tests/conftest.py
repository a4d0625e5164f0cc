from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from recognition_system.container import build_container
from recognition_system.core.enums import CycleStatus, Role
from recognition_system.cycles.model import PhaseWindows
from recognition_system.main import create_app


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 15, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def container():
    return build_container(backend="memory")


@pytest.fixture
def people(container):
    svc = container.user_service
    return SimpleNamespace(
        admin=svc.add_user(name="Admin", email="admin@example.com", department="HR", role=Role.ADMIN),
        alice=svc.add_user(name="Alice", email="alice@example.com", department="Sales"),
        bob=svc.add_user(name="Bob", email="bob@example.com", department="Support"),
        carol=svc.add_user(name="Carol", email="carol@example.com", department="IT"),
        dave=svc.add_user(name="Dave", email="dave@example.com", department="IT"),
    )


@pytest.fixture
def windows(fixed_now) -> PhaseWindows:
    return PhaseWindows(
        nomination_start=fixed_now,
        nomination_end=fixed_now + timedelta(days=7),
        voting_start=fixed_now + timedelta(days=7),
        voting_end=fixed_now + timedelta(days=14),
    )


@pytest.fixture
def nomination_cycle(container, fixed_now):
    """March 2024 cycle in NOMINATION, no phase windows."""
    return container.cycle_service.create_cycle(2, 2024, now=fixed_now)


@pytest.fixture
def voting_cycle(container, people, fixed_now):
    """Cycle in VOTING with nominations: bob x2 (alice, carol), carol x1 (dave)."""
    cycles = container.cycle_service
    cycle = cycles.create_cycle(2, 2024, now=fixed_now)

    noms = container.nomination_service
    noms.submit(people.alice.user_id, people.bob.user_id, cycle.cycle_id, "Great work", now=fixed_now)
    noms.submit(people.carol.user_id, people.bob.user_id, cycle.cycle_id, "Helpful", now=fixed_now)
    noms.submit(people.dave.user_id, people.carol.user_id, cycle.cycle_id, "Mentoring", now=fixed_now)

    return cycles.advance_status(cycle.cycle_id, CycleStatus.VOTING, now=fixed_now)


@pytest.fixture
def app(container):
    return create_app("recognition_system.config.testing", container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(user):
        with client.session_transaction() as sess:
            sess["user_id"] = user.user_id

    return _login
