from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from recognition_system.core.enums import CycleStatus
from recognition_system.core.exceptions import (
    CycleAlreadyActive,
    InvalidPeriod,
    InvalidTransition,
    NoVotesRecorded,
    NotFound,
    PhaseClosed,
)
from recognition_system.cycles.model import PhaseWindows
from recognition_system.cycles.service import CycleService
from recognition_system.database.memory_store import InMemoryCycleRepository, InMemoryStore


def test_create_cycle_starts_in_nomination(container, fixed_now):
    cycle = container.cycle_service.create_cycle(2, 2024, now=fixed_now)

    assert cycle.status == CycleStatus.NOMINATION
    assert cycle.winner_id is None
    assert cycle.label == "March 2024"
    assert container.cycle_service.get_active_cycle() == cycle


def test_create_cycle_rejected_while_another_is_open(container, fixed_now):
    svc = container.cycle_service
    first = svc.create_cycle(1, 2024, now=fixed_now)
    svc.advance_status(first.cycle_id, CycleStatus.VOTING, now=fixed_now)

    with pytest.raises(CycleAlreadyActive):
        svc.create_cycle(2, 2024, now=fixed_now)

    open_cycles = [c for c in svc.list_cycles() if c.is_open]
    assert [c.cycle_id for c in open_cycles] == [first.cycle_id]


@pytest.mark.parametrize(
    "month, year",
    [(12, 2024), (-1, 2024), (3, 2024), (0, 2025), (5, 1999), ("x", 2024)],
)
def test_create_cycle_rejects_bad_or_future_period(container, fixed_now, month, year):
    with pytest.raises(InvalidPeriod):
        container.cycle_service.create_cycle(month, year, now=fixed_now)
    assert container.cycle_service.list_cycles() == []


def test_create_cycle_with_windows_may_target_future_month(container, fixed_now, windows):
    cycle = container.cycle_service.create_cycle(3, 2024, windows, now=fixed_now)
    assert cycle.windows == windows


def test_create_cycle_tolerates_small_clock_skew(container, fixed_now, windows):
    skewed = PhaseWindows(
        nomination_start=fixed_now - timedelta(seconds=30),
        nomination_end=windows.nomination_end,
        voting_start=windows.voting_start,
        voting_end=windows.voting_end,
    )
    assert container.cycle_service.create_cycle(2, 2024, skewed, now=fixed_now).windows == skewed


@pytest.mark.parametrize(
    "offsets",
    [
        # nomination_start, nomination_end, voting_start, voting_end (hours from now)
        (-2, 24, 24, 48),
        (0, 0, 24, 48),
        (0, 24, 12, 48),
        (0, 24, 24, 24),
    ],
)
def test_create_cycle_rejects_bad_windows(container, fixed_now, offsets):
    bounds = [fixed_now + timedelta(hours=h) for h in offsets]
    with pytest.raises(InvalidPeriod):
        container.cycle_service.create_cycle(2, 2024, PhaseWindows(*bounds), now=fixed_now)


def test_advance_status_moves_forward_one_phase(container, nomination_cycle, fixed_now):
    svc = container.cycle_service
    voting = svc.advance_status(nomination_cycle.cycle_id, CycleStatus.VOTING, now=fixed_now)
    assert voting.status == CycleStatus.VOTING

    closed = svc.advance_status(nomination_cycle.cycle_id, CycleStatus.CLOSED, now=fixed_now)
    assert closed.status == CycleStatus.CLOSED
    assert closed.winner_id is None


def test_advance_status_rejects_skips_and_backward_moves(container, nomination_cycle, fixed_now):
    svc = container.cycle_service
    with pytest.raises(InvalidTransition):
        svc.advance_status(nomination_cycle.cycle_id, CycleStatus.CLOSED, now=fixed_now)
    with pytest.raises(InvalidTransition):
        svc.advance_status(nomination_cycle.cycle_id, CycleStatus.NOMINATION, now=fixed_now)

    svc.advance_status(nomination_cycle.cycle_id, CycleStatus.VOTING, now=fixed_now)
    with pytest.raises(InvalidTransition):
        svc.advance_status(nomination_cycle.cycle_id, CycleStatus.NOMINATION, now=fixed_now)
    assert svc.get_cycle(nomination_cycle.cycle_id).status == CycleStatus.VOTING


def test_forced_skip_closes_cycle(container, nomination_cycle, fixed_now):
    closed = container.cycle_service.advance_status(
        nomination_cycle.cycle_id, CycleStatus.CLOSED, force=True, now=fixed_now
    )
    assert closed.status == CycleStatus.CLOSED


def test_voting_cannot_start_early_without_force(container, windows, fixed_now):
    svc = container.cycle_service
    cycle = svc.create_cycle(2, 2024, windows, now=fixed_now)
    early = fixed_now + timedelta(days=1)

    with pytest.raises(InvalidTransition):
        svc.advance_status(cycle.cycle_id, CycleStatus.VOTING, now=early)

    forced = svc.advance_status(cycle.cycle_id, CycleStatus.VOTING, force=True, now=early)
    assert forced.status == CycleStatus.VOTING
    assert forced.windows.voting_start == early
    assert forced.windows.voting_end == windows.voting_end


def test_advance_status_unknown_cycle(container):
    with pytest.raises(NotFound):
        container.cycle_service.advance_status(999, CycleStatus.VOTING)


def test_get_active_cycle_prefers_open_over_recent_closed(container, fixed_now):
    svc = container.cycle_service
    february = svc.create_cycle(1, 2024, now=fixed_now)
    svc.advance_status(february.cycle_id, CycleStatus.CLOSED, force=True, now=fixed_now)
    assert svc.get_active_cycle().cycle_id == february.cycle_id

    january = svc.create_cycle(0, 2024, now=fixed_now)
    assert svc.get_active_cycle().cycle_id == january.cycle_id

    svc.advance_status(january.cycle_id, CycleStatus.VOTING, now=fixed_now)
    assert svc.get_active_cycle().cycle_id == january.cycle_id

    svc.advance_status(january.cycle_id, CycleStatus.CLOSED, now=fixed_now)
    assert svc.get_active_cycle().cycle_id == february.cycle_id


def test_get_active_cycle_none_when_empty(container):
    assert container.cycle_service.get_active_cycle() is None


def test_list_cycles_most_recent_period_first(container, fixed_now):
    svc = container.cycle_service
    for month in (0, 2, 1):
        cycle = svc.create_cycle(month, 2024, now=fixed_now)
        svc.advance_status(cycle.cycle_id, CycleStatus.CLOSED, force=True, now=fixed_now)

    assert [c.month for c in svc.list_cycles()] == [2, 1, 0]


def test_require_phase_honours_windows(container, windows, fixed_now):
    svc = container.cycle_service
    cycle = svc.create_cycle(2, 2024, windows, now=fixed_now)

    assert svc.require_phase(cycle.cycle_id, CycleStatus.NOMINATION, now=fixed_now) == cycle
    with pytest.raises(PhaseClosed):
        svc.require_phase(cycle.cycle_id, CycleStatus.NOMINATION, now=windows.nomination_start - timedelta(seconds=1))
    with pytest.raises(PhaseClosed):
        svc.require_phase(cycle.cycle_id, CycleStatus.NOMINATION, now=windows.nomination_end)
    with pytest.raises(PhaseClosed):
        svc.require_phase(cycle.cycle_id, CycleStatus.VOTING, now=fixed_now)


def test_declare_winner_closes_with_leader(container, people, voting_cycle, fixed_now):
    votes = container.vote_service
    votes.submit(people.alice.user_id, people.bob.user_id, voting_cycle.cycle_id, now=fixed_now)
    votes.submit(people.dave.user_id, people.carol.user_id, voting_cycle.cycle_id, now=fixed_now)
    votes.submit(people.admin.user_id, people.bob.user_id, voting_cycle.cycle_id, now=fixed_now)

    closed = container.cycle_service.declare_winner(voting_cycle.cycle_id)

    assert closed.status == CycleStatus.CLOSED
    assert closed.winner_id == people.bob.user_id


def test_declare_winner_without_votes_leaves_cycle_untouched(container, voting_cycle):
    with pytest.raises(NoVotesRecorded):
        container.cycle_service.declare_winner(voting_cycle.cycle_id)

    cycle = container.cycle_service.get_cycle(voting_cycle.cycle_id)
    assert cycle.status == CycleStatus.VOTING
    assert cycle.winner_id is None


def test_declare_winner_twice_keeps_first_result(container, people, voting_cycle, fixed_now):
    container.vote_service.submit(people.alice.user_id, people.carol.user_id, voting_cycle.cycle_id, now=fixed_now)
    first = container.cycle_service.declare_winner(voting_cycle.cycle_id)

    with pytest.raises(PhaseClosed):
        container.cycle_service.declare_winner(voting_cycle.cycle_id)
    assert container.cycle_service.get_cycle(voting_cycle.cycle_id) == first


def test_declare_winner_requires_voting_phase(container, nomination_cycle):
    with pytest.raises(PhaseClosed):
        container.cycle_service.declare_winner(nomination_cycle.cycle_id)


class LosingCycleRepository(InMemoryCycleRepository):
    """Another creator commits between the open-cycle check and the insert."""

    def open_cycle(self, **kwargs):
        return None


def test_concurrent_creates_leave_single_open_cycle(container, fixed_now):
    svc = container.cycle_service

    def attempt(month):
        try:
            svc.create_cycle(month, 2024, now=fixed_now)
            return "ok"
        except CycleAlreadyActive:
            return "active"

    with ThreadPoolExecutor(max_workers=6) as pool:
        outcomes = list(pool.map(attempt, [0, 1, 2] * 4))

    assert "ok" in outcomes
    assert len([c for c in svc.list_cycles() if c.is_open]) == 1


def test_open_cycle_force_closes_existing_open_cycles(fixed_now):
    repo = InMemoryCycleRepository(InMemoryStore())
    first = repo.open_cycle(month=1, year=2024, windows=None, created_at=fixed_now)

    second = repo.open_cycle(month=2, year=2024, windows=None, created_at=fixed_now)

    assert repo.get_by_id(first.cycle_id).status == CycleStatus.CLOSED
    assert [c.cycle_id for c in repo.list_open()] == [second.cycle_id]


def test_create_cycle_losing_race_reports_already_active(container, fixed_now):
    svc = CycleService(LosingCycleRepository(InMemoryStore()), container.results_service)

    with pytest.raises(CycleAlreadyActive):
        svc.create_cycle(2, 2024, now=fixed_now)
