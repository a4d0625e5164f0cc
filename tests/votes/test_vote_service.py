from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from recognition_system.core.enums import CycleStatus, UserStatus
from recognition_system.core.exceptions import (
    AuthorizationError,
    DuplicateSubmission,
    InvalidCandidate,
    PhaseClosed,
)


def test_submit_records_vote(container, people, voting_cycle, fixed_now):
    vote = container.vote_service.submit(people.alice.user_id, people.bob.user_id, voting_cycle.cycle_id, now=fixed_now)

    assert vote.voter_id == people.alice.user_id
    assert vote.nominee_id == people.bob.user_id
    assert container.vote_service.get_by_voter(people.alice.user_id, voting_cycle.cycle_id) == vote


def test_vote_for_non_nominee_is_rejected(container, people, voting_cycle, fixed_now):
    with pytest.raises(InvalidCandidate):
        container.vote_service.submit(people.alice.user_id, people.dave.user_id, voting_cycle.cycle_id, now=fixed_now)
    assert container.vote_service.list_for_cycle(voting_cycle.cycle_id) == []


def test_second_vote_is_rejected_and_first_kept(container, people, voting_cycle, fixed_now):
    svc = container.vote_service
    svc.submit(people.alice.user_id, people.bob.user_id, voting_cycle.cycle_id, now=fixed_now)

    with pytest.raises(DuplicateSubmission):
        svc.submit(people.alice.user_id, people.carol.user_id, voting_cycle.cycle_id, now=fixed_now)

    assert [v.nominee_id for v in svc.list_for_cycle(voting_cycle.cycle_id)] == [people.bob.user_id]


def test_nominee_may_vote_for_self(container, people, voting_cycle, fixed_now):
    vote = container.vote_service.submit(people.bob.user_id, people.bob.user_id, voting_cycle.cycle_id, now=fixed_now)
    assert vote.nominee_id == vote.voter_id


def test_votes_refused_before_voting_and_after_close(container, people, nomination_cycle, fixed_now):
    svc = container.vote_service
    container.nomination_service.submit(
        people.alice.user_id, people.bob.user_id, nomination_cycle.cycle_id, "Great", now=fixed_now
    )

    with pytest.raises(PhaseClosed):
        svc.submit(people.carol.user_id, people.bob.user_id, nomination_cycle.cycle_id, now=fixed_now)

    container.cycle_service.advance_status(nomination_cycle.cycle_id, CycleStatus.VOTING, now=fixed_now)
    container.cycle_service.advance_status(nomination_cycle.cycle_id, CycleStatus.CLOSED, now=fixed_now)

    with pytest.raises(PhaseClosed):
        svc.submit(people.carol.user_id, people.bob.user_id, nomination_cycle.cycle_id, now=fixed_now)
    assert svc.list_for_cycle(nomination_cycle.cycle_id) == []


def test_votes_refused_outside_voting_window(container, people, windows, fixed_now):
    cycle = container.cycle_service.create_cycle(2, 2024, windows, now=fixed_now)
    container.nomination_service.submit(people.alice.user_id, people.bob.user_id, cycle.cycle_id, "Great", now=fixed_now)
    container.cycle_service.advance_status(cycle.cycle_id, CycleStatus.VOTING, now=windows.nomination_end)

    with pytest.raises(PhaseClosed):
        container.vote_service.submit(people.carol.user_id, people.bob.user_id, cycle.cycle_id, now=windows.voting_end)

    vote = container.vote_service.submit(
        people.carol.user_id, people.bob.user_id, cycle.cycle_id, now=windows.voting_start
    )
    assert vote.cycle_id == cycle.cycle_id


def test_inactive_voter_is_refused(container, people, voting_cycle, fixed_now):
    container.user_service.set_status(people.dave.user_id, UserStatus.INACTIVE)

    with pytest.raises(AuthorizationError):
        container.vote_service.submit(people.dave.user_id, people.bob.user_id, voting_cycle.cycle_id, now=fixed_now)


def test_concurrent_votes_keep_one(container, people, voting_cycle, fixed_now):
    svc = container.vote_service
    choices = [people.bob.user_id, people.carol.user_id] * 6

    def attempt(nominee_id):
        try:
            svc.submit(people.dave.user_id, nominee_id, voting_cycle.cycle_id, now=fixed_now)
            return "ok"
        except DuplicateSubmission:
            return "duplicate"

    with ThreadPoolExecutor(max_workers=6) as pool:
        outcomes = list(pool.map(attempt, choices))

    assert outcomes.count("ok") == 1
    assert len(svc.list_for_cycle(voting_cycle.cycle_id)) == 1


def test_candidates_are_distinct_nominees_most_nominated_first(container, people, voting_cycle):
    candidates = container.vote_service.list_candidates(voting_cycle.cycle_id)

    assert [(c.name, c.nomination_count) for c in candidates] == [("Bob", 2), ("Carol", 1)]
    assert candidates[0].department == "Support"
