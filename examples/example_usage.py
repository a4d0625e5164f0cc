"""Example: drive the service layer directly (no Flask), on the in-memory backend.

Controllers are a thin layer; the whole cycle (nominate, vote, declare a
winner, read history) lives in the services.
"""

from datetime import datetime, timezone

from recognition_system.container import build_container
from recognition_system.core.enums import CycleStatus, Role


def main():
    c = build_container(backend="memory")
    now = datetime(2024, 3, 15, 9, 0, tzinfo=timezone.utc)

    admin = c.user_service.add_user(name="Admin", email="admin@example.com", role=Role.ADMIN)
    alice = c.user_service.add_user(name="Alice", email="alice@example.com", department="Sales")
    bob = c.user_service.add_user(name="Bob", email="bob@example.com", department="Support")
    carol = c.user_service.add_user(name="Carol", email="carol@example.com", department="IT")

    cycle = c.cycle_service.create_cycle(2, 2024, now=now)
    c.nomination_service.submit(alice.user_id, bob.user_id, cycle.cycle_id, "Great work on the release", now=now)
    c.nomination_service.submit(carol.user_id, bob.user_id, cycle.cycle_id, "Always helps out", now=now)
    c.nomination_service.submit(bob.user_id, carol.user_id, cycle.cycle_id, "Fixed the outage", now=now)

    c.cycle_service.advance_status(cycle.cycle_id, CycleStatus.VOTING, now=now)
    for voter, nominee in ((alice, bob), (admin, bob), (bob, carol)):
        c.vote_service.submit(voter.user_id, nominee.user_id, cycle.cycle_id, now=now)

    for row in c.results_service.compute_stats(cycle.cycle_id):
        print(row.to_dict())

    closed = c.cycle_service.declare_winner(cycle.cycle_id)
    print("winner:", c.user_service.get_user(closed.winner_id).name)
    print([h.to_dict() for h in c.results_service.compute_employee_history(bob.user_id)])


if __name__ == "__main__":
    main()
