"""In-process storage backend.

Implements every repository interface over plain dicts guarded by one
re-entrant lock per store, so check-and-insert operations are atomic across
threads. Used by the ``testing`` settings and the service-layer example.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime
from itertools import count
from typing import Optional, Sequence

from ..core.enums import CycleStatus, Role, UserStatus
from ..cycles.model import Cycle, PhaseWindows
from ..cycles.repository import CycleRepository
from ..nominations.model import Nomination
from ..nominations.repository import NominationRepository
from ..users.model import User
from ..users.repository import UserRepository
from ..votes.model import Vote
from ..votes.repository import VoteRepository


class InMemoryStore:
    def __init__(self):
        self.lock = threading.RLock()
        self.users: dict[int, User] = {}
        self.cycles: dict[int, Cycle] = {}
        self.nominations: dict[int, Nomination] = {}
        self.votes: dict[int, Vote] = {}
        self._ids = {name: count(1) for name in ("users", "cycles", "nominations", "votes")}

    def next_id(self, table: str) -> int:
        return next(self._ids[table])


class InMemoryUserRepository(UserRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, user_id: int) -> Optional[User]:
        with self._store.lock:
            return self._store.users.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        with self._store.lock:
            return next((u for u in self._store.users.values() if u.email == email), None)

    def list_all(self) -> Sequence[User]:
        with self._store.lock:
            return sorted(self._store.users.values(), key=lambda u: (u.name, u.user_id))

    def register_user(self, *, name: str, email: str, department: str) -> Optional[User]:
        with self._store.lock:
            role = Role.ADMIN if not self._store.users else Role.EMPLOYEE
            user_id = self.create_user(name=name, email=email, role=role, department=department)
            return self._store.users[user_id] if user_id is not None else None

    def create_user(
        self,
        *,
        name: str,
        email: str,
        role: Role,
        department: str,
        status: UserStatus = UserStatus.ACTIVE,
    ) -> Optional[int]:
        with self._store.lock:
            if self.get_by_email(email):
                return None
            user_id = self._store.next_id("users")
            self._store.users[user_id] = User(
                user_id=user_id,
                name=name,
                email=email,
                role=role,
                department=department,
                status=status,
            )
            return user_id

    def update_user(self, user: User) -> bool:
        with self._store.lock:
            current = self._store.users.get(user.user_id)
            if not current:
                return False
            other = self.get_by_email(user.email)
            if other and other.user_id != user.user_id:
                return False
            self._store.users[user.user_id] = replace(
                current,
                name=user.name,
                email=user.email,
                role=user.role,
                department=user.department,
            )
            return True

    def set_status(self, user_id: int, *, status: UserStatus) -> bool:
        with self._store.lock:
            current = self._store.users.get(int(user_id))
            if not current:
                return False
            self._store.users[current.user_id] = replace(current, status=status)
            return True


class InMemoryCycleRepository(CycleRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def get_by_id(self, cycle_id: int) -> Optional[Cycle]:
        with self._store.lock:
            return self._store.cycles.get(int(cycle_id))

    def list_all(self) -> Sequence[Cycle]:
        with self._store.lock:
            return sorted(self._store.cycles.values(), key=lambda c: (c.sort_key, c.cycle_id), reverse=True)

    def list_open(self) -> Sequence[Cycle]:
        with self._store.lock:
            return sorted(
                (c for c in self._store.cycles.values() if c.is_open),
                key=lambda c: c.cycle_id,
                reverse=True,
            )

    def open_cycle(
        self,
        *,
        month: int,
        year: int,
        windows: Optional[PhaseWindows],
        created_at: datetime,
    ) -> Optional[Cycle]:
        with self._store.lock:
            for c in list(self._store.cycles.values()):
                if c.is_open:
                    self._store.cycles[c.cycle_id] = replace(c, status=CycleStatus.CLOSED)

            cycle_id = self._store.next_id("cycles")
            cycle = Cycle(
                cycle_id=cycle_id,
                month=int(month),
                year=int(year),
                status=CycleStatus.NOMINATION,
                windows=windows,
                created_at=created_at,
            )
            self._store.cycles[cycle_id] = cycle
            return cycle

    def update_status(
        self,
        cycle_id: int,
        *,
        expected: CycleStatus,
        new_status: CycleStatus,
        voting_start: Optional[datetime] = None,
    ) -> bool:
        with self._store.lock:
            current = self._store.cycles.get(int(cycle_id))
            if not current or current.status != expected:
                return False
            windows = current.windows
            if voting_start is not None and windows is not None:
                windows = replace(windows, voting_start=voting_start)
            self._store.cycles[current.cycle_id] = replace(current, status=new_status, windows=windows)
            return True

    def set_winner(self, cycle_id: int, *, winner_id: int) -> bool:
        with self._store.lock:
            current = self._store.cycles.get(int(cycle_id))
            if not current or current.status != CycleStatus.VOTING or current.winner_id is not None:
                return False
            self._store.cycles[current.cycle_id] = replace(
                current, status=CycleStatus.CLOSED, winner_id=int(winner_id)
            )
            return True


class InMemoryNominationRepository(NominationRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def add_if_absent(
        self,
        *,
        nominator_id: int,
        nominee_id: int,
        cycle_id: int,
        reason: str,
        submitted_at: datetime,
    ) -> Optional[Nomination]:
        with self._store.lock:
            if self.get_by_nominator(nominator_id, cycle_id):
                return None
            nomination = Nomination(
                nomination_id=self._store.next_id("nominations"),
                nominator_id=int(nominator_id),
                nominee_id=int(nominee_id),
                cycle_id=int(cycle_id),
                reason=reason,
                submitted_at=submitted_at,
            )
            self._store.nominations[nomination.nomination_id] = nomination
            return nomination

    def get_by_nominator(self, nominator_id: int, cycle_id: int) -> Optional[Nomination]:
        with self._store.lock:
            return next(
                (
                    n
                    for n in self._store.nominations.values()
                    if n.nominator_id == int(nominator_id) and n.cycle_id == int(cycle_id)
                ),
                None,
            )

    def list_for_cycle(self, cycle_id: int) -> Sequence[Nomination]:
        return self._filter(lambda n: n.cycle_id == int(cycle_id))

    def list_by_nominator(self, nominator_id: int) -> Sequence[Nomination]:
        return self._filter(lambda n: n.nominator_id == int(nominator_id))

    def list_for_nominee(self, nominee_id: int) -> Sequence[Nomination]:
        return self._filter(lambda n: n.nominee_id == int(nominee_id))

    def _filter(self, predicate) -> Sequence[Nomination]:
        with self._store.lock:
            return [n for n in self._store.nominations.values() if predicate(n)]


class InMemoryVoteRepository(VoteRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    def add_if_absent(
        self,
        *,
        voter_id: int,
        nominee_id: int,
        cycle_id: int,
        submitted_at: datetime,
    ) -> Optional[Vote]:
        with self._store.lock:
            if self.get_by_voter(voter_id, cycle_id):
                return None
            vote = Vote(
                vote_id=self._store.next_id("votes"),
                voter_id=int(voter_id),
                nominee_id=int(nominee_id),
                cycle_id=int(cycle_id),
                submitted_at=submitted_at,
            )
            self._store.votes[vote.vote_id] = vote
            return vote

    def get_by_voter(self, voter_id: int, cycle_id: int) -> Optional[Vote]:
        with self._store.lock:
            return next(
                (
                    v
                    for v in self._store.votes.values()
                    if v.voter_id == int(voter_id) and v.cycle_id == int(cycle_id)
                ),
                None,
            )

    def list_for_cycle(self, cycle_id: int) -> Sequence[Vote]:
        return self._filter(lambda v: v.cycle_id == int(cycle_id))

    def list_by_voter(self, voter_id: int) -> Sequence[Vote]:
        return self._filter(lambda v: v.voter_id == int(voter_id))

    def list_for_nominee(self, nominee_id: int) -> Sequence[Vote]:
        return self._filter(lambda v: v.nominee_id == int(nominee_id))

    def _filter(self, predicate) -> Sequence[Vote]:
        with self._store.lock:
            return [v for v in self._store.votes.values() if predicate(v)]
