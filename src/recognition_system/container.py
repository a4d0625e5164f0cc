from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.constants import CLOCK_SKEW_SECONDS
from .cycles.repository import CycleRepository
from .cycles.service import CycleService
from .nominations.repository import NominationRepository
from .nominations.service import NominationService
from .results.service import ResultsService
from .users.repository import UserRepository
from .users.service import UserService
from .votes.repository import VoteRepository
from .votes.service import VoteService

BACKEND_MYSQL = "mysql"
BACKEND_MEMORY = "memory"


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    cycles_repo: CycleRepository
    nominations_repo: NominationRepository
    votes_repo: VoteRepository

    user_service: UserService
    cycle_service: CycleService
    nomination_service: NominationService
    vote_service: VoteService
    results_service: ResultsService


def build_container(
    *,
    db_config: Optional[dict] = None,
    backend: str = BACKEND_MYSQL,
    clock_skew_seconds: int = CLOCK_SKEW_SECONDS,
) -> Container:
    backend = (backend or BACKEND_MYSQL).lower()

    if backend == BACKEND_MEMORY:
        from .database.memory_store import (
            InMemoryCycleRepository,
            InMemoryNominationRepository,
            InMemoryStore,
            InMemoryUserRepository,
            InMemoryVoteRepository,
        )

        store = InMemoryStore()
        users_repo = InMemoryUserRepository(store)
        cycles_repo = InMemoryCycleRepository(store)
        nominations_repo = InMemoryNominationRepository(store)
        votes_repo = InMemoryVoteRepository(store)
    elif backend == BACKEND_MYSQL:
        from .cycles.mysql_cycle_repository import MySQLCycleRepository
        from .database.connection import DBConfig, DatabaseConnection
        from .nominations.mysql_nomination_repository import MySQLNominationRepository
        from .users.mysql_user_repository import MySQLUserRepository
        from .votes.mysql_vote_repository import MySQLVoteRepository

        if not db_config:
            raise ValueError("db_config is required for the mysql backend")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        users_repo = MySQLUserRepository(conn)
        cycles_repo = MySQLCycleRepository(conn)
        nominations_repo = MySQLNominationRepository(conn)
        votes_repo = MySQLVoteRepository(conn)
    else:
        raise ValueError(f"Unknown storage backend: {backend!r}")

    results_service = ResultsService(cycles_repo, nominations_repo, votes_repo, users_repo)
    cycle_service = CycleService(cycles_repo, results_service, clock_skew_seconds=clock_skew_seconds)
    user_service = UserService(users_repo)
    nomination_service = NominationService(nominations_repo, cycle_service, users_repo)
    vote_service = VoteService(votes_repo, nominations_repo, cycle_service, users_repo)

    return Container(
        users_repo=users_repo,
        cycles_repo=cycles_repo,
        nominations_repo=nominations_repo,
        votes_repo=votes_repo,
        user_service=user_service,
        cycle_service=cycle_service,
        nomination_service=nomination_service,
        vote_service=vote_service,
        results_service=results_service,
    )
