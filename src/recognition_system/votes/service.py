from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.constants import UNKNOWN_NAME
from ..core.enums import CycleStatus
from ..core.exceptions import AuthorizationError, DuplicateSubmission, InvalidCandidate, NotFound
from ..cycles.service import CycleService
from ..nominations.repository import NominationRepository
from ..users.repository import UserRepository
from .model import Candidate, Vote
from .repository import VoteRepository

logger = logging.getLogger(__name__)


class VoteService:
    """Vote ledger: at most one vote per (voter, cycle), only for nominees.

    Voting for yourself is allowed when a colleague nominated you.
    """

    def __init__(
        self,
        votes: VoteRepository,
        nominations: NominationRepository,
        cycles: CycleService,
        users: UserRepository,
    ):
        self._votes = votes
        self._nominations = nominations
        self._cycles = cycles
        self._users = users

    def submit(self, voter_id: int, nominee_id: int, cycle_id: int, *, now: Optional[datetime] = None) -> Vote:
        now = now or now_utc()
        cycle = self._cycles.require_phase(cycle_id, CycleStatus.VOTING, now=now)

        voter = self._users.get_by_id(int(voter_id))
        if not voter:
            raise NotFound("Voter does not exist")
        if not voter.is_active:
            raise AuthorizationError("Inactive users cannot vote")

        candidate_ids = {n.nominee_id for n in self._nominations.list_for_cycle(cycle.cycle_id)}
        if int(nominee_id) not in candidate_ids:
            raise InvalidCandidate("This person was not nominated in this cycle")

        if self._votes.get_by_voter(voter.user_id, cycle.cycle_id):
            raise DuplicateSubmission("You have already voted this cycle.")

        vote = self._votes.add_if_absent(
            voter_id=voter.user_id,
            nominee_id=int(nominee_id),
            cycle_id=cycle.cycle_id,
            submitted_at=now,
        )
        if vote is None:
            logger.warning("Concurrent duplicate vote by user %s in cycle %s", voter.user_id, cycle.cycle_id)
            raise DuplicateSubmission("You have already voted this cycle.")

        logger.info("User %s voted in cycle %s", voter.user_id, cycle.cycle_id)
        return vote

    def list_for_cycle(self, cycle_id: int) -> Sequence[Vote]:
        return self._votes.list_for_cycle(int(cycle_id))

    def get_by_voter(self, voter_id: int, cycle_id: int) -> Optional[Vote]:
        return self._votes.get_by_voter(int(voter_id), int(cycle_id))

    def list_candidates(self, cycle_id: int) -> list[Candidate]:
        """Distinct nominees of the cycle, most nominated first."""
        counts = Counter(n.nominee_id for n in self._nominations.list_for_cycle(int(cycle_id)))

        out: list[Candidate] = []
        for nominee_id, count in counts.items():
            user = self._users.get_by_id(nominee_id)
            out.append(
                Candidate(
                    user_id=nominee_id,
                    name=user.name if user else UNKNOWN_NAME,
                    department=user.department if user else "",
                    nomination_count=count,
                )
            )
        out.sort(key=lambda c: (-c.nomination_count, c.name.lower(), c.user_id))
        return out
