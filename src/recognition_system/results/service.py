from __future__ import annotations

import logging
from collections import Counter, defaultdict
from typing import Iterable, Optional

from ..core.constants import UNKNOWN_NAME
from ..core.exceptions import Unavailable
from ..cycles.model import Cycle
from ..cycles.repository import CycleRepository
from ..nominations.repository import NominationRepository
from ..users.repository import UserRepository
from ..votes.repository import VoteRepository
from .model import CycleStats, GivenNomination, HistoryEntry, Participation, ReceivedNomination
from .ranking.base import RankingPolicy
from .ranking.vote_count_ranking import VoteCountRanking

logger = logging.getLogger(__name__)


class ResultsService:
    """Results aggregator: joins both ledgers against the user directory.

    Everything is recomputed from the ledgers on each call. Names degrade to a
    placeholder when a user is missing or the directory cannot be reached.
    """

    def __init__(
        self,
        cycles: CycleRepository,
        nominations: NominationRepository,
        votes: VoteRepository,
        users: UserRepository,
        *,
        ranking: Optional[RankingPolicy] = None,
    ):
        self._cycles = cycles
        self._nominations = nominations
        self._votes = votes
        self._users = users
        self._ranking = ranking or VoteCountRanking()

    def compute_stats(self, cycle_id: int) -> list[CycleStats]:
        stats: dict[int, CycleStats] = {}

        for nom in self._nominations.list_for_cycle(int(cycle_id)):
            entry = stats.setdefault(nom.nominee_id, CycleStats(nominee_id=nom.nominee_id, nominee_name=UNKNOWN_NAME))
            entry.nomination_count += 1

        for vote in self._votes.list_for_cycle(int(cycle_id)):
            entry = stats.setdefault(vote.nominee_id, CycleStats(nominee_id=vote.nominee_id, nominee_name=UNKNOWN_NAME))
            entry.vote_count += 1

        names = self._resolve_names(stats.keys())
        for entry in stats.values():
            entry.nominee_name = names.get(entry.nominee_id, UNKNOWN_NAME)

        return self._ranking.rank(stats.values())

    def compute_leader(self, cycle_id: int) -> Optional[CycleStats]:
        ranked = self.compute_stats(cycle_id)
        return ranked[0] if ranked else None

    def compute_employee_history(self, user_id: int) -> list[HistoryEntry]:
        """Per-cycle activity of one user, most recent cycle first."""
        user_id = int(user_id)

        given = {n.cycle_id: n for n in self._nominations.list_by_nominator(user_id)}
        voted_cycles = {v.cycle_id for v in self._votes.list_by_voter(user_id)}
        votes_received = Counter(v.cycle_id for v in self._votes.list_for_nominee(user_id))
        received = defaultdict(list)
        for n in self._nominations.list_for_nominee(user_id):
            received[n.cycle_id].append(n)

        names = self._resolve_names(
            {n.nominee_id for n in given.values()}
            | {n.nominator_id for noms in received.values() for n in noms}
        )

        history: list[HistoryEntry] = []
        for cycle in self._cycles.list_all():
            mine = given.get(cycle.cycle_id)
            history.append(
                HistoryEntry(
                    cycle=cycle,
                    nominated=(
                        GivenNomination(
                            nominee_id=mine.nominee_id,
                            nominee_name=names.get(mine.nominee_id, UNKNOWN_NAME),
                            reason=mine.reason,
                        )
                        if mine
                        else None
                    ),
                    voted=cycle.cycle_id in voted_cycles,
                    received_nominations=[
                        ReceivedNomination(
                            nominator_id=n.nominator_id,
                            nominator_name=names.get(n.nominator_id, UNKNOWN_NAME),
                            reason=n.reason,
                        )
                        for n in received.get(cycle.cycle_id, [])
                    ],
                    votes_received=votes_received.get(cycle.cycle_id, 0),
                )
            )

        history.sort(key=lambda h: (h.cycle.sort_key, h.cycle.cycle_id), reverse=True)
        return history

    def participation(self, user_id: int, cycle: Optional[Cycle]) -> Participation:
        if cycle is None:
            return Participation(cycle=None)

        winner_name = None
        if cycle.winner_id is not None:
            winner_name = self._resolve_names([cycle.winner_id]).get(cycle.winner_id, UNKNOWN_NAME)

        return Participation(
            cycle=cycle,
            has_nominated=self._nominations.get_by_nominator(int(user_id), cycle.cycle_id) is not None,
            has_voted=self._votes.get_by_voter(int(user_id), cycle.cycle_id) is not None,
            winner_name=winner_name,
        )

    def _resolve_names(self, user_ids: Iterable[int]) -> dict[int, str]:
        user_ids = list(user_ids)
        names: dict[int, str] = {}
        for user_id in user_ids:
            try:
                user = self._users.get_by_id(user_id)
            except Unavailable:
                logger.warning(
                    "User directory unavailable; %d name(s) shown as %r", len(user_ids) - len(names), UNKNOWN_NAME
                )
                break
            if user:
                names[user_id] = user.name
        return names
