from __future__ import annotations

from typing import Iterable

from ..model import CycleStats
from .base import RankingPolicy


class VoteCountRanking(RankingPolicy):
    """Standard rule: most votes first, then most nominations, then lowest nominee id."""

    def rank(self, stats: Iterable[CycleStats]) -> list[CycleStats]:
        return sorted(stats, key=lambda s: (-s.vote_count, -s.nomination_count, s.nominee_id))
