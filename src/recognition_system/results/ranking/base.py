from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ..model import CycleStats


class RankingPolicy(ABC):
    """Ranking interface (Strategy Pattern for leaderboard ordering)."""

    @abstractmethod
    def rank(self, stats: Iterable[CycleStats]) -> list[CycleStats]:
        raise NotImplementedError
