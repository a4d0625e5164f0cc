from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Vote


class VoteRepository(Protocol):
    def add_if_absent(
        self,
        *,
        voter_id: int,
        nominee_id: int,
        cycle_id: int,
        submitted_at: datetime,
    ) -> Optional[Vote]:
        """Atomic insert; ``None`` if the voter already voted in the cycle."""

        raise NotImplementedError

    def get_by_voter(self, voter_id: int, cycle_id: int) -> Optional[Vote]:
        raise NotImplementedError

    def list_for_cycle(self, cycle_id: int) -> Sequence[Vote]:
        raise NotImplementedError

    def list_by_voter(self, voter_id: int) -> Sequence[Vote]:
        raise NotImplementedError

    def list_for_nominee(self, nominee_id: int) -> Sequence[Vote]:
        raise NotImplementedError
