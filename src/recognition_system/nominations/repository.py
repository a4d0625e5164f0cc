from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Nomination


class NominationRepository(Protocol):
    def add_if_absent(
        self,
        *,
        nominator_id: int,
        nominee_id: int,
        cycle_id: int,
        reason: str,
        submitted_at: datetime,
    ) -> Optional[Nomination]:
        """Atomic insert; ``None`` if the nominator already nominated in the cycle."""

        raise NotImplementedError

    def get_by_nominator(self, nominator_id: int, cycle_id: int) -> Optional[Nomination]:
        raise NotImplementedError

    def list_for_cycle(self, cycle_id: int) -> Sequence[Nomination]:
        raise NotImplementedError

    def list_by_nominator(self, nominator_id: int) -> Sequence[Nomination]:
        raise NotImplementedError

    def list_for_nominee(self, nominee_id: int) -> Sequence[Nomination]:
        raise NotImplementedError
