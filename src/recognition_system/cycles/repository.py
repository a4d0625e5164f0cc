from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import CycleStatus
from .model import Cycle, PhaseWindows


class CycleRepository(Protocol):
    def get_by_id(self, cycle_id: int) -> Optional[Cycle]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Cycle]:
        raise NotImplementedError

    def list_open(self) -> Sequence[Cycle]:
        """Cycles whose status is not CLOSED."""

        raise NotImplementedError

    def open_cycle(
        self,
        *,
        month: int,
        year: int,
        windows: Optional[PhaseWindows],
        created_at: datetime,
    ) -> Optional[Cycle]:
        """Close every open cycle and insert a NOMINATION cycle, atomically.

        Returns ``None`` when another open cycle won a concurrent race.
        """

        raise NotImplementedError

    def update_status(
        self,
        cycle_id: int,
        *,
        expected: CycleStatus,
        new_status: CycleStatus,
        voting_start: Optional[datetime] = None,
    ) -> bool:
        """Compare-and-set on status. ``voting_start`` replaces the stored one if given."""

        raise NotImplementedError

    def set_winner(self, cycle_id: int, *, winner_id: int) -> bool:
        """Record the winner and close the cycle, only if VOTING with no winner yet."""

        raise NotImplementedError
