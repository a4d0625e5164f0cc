from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import month_index
from ..core.constants import MONTHS
from ..core.enums import CycleStatus


@dataclass(frozen=True)
class PhaseWindows:
    """Wall-clock boundaries of both phases, half-open ``[start, end)``."""

    nomination_start: datetime
    nomination_end: datetime
    voting_start: datetime
    voting_end: datetime

    def bounds_for(self, phase: CycleStatus) -> tuple[datetime, datetime]:
        if phase == CycleStatus.NOMINATION:
            return self.nomination_start, self.nomination_end
        if phase == CycleStatus.VOTING:
            return self.voting_start, self.voting_end
        raise ValueError(f"No submission window for {phase.value}")

    def is_open(self, phase: CycleStatus, now: datetime) -> bool:
        start, end = self.bounds_for(phase)
        return start <= now < end

    def to_dict(self) -> dict:
        return {
            "nomination_start": self.nomination_start.isoformat(),
            "nomination_end": self.nomination_end.isoformat(),
            "voting_start": self.voting_start.isoformat(),
            "voting_end": self.voting_end.isoformat(),
        }


@dataclass(frozen=True)
class Cycle:
    """Domain entity: one monthly nomination-then-voting competition."""

    cycle_id: int
    month: int  # 0-11
    year: int
    status: CycleStatus
    winner_id: Optional[int] = None
    windows: Optional[PhaseWindows] = None
    created_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.status != CycleStatus.CLOSED

    @property
    def sort_key(self) -> int:
        return month_index(self.year, self.month)

    @property
    def label(self) -> str:
        return f"{MONTHS[self.month]} {self.year}"

    def to_dict(self) -> dict:
        return {
            "cycle_id": self.cycle_id,
            "month": self.month,
            "year": self.year,
            "label": self.label,
            "status": self.status.value,
            "winner_id": self.winner_id,
            "windows": self.windows.to_dict() if self.windows else None,
        }
