from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..cycles.model import Cycle


@dataclass
class CycleStats:
    """Derived per-nominee totals for one cycle (never persisted)."""

    nominee_id: int
    nominee_name: str
    nomination_count: int = 0
    vote_count: int = 0

    def to_dict(self) -> dict:
        return {
            "nominee_id": self.nominee_id,
            "nominee_name": self.nominee_name,
            "nomination_count": self.nomination_count,
            "vote_count": self.vote_count,
        }


@dataclass(frozen=True)
class GivenNomination:
    nominee_id: int
    nominee_name: str
    reason: str


@dataclass(frozen=True)
class ReceivedNomination:
    nominator_id: int
    nominator_name: str
    reason: str


@dataclass(frozen=True)
class HistoryEntry:
    """One user's activity in one cycle."""

    cycle: Cycle
    nominated: Optional[GivenNomination]
    voted: bool
    received_nominations: list[ReceivedNomination] = field(default_factory=list)
    votes_received: int = 0

    def to_dict(self) -> dict:
        return {
            "cycle": self.cycle.to_dict(),
            "nominated": (
                {
                    "nominee_id": self.nominated.nominee_id,
                    "name": self.nominated.nominee_name,
                    "reason": self.nominated.reason,
                }
                if self.nominated
                else None
            ),
            "voted": self.voted,
            "received_nominations": [
                {"nominator_id": r.nominator_id, "from": r.nominator_name, "reason": r.reason}
                for r in self.received_nominations
            ],
            "votes_received": self.votes_received,
        }


@dataclass(frozen=True)
class Participation:
    """Dashboard read-model: the active cycle from one user's point of view."""

    cycle: Optional[Cycle]
    has_nominated: bool = False
    has_voted: bool = False
    winner_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "cycle": self.cycle.to_dict() if self.cycle else None,
            "has_nominated": self.has_nominated,
            "has_voted": self.has_voted,
            "winner_name": self.winner_name,
        }
