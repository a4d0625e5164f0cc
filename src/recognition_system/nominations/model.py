from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Nomination:
    """Domain entity: one user's nomination of a colleague in a cycle."""

    nomination_id: int
    nominator_id: int
    nominee_id: int
    cycle_id: int
    reason: str
    submitted_at: datetime

    def to_dict(self) -> dict:
        return {
            "nomination_id": self.nomination_id,
            "nominator_id": self.nominator_id,
            "nominee_id": self.nominee_id,
            "cycle_id": self.cycle_id,
            "reason": self.reason,
            "submitted_at": self.submitted_at.isoformat(),
        }
