from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Vote:
    """Domain entity: one ballot for one nominee in a cycle."""

    vote_id: int
    voter_id: int
    nominee_id: int
    cycle_id: int
    submitted_at: datetime

    def to_dict(self) -> dict:
        return {
            "vote_id": self.vote_id,
            "voter_id": self.voter_id,
            "nominee_id": self.nominee_id,
            "cycle_id": self.cycle_id,
            "submitted_at": self.submitted_at.isoformat(),
        }


@dataclass(frozen=True)
class Candidate:
    """Read-model for the ballot: a nominee and how often they were nominated."""

    user_id: int
    name: str
    department: str
    nomination_count: int

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "department": self.department,
            "nomination_count": self.nomination_count,
        }
