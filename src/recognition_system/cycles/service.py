from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Optional

from ..common.datetime_utils import month_index, now_utc
from ..core.constants import CLOCK_SKEW_SECONDS, MAX_CYCLE_YEAR, MIN_CYCLE_YEAR
from ..core.enums import CycleStatus
from ..core.exceptions import (
    CycleAlreadyActive,
    InvalidPeriod,
    InvalidTransition,
    NoVotesRecorded,
    NotFound,
    PhaseClosed,
)
from .model import Cycle, PhaseWindows
from .repository import CycleRepository

if TYPE_CHECKING:
    from ..results.service import ResultsService

logger = logging.getLogger(__name__)

_PHASE_LABELS = {
    CycleStatus.NOMINATION: "Nominations",
    CycleStatus.VOTING: "Voting",
}


class CycleService:
    """Lifecycle controller for monthly cycles.

    Owns the NOMINATION -> VOTING -> CLOSED transitions, phase gating for the
    two ledgers and winner declaration. At most one cycle is open at a time.
    """

    def __init__(
        self,
        cycles: CycleRepository,
        results: "ResultsService",
        *,
        clock_skew_seconds: int = CLOCK_SKEW_SECONDS,
    ):
        self._cycles = cycles
        self._results = results
        self._clock_skew = timedelta(seconds=int(clock_skew_seconds))

    # -------- Queries --------
    def get_cycle(self, cycle_id: int) -> Optional[Cycle]:
        return self._cycles.get_by_id(int(cycle_id))

    def require_cycle(self, cycle_id: int) -> Cycle:
        cycle = self._cycles.get_by_id(int(cycle_id))
        if not cycle:
            raise NotFound("Cycle does not exist")
        return cycle

    def list_cycles(self) -> list[Cycle]:
        return sorted(self._cycles.list_all(), key=lambda c: (c.sort_key, c.cycle_id), reverse=True)

    def get_active_cycle(self) -> Optional[Cycle]:
        """Open nomination cycle, else voting cycle, else most recent closed one."""
        cycles = self._cycles.list_all()
        for status in (CycleStatus.NOMINATION, CycleStatus.VOTING, CycleStatus.CLOSED):
            matching = [c for c in cycles if c.status == status]
            if matching:
                return max(matching, key=lambda c: (c.sort_key, c.cycle_id))
        return None

    def require_phase(self, cycle_id: int, phase: CycleStatus, *, now: Optional[datetime] = None) -> Cycle:
        """Return the cycle if it currently accepts submissions for ``phase``."""
        now = now or now_utc()
        cycle = self.require_cycle(cycle_id)
        label = _PHASE_LABELS[phase]

        if cycle.status != phase:
            raise PhaseClosed(f"{label} are not open for {cycle.label} (status: {cycle.status.value})")

        if cycle.windows and not cycle.windows.is_open(phase, now):
            start, end = cycle.windows.bounds_for(phase)
            if now < start:
                raise PhaseClosed(f"{label} for {cycle.label} open at {start.isoformat()}")
            raise PhaseClosed(f"{label} for {cycle.label} closed at {end.isoformat()}")
        return cycle

    # -------- Commands --------
    def create_cycle(
        self,
        month: int,
        year: int,
        windows: Optional[PhaseWindows] = None,
        *,
        now: Optional[datetime] = None,
    ) -> Cycle:
        now = now or now_utc()
        month, year = self._validate_period(month, year, windows, now=now)

        open_cycles = self._cycles.list_open()
        if open_cycles:
            current = open_cycles[0]
            raise CycleAlreadyActive(
                f"{current.label} is still in {current.status.value}; close it before starting a new cycle"
            )

        cycle = self._cycles.open_cycle(month=month, year=year, windows=windows, created_at=now)
        if cycle is None:
            raise CycleAlreadyActive("Another cycle was started at the same time")

        logger.info("Started cycle %s (%s)", cycle.cycle_id, cycle.label)
        return cycle

    def advance_status(
        self,
        cycle_id: int,
        new_status: CycleStatus,
        *,
        force: bool = False,
        now: Optional[datetime] = None,
    ) -> Cycle:
        now = now or now_utc()
        cycle = self.require_cycle(cycle_id)
        new_status = CycleStatus(new_status)
        current = cycle.status

        if new_status.rank <= current.rank:
            raise InvalidTransition(f"Cannot move a {current.value} cycle to {new_status.value}")
        if new_status.rank - current.rank > 1 and not force:
            raise InvalidTransition(f"Moving from {current.value} to {new_status.value} skips a phase")

        voting_start = None
        if current == CycleStatus.NOMINATION and new_status == CycleStatus.VOTING and cycle.windows:
            if now < cycle.windows.nomination_end:
                if not force:
                    raise InvalidTransition(
                        "The nomination window is still open; force the change to start voting early"
                    )
                voting_start = now

        if not self._cycles.update_status(
            cycle.cycle_id, expected=current, new_status=new_status, voting_start=voting_start
        ):
            raise InvalidTransition("The cycle changed in the meantime; reload and try again")

        logger.info(
            "Cycle %s moved %s -> %s%s",
            cycle.cycle_id,
            current.value,
            new_status.value,
            " (forced)" if force else "",
        )
        return self.require_cycle(cycle.cycle_id)

    def declare_winner(self, cycle_id: int) -> Cycle:
        """Close a voting cycle with the current leader as winner."""
        cycle = self.require_cycle(cycle_id)
        if cycle.status == CycleStatus.CLOSED:
            raise PhaseClosed(f"{cycle.label} is already closed")
        if cycle.status != CycleStatus.VOTING:
            raise PhaseClosed(f"A winner can only be declared while {cycle.label} is in VOTING")

        leader = self._results.compute_leader(cycle.cycle_id)
        if leader is None or leader.vote_count <= 0:
            raise NoVotesRecorded(f"No votes have been recorded for {cycle.label}")

        if not self._cycles.set_winner(cycle.cycle_id, winner_id=leader.nominee_id):
            raise PhaseClosed(f"{cycle.label} was closed in the meantime")

        logger.info(
            "Cycle %s closed; winner %s with %s vote(s)",
            cycle.cycle_id,
            leader.nominee_id,
            leader.vote_count,
        )
        return self.require_cycle(cycle.cycle_id)

    # -------- Validation --------
    def _validate_period(
        self,
        month: int,
        year: int,
        windows: Optional[PhaseWindows],
        *,
        now: datetime,
    ) -> tuple[int, int]:
        try:
            month = int(month)
            year = int(year)
        except (TypeError, ValueError):
            raise InvalidPeriod("Month and year must be numbers")

        if not 0 <= month <= 11:
            raise InvalidPeriod("Month must be between 0 (January) and 11 (December)")
        if not MIN_CYCLE_YEAR <= year <= MAX_CYCLE_YEAR:
            raise InvalidPeriod(f"Year must be between {MIN_CYCLE_YEAR} and {MAX_CYCLE_YEAR}")

        if windows is None:
            if month_index(year, month) > month_index(now.year, now.month - 1):
                raise InvalidPeriod("Cannot start a cycle for a future month")
            return month, year

        if windows.nomination_start < now - self._clock_skew:
            raise InvalidPeriod("Nomination start is in the past")
        if windows.nomination_end <= windows.nomination_start:
            raise InvalidPeriod("Nomination end must be after nomination start")
        if windows.voting_start < windows.nomination_end:
            raise InvalidPeriod("Voting cannot start before nominations end")
        if windows.voting_end <= windows.voting_start:
            raise InvalidPeriod("Voting end must be after voting start")
        return month, year
