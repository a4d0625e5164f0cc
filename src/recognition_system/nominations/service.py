from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc
from ..common.validators import require_max_length, require_non_empty
from ..core.constants import MAX_REASON_LENGTH
from ..core.enums import CycleStatus, Role
from ..core.exceptions import (
    AuthorizationError,
    DuplicateSubmission,
    InvalidCandidate,
    NotFound,
    ValidationError,
)
from ..cycles.service import CycleService
from ..users.model import User
from ..users.repository import UserRepository
from .model import Nomination
from .repository import NominationRepository

logger = logging.getLogger(__name__)


class NominationService:
    """Nomination ledger: at most one nomination per (nominator, cycle)."""

    def __init__(self, nominations: NominationRepository, cycles: CycleService, users: UserRepository):
        self._nominations = nominations
        self._cycles = cycles
        self._users = users

    def submit(
        self,
        nominator_id: int,
        nominee_id: int,
        cycle_id: int,
        reason: str,
        *,
        now: Optional[datetime] = None,
    ) -> Nomination:
        now = now or now_utc()
        cycle = self._cycles.require_phase(cycle_id, CycleStatus.NOMINATION, now=now)

        nominator = self._users.get_by_id(int(nominator_id))
        if not nominator:
            raise NotFound("Nominator does not exist")
        if not nominator.is_active:
            raise AuthorizationError("Inactive users cannot nominate")

        if int(nominee_id) == nominator.user_id:
            raise ValidationError("You cannot nominate yourself")

        nominee = self._users.get_by_id(int(nominee_id))
        if not nominee or not nominee.is_active or nominee.role != Role.EMPLOYEE:
            raise InvalidCandidate("Nominee must be an active employee")

        reason = require_max_length(require_non_empty(reason, "Reason"), "Reason", MAX_REASON_LENGTH)

        if self._nominations.get_by_nominator(nominator.user_id, cycle.cycle_id):
            raise DuplicateSubmission("You have already nominated someone this cycle.")

        nomination = self._nominations.add_if_absent(
            nominator_id=nominator.user_id,
            nominee_id=nominee.user_id,
            cycle_id=cycle.cycle_id,
            reason=reason,
            submitted_at=now,
        )
        if nomination is None:
            logger.warning("Concurrent duplicate nomination by user %s in cycle %s", nominator.user_id, cycle.cycle_id)
            raise DuplicateSubmission("You have already nominated someone this cycle.")

        logger.info("User %s nominated %s in cycle %s", nominator.user_id, nominee.user_id, cycle.cycle_id)
        return nomination

    def list_for_cycle(self, cycle_id: int) -> Sequence[Nomination]:
        return self._nominations.list_for_cycle(int(cycle_id))

    def get_by_nominator(self, nominator_id: int, cycle_id: int) -> Optional[Nomination]:
        return self._nominations.get_by_nominator(int(nominator_id), int(cycle_id))

    def list_eligible_nominees(self, nominator_id: int) -> list[User]:
        """Active employees other than the nominator, by name."""
        return sorted(
            (
                u
                for u in self._users.list_all()
                if u.role == Role.EMPLOYEE and u.is_active and u.user_id != int(nominator_id)
            ),
            key=lambda u: (u.name.lower(), u.user_id),
        )
