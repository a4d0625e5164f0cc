from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "ADMIN"
    EMPLOYEE = "EMPLOYEE"


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class CycleStatus(str, Enum):
    """Lifecycle of a monthly cycle. Only moves forward."""

    NOMINATION = "NOMINATION"
    VOTING = "VOTING"
    CLOSED = "CLOSED"

    @property
    def rank(self) -> int:
        return _CYCLE_ORDER.index(self)


_CYCLE_ORDER = (CycleStatus.NOMINATION, CycleStatus.VOTING, CycleStatus.CLOSED)
