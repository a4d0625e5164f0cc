from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role, UserStatus
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def register_user(self, *, name: str, email: str, department: str) -> Optional[User]:
        """Insert a self-registered user. The role is ADMIN only when the
        directory is empty, decided atomically with the insert. ``None`` when
        the email is already taken.
        """

        raise NotImplementedError

    def create_user(
        self,
        *,
        name: str,
        email: str,
        role: Role,
        department: str,
        status: UserStatus = UserStatus.ACTIVE,
    ) -> Optional[int]:
        """Insert a user; ``None`` when the email is already taken."""

        raise NotImplementedError

    def update_user(self, user: User) -> bool:
        """Overwrite name/email/role/department; ``False`` on email conflict."""

        raise NotImplementedError

    def set_status(self, user_id: int, *, status: UserStatus) -> bool:
        raise NotImplementedError
