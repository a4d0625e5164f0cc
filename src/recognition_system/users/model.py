from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role, UserStatus


@dataclass(frozen=True)
class User:
    """Domain entity: a directory entry (employee or admin).

    Plain data object; no DB access here.
    """

    user_id: int
    name: str
    email: str
    role: Role
    department: str = ""
    status: UserStatus = UserStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "department": self.department,
            "status": self.status.value,
        }
