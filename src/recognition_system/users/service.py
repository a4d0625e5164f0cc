from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence

from ..common.validators import optional_text, require_email, require_max_length, require_non_empty
from ..core.enums import Role, UserStatus
from ..core.exceptions import AuthorizationError, NotFound, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Use case: the user directory (registration and admin management).

    Users are never hard-deleted; admins deactivate them instead.
    """

    def __init__(self, users: UserRepository):
        self._users = users

    def register(self, *, name: str, email: str, department: str = "") -> User:
        """Self-registration. The very first user becomes the administrator."""
        name, email, department = self._clean_profile(name, email, department)

        user = self._users.register_user(name=name, email=email, department=department)
        if user is None:
            raise ValidationError("User with this email already exists")

        logger.info("Registered user %s (%s, role=%s)", user.user_id, email, user.role.value)
        return user

    def add_user(self, *, name: str, email: str, department: str = "", role: Role = Role.EMPLOYEE) -> User:
        name, email, department = self._clean_profile(name, email, department)

        user_id = self._users.create_user(name=name, email=email, role=Role(role), department=department)
        if user_id is None:
            raise ValidationError("User with this email already exists")

        logger.info("Created user %s (%s, role=%s)", user_id, email, Role(role).value)
        return User(user_id=user_id, name=name, email=email, role=Role(role), department=department)

    def update_user(
        self,
        user_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        department: Optional[str] = None,
        role: Optional[Role] = None,
    ) -> User:
        user = self._require(user_id)

        changes: dict = {}
        if name is not None:
            changes["name"] = require_max_length(require_non_empty(name, "Name"), "Name", 150)
        if email is not None:
            changes["email"] = require_email(email)
        if department is not None:
            changes["department"] = require_max_length(optional_text(department, "Department"), "Department", 150)
        if role is not None:
            changes["role"] = Role(role)

        updated = replace(user, **changes)
        if updated.email != user.email:
            other = self._users.get_by_email(updated.email)
            if other and other.user_id != user.user_id:
                raise ValidationError("User with this email already exists")

        if not self._users.update_user(updated):
            raise ValidationError("User with this email already exists")
        return updated

    def set_status(self, user_id: int, status: UserStatus) -> User:
        user = self._require(user_id)
        status = UserStatus(status)
        if user.status != status:
            self._users.set_status(user.user_id, status=status)
            logger.info("User %s is now %s", user.user_id, status.value)
        return replace(user, status=status)

    def toggle_status(self, user_id: int) -> User:
        user = self._require(user_id)
        new_status = UserStatus.INACTIVE if user.is_active else UserStatus.ACTIVE
        return self.set_status(user.user_id, new_status)

    def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get_by_id(int(user_id))

    def list_users(self) -> Sequence[User]:
        return self._users.list_all()

    def list_employees(self, *, active_only: bool = False) -> list[User]:
        return [
            u
            for u in self._users.list_all()
            if u.role == Role.EMPLOYEE and (u.is_active or not active_only)
        ]

    def require_active(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFound("User does not exist")
        if not user.is_active:
            raise AuthorizationError("This account is inactive")
        return user

    def _require(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFound("User does not exist")
        return user

    def _clean_profile(self, name, email, department) -> tuple[str, str, str]:
        name = require_max_length(require_non_empty(name, "Name"), "Name", 150)
        email = require_email(email)
        department = require_max_length(optional_text(department, "Department"), "Department", 150)

        if self._users.get_by_email(email):
            raise ValidationError("User with this email already exists")
        return name, email, department
