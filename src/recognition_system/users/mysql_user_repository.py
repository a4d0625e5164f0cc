from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.enums import Role, UserStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, name, email, role, department, status"


def _row_to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row["email"],
        role=Role(row["role"]),
        department=row.get("department") or "",
        status=UserStatus(row.get("status") or UserStatus.ACTIVE.value),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY name, user_id")
            return [_row_to_user(r) for r in fetchall(cur)]

    def register_user(self, *, name: str, email: str, department: str) -> Optional[User]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                # Locking read serialises concurrent first registrations.
                cur.execute("SELECT COUNT(*) AS n FROM users FOR UPDATE")
                row = fetchone(cur)
                role = Role.ADMIN if not row or int(row["n"]) == 0 else Role.EMPLOYEE
                cur.execute(
                    """
                    INSERT INTO users(name, email, role, department, status)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (name, email, role.value, department, UserStatus.ACTIVE.value),
                )
                user_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                return None
            raise
        return User(user_id=user_id, name=name, email=email, role=role, department=department)

    def create_user(
        self,
        *,
        name: str,
        email: str,
        role: Role,
        department: str,
        status: UserStatus = UserStatus.ACTIVE,
    ) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(name, email, role, department, status)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (name, email, role.value, department, status.value),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                return None
            raise

    def update_user(self, user: User) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE users
                    SET name=%s, email=%s, role=%s, department=%s
                    WHERE user_id=%s
                    """,
                    (user.name, user.email, user.role.value, user.department, int(user.user_id)),
                )
                return True
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                return False
            raise

    def set_status(self, user_id: int, *, status: UserStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET status=%s WHERE user_id=%s", (status.value, int(user_id)))
            return cur.rowcount > 0
