from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..common.datetime_utils import as_utc, to_db_datetime
from ..core.enums import CycleStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Cycle, PhaseWindows
from .repository import CycleRepository

_COLUMNS = """
    cycle_id, month, year, status, winner_id,
    nomination_start, nomination_end, voting_start, voting_end, created_at
"""


def _row_to_cycle(row: dict) -> Cycle:
    windows = None
    if row.get("nomination_start") is not None:
        windows = PhaseWindows(
            nomination_start=as_utc(row["nomination_start"]),
            nomination_end=as_utc(row["nomination_end"]),
            voting_start=as_utc(row["voting_start"]),
            voting_end=as_utc(row["voting_end"]),
        )
    winner_id = row.get("winner_id")
    return Cycle(
        cycle_id=int(row["cycle_id"]),
        month=int(row["month"]),
        year=int(row["year"]),
        status=CycleStatus(row["status"]),
        winner_id=int(winner_id) if winner_id is not None else None,
        windows=windows,
        created_at=as_utc(row.get("created_at")),
    )


class MySQLCycleRepository(CycleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, cycle_id: int) -> Optional[Cycle]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM cycles WHERE cycle_id=%s", (int(cycle_id),))
            row = fetchone(cur)
            return _row_to_cycle(row) if row else None

    def list_all(self) -> Sequence[Cycle]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM cycles ORDER BY year DESC, month DESC, cycle_id DESC")
            return [_row_to_cycle(r) for r in fetchall(cur)]

    def list_open(self) -> Sequence[Cycle]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM cycles WHERE status<>%s ORDER BY cycle_id DESC",
                (CycleStatus.CLOSED.value,),
            )
            return [_row_to_cycle(r) for r in fetchall(cur)]

    def open_cycle(
        self,
        *,
        month: int,
        year: int,
        windows: Optional[PhaseWindows],
        created_at: datetime,
    ) -> Optional[Cycle]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "UPDATE cycles SET status=%s WHERE status<>%s",
                    (CycleStatus.CLOSED.value, CycleStatus.CLOSED.value),
                )
                cur.execute(
                    """
                    INSERT INTO cycles(
                        month, year, status,
                        nomination_start, nomination_end, voting_start, voting_end, created_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(month),
                        int(year),
                        CycleStatus.NOMINATION.value,
                        to_db_datetime(windows.nomination_start) if windows else None,
                        to_db_datetime(windows.nomination_end) if windows else None,
                        to_db_datetime(windows.voting_start) if windows else None,
                        to_db_datetime(windows.voting_end) if windows else None,
                        to_db_datetime(created_at),
                    ),
                )
                cycle_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                return None
            raise

        return Cycle(
            cycle_id=cycle_id,
            month=int(month),
            year=int(year),
            status=CycleStatus.NOMINATION,
            windows=windows,
            created_at=created_at,
        )

    def update_status(
        self,
        cycle_id: int,
        *,
        expected: CycleStatus,
        new_status: CycleStatus,
        voting_start: Optional[datetime] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE cycles
                SET status=%s, voting_start=COALESCE(%s, voting_start)
                WHERE cycle_id=%s AND status=%s
                """,
                (new_status.value, to_db_datetime(voting_start), int(cycle_id), expected.value),
            )
            return cur.rowcount > 0

    def set_winner(self, cycle_id: int, *, winner_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE cycles
                SET winner_id=%s, status=%s
                WHERE cycle_id=%s AND status=%s AND winner_id IS NULL
                """,
                (int(winner_id), CycleStatus.CLOSED.value, int(cycle_id), CycleStatus.VOTING.value),
            )
            return cur.rowcount > 0
