from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..common.datetime_utils import as_utc, to_db_datetime
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Nomination
from .repository import NominationRepository

_COLUMNS = "nomination_id, nominator_id, nominee_id, cycle_id, reason, submitted_at"


def _row_to_nomination(row: dict) -> Nomination:
    return Nomination(
        nomination_id=int(row["nomination_id"]),
        nominator_id=int(row["nominator_id"]),
        nominee_id=int(row["nominee_id"]),
        cycle_id=int(row["cycle_id"]),
        reason=row["reason"],
        submitted_at=as_utc(row["submitted_at"]),
    )


class MySQLNominationRepository(NominationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add_if_absent(
        self,
        *,
        nominator_id: int,
        nominee_id: int,
        cycle_id: int,
        reason: str,
        submitted_at: datetime,
    ) -> Optional[Nomination]:
        # uq_nominations_nominator_cycle makes the insert itself the uniqueness check.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO nominations(nominator_id, nominee_id, cycle_id, reason, submitted_at)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(nominator_id), int(nominee_id), int(cycle_id), reason, to_db_datetime(submitted_at)),
                )
                nomination_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                return None
            raise

        return Nomination(
            nomination_id=nomination_id,
            nominator_id=int(nominator_id),
            nominee_id=int(nominee_id),
            cycle_id=int(cycle_id),
            reason=reason,
            submitted_at=submitted_at,
        )

    def get_by_nominator(self, nominator_id: int, cycle_id: int) -> Optional[Nomination]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM nominations WHERE nominator_id=%s AND cycle_id=%s",
                (int(nominator_id), int(cycle_id)),
            )
            row = fetchone(cur)
            return _row_to_nomination(row) if row else None

    def list_for_cycle(self, cycle_id: int) -> Sequence[Nomination]:
        return self._list("cycle_id", cycle_id)

    def list_by_nominator(self, nominator_id: int) -> Sequence[Nomination]:
        return self._list("nominator_id", nominator_id)

    def list_for_nominee(self, nominee_id: int) -> Sequence[Nomination]:
        return self._list("nominee_id", nominee_id)

    def _list(self, column: str, value: int) -> Sequence[Nomination]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM nominations WHERE {column}=%s ORDER BY nomination_id",
                (int(value),),
            )
            return [_row_to_nomination(r) for r in fetchall(cur)]
