from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..common.datetime_utils import as_utc, to_db_datetime
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Vote
from .repository import VoteRepository

_COLUMNS = "vote_id, voter_id, nominee_id, cycle_id, submitted_at"


def _row_to_vote(row: dict) -> Vote:
    return Vote(
        vote_id=int(row["vote_id"]),
        voter_id=int(row["voter_id"]),
        nominee_id=int(row["nominee_id"]),
        cycle_id=int(row["cycle_id"]),
        submitted_at=as_utc(row["submitted_at"]),
    )


class MySQLVoteRepository(VoteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add_if_absent(
        self,
        *,
        voter_id: int,
        nominee_id: int,
        cycle_id: int,
        submitted_at: datetime,
    ) -> Optional[Vote]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO votes(voter_id, nominee_id, cycle_id, submitted_at)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (int(voter_id), int(nominee_id), int(cycle_id), to_db_datetime(submitted_at)),
                )
                vote_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                return None
            raise

        return Vote(
            vote_id=vote_id,
            voter_id=int(voter_id),
            nominee_id=int(nominee_id),
            cycle_id=int(cycle_id),
            submitted_at=submitted_at,
        )

    def get_by_voter(self, voter_id: int, cycle_id: int) -> Optional[Vote]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM votes WHERE voter_id=%s AND cycle_id=%s",
                (int(voter_id), int(cycle_id)),
            )
            row = fetchone(cur)
            return _row_to_vote(row) if row else None

    def list_for_cycle(self, cycle_id: int) -> Sequence[Vote]:
        return self._list("cycle_id", cycle_id)

    def list_by_voter(self, voter_id: int) -> Sequence[Vote]:
        return self._list("voter_id", voter_id)

    def list_for_nominee(self, nominee_id: int) -> Sequence[Vote]:
        return self._list("nominee_id", nominee_id)

    def _list(self, column: str, value: int) -> Sequence[Vote]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM votes WHERE {column}=%s ORDER BY vote_id", (int(value),))
            return [_row_to_vote(r) for r in fetchall(cur)]
