from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

import mysql.connector

from ..core.exceptions import Unavailable
from .connection import DBConfig, DatabaseConnection
from .mysql_base import db_cursor, fetchall

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def load_schema_statements(schema_path: str | Path = DEFAULT_SCHEMA_PATH) -> list[str]:
    sql = Path(schema_path).read_text(encoding="utf-8")
    return list(iter_sql_statements(_strip_comments(_strip_create_db_and_use(sql))))


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    name = conn_factory.config.database
    try:
        conn = conn_factory.connect(with_database=False)
    except mysql.connector.Error as e:
        raise Unavailable("The database server could not be reached") from e
    try:
        cur = conn.cursor()
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;")
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = DEFAULT_SCHEMA_PATH) -> None:
    conn_factory = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    ensure_database_exists(conn_factory)

    statements = load_schema_statements(schema_path)
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        for stmt in statements:
            cur.execute(stmt)


def list_tables(db_config: dict) -> list[str]:
    conn_factory = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    with db_cursor(conn_factory) as (_, cur):
        cur.execute("SHOW TABLES")
        return [str(next(iter(r.values()))) for r in fetchall(cur)]
