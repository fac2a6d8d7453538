from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from econbot.config import DB_PATH
from econbot.config.settings import SNAPSHOT_HISTORY
from econbot.db.database import get_connection

ConnectionFactory = Callable[[], sqlite3.Connection]


def save_snapshot(
    state: dict[str, Any],
    connection_factory: ConnectionFactory = get_connection,
    *,
    keep: int = SNAPSHOT_HISTORY,
) -> int:
    payload = json.dumps(state, ensure_ascii=False, separators=(",", ":"))
    saved_at = datetime.now(timezone.utc).isoformat()
    with connection_factory() as conn:
        cur = conn.execute(
            """
            INSERT INTO snapshots (saved_at, payload)
            VALUES (?, ?)
            """,
            (saved_at, payload),
        )
        snapshot_id = int(cur.lastrowid)
        conn.execute(
            """
            DELETE FROM snapshots
            WHERE id NOT IN (
                SELECT id FROM snapshots ORDER BY id DESC LIMIT ?
            )
            """,
            (max(1, int(keep)),),
        )
    return snapshot_id


def load_snapshot(connection_factory: ConnectionFactory = get_connection) -> dict[str, Any] | None:
    """Return the newest saved ledger state, or ``None`` when nothing was saved.

    Raises ``ValueError`` when the stored payload cannot be decoded.
    """
    with connection_factory() as conn:
        row = conn.execute(
            "SELECT payload FROM snapshots ORDER BY id DESC LIMIT 1"
        ).fetchone()
    if row is None:
        return None
    state = json.loads(row[0])
    if not isinstance(state, dict):
        raise ValueError("snapshot payload is not an object")
    return state



def get_state_value(key: str, connection_factory: ConnectionFactory = get_connection) -> str | None:
    with connection_factory() as conn:
        row = conn.execute(
            "SELECT value FROM app_state WHERE key = ?",
            (key,),
        ).fetchone()
        return None if row is None else row[0]


def set_state_value(
    key: str,
    value: str,
    connection_factory: ConnectionFactory = get_connection,
) -> None:
    with connection_factory() as conn:
        conn.execute(
            """
            INSERT INTO app_state (key, value)
            VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """,
            (key, value),
        )


def create_database_backup(
    *,
    prefix: str = "econbot",
) -> str:
    db_path = Path(DB_PATH)
    backup_dir = db_path.parent / "backups"
    backup_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
    backup_path = backup_dir / f"{prefix}_{stamp}.db"

    with get_connection() as source_conn, sqlite3.connect(backup_path) as backup_conn:
        source_conn.backup(backup_conn)

    return str(backup_path)
