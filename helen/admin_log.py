"""Log of actions taken by administrators."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from helen.storage import Database

_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def _from_text(text: str | None) -> datetime | None:
    if not text:
        return None
    return datetime.strptime(text, _TIME_FORMAT).replace(tzinfo=timezone.utc)


@dataclass
class AdminLogEntry:
    """One action: who did it, to whom, and what."""

    player_id: int
    rel_id: int = 0
    rel_text: str = ""
    id: int | None = None
    created_at: datetime | None = None


def _from_row(row: Any) -> AdminLogEntry:
    return AdminLogEntry(
        id=row["id"],
        created_at=_from_text(row["created_at"]),
        player_id=row["player_id"],
        rel_id=row["rel_id"],
        rel_text=row["rel_text"],
    )


def log_custom_admin_action(
    db: Database, player_id: int, text: str, rel_id: int = 0
) -> AdminLogEntry:
    """Record an action by an admin against a target."""
    now = datetime.now(timezone.utc)
    stamp = now.strftime(_TIME_FORMAT)
    entry = AdminLogEntry(player_id=player_id, rel_id=rel_id, rel_text=text, created_at=now)
    cursor = db.execute(
        "INSERT INTO admin_log_entries (created_at, updated_at, player_id, rel_id, rel_text) "
        "VALUES (?, ?, ?, ?, ?)",
        (stamp, stamp, player_id, rel_id, text),
    )
    entry.id = cursor.lastrowid
    return entry


def get_admin_log(db: Database) -> list[AdminLogEntry]:
    """Return all entries that have not been deleted, oldest first."""
    rows = db.query("SELECT * FROM admin_log_entries WHERE deleted_at IS NULL ORDER BY id")
    return [_from_row(row) for row in rows]