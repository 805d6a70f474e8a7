"""Player bans and the reports that lead to automatic bans."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Any

from helen.player import Player, PlayerNotFoundError, get_player_by_id
from helen.storage import Database

_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"
_REPORT_WINDOW = timedelta(minutes=30)
_REPORT_BAN_LENGTH = timedelta(minutes=30)


def _to_text(value: datetime) -> str:
    # Fixed-width UTC text, so that SQL string comparison orders by time.
    return value.astimezone(timezone.utc).strftime(_TIME_FORMAT)


def _from_text(text: str | None) -> datetime | None:
    if not text:
        return None
    return datetime.strptime(text, _TIME_FORMAT).replace(tzinfo=timezone.utc)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _db_of(player: Player) -> Database:
    if player.db is None:
        raise RuntimeError("player is not attached to a database")
    return player.db


class BanType(IntEnum):
    """What a ban keeps a player from doing."""

    JOIN = 0
    CREATE = 1
    CHAT = 2
    FULL = 3
    JOIN_MUMBLE = 4

    @property
    def description(self) -> str:
        return _BAN_NAMES[self]

    def __str__(self) -> str:
        return self.description


_BAN_NAMES = {
    BanType.JOIN: "lobby join ban",
    BanType.JOIN_MUMBLE: "mumble lobby join ban",
    BanType.CREATE: "lobby create ban",
    BanType.CHAT: "chat ban",
    BanType.FULL: "full ban",
}


@dataclass
class PlayerBan:
    """A ban on one player, valid until a given time while active."""

    player_id: int
    type: BanType
    until: datetime
    reason: str = ""
    banned_by_player_id: int = 0
    active: bool = True
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    player: Player | None = field(default=None, repr=False, compare=False)
    banned_by_player: Player | None = field(default=None, repr=False, compare=False)

    def to_json(self) -> dict[str, Any]:
        """Return the ban as it is sent to clients."""
        return {
            "type": str(self.type),
            "until": self.until.isoformat(),
            "reason": self.reason,
        }


class ReportType(IntEnum):
    """Why a player was reported."""

    SUBSTITUTE = 0
    VOTE = 1
    RAGE_QUIT = 2


@dataclass
class Report:
    """A report filed against a player in a lobby."""

    player_id: int
    lobby_id: int
    type: ReportType
    id: int | None = None
    created_at: datetime | None = None


def _find_player(db: Database, player_id: int) -> Player | None:
    try:
        return get_player_by_id(db, player_id)
    except PlayerNotFoundError:
        return None


def _ban_from_row(db: Database, row: Any, with_players: bool = False) -> PlayerBan:
    ban = PlayerBan(
        id=row["id"],
        player_id=row["player_id"],
        banned_by_player_id=row["banned_by_player_id"],
        type=BanType(row["type"]),
        until=_from_text(row["until"]),
        reason=row["reason"],
        active=bool(row["active"]),
        created_at=_from_text(row["created_at"]),
        updated_at=_from_text(row["updated_at"]),
    )
    if with_players:
        ban.player = _find_player(db, ban.player_id)
        ban.banned_by_player = _find_player(db, ban.banned_by_player_id)
    return ban


def is_banned_with_time(player: Player, ban_type: BanType) -> tuple[bool, datetime | None]:
    """Return whether the player is banned, and until when, counting full bans."""
    db = _db_of(player)
    rows = db.query(
        "SELECT until FROM player_bans WHERE type IN (?, ?) AND until > ? "
        "AND player_id = ? AND active = 1 ORDER BY until DESC LIMIT 1",
        (int(ban_type), int(BanType.FULL), _to_text(_now()), player.id),
    )
    if not rows:
        return False, None
    return True, _from_text(rows[0]["until"])


def is_banned(player: Player, ban_type: BanType) -> bool:
    return is_banned_with_time(player, ban_type)[0]


def ban_until(
    player: Player,
    until: datetime,
    ban_type: BanType,
    reason: str,
    banned_by: int = 0,
) -> None:
    """Ban the player until the given time, or move an existing ban's end."""
    db = _db_of(player)
    now = _to_text(_now())
    if is_banned(player, ban_type):
        db.execute(
            "UPDATE player_bans SET until = ?, updated_at = ? WHERE player_id = ? "
            "AND type = ? AND active = 1 AND until > ?",
            (_to_text(until), now, player.id, int(ban_type), now),
        )
        return
    db.execute(
        "INSERT INTO player_bans (created_at, updated_at, player_id, banned_by_player_id, "
        "type, until, reason, active) VALUES (?, ?, ?, ?, ?, ?, ?, 1)",
        (now, now, player.id, banned_by, int(ban_type), _to_text(until), reason),
    )


def unban(player: Player, ban_type: BanType) -> None:
    db = _db_of(player)
    db.execute(
        "UPDATE player_bans SET active = 0, updated_at = ? "
        "WHERE player_id = ? AND type = ? AND active = 1",
        (_to_text(_now()), player.id, int(ban_type)),
    )


def get_active_ban(player: Player, ban_type: BanType) -> PlayerBan:
    """Return the player's active full ban, or else the active ban of the given type."""
    db = _db_of(player)
    for wanted in (BanType.FULL, ban_type):
        rows = db.query(
            "SELECT * FROM player_bans WHERE player_id = ? AND type = ? AND active = 1 "
            "ORDER BY id LIMIT 1",
            (player.id, int(wanted)),
        )
        if rows:
            return _ban_from_row(db, rows[0])
    raise LookupError(f"no active {ban_type} for player {player.id}")


def get_active_bans(player: Player) -> list[PlayerBan]:
    db = _db_of(player)
    rows = db.query(
        "SELECT * FROM player_bans WHERE player_id = ? AND active = 1 AND until > ? "
        "ORDER BY id",
        (player.id, _to_text(_now())),
    )
    return [_ban_from_row(db, row, with_players=True) for row in rows]


def get_all_bans(player: Player) -> list[PlayerBan]:
    db = _db_of(player)
    rows = db.query(
        "SELECT * FROM player_bans WHERE player_id = ? ORDER BY id", (player.id,)
    )
    return [_ban_from_row(db, row, with_players=True) for row in rows]


def get_all_active_bans(db: Database) -> list[PlayerBan]:
    rows = db.query(
        "SELECT * FROM player_bans WHERE active = 1 AND until > ? ORDER BY id",
        (_to_text(_now()),),
    )
    return [_ban_from_row(db, row, with_players=True) for row in rows]


def new_report(player: Player, report_type: ReportType, lobby_id: int) -> Report:
    """File a report, banning repeat offenders from joining for 30 minutes."""
    db = _db_of(player)
    rtype = ReportType(report_type)
    now = _now()
    count = db.query(
        "SELECT COUNT(*) FROM reports WHERE player_id = ? AND created_at > ? AND type = ?",
        (player.id, _to_text(now - _REPORT_WINDOW), int(rtype)),
    )[0][0]

    reason = None
    if rtype is ReportType.SUBSTITUTE and count == 1:
        reason = "For !subbing twice in the last 30 minutes"
    elif rtype is ReportType.VOTE and count:
        reason = "For getting !repped from a lobby multiple times in the last 30 minutes"
    elif rtype is ReportType.RAGE_QUIT and count:
        reason = "For ragequitting a lobby multiple times in the last 30 minutes"
    if reason is not None:
        ban_until(player, now + _REPORT_BAN_LENGTH, BanType.JOIN, reason, 0)

    report = Report(player_id=player.id, lobby_id=lobby_id, type=rtype, created_at=now)
    cursor = db.execute(
        "INSERT INTO reports (created_at, player_id, lobby_id, type) VALUES (?, ?, ?, ?)",
        (_to_text(now), report.player_id, report.lobby_id, int(rtype)),
    )
    report.id = cursor.lastrowid
    return report