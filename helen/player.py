"""Players and their stored profile."""

from __future__ import annotations

import hashlib
import json
import re
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from helen.formats import InvalidSlotError, get_slot_team_class
from helen.stats import PlayerStats
from helen.storage import Database


class PlayerNotFoundError(LookupError):
    """Raised when no player matches a lookup."""

    def __init__(self, message: str = "Player not found") -> None:
        super().__init__(message)


_STEAM_PROFILE_ID = re.compile(r"steamcommunity.com\/id\/(\w+)", re.ASCII)


def _timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_timestamp(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def is_clean(s: str) -> bool:
    """True for a non-empty string of characters between 'A' and 'z' or spaces."""
    return bool(s) and all("A" <= c <= "z" or c == " " for c in s)


@dataclass
class Player:
    """A registered player."""

    steam_id: str = ""
    id: int | None = None
    created_at: datetime | None = None
    profile_updated_at: datetime | None = None
    stream_status_updated_at: datetime | None = None

    stats: PlayerStats = field(default_factory=PlayerStats)
    stats_id: int | None = None

    avatar: str = ""
    profileurl: str = ""
    game_hours: int = 0
    name: str = ""
    role: str = "player"

    settings: dict[str, str] = field(default_factory=dict)

    mumble_username: str = ""
    mumble_authkey: str = ""

    twitch_access_token: str = ""
    twitch_name: str = ""
    is_streaming: bool = False

    external_links: dict[str, str] = field(default_factory=dict)

    db: Database | None = field(default=None, repr=False, compare=False)

    def _require_db(self) -> Database:
        if self.db is None:
            raise RuntimeError("player is not attached to a database")
        return self.db

    def alias(self) -> str:
        """The site alias if one is set, the Steam name otherwise."""
        return self.get_setting("siteAlias") or self.name

    def get_setting(self, key: str) -> str:
        return self.settings.get(key, "")

    def set_setting(self, key: str, value: str) -> None:
        self.settings[key] = value
        self.save()

    def save(self) -> None:
        """Store the player and its stats; a new player gets its id here."""
        db = self._require_db()
        self.stats.save(db)
        self.stats_id = self.stats.id
        if self.created_at is None:
            self.created_at = datetime.now(timezone.utc)

        values: dict[str, Any] = {
            "created_at": _timestamp(self.created_at),
            "profile_updated_at": _timestamp(self.profile_updated_at),
            "stream_status_updated_at": _timestamp(self.stream_status_updated_at),
            "steam_id": self.steam_id,
            "stats_id": self.stats_id,
            "avatar": self.avatar,
            "profileurl": self.profileurl,
            "game_hours": self.game_hours,
            "name": self.name,
            "role": self.role,
            "settings": json.dumps(self.settings),
            "mumble_username": self.mumble_username or None,
            "mumble_authkey": self.mumble_authkey,
            "twitch_access_token": self.twitch_access_token,
            "twitch_name": self.twitch_name,
            "is_streaming": int(self.is_streaming),
            "external_links": json.dumps(self.external_links),
        }
        columns = list(values)
        if self.id is None:
            cursor = db.execute(
                f"INSERT INTO players ({', '.join(columns)}) "
                f"VALUES ({', '.join('?' * len(columns))})",
                list(values.values()),
            )
            self.id = cursor.lastrowid
        else:
            db.execute(
                f"INSERT OR REPLACE INTO players (id, {', '.join(columns)}) "
                f"VALUES ({', '.join('?' * (len(columns) + 1))})",
                [self.id, *values.values()],
            )

    def gen_auth_key(self) -> str:
        """Return a random hex key that no stored player uses yet."""
        db = self._require_db()
        while True:
            key = hashlib.sha256(secrets.token_bytes(32)).hexdigest()
            rows = db.query("SELECT 1 FROM players WHERE mumble_authkey = ?", (key,))
            if not rows:
                return key

    def set_mumble_username(self, lobby_format: int, slot: int) -> str:
        """Store a unique Mumble name made of the slot's class and the player's name."""
        db = self._require_db()
        try:
            _, class_name = get_slot_team_class(lobby_format, slot)
        except InvalidSlotError:
            class_name = ""

        username = class_name.upper() + "_"
        alias = self.get_setting("siteAlias")
        match = _STEAM_PROFILE_ID.search(self.profileurl)
        if is_clean(alias):
            username += alias.replace(" ", "_")
        elif is_clean(self.name):
            username += self.name.replace(" ", "_")
        elif match:
            username += match.group(1)
        else:
            username += self.steam_id

        while db.query(
            "SELECT 1 FROM players WHERE mumble_username = ? AND id IS NOT ?",
            (username, self.id),
        ):
            username += "_"

        db.execute("UPDATE players SET mumble_username = ? WHERE id = ?", (username, self.id))
        self.mumble_username = username
        return username

    def decorate_player_tags(self) -> list[str]:
        tags = [self.role]
        if self.is_streaming:
            tags.append("twitch")
        return tags


def _from_row(db: Database, row: Any) -> Player:
    return Player(
        id=row["id"],
        steam_id=row["steam_id"],
        created_at=_parse_timestamp(row["created_at"]),
        profile_updated_at=_parse_timestamp(row["profile_updated_at"]),
        stream_status_updated_at=_parse_timestamp(row["stream_status_updated_at"]),
        stats=PlayerStats(id=row["stats_id"]),
        stats_id=row["stats_id"],
        avatar=row["avatar"],
        profileurl=row["profileurl"],
        game_hours=row["game_hours"],
        name=row["name"],
        role=row["role"],
        settings=json.loads(row["settings"] or "{}"),
        mumble_username=row["mumble_username"] or "",
        mumble_authkey=row["mumble_authkey"],
        twitch_access_token=row["twitch_access_token"],
        twitch_name=row["twitch_name"],
        is_streaming=bool(row["is_streaming"]),
        external_links=json.loads(row["external_links"] or "{}"),
        db=db,
    )


def new_player(db: Database, steam_id: str) -> Player:
    """Create an unsaved player with fresh stats and Mumble credentials."""
    player = Player(steam_id=steam_id, db=db)
    rows = db.query("SELECT id FROM players ORDER BY id DESC LIMIT 1")
    last_id = rows[0]["id"] if rows else 0
    player.mumble_username = f"TF2Stadium{last_id + 1}"
    player.mumble_authkey = player.gen_auth_key()
    return player


def get_player_by_id(db: Database, player_id: int) -> Player:
    rows = db.query("SELECT * FROM players WHERE id = ?", (player_id,))
    if not rows:
        raise PlayerNotFoundError()
    return _from_row(db, rows[0])


def get_player_by_steam_id(db: Database, steam_id: str) -> Player:
    rows = db.query("SELECT * FROM players WHERE steam_id = ?", (steam_id,))
    if not rows:
        raise PlayerNotFoundError()
    return _from_row(db, rows[0])


def get_player_with_stats(db: Database, steam_id: str) -> Player:
    """Look a player up by Steam ID, with the stats record loaded."""
    player = get_player_by_steam_id(db, steam_id)
    if player.stats_id is not None:
        try:
            player.stats = PlayerStats.load(db, player.stats_id)
        except LookupError:
            pass
    return player