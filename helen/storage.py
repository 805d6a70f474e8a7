"""SQLite storage shared by the models."""

from __future__ import annotations

import sqlite3
import threading
from collections.abc import Mapping
from os import PathLike
from typing import Any, Sequence

_SCHEMA = """
CREATE TABLE IF NOT EXISTS player_stats (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    played_sixes_count INTEGER NOT NULL DEFAULT 0,
    played_highlander_count INTEGER NOT NULL DEFAULT 0,
    played_fours_count INTEGER NOT NULL DEFAULT 0,
    played_ultiduo_count INTEGER NOT NULL DEFAULT 0,
    played_bball_count INTEGER NOT NULL DEFAULT 0,
    played_prolander_count INTEGER NOT NULL DEFAULT 0,
    scout INTEGER NOT NULL DEFAULT 0,
    scout_hours REAL NOT NULL DEFAULT 0,
    soldier INTEGER NOT NULL DEFAULT 0,
    soldier_hours REAL NOT NULL DEFAULT 0,
    pyro INTEGER NOT NULL DEFAULT 0,
    pyro_hours REAL NOT NULL DEFAULT 0,
    engineer INTEGER NOT NULL DEFAULT 0,
    engineer_hours REAL NOT NULL DEFAULT 0,
    heavy INTEGER NOT NULL DEFAULT 0,
    heavy_hours REAL NOT NULL DEFAULT 0,
    demoman INTEGER NOT NULL DEFAULT 0,
    demo_hours REAL NOT NULL DEFAULT 0,
    sniper INTEGER NOT NULL DEFAULT 0,
    sniper_hours REAL NOT NULL DEFAULT 0,
    medic INTEGER NOT NULL DEFAULT 0,
    medic_hours REAL NOT NULL DEFAULT 0,
    spy INTEGER NOT NULL DEFAULT 0,
    spy_hours REAL NOT NULL DEFAULT 0,
    substitutes INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS players (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at TEXT,
    profile_updated_at TEXT,
    stream_status_updated_at TEXT,
    steam_id TEXT NOT NULL UNIQUE,
    stats_id INTEGER REFERENCES player_stats(id),
    avatar TEXT NOT NULL DEFAULT '',
    profileurl TEXT NOT NULL DEFAULT '',
    game_hours INTEGER NOT NULL DEFAULT 0,
    name TEXT NOT NULL DEFAULT '',
    role TEXT NOT NULL DEFAULT 'player',
    settings TEXT,
    mumble_username TEXT UNIQUE,
    mumble_authkey TEXT NOT NULL UNIQUE,
    twitch_access_token TEXT NOT NULL DEFAULT '',
    twitch_name TEXT NOT NULL DEFAULT '',
    is_streaming INTEGER NOT NULL DEFAULT 0,
    external_links TEXT
);

CREATE TABLE IF NOT EXISTS player_bans (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at TEXT,
    updated_at TEXT,
    deleted_at TEXT,
    player_id INTEGER NOT NULL,
    banned_by_player_id INTEGER NOT NULL DEFAULT 0,
    type INTEGER NOT NULL,
    until TEXT NOT NULL,
    reason TEXT NOT NULL DEFAULT '',
    active INTEGER NOT NULL DEFAULT 1
);

CREATE TABLE IF NOT EXISTS reports (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at TEXT,
    player_id INTEGER NOT NULL,
    lobby_id INTEGER NOT NULL DEFAULT 0,
    type INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS chat_messages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at TEXT,
    player_id INTEGER NOT NULL DEFAULT 0,
    room INTEGER NOT NULL DEFAULT 0,
    message VARCHAR(150) NOT NULL DEFAULT '',
    deleted INTEGER NOT NULL DEFAULT 0,
    bot INTEGER NOT NULL DEFAULT 0,
    in_game INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS server_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    host TEXT NOT NULL DEFAULT '',
    log_secret TEXT NOT NULL DEFAULT '',
    server_password TEXT NOT NULL DEFAULT '',
    rcon_password TEXT NOT NULL DEFAULT ''
);

CREATE TABLE IF NOT EXISTS stored_servers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL DEFAULT '',
    address TEXT NOT NULL UNIQUE,
    rcon_password TEXT NOT NULL DEFAULT '',
    used INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS admin_log_entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    created_at TEXT,
    updated_at TEXT,
    deleted_at TEXT,
    player_id INTEGER NOT NULL DEFAULT 0,
    rel_id INTEGER NOT NULL DEFAULT 0,
    rel_text TEXT NOT NULL DEFAULT ''
);
"""


class Database:
    """A thread-safe SQLite connection with the application schema in place."""

    def __init__(self, path: str | PathLike[str] = ":memory:") -> None:
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.RLock()
        with self._lock:
            self._conn.executescript(_SCHEMA)
            self._conn.commit()

    @staticmethod
    def _params(params: Sequence[Any] | Mapping[str, Any]) -> Any:
        return params if isinstance(params, Mapping) else tuple(params)

    def execute(
        self, sql: str, params: Sequence[Any] | Mapping[str, Any] = ()
    ) -> sqlite3.Cursor:
        """Run one statement and commit it; return the cursor."""
        with self._lock:
            try:
                cursor = self._conn.execute(sql, self._params(params))
            except sqlite3.Error:
                self._conn.rollback()
                raise
            self._conn.commit()
            return cursor

    def query(
        self, sql: str, params: Sequence[Any] | Mapping[str, Any] = ()
    ) -> list[sqlite3.Row]:
        """Run a query and return all of its rows."""
        with self._lock:
            return self._conn.execute(sql, self._params(params)).fetchall()

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()