"""Game servers: per-lobby server records and the pool of stored servers."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any

from helen.storage import Database


@dataclass
class ServerRecord:
    """Connection details of the game server a lobby runs on."""

    id: int | None = None
    host: str = ""
    log_secret: str = ""
    server_password: str = ""
    rcon_password: str = ""


@dataclass
class StoredServer:
    """A server in the pool that lobbies can borrow."""

    name: str
    address: str
    rcon_password: str = ""
    used: bool = False
    id: int | None = None


class ServerUsedError(RuntimeError):
    """Raised when a stored server is already in use."""

    def __init__(self) -> None:
        super().__init__("server is being used")


class ServerAlreadyExistsError(ValueError):
    """Raised when a stored server with the same address exists."""

    def __init__(self) -> None:
        super().__init__("server already exists")


_store_lock = threading.Lock()


def _from_row(row: Any) -> StoredServer:
    return StoredServer(
        id=row["id"],
        name=row["name"],
        address=row["address"],
        rcon_password=row["rcon_password"],
        used=bool(row["used"]),
    )


def new_stored_server(db: Database, name: str, address: str, password: str) -> StoredServer:
    """Add a server to the pool."""
    if db.query("SELECT 1 FROM stored_servers WHERE address = ?", (address,)):
        raise ServerAlreadyExistsError()
    server = StoredServer(name=name, address=address, rcon_password=password)
    cursor = db.execute(
        "INSERT INTO stored_servers (name, address, rcon_password, used) VALUES (?, ?, ?, 0)",
        (name, address, password),
    )
    server.id = cursor.lastrowid
    return server


def remove_stored_server(db: Database, address: str) -> None:
    db.execute("DELETE FROM stored_servers WHERE address = ?", (address,))


def get_available_servers(db: Database) -> list[StoredServer]:
    rows = db.query("SELECT * FROM stored_servers WHERE used = 0 ORDER BY id")
    return [_from_row(row) for row in rows]


def get_stored_server(db: Database, server_id: int) -> StoredServer:
    """Take a server out of the pool, marking it as used."""
    with _store_lock:
        rows = db.query("SELECT * FROM stored_servers WHERE id = ?", (server_id,))
        if not rows:
            raise LookupError(f"stored server {server_id} not found")
        server = _from_row(rows[0])
        if server.used:
            raise ServerUsedError()
        db.execute("UPDATE stored_servers SET used = 1 WHERE id = ?", (server_id,))
        server.used = True
        return server


def put_stored_server(db: Database, address: str) -> None:
    """Return a server to the pool."""
    with _store_lock:
        db.execute("UPDATE stored_servers SET used = 0 WHERE address = ?", (address,))


def get_all_stored_servers(db: Database) -> list[StoredServer]:
    return [_from_row(row) for row in db.query("SELECT * FROM stored_servers ORDER BY id")]