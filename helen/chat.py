"""Chat messages sent by players and by the notification bot."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable

from helen.player import Player, PlayerNotFoundError, get_player_by_id
from helen.storage import Database

_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"
_SCROLLBACK_LENGTH = 20
_BOT_NAME = "TF2Stadium"
_BOT_STEAM_ID = "76561198275497635"
_BOT_TAGS = ("tf2stadium",)


def _to_text(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime(_TIME_FORMAT)


def _from_text(text: str | None) -> datetime | None:
    if not text:
        return None
    return datetime.strptime(text, _TIME_FORMAT).replace(tzinfo=timezone.utc)


@dataclass
class ChatMessage:
    """A message sent to a chat room."""

    room: int = 0
    message: str = ""
    player_id: int = 0
    id: int | None = None
    created_at: datetime | None = None
    deleted: bool = False
    bot: bool = False
    in_game: bool = False

    def save(self, db: Database) -> None:
        """Insert or update the message; a new message gets its id here."""
        if self.created_at is None:
            self.created_at = datetime.now(timezone.utc)
        values = (
            _to_text(self.created_at),
            self.player_id,
            self.room,
            self.message,
            int(self.deleted),
            int(self.bot),
            int(self.in_game),
        )
        columns = "created_at, player_id, room, message, deleted, bot, in_game"
        if self.id is None:
            cursor = db.execute(
                f"INSERT INTO chat_messages ({columns}) VALUES (?, ?, ?, ?, ?, ?, ?)", values
            )
            self.id = cursor.lastrowid
        else:
            db.execute(
                f"INSERT OR REPLACE INTO chat_messages (id, {columns}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (self.id, *values),
            )

    def to_json(self, db: Database, filtered_words: Iterable[str] = ()) -> dict[str, Any]:
        """Return the message as sent to clients, with filtered words redacted."""
        text = self.message
        data: dict[str, Any] = {
            "id": self.id,
            "timestamp": self.created_at.isoformat() if self.created_at else None,
            "room": self.room,
            "deleted": self.deleted,
            "ingame": self.in_game,
        }
        if self.bot:
            data["player"] = {
                "name": _BOT_NAME,
                "steamid": _BOT_STEAM_ID,
                "tags": list(_BOT_TAGS),
            }
        else:
            try:
                sender = get_player_by_id(db, self.player_id)
            except PlayerNotFoundError:
                sender = Player()
            tags = sender.decorate_player_tags()
            if self.deleted:
                tags.append("<deleted>")
                text = "<deleted>"
            data["player"] = {"name": sender.alias(), "steamid": sender.steam_id, "tags": tags}

        for word in filtered_words:
            text = text.replace(word, "<redacted>")
        data["message"] = text
        return data


def _from_row(row: Any) -> ChatMessage:
    return ChatMessage(
        id=row["id"],
        created_at=_from_text(row["created_at"]),
        player_id=row["player_id"],
        room=row["room"],
        message=row["message"],
        deleted=bool(row["deleted"]),
        bot=bool(row["bot"]),
        in_game=bool(row["in_game"]),
    )


def new_chat_message(message: str, room: int, player: Player) -> ChatMessage:
    """Return an unsaved message from the player to a room."""
    return ChatMessage(room=room, message=message, player_id=player.id or 0)


def new_in_game_chat_message(lobby_id: int, player: Player, message: str) -> ChatMessage:
    """Return an unsaved message said in a lobby's game server."""
    return ChatMessage(
        room=lobby_id, message=message, player_id=player.id or 0, in_game=True
    )


def new_bot_message(db: Database, message: str, room: int) -> ChatMessage:
    """Create and save a message from the notification bot."""
    msg = ChatMessage(room=room, message=message, bot=True)
    msg.save(db)
    return msg


def get_room_messages(db: Database, room: int) -> list[ChatMessage]:
    rows = db.query(
        "SELECT * FROM chat_messages WHERE room = ? ORDER BY created_at, id", (room,)
    )
    return [_from_row(row) for row in rows]


def get_player_messages(db: Database, player: Player) -> list[ChatMessage]:
    rows = db.query(
        "SELECT * FROM chat_messages WHERE player_id = ? ORDER BY room, created_at, id",
        (player.id,),
    )
    return [_from_row(row) for row in rows]


def get_scrollback(db: Database, room: int) -> list[ChatMessage]:
    """Return the latest 20 undeleted messages of a room, newest first."""
    rows = db.query(
        "SELECT * FROM chat_messages WHERE room = ? AND deleted = 0 ORDER BY id DESC LIMIT ?",
        (room, _SCROLLBACK_LENGTH),
    )
    return [_from_row(row) for row in rows]