"""Per-player lobby statistics."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import timedelta
from typing import Any

from helen.formats import Format, InvalidSlotError, get_slot_team_class
from helen.storage import Database

_PLAYED_FIELDS = {
    Format.SIXES: "played_sixes_count",
    Format.HIGHLANDER: "played_highlander_count",
    Format.FOURS: "played_fours_count",
    Format.BBALL: "played_bball_count",
    Format.ULTIDUO: "played_ultiduo_count",
    Format.PROLANDER: "played_prolander_count",
}

_CLASS_FIELDS = {
    "scout": "scout",
    "scout1": "scout",
    "scout2": "scout",
    "roamer": "soldier",
    "pocket": "soldier",
    "soldier": "soldier",
    "soldier1": "soldier",
    "soldier2": "soldier",
    "pyro": "pyro",
    "engineer": "engineer",
    "heavy": "heavy",
    "demoman": "demoman",
    "sniper": "sniper",
    "medic": "medic",
    "spy": "spy",
}


@dataclass
class PlayerStats:
    """Counts of lobbies played, per format and per class."""

    id: int | None = None

    played_sixes_count: int = 0
    played_highlander_count: int = 0
    played_fours_count: int = 0
    played_ultiduo_count: int = 0
    played_bball_count: int = 0
    played_prolander_count: int = 0

    scout: int = 0
    scout_hours: timedelta = field(default_factory=timedelta)
    soldier: int = 0
    soldier_hours: timedelta = field(default_factory=timedelta)
    pyro: int = 0
    pyro_hours: timedelta = field(default_factory=timedelta)
    engineer: int = 0
    engineer_hours: timedelta = field(default_factory=timedelta)
    heavy: int = 0
    heavy_hours: timedelta = field(default_factory=timedelta)
    demoman: int = 0
    demo_hours: timedelta = field(default_factory=timedelta)
    sniper: int = 0
    sniper_hours: timedelta = field(default_factory=timedelta)
    medic: int = 0
    medic_hours: timedelta = field(default_factory=timedelta)
    spy: int = 0
    spy_hours: timedelta = field(default_factory=timedelta)

    substitutes: int = 0

    def total_lobbies(self) -> int:
        """Lobbies played in sixes, highlander, fours, ultiduo and bball."""
        return (
            self.played_sixes_count
            + self.played_highlander_count
            + self.played_fours_count
            + self.played_ultiduo_count
            + self.played_bball_count
        )

    def played_count_increase(self, lobby_format: int) -> None:
        name = _PLAYED_FIELDS.get(lobby_format)
        if name is not None:
            setattr(self, name, getattr(self, name) + 1)

    def increase_sub_count(self) -> None:
        self.substitutes += 1

    def increase_class_count(self, lobby_format: int, slot: int) -> None:
        """Count one more lobby played on the class of the given slot."""
        try:
            _, class_name = get_slot_team_class(lobby_format, slot)
        except InvalidSlotError:
            return
        name = _CLASS_FIELDS.get(class_name)
        if name is not None:
            setattr(self, name, getattr(self, name) + 1)

    def save(self, db: Database) -> None:
        """Insert or update the record; a new record gets its id here."""
        columns = _columns()
        values = [_to_column(getattr(self, name)) for name in columns]
        if self.id is None:
            cursor = db.execute(
                f"INSERT INTO player_stats ({', '.join(columns)}) "
                f"VALUES ({', '.join('?' * len(columns))})",
                values,
            )
            self.id = cursor.lastrowid
        else:
            db.execute(
                f"INSERT OR REPLACE INTO player_stats (id, {', '.join(columns)}) "
                f"VALUES ({', '.join('?' * (len(columns) + 1))})",
                [self.id, *values],
            )

    @classmethod
    def load(cls, db: Database, stats_id: int) -> PlayerStats:
        rows = db.query("SELECT * FROM player_stats WHERE id = ?", (stats_id,))
        if not rows:
            raise LookupError(f"player stats {stats_id} not found")
        row = rows[0]
        values = {
            name: timedelta(seconds=row[name]) if name.endswith("_hours") else row[name]
            for name in _columns()
        }
        return cls(id=row["id"], **values)


def _columns() -> list[str]:
    return [f.name for f in fields(PlayerStats) if f.name != "id"]


def _to_column(value: Any) -> Any:
    return value.total_seconds() if isinstance(value, timedelta) else value