"""Lobby formats and the mapping between slot numbers, teams and classes."""

from __future__ import annotations

from enum import IntEnum


class Format(IntEnum):
    """A lobby format."""

    SIXES = 0
    HIGHLANDER = 1
    FOURS = 2
    ULTIDUO = 3
    BBALL = 4
    PROLANDER = 5
    DEBUG = 6

    @property
    def friendly_name(self) -> str:
        """Human readable name of the format."""
        return _FRIENDLY_NAMES[self]

    @property
    def number_of_classes(self) -> int:
        """Number of class slots on one team."""
        return len(_CLASSES[self])


TEAMS: tuple[str, ...] = ("red", "blu")

_CLASSES: dict[Format, tuple[str, ...]] = {
    Format.SIXES: ("scout1", "scout2", "roamer", "pocket", "demoman", "medic"),
    Format.HIGHLANDER: (
        "scout",
        "soldier",
        "pyro",
        "demoman",
        "heavy",
        "engineer",
        "medic",
        "sniper",
        "spy",
    ),
    Format.FOURS: ("scout", "soldier", "demoman", "medic"),
    Format.ULTIDUO: ("soldier", "medic"),
    Format.BBALL: ("soldier1", "soldier2"),
    Format.PROLANDER: ("scout", "soldier", "demoman", "medic", "sniper", "flex1", "flex2"),
    Format.DEBUG: ("scout",),
}

_FRIENDLY_NAMES: dict[Format, str] = {
    Format.HIGHLANDER: "Highlander",
    Format.SIXES: "6s",
    Format.FOURS: "4v4",
    Format.ULTIDUO: "Ultiduo",
    Format.BBALL: "Bball",
    Format.DEBUG: "Debug",
    Format.PROLANDER: "Prolander",
}

_TEAM_INDEX = {team: index for index, team in enumerate(TEAMS)}
_CLASS_INDEX = {
    fmt: {name: index for index, name in enumerate(classes)}
    for fmt, classes in _CLASSES.items()
}


class InvalidTeamError(ValueError):
    """Raised for a team name that does not exist."""

    def __init__(self, team: str) -> None:
        super().__init__(f"format: Invalid Team: {team}")
        self.team = team


class InvalidClassError(ValueError):
    """Raised for a class name that the format does not have."""

    def __init__(self, class_name: str) -> None:
        super().__init__(f"format: Invalid Class: {class_name}")
        self.class_name = class_name


class InvalidSlotError(ValueError):
    """Raised for a slot number outside the format's slots."""

    def __init__(self, slot: int) -> None:
        super().__init__(f"format: Invalid Slot number: {slot}")
        self.slot = slot


def _classes_of(lobby_format: int) -> tuple[str, ...]:
    try:
        return _CLASSES[Format(lobby_format)]
    except ValueError:
        return ()


def get_slot(lobby_format: int, team: str, class_name: str) -> int:
    """Return the slot number for a team and class in the given format."""
    try:
        team_index = _TEAM_INDEX[team]
    except KeyError:
        raise InvalidTeamError(team) from None

    try:
        class_index = _CLASS_INDEX[Format(lobby_format)][class_name]
    except (KeyError, ValueError):
        raise InvalidClassError(class_name) from None

    return team_index * len(_classes_of(lobby_format)) + class_index


def get_slot_team_class(lobby_format: int, slot: int) -> tuple[str, str]:
    """Return the (team, class) pair that a slot number stands for."""
    classes = _classes_of(lobby_format)
    team_index, class_index = divmod(slot, len(classes)) if classes else (len(TEAMS), 0)
    if slot < 0 or team_index >= len(TEAMS):
        raise InvalidSlotError(slot)
    return TEAMS[team_index], classes[class_index]


def get_classes(lobby_format: int) -> list[str]:
    """Return the class names of one team in the given format, in slot order."""
    return list(_classes_of(lobby_format))