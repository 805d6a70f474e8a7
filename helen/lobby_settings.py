"""Lobby settings: formats, maps, leagues and whitelists loaded from JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


class SettingsError(ValueError):
    """Raised when lobby settings cannot be loaded."""


@dataclass(frozen=True)
class LobbyFormat:
    name: str
    pretty_name: str = ""
    important: bool = False


@dataclass(frozen=True)
class LobbyMapFormat:
    format: LobbyFormat
    importance: int = 0


@dataclass
class LobbyMap:
    name: str
    formats: list[LobbyMapFormat] = field(default_factory=list)


@dataclass(frozen=True)
class LobbyLeagueDescription:
    map_type: str
    description: str


@dataclass(frozen=True)
class LobbyLeagueFormat:
    format: LobbyFormat
    used: bool


@dataclass
class LobbyLeague:
    name: str
    pretty_name: str = ""
    descriptions: list[LobbyLeagueDescription] = field(default_factory=list)
    formats: list[LobbyLeagueFormat] = field(default_factory=list)


@dataclass
class LobbyWhitelist:
    id: int
    pretty_name: str
    league: LobbyLeague
    format: LobbyFormat


def _lookup(obj: dict[str, Any], key: str) -> Any:
    """Find a key case-insensitively; the last matching key wins."""
    folded = key.casefold()
    found = None
    for name, value in obj.items():
        if name.casefold() == folded:
            found = value
    return found


def _typed(obj: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    value = _lookup(obj, key)
    if value is None:
        return default
    if kind is int:
        ok = isinstance(value, int) and not isinstance(value, bool)
    else:
        ok = isinstance(value, kind)
    if not ok:
        raise SettingsError(f"field {key!r} must be of type {kind.__name__}")
    return value


def _objects(obj: dict[str, Any], key: str) -> list[dict[str, Any]]:
    items = _typed(obj, key, list, [])
    result = []
    for item in items:
        if item is None:
            item = {}
        if not isinstance(item, dict):
            raise SettingsError(f"entries of {key!r} must be objects")
        result.append(item)
    return result


def _mapping(obj: dict[str, Any], key: str, kind: type, default: Any) -> dict[str, Any]:
    raw = _typed(obj, key, dict, {})
    return {name: _typed(raw, name, kind, default) if name in raw else default for name in raw}


def _missing(kind: str, name: str) -> SettingsError:
    return SettingsError(f"Referenced a non existing {kind} {json.dumps(name)}")


@dataclass
class LobbySettings:
    """The full set of lobby settings, with lookups by name and id."""

    formats: list[LobbyFormat] = field(default_factory=list)
    maps: list[LobbyMap] = field(default_factory=list)
    leagues: list[LobbyLeague] = field(default_factory=list)
    whitelists: list[LobbyWhitelist] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._formats = {fmt.name: fmt for fmt in self.formats}
        self._maps = {amap.name: amap for amap in self.maps}
        self._leagues = {league.name: league for league in self.leagues}
        self._whitelists = {wl.id: wl for wl in self.whitelists}

    @classmethod
    def load(cls, data: str | bytes) -> LobbySettings:
        """Parse settings from a JSON document."""
        try:
            raw = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise SettingsError(str(exc)) from exc
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise SettingsError("lobby settings must be a JSON object")

        formats = [
            LobbyFormat(
                name=_typed(entry, "name", str, ""),
                pretty_name=_typed(entry, "prettyName", str, ""),
                important=_typed(entry, "important", bool, False),
            )
            for entry in _objects(raw, "formats")
        ]
        format_index = {fmt.name: fmt for fmt in formats}

        def resolve_format(name: str) -> LobbyFormat:
            try:
                return format_index[name]
            except KeyError:
                raise _missing("format", name) from None

        maps = [
            LobbyMap(
                name=_typed(entry, "name", str, ""),
                formats=[
                    LobbyMapFormat(resolve_format(name), importance)
                    for name, importance in _mapping(entry, "formats", int, 0).items()
                ],
            )
            for entry in _objects(raw, "maps")
        ]

        leagues = [
            LobbyLeague(
                name=_typed(entry, "name", str, ""),
                pretty_name=_typed(entry, "prettyName", str, ""),
                descriptions=[
                    LobbyLeagueDescription(map_type, description)
                    for map_type, description in _mapping(
                        entry, "descriptions", str, ""
                    ).items()
                ],
                formats=[
                    LobbyLeagueFormat(resolve_format(name), used)
                    for name, used in _mapping(entry, "formats", bool, False).items()
                ],
            )
            for entry in _objects(raw, "leagues")
        ]
        league_index = {league.name: league for league in leagues}

        whitelists = []
        for entry in _objects(raw, "whitelists"):
            league_name = _typed(entry, "league", str, "")
            format_name = _typed(entry, "format", str, "")
            if league_name not in league_index:
                raise _missing("league", league_name)
            whitelists.append(
                LobbyWhitelist(
                    id=_typed(entry, "id", int, 0),
                    pretty_name=_typed(entry, "prettyName", str, ""),
                    league=league_index[league_name],
                    format=resolve_format(format_name),
                )
            )

        return cls(formats=formats, maps=maps, leagues=leagues, whitelists=whitelists)

    def get_format(self, name: str) -> LobbyFormat | None:
        return self._formats.get(name)

    def get_map(self, name: str) -> LobbyMap | None:
        return self._maps.get(name)

    def get_league(self, name: str) -> LobbyLeague | None:
        return self._leagues.get(name)

    def get_whitelist(self, whitelist_id: int) -> LobbyWhitelist | None:
        return self._whitelists.get(whitelist_id)

    def map_format(self, map_name: str, format_name: str) -> LobbyMapFormat | None:
        """Return a map's entry for a format.

        A known format that the map does not list has importance 0.
        """
        amap = self.get_map(map_name)
        if amap is None:
            return None
        for map_format in amap.formats:
            if map_format.format.name == format_name:
                return map_format
        fmt = self.get_format(format_name)
        return LobbyMapFormat(fmt, 0) if fmt is not None else None

    def to_json(self) -> dict[str, Any]:
        """Return the settings in the shape the front end expects."""
        format_options = [
            {"value": fmt.name, "title": fmt.pretty_name, "important": fmt.important}
            for fmt in self.formats
        ]

        map_options = []
        for amap in self.maps:
            option: dict[str, Any] = {"value": amap.name}
            option.update((mf.format.name, mf.importance) for mf in amap.formats)
            map_options.append(option)

        league_options = []
        for league in self.leagues:
            option = {
                "value": league.name,
                "title": league.pretty_name,
                "descriptions": {d.map_type: d.description for d in league.descriptions},
            }
            option.update((lf.format.name, lf.used) for lf in league.formats)
            league_options.append(option)

        whitelist_options = [
            {
                "value": wl.id,
                "title": wl.pretty_name,
                "league": wl.league.name,
                "format": wl.format.name,
            }
            for wl in self.whitelists
        ]

        return {
            "formats": {"key": "type", "title": "Format", "options": format_options},
            "maps": {"key": "mapName", "title": "Map", "options": map_options},
            "leagues": {"key": "league", "title": "League", "options": league_options},
            "whitelists": {
                "key": "whitelist",
                "title": "Whitelist",
                "options": whitelist_options,
            },
        }