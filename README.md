# helen

Core models for a matchmaking backend that runs team game lobbies. The package
covers lobby formats and slot numbering, lobby settings (formats, maps, leagues,
whitelists), a JSON codec for websocket requests, players and their statistics,
bans and reports, chat messages, a pool of game servers and a log of admin
actions. Everything is stored in SQLite through the standard library. There are
no third-party dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Lobby formats and slots (`helen.formats`)

`Format` is an `IntEnum` of the formats `SIXES`, `HIGHLANDER`, `FOURS`,
`ULTIDUO`, `BBALL`, `PROLANDER` and `DEBUG`. Each has a `friendly_name` and a
`number_of_classes`. The two teams are `"red"` and `"blu"`; red's slots come
first, then blu's.

```python
from helen.formats import Format, get_slot, get_slot_team_class, get_classes

get_slot(Format.HIGHLANDER, "blu", "heavy")   # 13
get_slot_team_class(Format.SIXES, 4)          # ("red", "demoman")
get_classes(Format.FOURS)                     # ["scout", "soldier", "demoman", "medic"]
```

An unknown team, class or slot raises `InvalidTeamError`, `InvalidClassError` or
`InvalidSlotError`. All three are `ValueError` subclasses.

## Lobby settings (`helen.lobby_settings`)

`LobbySettings.load` parses a JSON document with `formats`, `maps`, `leagues` and
`whitelists`. If the JSON is malformed, a field has the wrong type, or an entry
names a format or league that was not defined, it raises `SettingsError`.

```python
from helen.lobby_settings import LobbySettings

settings = LobbySettings.load(data)
settings.get_format("sixes").pretty_name
settings.get_map("cp_process_final")
settings.get_league("etf2l")
settings.get_whitelist(3250)
settings.map_format("cp_process_final", "highlander").importance
settings.to_json()   # dict in the shape sent to clients
```

The lookups return `None` when nothing matches. `map_format` gives importance 0
to a known format that the map does not list.

## Websocket request codec (`helen.codec`)

`JSONCodec.read_name` returns the `Request` name of a body, or `""` if the body
has none. `JSONCodec.unmarshal` decodes a body into a dict with one value for
each `Field`. A field may not be null unless it has `empty=True`; an empty
string field becomes `""`. A field with `valid` values must be one of them.
On failure it raises `CodecError`. `JSONCodec.error` turns an exception into
`{"message": ..., "success": False}`.

```python
from helen.codec import Field, JSONCodec

codec = JSONCodec()
codec.unmarshal('{"team": "red"}', [Field("team", valid=("red", "blu"))])
```

## Storage (`helen.storage`)

`Database(path=":memory:")` opens a SQLite connection, creates the tables, and
can be shared between threads. It has `execute`, `query` and `close`, and it
works as a context manager.

## Players, statistics, bans and chat

```python
from datetime import datetime, timedelta, timezone

from helen.storage import Database
from helen.player import new_player, get_player_by_steam_id, get_player_with_stats
from helen.bans import BanType, ban_until, is_banned, unban, new_report, ReportType
from helen.chat import new_chat_message, get_room_messages, get_scrollback

with Database(":memory:") as db:
    player = new_player(db, "76561198000000000")
    player.save()
    player.set_setting("siteAlias", "medic main")
    player.alias()                      # "medic main"

    player.stats.played_count_increase(0)   # Format.SIXES
    player.save()
    get_player_with_stats(db, player.steam_id).stats.total_lobbies()   # 1

    ban_until(player, datetime.now(timezone.utc) + timedelta(minutes=10),
              BanType.CHAT, "spam")
    is_banned(player, BanType.CHAT)     # True
    unban(player, BanType.CHAT)

    new_report(player, ReportType.SUBSTITUTE, lobby_id=1)

    message = new_chat_message("hello", 0, player)
    message.save(db)
    get_room_messages(db, 0)
    message.to_json(db, filtered_words=["badword"])
```

- `helen.player`: `new_player` creates an unsaved player that already has a
  Mumble user name and auth key. `Player.save` stores the player together with
  its `PlayerStats`. `set_mumble_username` stores a unique Mumble name built
  from the slot's class and the player's name. The lookup functions raise
  `PlayerNotFoundError` when no player matches.
- `helen.stats`: `PlayerStats` counts lobbies per format and per class, and
  the number of substitutions.
- `helen.bans`: A full ban counts as every other type of ban. `get_active_ban`
  raises `LookupError` when there is none. `new_report` bans a player from
  joining for 30 minutes after a second substitute report within 30 minutes,
  or after a repeated vote or rage-quit report.
- `helen.chat`: `new_bot_message` saves a message from the notification bot.
  `get_scrollback` returns the latest 20 messages that are not deleted, newest
  first.

## Game servers and the admin log

```python
from helen.servers import new_stored_server, get_stored_server, put_stored_server
from helen.admin_log import log_custom_admin_action, get_admin_log

password = "password"
server = new_stored_server(db, "eu-1", "192.0.2.10:27015", password)
get_stored_server(db, server.id)        # marks it used
put_stored_server(db, server.address)   # returns it to the pool

log_custom_admin_action(db, 1, "ban", 2)
get_admin_log(db)
```

`new_stored_server` raises `ServerAlreadyExistsError` when the address is
already stored. `get_stored_server` raises `ServerUsedError` when the server is
in use, and `LookupError` when the id is unknown.

## What this package does not do

The package contains no lobby model itself (lobby state, slots, readiness,
spectators). It runs no HTTP or websocket server and does not send chat
messages to rooms. It does not call Steam, Twitch or other web services to fill
in player profiles, links or streaming status. It does not talk to game servers
or voice servers. Those parts have to be built on top of these models.