from itertools import count

import pytest

from helen.chat import (
    ChatMessage,
    get_player_messages,
    get_room_messages,
    get_scrollback,
    new_bot_message,
    new_chat_message,
    new_in_game_chat_message,
)
from helen.player import new_player
from helen.storage import Database

_ids = count(1)


@pytest.fixture
def db():
    database = Database()
    yield database
    database.close()


def _make_player(db, name="tester"):
    player = new_player(db, f"7656119811111{next(_ids):04d}")
    player.name = name
    player.save()
    return player


def test_new_chat_message(db):
    player = _make_player(db)
    for i in range(3):
        message = new_chat_message(str(i), 0, player)
        message.save(db)

    messages = get_room_messages(db, 0)
    assert len(messages) == 3
    assert [m.message for m in messages] == ["0", "1", "2"]
    assert all(m.player_id == player.id for m in messages)


def test_in_game_message(db):
    player = _make_player(db)
    message = new_in_game_chat_message(12, player, "gg")
    assert (message.room, message.in_game, message.message) == (12, True, "gg")


def test_bot_message_is_saved(db):
    message = new_bot_message(db, "Lobby closed", 5)
    stored = get_room_messages(db, 5)
    assert [(m.id, m.bot, m.message) for m in stored] == [(message.id, True, "Lobby closed")]


def test_to_json_for_player(db):
    player = _make_player(db)
    message = new_chat_message("hello", 3, player)
    message.save(db)
    data = message.to_json(db)
    assert data["message"] == "hello"
    assert data["room"] == 3
    assert data["player"] == {"name": "tester", "steamid": player.steam_id, "tags": ["player"]}
    assert data["deleted"] is False and data["ingame"] is False


def test_to_json_uses_alias(db):
    player = _make_player(db)
    player.set_setting("siteAlias", "nick")
    message = new_chat_message("hi", 0, player)
    message.save(db)
    assert message.to_json(db)["player"]["name"] == "nick"


def test_to_json_for_bot(db):
    message = new_bot_message(db, "notice", 0)
    assert message.to_json(db)["player"] == {
        "name": "TF2Stadium",
        "steamid": "76561198275497635",
        "tags": ["tf2stadium"],
    }


def test_to_json_deleted(db):
    player = _make_player(db)
    message = new_chat_message("rude", 0, player)
    message.deleted = True
    message.save(db)
    data = message.to_json(db)
    assert data["message"] == "<deleted>"
    assert data["player"]["tags"] == ["player", "<deleted>"]


def test_to_json_redacts_filtered_words(db):
    message = new_bot_message(db, "you are bad, bad", 0)
    data = message.to_json(db, ["bad"])
    assert data["message"] == "you are <redacted>, <redacted>"


def test_scrollback(db):
    player = _make_player(db)
    saved = []
    for i in range(25):
        message = new_chat_message(f"m{i}", 1, player)
        message.save(db)
        saved.append(message)
    saved[-1].deleted = True
    saved[-1].save(db)

    scrollback = get_scrollback(db, 1)
    assert len(scrollback) == 20
    ids = [m.id for m in scrollback]
    assert ids == sorted(ids, reverse=True)
    assert saved[-1].id not in ids
    assert scrollback[0].id == saved[-2].id


def test_player_messages_ordered_by_room(db):
    player = _make_player(db)
    other = _make_player(db, "other")
    for room in (2, 1, 2, 1):
        new_chat_message("x", room, player).save(db)
    new_chat_message("y", 1, other).save(db)

    messages = get_player_messages(db, player)
    assert [m.room for m in messages] == [1, 1, 2, 2]


def test_save_updates_existing(db):
    message = ChatMessage(room=4, message="first")
    message.save(db)
    first_id = message.id
    message.message = "second"
    message.save(db)
    stored = get_room_messages(db, 4)
    assert [(m.id, m.message) for m in stored] == [(first_id, "second")]