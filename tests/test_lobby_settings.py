import json

import pytest

from helen.lobby_settings import LobbySettings, SettingsError

SETTINGS_DATA = b"""
{
    "formats": [
        {"name": "sixes", "prettyName": "6v6", "important": true},
        {"name": "highlander", "prettyName": "Highlander", "important": true},
        {"name": "fours", "prettyName": "4v4"}
    ],
    "maps": [
        {"name": "cp_process_final", "formats": {"highlander": 1, "sixes": 2}},
        {"name": "pl_upward", "formats": {"highlander": 2}}
    ],
    "leagues": [
        {
            "name": "etf2l",
            "prettyName": "ETF2L",
            "descriptions": {"cp": "Somethings cool happen"},
            "formats": {"highlander": true, "sixes": true}
        }
    ],
    "whitelists": [
        {
            "id": 3250,
            "prettyName": "ETF2L Highlander (Season 8)",
            "league": "etf2l",
            "format": "highlander"
        }
    ]
}
"""


@pytest.fixture
def settings():
    return LobbySettings.load(SETTINGS_DATA)


def test_formats_loaded(settings):
    assert len(settings.formats) == 3

    sixes = settings.get_format("sixes")
    assert sixes.pretty_name == "6v6"
    assert sixes.important is True

    highlander = settings.get_format("highlander")
    assert highlander.pretty_name == "Highlander"
    assert highlander.important is True

    fours = settings.get_format("fours")
    assert fours.pretty_name == "4v4"
    assert fours.important is False


def test_maps_loaded(settings):
    assert len(settings.maps) == 2

    process = settings.get_map("cp_process_final")
    assert len(process.formats) == 2
    assert settings.map_format("cp_process_final", "highlander").importance == 1
    assert settings.map_format("cp_process_final", "sixes").importance == 2
    assert settings.map_format("cp_process_final", "fours").importance == 0

    upward = settings.get_map("pl_upward")
    assert len(upward.formats) == 1
    assert settings.map_format("pl_upward", "highlander").importance == 2


def test_map_format_unknown(settings):
    assert settings.map_format("pl_upward", "ultiduo") is None
    assert settings.map_format("koth_nowhere", "sixes") is None


def test_leagues_and_whitelists(settings):
    league = settings.get_league("etf2l")
    assert league.pretty_name == "ETF2L"
    assert {(d.map_type, d.description) for d in league.descriptions} == {
        ("cp", "Somethings cool happen")
    }
    assert {(lf.format.name, lf.used) for lf in league.formats} == {
        ("highlander", True),
        ("sixes", True),
    }

    whitelist = settings.get_whitelist(3250)
    assert whitelist.pretty_name == "ETF2L Highlander (Season 8)"
    assert whitelist.league is league
    assert whitelist.format is settings.get_format("highlander")


def test_missing_lookups(settings):
    assert settings.get_format("ultiduo") is None
    assert settings.get_map("koth_nowhere") is None
    assert settings.get_league("ugc") is None
    assert settings.get_whitelist(1) is None


def test_to_json_encodes(settings):
    document = settings.to_json()
    assert json.loads(json.dumps(document)) == document


def test_to_json_shape(settings):
    document = settings.to_json()
    assert document["formats"]["key"] == "type"
    assert document["formats"]["title"] == "Format"
    assert document["formats"]["options"][0] == {
        "value": "sixes",
        "title": "6v6",
        "important": True,
    }
    assert document["maps"]["key"] == "mapName"
    assert document["maps"]["options"][0] == {
        "value": "cp_process_final",
        "highlander": 1,
        "sixes": 2,
    }
    league = document["leagues"]["options"][0]
    assert league["value"] == "etf2l"
    assert league["descriptions"] == {"cp": "Somethings cool happen"}
    assert league["highlander"] is True
    assert document["whitelists"]["key"] == "whitelist"
    assert document["whitelists"]["options"] == [
        {
            "value": 3250,
            "title": "ETF2L Highlander (Season 8)",
            "league": "etf2l",
            "format": "highlander",
        }
    ]


def test_map_with_unknown_format_is_rejected():
    data = json.dumps(
        {"formats": [{"name": "sixes"}], "maps": [{"name": "m", "formats": {"bogus": 1}}]}
    )
    with pytest.raises(SettingsError, match="Referenced a non existing format"):
        LobbySettings.load(data)


def test_league_with_unknown_format_is_rejected():
    data = json.dumps({"leagues": [{"name": "etf2l", "formats": {"sixes": True}}]})
    with pytest.raises(SettingsError, match="Referenced a non existing format"):
        LobbySettings.load(data)


def test_whitelist_with_unknown_league_is_rejected():
    data = json.dumps(
        {
            "formats": [{"name": "sixes"}],
            "whitelists": [{"id": 1, "league": "nope", "format": "sixes"}],
        }
    )
    with pytest.raises(SettingsError, match="Referenced a non existing league"):
        LobbySettings.load(data)


def test_whitelist_with_unknown_format_is_rejected():
    data = json.dumps(
        {
            "leagues": [{"name": "etf2l"}],
            "whitelists": [{"id": 1, "league": "etf2l", "format": "sixes"}],
        }
    )
    with pytest.raises(SettingsError, match="Referenced a non existing format"):
        LobbySettings.load(data)


def test_invalid_json_is_rejected():
    with pytest.raises(SettingsError):
        LobbySettings.load(b"{not json")


def test_wrong_type_is_rejected():
    with pytest.raises(SettingsError):
        LobbySettings.load(json.dumps({"formats": [{"name": 5}]}))


def test_empty_document_gives_empty_settings():
    settings = LobbySettings.load("{}")
    assert settings.formats == []
    assert settings.to_json()["maps"]["options"] == []