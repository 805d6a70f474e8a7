from datetime import datetime, timezone

import pytest

from helen.formats import (
    Format,
    InvalidClassError,
    InvalidSlotError,
    InvalidTeamError,
    get_classes,
    get_slot,
    get_slot_team_class,
)

SIXES_SLOTS = [
    (0, "scout1"),
    (1, "scout2"),
    (2, "roamer"),
    (3, "pocket"),
    (4, "demoman"),
    (5, "medic"),
]


def test_sixes_red_scout1_is_slot_zero():
    assert get_slot(Format.SIXES, "red", "scout1") == 0


def test_highlander_blu_heavy_is_slot_13():
    assert get_slot(Format.HIGHLANDER, "blu", "heavy") == 13


def test_unknown_class_raises():
    with pytest.raises(InvalidClassError):
        get_slot(Format.HIGHLANDER, "blu", "garbageman")


def test_unknown_team_raises():
    with pytest.raises(InvalidTeamError):
        get_slot(Format.SIXES, "ylw", "demoman")


@pytest.mark.parametrize("slot,class_name", SIXES_SLOTS)
def test_sixes_red_slots(slot, class_name):
    team, cls = get_slot_team_class(Format.SIXES, slot)
    assert cls == class_name
    assert team == "red"


@pytest.mark.parametrize("fmt", list(Format))
def test_slot_round_trip(fmt):
    for slot in range(2 * fmt.number_of_classes):
        team, cls = get_slot_team_class(fmt, slot)
        assert get_slot(fmt, team, cls) == slot


@pytest.mark.parametrize("fmt", list(Format))
def test_slot_past_both_teams_is_invalid(fmt):
    with pytest.raises(InvalidSlotError):
        get_slot_team_class(fmt, 2 * fmt.number_of_classes)


def test_negative_slot_is_invalid():
    with pytest.raises(InvalidSlotError):
        get_slot_team_class(Format.SIXES, -1)


def test_second_half_is_blu():
    assert get_slot_team_class(Format.HIGHLANDER, 13) == ("blu", "heavy")


def test_error_messages():
    assert str(InvalidTeamError("ylw")) == "format: Invalid Team: ylw"
    assert str(InvalidClassError("garbageman")) == "format: Invalid Class: garbageman"
    assert str(InvalidSlotError(55)) == "format: Invalid Slot number: 55"


@pytest.mark.parametrize(
    "fmt,expected",
    [
        (Format.HIGHLANDER, 9),
        (Format.SIXES, 6),
        (Format.FOURS, 4),
        (Format.ULTIDUO, 2),
        (Format.BBALL, 2),
        (Format.DEBUG, 1),
        (Format.PROLANDER, 7),
    ],
)
def test_number_of_classes(fmt, expected):
    assert len(get_classes(fmt)) == expected
    assert fmt.number_of_classes == expected
    team, _ = get_slot_team_class(fmt, expected)
    assert team == "blu"


@pytest.mark.parametrize(
    "fmt,expected",
    [
        (Format.SIXES, "6s"),
        (Format.FOURS, "4v4"),
        (Format.PROLANDER, "Prolander"),
    ],
)
def test_friendly_names(fmt, expected):
    assert Format(fmt).friendly_name == expected


def test_get_classes():
    assert get_classes(Format.SIXES) == [name for _, name in SIXES_SLOTS]
    assert get_classes(Format.BBALL) == ["soldier1", "soldier2"]


def test_get_classes_returns_copy():
    classes = get_classes(Format.DEBUG)
    classes.append("spy")
    assert get_classes(Format.DEBUG) == ["scout"]


def test_unknown_format_has_no_slots():
    assert get_classes(42) == []
    with pytest.raises(InvalidClassError):
        get_slot(42, "red", "scout")
    with pytest.raises(InvalidSlotError):
        get_slot_team_class(42, 0)