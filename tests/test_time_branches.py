"""Tests du résolveur de 時辰 (double-heure)."""

import pytest

from shuwen.domain.entities import BranchTime, ClockTime, UnknownTime
from shuwen.domain.time_branches import (
    BRANCH_CODES,
    TIME_BRANCHES,
    branch_for_clock,
    is_branch_code,
    parse_clock,
    resolve_branch,
)

EXPECTED_BRANCH_COUNT = 12
EXPECTED_REGULAR_WINDOWS = 11


def test_twelve_distinct_branch_labels():
    """Teste que les douze codes ont des libellés distincts."""
    assert len(BRANCH_CODES) == EXPECTED_BRANCH_COUNT
    labels = {resolve_branch(BranchTime(code)) for code in BRANCH_CODES}
    assert len(labels) == EXPECTED_BRANCH_COUNT


def test_unknown_and_invalid_branch_codes():
    assert resolve_branch(UnknownTime()) == "吉時"
    assert resolve_branch(BranchTime("")) == "未知"
    assert resolve_branch(BranchTime("dragon")) == "未知"
    assert not is_branch_code("ZI")
    assert is_branch_code("zi")


@pytest.mark.parametrize(
    ("hour", "minute", "label"),
    [
        (23, 0, "夜子時"),
        (23, 59, "夜子時"),
        (0, 0, "早子時"),
        (0, 59, "早子時"),
        (1, 0, "丑時"),
        (2, 59, "丑時"),
        (12, 0, "午時"),
        (12, 59, "午時"),
        (13, 0, "未時"),
        (22, 59, "亥時"),
    ],
)
def test_clock_time_labels(hour, minute, label):
    """Teste les bornes des fenêtres et les cas particuliers du 子時."""
    assert resolve_branch(ClockTime(hour, minute)) == label


@pytest.mark.parametrize(
    ("hour", "minute"),
    [(None, None), (24, 0), (12, 60), (-1, 30), (True, 0)],
)
def test_malformed_clock_times_are_unknown(hour, minute):
    """Teste qu'une heure mal formée donne 未知 sans lever."""
    assert resolve_branch(ClockTime(hour, minute)) == "未知"


def test_windows_partition_the_day_outside_zi():
    """Teste que [01:00, 23:00) est couvert par onze fenêtres de deux heures (丑 à 亥)."""
    seen = {}
    for minute_of_day in range(60, 23 * 60):
        code = branch_for_clock(minute_of_day // 60, minute_of_day % 60)
        assert code and code != "zi"
        seen[code] = seen.get(code, 0) + 1
    assert len(seen) == EXPECTED_REGULAR_WINDOWS
    assert set(seen.values()) == {120}


def test_zi_wraps_midnight():
    zi = TIME_BRANCHES["zi"]
    assert zi.contains(23 * 60)
    assert zi.contains(0)
    assert zi.contains(59)
    assert not zi.contains(60)
    assert not zi.contains(22 * 60 + 59)


def test_branch_for_clock_accepts_digit_strings():
    assert branch_for_clock("07", "05") == "chen"
    assert branch_for_clock("7a", "05") == ""


def test_clock_time_from_text():
    """Teste l'analyse stricte HH:MM."""
    assert ClockTime.from_text("09:30") == ClockTime(9, 30)
    assert ClockTime.from_text("9:30") == ClockTime(None, None)
    assert ClockTime.from_text(None) == ClockTime(None, None)
    assert resolve_branch(ClockTime.from_text("23:10")) == "夜子時"


def test_parse_clock_bounds():
    assert parse_clock("00:00") == (0, 0)
    assert parse_clock("23:59") == (23, 59)
    assert parse_clock("24:00") is None
    assert parse_clock("12:5") is None
    assert parse_clock("") is None


def test_parse_clock_is_ascii_and_fully_anchored():
    """Teste que seuls les chiffres ASCII et un texte complet sont acceptés."""
    assert parse_clock("12:30\n") is None
    assert parse_clock("１２:３０") is None
    assert branch_for_clock("１２", "30") == ""
    assert resolve_branch(ClockTime.from_text("12:30\n")) == "未知"
