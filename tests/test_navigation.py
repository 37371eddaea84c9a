from __future__ import annotations

import pytest

from kanbars.navigation import clamp_selection, move_down, move_up


def test_move_down_increments():
    assert move_down(0, 3) == 1


def test_move_down_wraps():
    assert move_down(2, 3) == 0


def test_move_up_decrements():
    assert move_up(2, 3) == 1


def test_move_up_wraps():
    assert move_up(0, 3) == 2


def test_moves_are_noops_when_empty():
    assert move_up(0, 0) == 0
    assert move_down(0, 0) == 0


@pytest.mark.parametrize("total", [1, 2, 5, 17])
def test_down_then_up_is_identity(total):
    for index in range(total):
        assert move_up(move_down(index, total), total) == index


@pytest.mark.parametrize("total", [1, 2, 5, 17])
def test_full_cycle_returns_to_start(total):
    for start in range(total):
        index = start
        for _ in range(total):
            index = move_down(index, total)
        assert index == start


def test_moves_stay_in_range():
    index = 0
    for step in [1, 1, -1, -1, -1, 1, 1, 1, 1, -1] * 3:
        index = move_down(index, 4) if step > 0 else move_up(index, 4)
        assert 0 <= index < 4


@pytest.mark.parametrize(
    "index,total,expected",
    [(0, 0, 0), (5, 0, 0), (5, 3, 2), (1, 3, 1), (-1, 3, 0)],
)
def test_clamp_selection(index, total, expected):
    assert clamp_selection(index, total) == expected
