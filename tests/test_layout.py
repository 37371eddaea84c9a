from __future__ import annotations

import pytest
from rich.text import Text

from kanbars.layout import (
    LABEL_WIDTH,
    TITLE_HEIGHT,
    DrawPlan,
    Region,
    Size,
    board_plan,
    lane_lines,
    split_evenly,
    ticket_lines,
    ticket_prefix,
    wrap_summary,
)
from kanbars.models import TicketType
from kanbars.status import Board
from factories import make_ticket

TITLE = [Text("title"), Text("hints")]


# -- Splitting --


@pytest.mark.parametrize(
    "total,parts,expected",
    [
        (10, 3, [3, 4, 3]),
        (12, 4, [3, 3, 3, 3]),
        (5, 5, [1, 1, 1, 1, 1]),
        (2, 4, [1, 0, 1, 0]),
        (0, 2, [0, 0]),
        (7, 0, []),
    ],
)
def test_split_evenly(total, parts, expected):
    assert split_evenly(total, parts) == expected


@pytest.mark.parametrize("total", range(0, 40))
def test_split_evenly_sums_to_total(total):
    for parts in range(1, 7):
        assert sum(split_evenly(total, parts)) == total


# -- Prefix and wrapping --


def test_prefix_without_assignee():
    ticket = make_ticket("A-1", assignee="unassigned")
    assert ticket_prefix(ticket) == "✓ A-1 - "


def test_prefix_empty_assignee():
    ticket = make_ticket("A-1", assignee="")
    assert ticket_prefix(ticket) == "✓ A-1 - "


def test_prefix_uses_assignee_local_part():
    ticket = make_ticket("A-1", assignee="jane.doe@example.com")
    assert ticket_prefix(ticket) == "✓ A-1 @jane.doe - "


def test_prefix_uses_type_emoji():
    ticket = make_ticket("B-9", ticket_type=TicketType.BUG)
    assert ticket_prefix(ticket).startswith("🐛 B-9")


def test_wrap_summary_fits():
    assert wrap_summary("short", 10, 10) == ["short"]


def test_wrap_summary_two_lines():
    assert wrap_summary("alpha beta gamma", 11, 20) == ["alpha beta", "gamma"]


def test_wrap_summary_drops_words_past_second_line():
    assert wrap_summary("aa bb cc dd ee", 5, 5) == ["aa bb", "cc dd"]


def test_wrap_summary_zero_width():
    assert wrap_summary("anything at all", 0, 10) == [""]


def test_wrap_summary_word_too_long_for_first_line():
    assert wrap_summary("enormousword tail", 5, 20) == ["", "enormousword tail"]


# Prefix "✓ A-1 - " is 8 cells wide.
PREFIX_WIDTH = 8


def test_ticket_exactly_fitting_renders_one_line():
    width = 20
    summary = "x" * (width - PREFIX_WIDTH)
    lines = ticket_lines(make_ticket(summary=summary), width)
    assert len(lines) == 1
    assert lines[0].plain.endswith(summary)


def test_ticket_one_char_over_renders_two_lines():
    width = 20
    summary = "aaaaaa bbbbbb"  # 13 chars, 12 available
    lines = ticket_lines(make_ticket(summary=summary), width)
    assert len(lines) == 2
    assert lines[0].plain.endswith("- aaaaaa")
    assert lines[1].plain.strip() == "bbbbbb"


def test_ticket_second_line_truncates_silently():
    width = 20
    summary = "aaa bbb ccccccccccccc ddd"
    lines = ticket_lines(make_ticket(summary=summary), width)
    assert len(lines) == 2
    assert lines[0].plain.endswith("- aaa bbb")
    assert lines[1].plain.strip() == "ccccccccccccc"


def test_ticket_unfittable_second_word_gives_single_line():
    width = 20
    summary = "aaa " + "b" * 30
    lines = ticket_lines(make_ticket(summary=summary), width)
    assert len(lines) == 1
    assert lines[0].plain.endswith("- aaa")


def test_ticket_narrower_than_prefix_shows_prefix_only():
    lines = ticket_lines(make_ticket(summary="lots of words here"), 4)
    assert len(lines) == 1
    assert "A-1" in lines[0].plain
    assert "words" not in lines[0].plain


def test_selected_ticket_has_marker():
    selected = ticket_lines(make_ticket(), 40, selected=True)
    plain = ticket_lines(make_ticket(), 40)
    assert selected[0].plain.startswith("▶ ")
    assert plain[0].plain.startswith("  ")


# -- Lanes --


def _tickets(n: int) -> list:
    return [make_ticket(f"A-{i}", summary="s") for i in range(n)]


def test_lane_lines_separates_tickets_with_blank_line():
    lines = lane_lines(_tickets(2), 40, 10)
    assert [line.plain.strip() != "" for line in lines] == [True, False, True]


def test_lane_lines_all_fit_no_indicator():
    lines = lane_lines(_tickets(3), 40, 6)
    assert len(lines) == 5
    assert "more" not in lines[-1].plain


def test_lane_lines_overflow_indicator():
    lines = lane_lines(_tickets(5), 40, 6)
    assert len(lines) == 6
    assert lines[-1].plain.strip() == "…and 2 more"


def test_lane_lines_no_room_at_all():
    lines = lane_lines(_tickets(2), 40, 1)
    assert [line.plain.strip() for line in lines] == ["…and 2 more"]


def test_lane_lines_marks_selected_offset():
    lines = lane_lines(_tickets(3), 40, 10, selected_offset=1)
    marked = [line.plain for line in lines if line.plain.startswith("▶")]
    assert len(marked) == 1
    assert "A-1" in marked[0]


# -- Draw plans --


def _cell_width(text: Text) -> int:
    return text.cell_len


def test_region_crops_and_pads():
    region = Region(0, 0, 5, 2, [Text("abcdefgh")])
    assert region.line(0).plain == "abcde"
    assert region.line(1).plain == "     "


def test_rows_have_exact_size():
    plan = DrawPlan(Size(10, 3), [Region(2, 1, 4, 1, [Text("hello")])])
    rows = plan.rows()
    assert len(rows) == 3
    assert [r.plain for r in rows] == [" " * 10, "  hell    ", " " * 10]


def test_board_plan_lane_bands():
    board = Board.from_tickets(
        [
            make_ticket("A-1", status="To Do"),
            make_ticket("A-2", status="Done"),
            make_ticket("A-3", status="To Do"),
        ]
    )
    plan = board_plan(Size(80, 24), board, 0, TITLE)
    rows = plan.rows()
    assert len(rows) == 24
    assert all(_cell_width(r) == 80 for r in rows)
    assert rows[0].plain.startswith("title")
    # Body of 22 rows splits into two 11-row lanes, each led by a rule
    assert rows[TITLE_HEIGHT].plain.startswith("───")
    assert rows[TITLE_HEIGHT + 11].plain.startswith("───")
    assert rows[TITLE_HEIGHT + 1].plain.startswith("TO DO")
    assert rows[TITLE_HEIGHT + 12].plain.startswith("DONE")
    assert rows[TITLE_HEIGHT + 1].plain[LABEL_WIDTH + 1 :].startswith("▶ ✓ A-1")


def test_board_plan_selection_in_second_lane():
    board = Board.from_tickets(
        [make_ticket("A-1", status="To Do"), make_ticket("A-2", status="Done")]
    )
    rows = board_plan(Size(60, 12), board, 1, TITLE).rows()
    marked = [r.plain for r in rows if "▶" in r.plain]
    assert len(marked) == 1
    assert "A-2" in marked[0]


def test_board_plan_empty_board():
    plan = board_plan(Size(60, 12), Board(), 0, TITLE)
    rows = plan.rows()
    assert any("No tickets found" in r.plain for r in rows)


@pytest.mark.parametrize("size", [Size(0, 0), Size(3, 1), Size(5, 4), Size(14, 3)])
def test_board_plan_tiny_canvas_degrades(size):
    board = Board.from_tickets([make_ticket(f"A-{i}", status="Open") for i in range(4)])
    rows = board_plan(size, board, 2, TITLE).rows()
    assert len(rows) == size.height
    assert all(_cell_width(r) == size.width for r in rows)
