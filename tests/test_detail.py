from __future__ import annotations

import pytest
from rich.text import Text

from kanbars.detail import (
    LOADING,
    NO_DESCRIPTION,
    NO_DESCRIPTION_HINT,
    clamp_scroll,
    detail_lines,
    max_scroll,
    visible_lines,
)
from kanbars.models import Comment
from factories import make_ticket


def _plain(lines: list[Text]) -> list[str]:
    return [line.plain for line in lines]


def test_minimal_ticket_shows_placeholder_and_hint():
    lines = _plain(detail_lines(make_ticket(status="To Do")))
    assert lines == [
        "Status: To Do   Assignee: unassigned",
        "",
        "",
        "Description:",
        NO_DESCRIPTION,
        NO_DESCRIPTION_HINT,
    ]


def test_empty_description_counts_as_missing():
    lines = _plain(detail_lines(make_ticket(description="")))
    assert NO_DESCRIPTION in lines


def test_loading_placeholder():
    lines = _plain(detail_lines(make_ticket(), loading=True))
    assert LOADING in lines
    assert NO_DESCRIPTION not in lines


def test_full_ticket():
    ticket = make_ticket(
        assignee="jane@example.com",
        description="First line\nSecond line",
        priority="High",
        reporter="Bob",
        created="2024-01-01",
        updated="2024-01-02",
        labels=["backend", "urgent"],
        comments=[
            Comment(author="Ann", created="2024-01-03", body="Looks good"),
            Comment(author="Bob", created="", body="Ship it"),
        ],
    )
    lines = _plain(detail_lines(ticket))
    assert lines == [
        "Status: To Do   Assignee: jane",
        "",
        "Priority: High",
        "Reporter: Bob",
        "Created: 2024-01-01   Updated: 2024-01-02",
        "Labels: backend, urgent",
        "",
        "Description:",
        "First line",
        "Second line",
        "Comments (2)",
        "",
        "Ann — 2024-01-03",
        "Looks good",
        "",
        "Bob",
        "Ship it",
    ]


def test_dates_line_with_only_updated():
    lines = _plain(detail_lines(make_ticket(updated="2024-02-02")))
    assert "Updated: 2024-02-02" in lines
    assert not any(line.startswith("Created") for line in lines)


def test_empty_labels_and_comments_are_omitted():
    lines = _plain(detail_lines(make_ticket(labels=[], comments=[])))
    assert not any(line.startswith("Labels") for line in lines)
    assert not any(line.startswith("Comments") for line in lines)


@pytest.mark.parametrize(
    "total,viewport,expected",
    [(10, 4, 6), (4, 10, 0), (5, 5, 0), (0, 3, 0), (7, 0, 7)],
)
def test_max_scroll(total, viewport, expected):
    assert max_scroll(total, viewport) == expected


@pytest.mark.parametrize(
    "scroll,limit,expected",
    [(-3, 5, 0), (3, 5, 3), (9, 5, 5), (4, 0, 0)],
)
def test_clamp_scroll(scroll, limit, expected):
    assert clamp_scroll(scroll, limit) == expected


def test_visible_lines_slice():
    lines = [Text(str(i)) for i in range(10)]
    assert _plain(visible_lines(lines, 3, 4)) == ["3", "4", "5", "6"]
    assert _plain(visible_lines(lines, 8, 4)) == ["8", "9"]
