"""Board layout: lane splitting, ticket wrapping and the draw plan.

A DrawPlan is a list of rectangular regions holding rich Text rows. It is
independent of Textual so the whole layout can be exercised without a
terminal; the TUI canvas only rasterizes `DrawPlan.rows()`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

from rich.cells import cell_len
from rich.text import Text

from kanbars.models import Ticket
from kanbars.status import BUCKET_COLORS, BUCKET_EMOJI, Board, Lane

TITLE_HEIGHT = 2
LABEL_WIDTH = 12
GUTTER_WIDTH = 1
MARKER_WIDTH = 2
CONTINUATION_INDENT = 4

SELECTED_MARKER = "▶ "
SEPARATOR = " - "
RULE_CHAR = "─"


class Size(NamedTuple):
    width: int
    height: int


@dataclass
class Region:
    x: int
    y: int
    width: int
    height: int
    lines: list[Text] = field(default_factory=list)
    style: str = ""

    def covers_row(self, y: int) -> bool:
        return self.y <= y < self.y + self.height

    def line(self, row: int) -> Text:
        """Row `row` of the region, cropped or padded to the region width."""
        text = self.lines[row].copy() if 0 <= row < len(self.lines) else Text()
        text.truncate(max(0, self.width), pad=True)
        if self.style:
            text.stylize_before(self.style)
        return text


@dataclass
class DrawPlan:
    size: Size
    regions: list[Region] = field(default_factory=list)

    def rows(self) -> list[Text]:
        """Rasterize the regions into exactly `height` rows of `width` cells."""
        width = max(0, self.size.width)
        rows: list[Text] = []
        for y in range(max(0, self.size.height)):
            row = Text()
            cursor = 0
            covering = sorted(
                (r for r in self.regions if r.covers_row(y) and r.width > 0),
                key=lambda r: r.x,
            )
            for region in covering:
                if region.x < cursor:
                    continue
                if region.x > cursor:
                    row.append(" " * (region.x - cursor))
                row.append_text(region.line(y - region.y))
                cursor = region.x + region.width
            row.truncate(width, pad=True)
            rows.append(row)
        return rows


def split_evenly(total: int, parts: int) -> list[int]:
    """Split `total` cells into `parts` near-equal sizes that sum to `total`."""
    if parts <= 0:
        return []
    total = max(0, total)
    bounds = [(total * i + parts // 2) // parts for i in range(parts + 1)]
    return [bounds[i + 1] - bounds[i] for i in range(parts)]


# -- Ticket wrapping --


def _pack(words: list[str], width: int) -> tuple[list[str], list[str]]:
    """Greedily take whole words that fit in `width`; return (taken, rest)."""
    taken: list[str] = []
    used = 0
    for i, word in enumerate(words):
        needed = cell_len(word) + (1 if taken else 0)
        if used + needed > width:
            return taken, words[i:]
        taken.append(word)
        used += needed
    return taken, []


def wrap_summary(summary: str, first_width: int, next_width: int) -> list[str]:
    """Wrap a summary onto at most two lines.

    The first line has `first_width` cells next to the ticket prefix, the
    continuation line `next_width`. Words that fit on neither are dropped.
    """
    if first_width <= 0:
        return [""]
    if cell_len(summary) <= first_width:
        return [summary]
    first, rest = _pack(summary.split(), first_width)
    lines = [" ".join(first)]
    if rest:
        second, _dropped = _pack(rest, next_width)
        if second:
            lines.append(" ".join(second))
    return lines


def ticket_prefix(ticket: Ticket) -> str:
    prefix = f"{ticket.ticket_type.emoji} {ticket.key}"
    name = ticket.assignee_name
    if name:
        prefix += f" @{name}"
    return prefix + SEPARATOR


def ticket_lines(ticket: Ticket, width: int, selected: bool = False) -> list[Text]:
    """Render one ticket into one or two lines of `width` cells (plus marker)."""
    prefix_len = cell_len(ticket_prefix(ticket))
    remaining = max(0, width - prefix_len)
    wrapped = wrap_summary(
        ticket.summary, remaining, max(0, width - CONTINUATION_INDENT)
    )

    marker = SELECTED_MARKER if selected else " " * MARKER_WIDTH
    key_style = "bold reverse" if selected else "bold"

    first = Text(marker, style="bold" if selected else "")
    first.append(f"{ticket.ticket_type.emoji} ")
    first.append(ticket.key, style=key_style)
    name = ticket.assignee_name
    if name:
        first.append(f" @{name}", style="italic")
    first.append(SEPARATOR, style="dim")
    first.append(wrapped[0])

    lines = [first]
    for extra in wrapped[1:]:
        lines.append(Text(" " * (MARKER_WIDTH + CONTINUATION_INDENT) + extra))
    return lines


def lane_lines(
    tickets: list[Ticket],
    width: int,
    height: int,
    selected_offset: int | None = None,
) -> list[Text]:
    """Lay out a lane's tickets into `height` rows of a `width`-cell column.

    The last row is kept for the "…and N more" indicator shown when not
    every ticket fits.
    """
    wrap_width = max(0, width - MARKER_WIDTH)
    budget = max(0, height - 1)
    lines: list[Text] = []
    rendered = 0
    for offset, ticket in enumerate(tickets):
        block = ticket_lines(ticket, wrap_width, selected=offset == selected_offset)
        needed = len(block) + (1 if lines else 0)
        if len(lines) + needed > budget:
            break
        if lines:
            lines.append(Text())
        lines.extend(block)
        rendered += 1

    hidden = len(tickets) - rendered
    if hidden:
        lines.append(Text(f"  …and {hidden} more", style="dim italic"))
    return lines


def lane_label(lane: Lane) -> list[Text]:
    color = BUCKET_COLORS[lane.bucket]
    name = Text(lane.status.upper(), style=f"bold {color}")
    name.truncate(LABEL_WIDTH - 1, overflow="ellipsis")
    return [
        name,
        Text(f"{BUCKET_EMOJI[lane.bucket]} {len(lane)}", style=color),
    ]


# -- Plans --


def title_region(size: Size, title_lines: list[Text]) -> Region:
    return Region(0, 0, size.width, TITLE_HEIGHT, title_lines, style="on grey11")


def empty_board_plan(size: Size, title_lines: list[Text]) -> DrawPlan:
    """Title strip plus a centered "no tickets" panel."""
    messages = ["No tickets found", "", "press r to refresh, q to quit"]
    panel_width = min(max(0, size.width), max(cell_len(m) for m in messages) + 4)
    body_height = max(0, size.height - TITLE_HEIGHT)
    panel_height = len(messages)
    lines = []
    for i, message in enumerate(messages):
        text = Text(message, style="bold" if i == 0 else "dim")
        text.align("center", panel_width)
        lines.append(text)
    panel = Region(
        x=max(0, (size.width - panel_width) // 2),
        y=TITLE_HEIGHT + max(0, (body_height - panel_height) // 2),
        width=panel_width,
        height=min(panel_height, body_height),
        lines=lines,
    )
    return DrawPlan(size, [title_region(size, title_lines), panel])


def board_plan(
    size: Size,
    board: Board,
    selected_index: int,
    title_lines: list[Text],
) -> DrawPlan:
    """Stack the active lanes vertically below the title strip."""
    if not board.lanes:
        return empty_board_plan(size, title_lines)

    regions = [title_region(size, title_lines)]
    located = board.locate(selected_index)
    content_x = LABEL_WIDTH + GUTTER_WIDTH
    content_width = max(0, size.width - content_x)

    body_height = max(0, size.height - TITLE_HEIGHT)
    y = TITLE_HEIGHT
    for lane_idx, (lane, band) in enumerate(
        zip(board.lanes, split_evenly(body_height, len(board.lanes)))
    ):
        color = BUCKET_COLORS[lane.bucket]
        inner_height = max(0, band - 1)
        selected_offset = None
        if located is not None and located[0] == lane_idx:
            selected_offset = located[1]

        regions.append(
            Region(
                0,
                y,
                size.width,
                min(band, 1),
                [Text(RULE_CHAR * max(0, size.width))],
                style=f"dim {color}",
            )
        )
        regions.append(
            Region(0, y + 1, LABEL_WIDTH, inner_height, lane_label(lane))
        )
        regions.append(
            Region(
                content_x,
                y + 1,
                content_width,
                inner_height,
                lane_lines(lane.tickets, content_width, inner_height, selected_offset),
            )
        )
        y += band
    return DrawPlan(size, regions)


def detail_plan(size: Size, title_lines: list[Text], body: list[Text]) -> DrawPlan:
    body_height = max(0, size.height - TITLE_HEIGHT)
    return DrawPlan(
        size,
        [
            title_region(size, title_lines),
            Region(1, TITLE_HEIGHT, max(0, size.width - 2), body_height, body),
        ],
    )
