"""Frame rendering: turn board + UI state into a DrawPlan for a canvas size."""

from __future__ import annotations

from datetime import datetime

from rich.text import Text

from kanbars.detail import clamp_scroll, detail_lines, max_scroll, visible_lines
from kanbars.layout import (
    TITLE_HEIGHT,
    DrawPlan,
    Size,
    board_plan,
    detail_plan,
)
from kanbars.models import Ticket
from kanbars.state import AppState, Mode
from kanbars.status import Board

APP_TITLE = "🦀 KANBARS - JIRA Board"
BOARD_HINTS = "q quit · r refresh · p pause · ↑/k ↓/j select · enter details"
DETAIL_HINTS = "esc/q back · ↑/k ↓/j scroll · pgup/pgdn page"
INFO_SEPARATOR = "  │  "


def _board_title(
    board: Board,
    state: AppState,
    last_update: datetime | None,
    paused: bool,
    refresh_interval: int,
    next_refresh_in: float | None,
) -> list[Text]:
    title = Text(APP_TITLE, style="bold")
    title.append(INFO_SEPARATOR, style="dim")
    title.append(f"{board.total} tickets")
    if last_update is not None:
        title.append(INFO_SEPARATOR, style="dim")
        title.append(f"updated {last_update:%H:%M:%S}")
    title.append(INFO_SEPARATOR, style="dim")
    if paused:
        title.append("⏸ PAUSED", style="bold yellow")
    elif next_refresh_in is not None:
        title.append(f"next refresh in {int(next_refresh_in)}s", style="green")
    else:
        title.append(f"auto-refresh {refresh_interval}s", style="green")
    if state.refreshing:
        title.append(INFO_SEPARATOR, style="dim")
        title.append("⟳ refreshing…", style="bold cyan")
    return [title, Text(BOARD_HINTS, style="dim")]


def _render_detail(size: Size, state: AppState, ticket: Ticket) -> DrawPlan:
    viewport = max(0, size.height - TITLE_HEIGHT)
    lines = detail_lines(ticket, loading=state.detail_loading)
    state.detail_max_scroll = max_scroll(len(lines), viewport)
    state.detail_scroll = clamp_scroll(state.detail_scroll, state.detail_max_scroll)

    title = Text(f"{ticket.ticket_type.emoji} ")
    title.append(ticket.key, style="bold")
    title.append(f" {ticket.summary}")
    hints = Text(DETAIL_HINTS, style="dim")
    if lines and viewport > 0:
        first = state.detail_scroll + 1
        last = min(len(lines), state.detail_scroll + viewport)
        hints.append(INFO_SEPARATOR)
        hints.append(f"lines {first}-{last} of {len(lines)}")

    body = visible_lines(lines, state.detail_scroll, viewport)
    return detail_plan(size, [title, hints], body)


def render(
    size: Size,
    board: Board,
    state: AppState,
    last_update: datetime | None,
    paused: bool,
    refresh_interval: int,
    next_refresh_in: float | None = None,
) -> DrawPlan:
    """Build the draw plan for one frame.

    Detail rendering also re-derives `detail_max_scroll` for the current
    viewport and clamps `detail_scroll` into it.
    """
    size = Size(max(0, size.width), max(0, size.height))
    if state.mode is Mode.DETAIL and state.detail_ticket is not None:
        return _render_detail(size, state, state.detail_ticket)
    title = _board_title(
        board, state, last_update, paused, refresh_interval, next_refresh_in
    )
    return board_plan(size, board, state.selected_index, title)
