"""Board/detail UI state machine and the auto-refresh schedule."""

from __future__ import annotations

import copy
import time
from dataclasses import dataclass, field
from enum import Enum

from kanbars.models import Ticket
from kanbars.navigation import clamp_selection, move_down, move_up
from kanbars.status import Board

PAGE_SIZE = 10
PAUSED_POLL_SECONDS = 0.1


class Mode(Enum):
    BOARD = "board"
    DETAIL = "detail"


class Key(Enum):
    QUIT = "quit"
    ESCAPE = "escape"
    REFRESH = "refresh"
    PAUSE = "pause"
    UP = "up"
    DOWN = "down"
    ENTER = "enter"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"


class Request(Enum):
    """Work the state machine asks its caller to perform."""

    QUIT = "quit"
    REFRESH = "refresh"
    FETCH_DETAIL = "fetch_detail"


@dataclass
class AppState:
    mode: Mode = Mode.BOARD
    selected_index: int = 0
    # Private copy so a board refresh can't change the ticket being read
    detail_ticket: Ticket | None = None
    detail_scroll: int = 0
    detail_max_scroll: int = 0  # recomputed on every detail render
    paused: bool = False
    refreshing: bool = False
    detail_loading: bool = False


def handle_key(state: AppState, key: Key, board: Board) -> Request | None:
    """Apply a key press to the state; return a request for the caller, if any."""
    if state.mode is Mode.DETAIL:
        return _handle_detail_key(state, key)
    return _handle_board_key(state, key, board)


def _handle_board_key(state: AppState, key: Key, board: Board) -> Request | None:
    if key is Key.QUIT:
        return Request.QUIT
    if key is Key.REFRESH:
        return Request.REFRESH if start_refresh(state) else None
    if key is Key.PAUSE:
        state.paused = not state.paused
    elif key is Key.UP:
        state.selected_index = move_up(state.selected_index, board.total)
    elif key is Key.DOWN:
        state.selected_index = move_down(state.selected_index, board.total)
    elif key is Key.ENTER:
        return _enter_detail(state, board)
    return None


def _enter_detail(state: AppState, board: Board) -> Request | None:
    ticket = board.resolve(state.selected_index)
    if ticket is None:
        return None
    state.mode = Mode.DETAIL
    state.detail_ticket = copy.deepcopy(ticket)
    state.detail_scroll = 0
    state.detail_max_scroll = 0
    if ticket.has_details:
        state.detail_loading = False
        return None
    state.detail_loading = True
    return Request.FETCH_DETAIL


def _handle_detail_key(state: AppState, key: Key) -> Request | None:
    if key in (Key.QUIT, Key.ESCAPE):
        leave_detail(state)
    elif key is Key.UP:
        scroll_detail(state, -1)
    elif key is Key.DOWN:
        scroll_detail(state, 1)
    elif key is Key.PAGE_UP:
        scroll_detail(state, -PAGE_SIZE)
    elif key is Key.PAGE_DOWN:
        scroll_detail(state, PAGE_SIZE)
    return None


def leave_detail(state: AppState) -> None:
    state.mode = Mode.BOARD
    state.detail_ticket = None
    state.detail_loading = False
    state.detail_scroll = 0


def scroll_detail(state: AppState, delta: int) -> None:
    state.detail_scroll = max(
        0, min(state.detail_scroll + delta, state.detail_max_scroll)
    )


# -- Fetch results --


def start_refresh(state: AppState) -> bool:
    """Mark a board refresh as in flight; False if one already is."""
    if state.refreshing:
        return False
    state.refreshing = True
    return True


def finish_refresh(state: AppState, board: Board) -> None:
    """Board was replaced; selection stays positional, clamped into range."""
    state.refreshing = False
    state.selected_index = clamp_selection(state.selected_index, board.total)


def fail_refresh(state: AppState) -> None:
    state.refreshing = False


def _awaiting(state: AppState, key: str) -> bool:
    return (
        state.mode is Mode.DETAIL
        and state.detail_ticket is not None
        and state.detail_ticket.key == key
    )


def finish_detail(state: AppState, ticket: Ticket) -> bool:
    """Install fetched details if that ticket is still open; return whether used."""
    if not _awaiting(state, ticket.key):
        return False
    state.detail_ticket = ticket
    state.detail_loading = False
    return True


def fail_detail(state: AppState, key: str, message: str) -> bool:
    """Show a detail fetch error in place of the description."""
    ticket = state.detail_ticket
    if ticket is None or not _awaiting(state, key):
        return False
    ticket.description = f"Error loading details: {message}"
    state.detail_loading = False
    return True


@dataclass
class RefreshSchedule:
    """When the next automatic refresh is due."""

    interval: float
    last_refresh: float = field(default_factory=time.monotonic)

    def timeout(self, paused: bool, now: float | None = None) -> float:
        """How long to wait for input before checking the schedule again."""
        if paused:
            return PAUSED_POLL_SECONDS
        now = time.monotonic() if now is None else now
        return max(0.0, self.interval - (now - self.last_refresh))

    def due(self, paused: bool, now: float | None = None) -> bool:
        if paused:
            return False
        now = time.monotonic() if now is None else now
        return now - self.last_refresh >= self.interval

    def mark(self, now: float | None = None) -> None:
        """Restart the interval; called after every attempt, failed or not."""
        self.last_refresh = time.monotonic() if now is None else now
