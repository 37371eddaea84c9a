from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from textual.app import App, ComposeResult
from textual.binding import Binding

from kanbars.jira import FetchError
from kanbars.layout import DrawPlan, Size
from kanbars.models import Ticket
from kanbars.render import render
from kanbars.state import (
    PAUSED_POLL_SECONDS,
    AppState,
    Key,
    RefreshSchedule,
    Request,
    fail_detail,
    fail_refresh,
    finish_detail,
    finish_refresh,
    handle_key,
    start_refresh,
)
from kanbars.status import Board
from kanbars.tui.canvas import BoardCanvas

log = logging.getLogger(__name__)


class KanbarsApp(App):
    """Kanban board TUI for JIRA tickets."""

    TITLE = "kanbars"

    CSS = """
    Screen {
        layout: vertical;
    }
    """

    BINDINGS = [
        Binding("q", "press('quit')", "Quit", show=False),
        Binding("escape", "press('escape')", "Back", show=False),
        Binding("r", "press('refresh')", "Refresh", show=False),
        Binding("p", "press('pause')", "Pause", show=False),
        Binding("k,up", "press('up')", "Up", show=False),
        Binding("j,down", "press('down')", "Down", show=False),
        Binding("enter", "press('enter')", "Details", show=False),
        Binding("pageup,ctrl+u", "press('page_up')", "Page up", show=False),
        Binding("pagedown,ctrl+d", "press('page_down')", "Page down", show=False),
    ]

    def __init__(
        self,
        tickets: list[Ticket],
        fetch_tickets: Callable[[], list[Ticket]],
        fetch_details: Callable[[str], Ticket],
        refresh_interval: int = 60,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.board = Board.from_tickets(tickets)
        self.state = AppState()
        self.refresh_interval = refresh_interval
        self.schedule = RefreshSchedule(refresh_interval)
        self.last_update: datetime | None = datetime.now()
        self._fetch_tickets = fetch_tickets
        self._fetch_details = fetch_details

    def compose(self) -> ComposeResult:
        yield BoardCanvas(self._render_frame, id="canvas")

    def on_mount(self) -> None:
        self.set_interval(PAUSED_POLL_SECONDS, self._check_refresh)
        # Keeps the "next refresh in" countdown current
        self.set_interval(1, self._redraw)

    def _render_frame(self, size: Size) -> DrawPlan:
        paused = self.state.paused
        return render(
            size,
            self.board,
            self.state,
            self.last_update,
            paused,
            self.refresh_interval,
            next_refresh_in=None if paused else self.schedule.timeout(paused),
        )

    def _redraw(self) -> None:
        self.query_one("#canvas", BoardCanvas).invalidate()

    # -- Keys --

    def action_press(self, key: str) -> None:
        request = handle_key(self.state, Key(key), self.board)
        if request is Request.QUIT:
            self.exit()
            return
        if request is Request.REFRESH:
            self._run_refresh()
        elif request is Request.FETCH_DETAIL and self.state.detail_ticket is not None:
            self._run_detail_fetch(self.state.detail_ticket.key)
        self._redraw()

    # -- Board refresh --

    def _check_refresh(self) -> None:
        """Start an automatic refresh once the interval has elapsed."""
        if self.schedule.due(self.state.paused) and start_refresh(self.state):
            log.info("Auto-refresh after %ss", self.refresh_interval)
            self._run_refresh()
            self._redraw()

    def _run_refresh(self) -> None:
        self.run_worker(self._refresh(), group="refresh")

    async def _refresh(self) -> None:
        try:
            tickets = await asyncio.to_thread(self._fetch_tickets)
        except FetchError as e:
            log.warning("Refresh failed: %s", e)
            fail_refresh(self.state)
            self.notify(f"Refresh failed: {e}", severity="error")
        except Exception as e:
            log.exception("Unexpected error during refresh")
            fail_refresh(self.state)
            self.notify(f"Refresh failed: {e}", severity="error")
        else:
            self.board = Board.from_tickets(tickets)
            finish_refresh(self.state, self.board)
            self.last_update = datetime.now()
        finally:
            self.schedule.mark()
        self._redraw()

    # -- Detail fetch --

    def _run_detail_fetch(self, key: str) -> None:
        self.run_worker(self._load_details(key), group="detail", exclusive=True)

    async def _load_details(self, key: str) -> None:
        try:
            ticket = await asyncio.to_thread(self._fetch_details, key)
        except Exception as e:
            log.warning("Could not load details for %s: %s", key, e)
            fail_detail(self.state, key, str(e))
        else:
            finish_detail(self.state, ticket)
        self._redraw()
