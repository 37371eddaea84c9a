"""Widget that paints a DrawPlan, re-planning whenever its size changes."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from rich.text import Text
from textual.events import Resize
from textual.strip import Strip
from textual.widget import Widget

from kanbars.layout import DrawPlan, Size


class BoardCanvas(Widget):
    """Full-screen canvas backed by a frame renderer callback."""

    DEFAULT_CSS = """
    BoardCanvas {
        width: 100%;
        height: 1fr;
    }
    """

    def __init__(self, renderer: Callable[[Size], DrawPlan], **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._renderer = renderer
        self.plan: DrawPlan | None = None
        self._rows: list[Text] = []

    def invalidate(self) -> None:
        """Drop the current plan so the next paint renders a fresh frame."""
        self.plan = None
        self.refresh()

    def on_resize(self, _event: Resize) -> None:
        self.invalidate()

    def _ensure_plan(self) -> list[Text]:
        size = Size(self.size.width, self.size.height)
        if self.plan is None or self.plan.size != size:
            self.plan = self._renderer(size)
            self._rows = self.plan.rows()
        return self._rows

    def render_line(self, y: int) -> Strip:
        width = self.size.width
        rows = self._ensure_plan()
        if y >= len(rows):
            return Strip.blank(width, self.rich_style)
        segments = list(rows[y].render(self.app.console))
        strip = Strip(segments)
        strip = strip.extend_cell_length(width, self.rich_style)
        return strip.crop(0, width)
