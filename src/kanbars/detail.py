"""Detail view content and scroll math for a single ticket."""

from __future__ import annotations

from rich.text import Text

from kanbars.models import Ticket

NO_DESCRIPTION = "(no description)"
NO_DESCRIPTION_HINT = "Details are fetched from JIRA when a ticket is opened."
LOADING = "Loading details…"


def _field(label: str, value: str) -> Text:
    text = Text(f"{label}: ", style="bold")
    text.append(value)
    return text


def detail_lines(ticket: Ticket, loading: bool = False) -> list[Text]:
    """Build the full, unscrolled list of lines for the detail view."""
    lines: list[Text] = []

    status_line = _field("Status", ticket.status)
    status_line.append("   ")
    status_line.append_text(_field("Assignee", ticket.assignee_name or "unassigned"))
    lines.append(status_line)
    lines.append(Text())

    if ticket.priority:
        lines.append(_field("Priority", ticket.priority))
    if ticket.reporter:
        lines.append(_field("Reporter", ticket.reporter))
    if ticket.created or ticket.updated:
        dates = Text()
        if ticket.created:
            dates.append_text(_field("Created", ticket.created))
        if ticket.updated:
            if ticket.created:
                dates.append("   ")
            dates.append_text(_field("Updated", ticket.updated))
        lines.append(dates)
    if ticket.labels:
        lines.append(_field("Labels", ", ".join(ticket.labels)))

    lines.append(Text())
    lines.append(Text("Description:", style="bold underline"))
    if ticket.description:
        lines.extend(Text(line) for line in ticket.description.splitlines())
    elif loading:
        lines.append(Text(LOADING, style="italic"))
    else:
        lines.append(Text(NO_DESCRIPTION, style="dim"))
        lines.append(Text(NO_DESCRIPTION_HINT, style="dim italic"))

    if ticket.comments:
        lines.append(Text(f"Comments ({len(ticket.comments)})", style="bold underline"))
        for comment in ticket.comments:
            lines.append(Text())
            header = Text(comment.author, style="bold cyan")
            if comment.created:
                header.append(f" — {comment.created}", style="dim")
            lines.append(header)
            # Bodies are shown as-is; multi-line bodies keep their own breaks.
            lines.extend(Text(line) for line in comment.body.splitlines() or [""])
    return lines


def max_scroll(total_lines: int, viewport_height: int) -> int:
    return max(0, total_lines - max(0, viewport_height))


def clamp_scroll(scroll: int, limit: int) -> int:
    return max(0, min(scroll, max(0, limit)))


def visible_lines(lines: list[Text], scroll: int, viewport_height: int) -> list[Text]:
    return lines[scroll : scroll + max(0, viewport_height)]
