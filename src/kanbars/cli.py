from __future__ import annotations

import logging
import sys

import click

# Restore the default excepthook so Rich (installed by Textual) doesn't
# hijack tracebacks with fancy formatting that breaks CI and log parsing.
sys.excepthook = sys.__excepthook__

from kanbars import __version__  # noqa: E402
from kanbars.config import ConfigError, ensure_config, get_config  # noqa: E402
from kanbars.jira import FetchError, JiraClient  # noqa: E402
from kanbars.status import BUCKET_EMOJI, Board  # noqa: E402

log = logging.getLogger(__name__)

ASSIGNEE_CLAUSES = ("assignee = currentUser()", "developer = currentUser()")


def build_jql(
    default_jql: str,
    jql: str | None = None,
    epic: str | None = None,
    assignee: str | None = None,
) -> str:
    """Combine the configured query with --jql/--epic/--assignee overrides."""
    if jql:
        return jql

    query = default_jql
    if epic:
        query = f'"Epic Link" = {epic} AND {query}'

    if assignee:
        replacement = f"assignee = '{assignee}'"
        if any(clause in query for clause in ASSIGNEE_CLAUSES):
            for clause in ASSIGNEE_CLAUSES:
                query = query.replace(clause, replacement)
        elif "assignee" not in query and "developer" not in query:
            query = f"{replacement} AND {query}"
    return query


def _setup_logging(log_file: str | None) -> None:
    """Log to a file only; the TUI owns stdout/stderr."""
    if not log_file:
        return
    handler = logging.FileHandler(log_file)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root = logging.getLogger("kanbars")
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


def format_board(board: Board) -> str:
    """Plain-text rendering of the board for --once."""
    if not board.lanes:
        return "No tickets found."
    sections: list[str] = []
    for lane in board.lanes:
        lines = [f"{BUCKET_EMOJI[lane.bucket]} {lane.status.upper()} ({len(lane)})"]
        for ticket in lane.tickets:
            who = f" @{ticket.assignee_name}" if ticket.assignee_name else ""
            lines.append(
                f"  {ticket.ticket_type.emoji} {ticket.key}{who} - {ticket.summary}"
            )
        sections.append("\n".join(lines))
    return "\n\n".join(sections)


@click.command()
@click.option("--jql", default=None, help="Custom JQL query.")
@click.option("--epic", default=None, help="Filter by epic.")
@click.option("--assignee", default=None, help="Show tickets for a specific assignee.")
@click.option("--url", default=None, help="JIRA instance URL (overrides config).")
@click.option("--init", "init", is_flag=True, help="Generate a sample config file.")
@click.option(
    "-r",
    "--refresh",
    type=click.IntRange(min=1),
    default=None,
    help="Auto-refresh interval in seconds (default: 60).",
)
@click.option(
    "--once",
    is_flag=True,
    help="Display once and exit (useful with the watch command).",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write debug logs to this file.",
)
@click.version_option(__version__, prog_name="kanbars")
def main(
    jql: str | None,
    epic: str | None,
    assignee: str | None,
    url: str | None,
    init: bool,
    refresh: int | None,
    once: bool,
    log_file: str | None,
) -> None:
    """🦀 Lightweight Terminal Kanban for JIRA."""
    _setup_logging(log_file)

    if init:
        path = ensure_config()
        click.echo(f"Config file: {path}")
        click.echo("Edit it and add your JIRA credentials.")
        return

    try:
        config = get_config()
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    if url:
        config.jira_url = url
    query = build_jql(config.jql, jql=jql, epic=epic, assignee=assignee)
    interval = refresh or config.refresh
    log.debug("Using JQL: %s", query)

    try:
        client = JiraClient.from_config(config)
    except FetchError as e:
        raise click.ClickException(str(e)) from e

    with client:
        try:
            tickets = client.search(query)
        except FetchError as e:
            raise click.ClickException(str(e)) from e

        if once:
            click.echo("🦀 KANBARS - JIRA Board\n")
            click.echo(format_board(Board.from_tickets(tickets)))
            return

        from kanbars.tui.app import KanbarsApp

        app = KanbarsApp(
            tickets,
            fetch_tickets=lambda: client.search(query),
            fetch_details=client.issue,
            refresh_interval=interval,
        )
        app.run()
