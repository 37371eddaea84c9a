"""JIRA Cloud REST client producing Ticket records."""

from __future__ import annotations

import logging
from typing import Any

import requests

from kanbars.adf import extract_text
from kanbars.config import Config
from kanbars.models import Comment, Ticket, TicketType

log = logging.getLogger(__name__)

SEARCH_FIELDS = "key,summary,status,issuetype,assignee"
MAX_RESULTS = 100


class FetchError(Exception):
    """Raised when tickets or ticket details could not be fetched."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ConfigurationError(FetchError):
    """Raised when the JIRA connection settings are incomplete."""

    def __init__(self, setting: str, env_hint: str) -> None:
        self.setting = setting
        super().__init__(f"JIRA {setting} not configured. Set {env_hint}.")


# -- Parsing --


def _user_name(user: Any) -> str | None:
    if not isinstance(user, dict):
        return None
    return user.get("displayName") or user.get("emailAddress")


def _named(value: Any) -> str | None:
    if isinstance(value, dict) and isinstance(value.get("name"), str):
        return value["name"]
    return None


def _rich_text(value: Any) -> str | None:
    """JIRA text fields are plain strings, ADF documents or null."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return extract_text(value)
    return None


def _parse_comments(fields: dict[str, Any]) -> list[Comment] | None:
    comment_field = fields.get("comment")
    if not isinstance(comment_field, dict):
        return None
    raw = comment_field.get("comments")
    if not isinstance(raw, list):
        return None
    return [
        Comment(
            author=_user_name(c.get("author")) or "Unknown",
            created=c.get("created") or "",
            body=_rich_text(c.get("body")) or "",
        )
        for c in raw
        if isinstance(c, dict)
    ]


def parse_issue(issue: dict[str, Any], details: bool = False) -> Ticket:
    """Build a Ticket from an issue JSON object.

    Extended fields are only read when `details` is set, so board tickets
    keep them absent until a detail fetch.
    """
    key = issue.get("key")
    fields = issue.get("fields")
    if not isinstance(key, str) or not isinstance(fields, dict):
        raise FetchError("Malformed issue in JIRA response (missing key or fields)")

    ticket = Ticket(
        key=key,
        ticket_type=TicketType.parse(_named(fields.get("issuetype")) or "Task"),
        summary=fields.get("summary") or "No summary",
        status=_named(fields.get("status")) or "Unknown",
        assignee=_user_name(fields.get("assignee")) or "unassigned",
    )
    if not details:
        return ticket

    labels = fields.get("labels")
    ticket.description = _rich_text(fields.get("description"))
    ticket.priority = _named(fields.get("priority"))
    ticket.reporter = _user_name(fields.get("reporter"))
    ticket.created = fields.get("created")
    ticket.updated = fields.get("updated")
    ticket.labels = (
        [label for label in labels if isinstance(label, str)]
        if isinstance(labels, list)
        else None
    )
    ticket.comments = _parse_comments(fields)
    return ticket


# -- Client --


class JiraClient:
    """Minimal JIRA REST v3 client (basic auth with an API token)."""

    def __init__(
        self,
        url: str,
        email: str,
        api_token: str,
        timeout: int = 30,
    ) -> None:
        self.base_url = url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.auth = (email, api_token)
        self.session.headers["Accept"] = "application/json"

    @classmethod
    def from_config(cls, config: Config) -> JiraClient:
        if not config.jira_url:
            raise ConfigurationError("URL", "JIRA_URL or JIRA_SITE")
        if not config.email:
            raise ConfigurationError("email", "JIRA_USER or JIRA_EMAIL")
        if not config.api_token:
            raise ConfigurationError("API token", "JIRA_API_TOKEN")
        return cls(config.jira_url, config.email, config.api_token)

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        log.debug("GET %s params=%r", url, params)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.Timeout as e:
            raise FetchError(
                f"Request to {url} timed out after {self.timeout}s"
            ) from e
        except requests.RequestException as e:
            raise FetchError(f"Request to {url} failed: {e}") from e

        if not response.ok:
            body = response.text or "Could not read response body"
            raise FetchError(
                f"JIRA API request failed with status: {response.status_code}\n"
                f"Response: {body}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise FetchError(f"Invalid JSON from {url}: {e}") from e

    def search(self, jql: str, max_results: int = MAX_RESULTS) -> list[Ticket]:
        """Run a JQL search and return board tickets (no extended fields)."""
        data = self._get(
            "/rest/api/3/search/jql",
            params={
                "jql": jql,
                "maxResults": str(max_results),
                "fields": SEARCH_FIELDS,
            },
        )
        issues = data.get("issues") if isinstance(data, dict) else None
        if not isinstance(issues, list):
            raise FetchError("No issues in JIRA search response")
        tickets = [parse_issue(issue) for issue in issues]
        log.info("Fetched %d tickets", len(tickets))
        return tickets

    def issue(self, key: str) -> Ticket:
        """Fetch one issue with description, metadata and comments."""
        data = self._get(f"/rest/api/3/issue/{key}")
        if not isinstance(data, dict):
            raise FetchError(f"Unexpected response for {key}")
        return parse_issue(data, details=True)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> JiraClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
