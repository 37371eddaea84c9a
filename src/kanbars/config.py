from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

CONFIG_DIR = Path.home() / ".config" / "kanbars"
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_JQL = (
    "developer = currentUser() AND status NOT IN "
    "('Done', 'Shipped', 'Discontinued', 'Closed', 'Hibernate')"
)
DEFAULT_REFRESH = 60

DEFAULT_CONFIG = f"""\
[jira]
# Your JIRA Cloud site. Falls back to $JIRA_URL or $JIRA_SITE.
# url = "https://your-company.atlassian.net"
# Account email. Falls back to $JIRA_USER or $JIRA_EMAIL.
# email = "you@example.com"
# API token from https://id.atlassian.com/manage-profile/security/api-tokens
# Falls back to $JIRA_API_TOKEN.
# api_token = ""

[query]
jql = "{DEFAULT_JQL}"

[board]
# Auto-refresh interval in seconds (overridden by --refresh)
refresh = {DEFAULT_REFRESH}
"""


class ConfigError(ValueError):
    """Raised when the config file cannot be parsed or holds bad values."""

    def __init__(self, path: Path | None, reason: str) -> None:
        self.path = path
        self.reason = reason
        if path is None:
            super().__init__(f"Invalid config: {reason}")
        else:
            super().__init__(f"Invalid config file {path}: {reason}")


def _site_url(site: str) -> str:
    """JIRA_SITE may be a bare domain (ACLI style)."""
    if site.startswith(("http://", "https://")):
        return site
    return f"https://{site}"


def _env_url(env: Mapping[str, str]) -> str | None:
    if env.get("JIRA_URL"):
        return env["JIRA_URL"]
    if env.get("JIRA_SITE"):
        return _site_url(env["JIRA_SITE"])
    return None


def _table(
    data: Mapping[str, Any], name: str, path: Path | None
) -> Mapping[str, Any]:
    table = data.get(name, {})
    if not isinstance(table, Mapping):
        raise ConfigError(path, f"[{name}] must be a table")
    return table


def _string(table: Mapping[str, Any], key: str, path: Path | None) -> str | None:
    value = table.get(key.rpartition(".")[2])
    if value is not None and not isinstance(value, str):
        raise ConfigError(path, f"{key} must be a string, got {value!r}")
    return value


@dataclass
class Config:
    jira_url: str | None = None
    email: str | None = None
    api_token: str | None = None
    jql: str = DEFAULT_JQL
    refresh: int = DEFAULT_REFRESH

    @classmethod
    def from_data(
        cls,
        data: Mapping[str, Any],
        env: Mapping[str, str] | None = None,
        path: Path | None = None,
    ) -> Config:
        """Build a Config from parsed TOML, filling gaps from the environment.

        Raises ConfigError (naming `path`) for tables or values of the wrong
        type and for a refresh interval below one second.
        """
        env = os.environ if env is None else env
        jira = _table(data, "jira", path)
        query = _table(data, "query", path)
        board = _table(data, "board", path)

        refresh = board.get("refresh", DEFAULT_REFRESH)
        # bool is an int subclass; `refresh = true` is not an interval
        if not isinstance(refresh, int) or isinstance(refresh, bool):
            raise ConfigError(
                path, f"board.refresh must be an integer, got {refresh!r}"
            )
        if refresh < 1:
            raise ConfigError(path, f"board.refresh must be at least 1, got {refresh}")

        api_token = _string(jira, "jira.api_token", path)
        return cls(
            jira_url=_string(jira, "jira.url", path) or _env_url(env),
            email=(
                _string(jira, "jira.email", path)
                or env.get("JIRA_USER")
                or env.get("JIRA_EMAIL")
            ),
            api_token=api_token or env.get("JIRA_API_TOKEN"),
            jql=_string(query, "query.jql", path) or DEFAULT_JQL,
            refresh=refresh,
        )

    @classmethod
    def load(cls, path: Path | None = None) -> Config:
        path = CONFIG_FILE if path is None else path
        if path.exists():
            try:
                with open(path, "rb") as f:
                    data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(path, str(e)) from e
        else:
            data = {}
        return cls.from_data(data, path=path)


def get_config() -> Config:
    return Config.load()


def ensure_config() -> Path:
    """Create default config file if it doesn't exist. Returns config path."""
    if not CONFIG_FILE.exists():
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        CONFIG_FILE.write_text(DEFAULT_CONFIG)
    return CONFIG_FILE
