from __future__ import annotations

import pytest

JIRA_ENV_VARS = ("JIRA_URL", "JIRA_SITE", "JIRA_USER", "JIRA_EMAIL", "JIRA_API_TOKEN")


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep real JIRA credentials and config files out of tests."""
    for var in JIRA_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    config_dir = tmp_path / "config"
    monkeypatch.setattr("kanbars.config.CONFIG_DIR", config_dir)
    monkeypatch.setattr("kanbars.config.CONFIG_FILE", config_dir / "config.toml")
