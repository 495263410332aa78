"""Config and client resolution shared by CLI and MCP."""

from __future__ import annotations

from typing import Optional

from ..config import JiraConfig
from ..jira_client import JiraClient

_config: Optional[JiraConfig] = None


def get_config() -> JiraConfig:
    """Return the process-wide config, loading it on first use.

    Raises:
        ConfigurationError: If credentials are missing.
    """
    global _config
    if _config is None:
        _config = JiraConfig.load()
    return _config


def get_client(config: Optional[JiraConfig] = None) -> JiraClient:
    """Return a Jira client for ``config`` or the process-wide config."""
    return JiraClient(config or get_config())
