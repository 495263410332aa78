"""Configuration for jira-pm.

Credentials come from the process environment. Values can also be placed in
a ``.env`` file (current directory or the user config directory) and
non-secret settings in a JSON user config file.

## User config file

```
~/.config/jira-pm/config.json     # location from platformdirs
```

```json
{
  "base_url": "https://company.atlassian.net",
  "default_project": "FRON",
  "timeout": 30,
  "max_comments": 5,
  "project_aliases": {
    "mobile install": "FRON"
  }
}
```

### Resolution Order

1. Process environment (``JIRA_EMAIL``, ``JIRA_TOKEN``, ``JIRA_BASE_URL``, ...)
2. ``.env`` in the current directory, then in the user config directory
3. ``config.json`` in the user config directory
4. Built-in defaults
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from platformdirs import user_config_dir

from .aliases import DEFAULT_PROJECT_ALIASES, ProjectAliases
from .errors import ConfigurationError

logger = logging.getLogger("jira_pm.config")

USER_CONFIG_DIR = Path(user_config_dir("jira-pm"))
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.json"
USER_ENV_FILE = USER_CONFIG_DIR / ".env"

DEFAULT_BASE_URL = "https://asaptire.atlassian.net"
DEFAULT_PROJECT = "FRON"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_COMMENTS = 5


@dataclass(frozen=True)
class JiraConfig:
    """Immutable Jira connection settings, built once at startup."""

    email: str
    api_token: str
    base_url: str = DEFAULT_BASE_URL
    default_project: str = DEFAULT_PROJECT
    timeout: float = DEFAULT_TIMEOUT
    max_comments: int = DEFAULT_MAX_COMMENTS
    aliases: ProjectAliases = field(default_factory=ProjectAliases)

    def __post_init__(self) -> None:
        # frozen: bypass __setattr__
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    def browse_url(self, key: str) -> str:
        """Human-facing URL of an issue."""
        return f"{self.base_url}/browse/{key}"

    @classmethod
    def load(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        config_file: Optional[Path] = None,
    ) -> "JiraConfig":
        """Load config from the environment and the optional user config file.

        Args:
            environ: Mapping to read instead of ``os.environ``. When given,
                ``.env`` files are not loaded.
            config_file: JSON config file to read instead of the default.

        Raises:
            ConfigurationError: If ``JIRA_EMAIL`` or ``JIRA_TOKEN`` is missing,
                a numeric setting is malformed, or the alias table is invalid.
        """
        if environ is None:
            load_env_files()
            environ = os.environ

        file_data = load_user_config(config_file or USER_CONFIG_FILE)

        email = environ.get("JIRA_EMAIL")
        api_token = environ.get("JIRA_TOKEN")
        missing = [
            name for name, value in (("JIRA_EMAIL", email), ("JIRA_TOKEN", api_token))
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Missing {' and '.join(missing)} in environment.",
                suggestions=[
                    "Set: export JIRA_EMAIL=you@example.com",
                    "Set: export JIRA_TOKEN=<api token>",
                    f"Or add them to .env or {USER_ENV_FILE}",
                ],
            )

        user_aliases = file_data.get("project_aliases") or {}
        if not isinstance(user_aliases, dict):
            raise ConfigurationError("project_aliases must be a JSON object.")
        # A user alias replaces any built-in spelled the same ignoring case
        overridden = {alias.casefold() for alias in user_aliases}
        aliases = {
            alias: key
            for alias, key in DEFAULT_PROJECT_ALIASES.items()
            if alias.casefold() not in overridden
        }
        aliases.update(user_aliases)

        return cls(
            email=email,
            api_token=api_token,
            base_url=environ.get("JIRA_BASE_URL") or file_data.get("base_url") or DEFAULT_BASE_URL,
            default_project=(
                environ.get("JIRA_DEFAULT_PROJECT")
                or file_data.get("default_project")
                or DEFAULT_PROJECT
            ),
            timeout=_number(
                "JIRA_TIMEOUT",
                environ.get("JIRA_TIMEOUT", file_data.get("timeout")),
                DEFAULT_TIMEOUT,
                float,
            ),
            max_comments=_number(
                "JIRA_MAX_COMMENTS",
                environ.get("JIRA_MAX_COMMENTS", file_data.get("max_comments")),
                DEFAULT_MAX_COMMENTS,
                int,
            ),
            aliases=ProjectAliases(aliases),
        )


def _number(name: str, raw, default, kind):
    if raw is None or raw == "":
        return default
    try:
        value = kind(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {raw!r}.")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}.")
    return value


def load_env_files() -> None:
    """Load ``.env`` files without overriding variables already set."""
    cwd_env = Path.cwd() / ".env"
    for env_file in (cwd_env, USER_ENV_FILE):
        if env_file.exists():
            load_dotenv(env_file, override=False)
            logger.debug("env_file_loaded", extra={"path": str(env_file)})


def load_user_config(config_file: Path) -> dict:
    """Load the JSON user config file, or ``{}`` if it does not exist."""
    if not config_file.exists():
        return {}
    try:
        with open(config_file) as f:
            data = json.load(f) or {}
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {config_file}: {e}")
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_file} must contain a JSON object.")
    return data


def get_auth_help_message() -> str:
    """Get helpful message about authentication options."""
    return f"""Jira authentication not configured.

To authenticate, use one of these methods:

1. Environment variables:
   $ export JIRA_EMAIL=you@example.com
   $ export JIRA_TOKEN=xxxxxxxxxxxx

2. A .env file in the current directory or at {USER_ENV_FILE}:
   JIRA_EMAIL=you@example.com
   JIRA_TOKEN=xxxxxxxxxxxx

Optional: JIRA_BASE_URL (default {DEFAULT_BASE_URL}),
JIRA_DEFAULT_PROJECT, JIRA_TIMEOUT, JIRA_MAX_COMMENTS.

To get an API token:
   https://id.atlassian.com/manage-profile/security/api-tokens
"""
