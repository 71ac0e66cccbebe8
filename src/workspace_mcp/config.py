"""Centralized credential configuration.

Both adapters and the token utility read their Google OAuth client settings
from the process environment:

    GOOGLE_CLIENT_ID       - OAuth client ID (required)
    GOOGLE_CLIENT_SECRET   - OAuth client secret (required)
    GOOGLE_REFRESH_TOKEN   - Long-lived refresh token (required by the adapters)
    GOOGLE_REDIRECT_URI    - Redirect URI (optional, defaults to http://localhost)

This module auto-loads the .env file in the repo root on import. Variables
already present in the environment take precedence.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from workspace_mcp.google.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# __file__ is src/workspace_mcp/config.py, so 3 levels up
REPO_ROOT = Path(__file__).parent.parent.parent
ENV_FILE = REPO_ROOT / ".env"

DEFAULT_REDIRECT_URI = "http://localhost"
LOG_LEVEL_ENV = "WORKSPACE_MCP_LOG_LEVEL"

ENV_VARS = (
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "GOOGLE_REFRESH_TOKEN",
    "GOOGLE_REDIRECT_URI",
)

# Libraries that log at INFO on every request
_NOISY_LOGGERS = ("mcp", "googleapiclient.discovery_cache", "httpx")


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from a file.

    Args:
        env_path: Path to .env file.

    Returns:
        Dictionary of loaded variables.
    """
    loaded = {}
    if not env_path.exists():
        return loaded

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            if (value.startswith('"') and value.endswith('"')) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]

            if key and key not in os.environ:
                os.environ[key] = value
                loaded[key] = value

    return loaded


def require_env(name: str) -> str:
    """Read a required environment variable.

    Args:
        name: Variable name.

    Returns:
        The variable's value.

    Raises:
        ConfigurationError: If the variable is unset or empty.
    """
    value = os.environ.get(name)
    if not value:
        raise ConfigurationError(name)
    return value


@dataclass(frozen=True)
class GoogleClientConfig:
    """OAuth client settings shared by both adapters."""

    client_id: str
    client_secret: str
    refresh_token: str
    redirect_uri: str = DEFAULT_REDIRECT_URI

    @classmethod
    def from_env(cls) -> GoogleClientConfig:
        """Build config from the environment.

        Raises:
            ConfigurationError: If a required variable is missing.
        """
        return cls(
            client_id=require_env("GOOGLE_CLIENT_ID"),
            client_secret=require_env("GOOGLE_CLIENT_SECRET"),
            refresh_token=require_env("GOOGLE_REFRESH_TOKEN"),
            redirect_uri=os.environ.get("GOOGLE_REDIRECT_URI") or DEFAULT_REDIRECT_URI,
        )


def mask(value: str | None) -> str:
    """Mask a secret, keeping the first four characters and the length."""
    if not value:
        return "(none)"
    return f"{value[:4]}…({len(value)})"


def preview_env() -> dict[str, str]:
    """Log a masked preview of the Google OAuth variables.

    The redirect URI is not a secret and is shown as-is.

    Returns:
        Mapping of variable name to its masked value.
    """
    preview = {}
    for name in ENV_VARS:
        value = os.environ.get(name)
        if name == "GOOGLE_REDIRECT_URI":
            preview[name] = value or "(none)"
        else:
            preview[name] = mask(value)

    logger.info("[ENV CHECK] " + " ".join(f"{k}={v}" for k, v in preview.items()))
    return preview


def configure_logging(level: str | None = None) -> None:
    """Send log records to stderr; stdout belongs to the MCP stream."""
    level = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


# Auto-load .env from repo root on import
_loaded = _load_env_file(ENV_FILE)
