"""Google OAuth and API authentication utilities."""

from workspace_mcp.google.exceptions import (
    ConfigurationError,
    GoogleAuthError,
    RemoteApiError,
    TokenError,
)
from workspace_mcp.google.loopback import CallbackResult, LoopbackServer
from workspace_mcp.google.oauth import (
    GoogleOAuth,
    build_credentials,
    build_service,
    get_access_token,
)

__all__ = [
    "GoogleOAuth",
    "LoopbackServer",
    "CallbackResult",
    "build_credentials",
    "build_service",
    "get_access_token",
    "GoogleAuthError",
    "ConfigurationError",
    "TokenError",
    "RemoteApiError",
]
