"""Google OAuth management using Authlib and google-auth.

This module covers both halves of the refresh-token lifecycle:
- Minting: Authlib builds the consent URL (offline access, forced consent)
  and exchanges the authorization code for tokens.
- Using: google-auth credentials built from a stored refresh token, which
  the Google API client refreshes silently before each call.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from authlib.integrations.requests_client import OAuth2Session
from authlib.oauth2 import OAuth2Error
from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials as GoogleCredentials
from googleapiclient.discovery import build

from workspace_mcp.google.exceptions import TokenError

if TYPE_CHECKING:
    from workspace_mcp.config import GoogleClientConfig

logger = logging.getLogger(__name__)


AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"

# Common Google OAuth scopes
SCOPES = {
    "sheets": "https://www.googleapis.com/auth/spreadsheets",
    "sheets_readonly": "https://www.googleapis.com/auth/spreadsheets.readonly",
    "calendar": "https://www.googleapis.com/auth/calendar",
    "calendar_readonly": "https://www.googleapis.com/auth/calendar.readonly",
}


def resolve_scopes(scopes: list[str]) -> list[str]:
    """Resolve scope names to full URLs."""
    resolved = []
    for scope in scopes:
        if scope.startswith("https://"):
            resolved.append(scope)
        elif scope in SCOPES:
            resolved.append(SCOPES[scope])
        else:
            raise ValueError(f"Unknown scope: {scope}. Use full URL or one of: {list(SCOPES.keys())}")
    return resolved


class GoogleOAuth:
    """Authorization-code flow for minting a refresh token.

    Example:
        >>> auth = GoogleOAuth(client_id, client_secret, redirect_uri, scopes=["sheets_readonly"])
        >>> url = auth.get_authorization_url()
        >>> token = auth.exchange_code(code_from_callback)
        >>> token["refresh_token"]
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scopes: list[str] | None = None,
    ):
        """Initialize the flow.

        Args:
            client_id: OAuth client ID.
            client_secret: OAuth client secret.
            redirect_uri: Loopback URI registered for the callback.
            scopes: Scope names (e.g., ["sheets_readonly"]) or full URLs.
                   Defaults to read-only Sheets and Calendar.
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.required_scopes = resolve_scopes(scopes or ["sheets_readonly", "calendar_readonly"])

        self.session = OAuth2Session(
            client_id=self.client_id,
            client_secret=self.client_secret,
            scope=" ".join(self.required_scopes),
            redirect_uri=self.redirect_uri,
            token_endpoint_auth_method="client_secret_post",
        )
        self._state: str | None = None

    def get_authorization_url(self) -> str:
        """Build the consent URL.

        Offline access plus a forced consent prompt make Google issue a
        refresh token even when the user granted access before.

        Returns:
            Authorization URL for user to visit.
        """
        authorization_url, state = self.session.create_authorization_url(
            AUTHORIZE_URL,
            access_type="offline",
            prompt="consent",
        )
        self._state = state
        return authorization_url

    def exchange_code(self, code: str) -> dict[str, Any]:
        """Exchange an authorization code for tokens.

        Args:
            code: The ``code`` query parameter from the OAuth callback.

        Returns:
            The token dict (access_token, refresh_token, expires_at, ...).

        Raises:
            TokenError: If Google rejects the exchange.
        """
        try:
            token = self.session.fetch_token(
                TOKEN_URL,
                code=code,
                client_secret=self.client_secret,
            )
        except OAuth2Error as e:
            raise TokenError(f"Failed to exchange authorization code: {e}") from e

        logger.info(f"Token received with scopes: {token.get('scope', '')}")
        return dict(token)


def build_credentials(config: GoogleClientConfig, scopes: list[str] | None = None) -> GoogleCredentials:
    """Build credentials that refresh themselves from the stored refresh token.

    No access token is installed, so the first API call triggers a refresh.

    Args:
        config: OAuth client settings.
        scopes: Optional scope names or URLs to request on refresh.

    Returns:
        Google Credentials object for API client libraries.
    """
    return GoogleCredentials(
        token=None,
        refresh_token=config.refresh_token,
        token_uri=TOKEN_URL,
        client_id=config.client_id,
        client_secret=config.client_secret,
        scopes=resolve_scopes(scopes) if scopes else None,
    )


def get_access_token(credentials: GoogleCredentials) -> str:
    """Return a valid access token, refreshing if needed.

    Raises:
        TokenError: If the refresh is rejected.
    """
    if not credentials.valid:
        logger.info("Access token missing or expired, refreshing...")
        try:
            credentials.refresh(Request())
        except RefreshError as e:
            raise TokenError(f"Failed to refresh token: {e}") from e
    return credentials.token


def build_service(service_name: str, version: str, credentials: GoogleCredentials) -> Any:
    """Build a Google API service with the given credentials.

    Args:
        service_name: Name of the service (e.g., 'sheets', 'calendar').
        version: API version (e.g., 'v4').
        credentials: Credentials from :func:`build_credentials`.

    Returns:
        Google API service object.
    """
    return build(service_name, version, credentials=credentials, cache_discovery=False)
