"""Google Calendar events client."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from workspace_mcp.config import GoogleClientConfig
from workspace_mcp.exceptions import ValidationError
from workspace_mcp.google.api import execute
from workspace_mcp.google.oauth import build_credentials, build_service

logger = logging.getLogger(__name__)

ORDER_BY_OPTIONS = ("startTime", "updated")


@dataclass(frozen=True)
class EventsRequest:
    """Validated arguments for ``calendar.events.list``.

    ``time_min`` and ``time_max`` are RFC 3339 strings passed through as-is;
    the API is the judge of their format.
    """

    calendar_id: str = "primary"
    time_min: str | None = None
    time_max: str | None = None
    max_results: int = 100
    single_events: bool = True
    order_by: str = "startTime"
    query: str | None = None

    def to_params(self) -> dict[str, Any]:
        """Render API keyword arguments."""
        params: dict[str, Any] = {
            "calendarId": self.calendar_id,
            "timeMin": self.time_min,
            "timeMax": self.time_max,
            "maxResults": self.max_results,
            "singleEvents": self.single_events,
            "orderBy": self.order_by,
            "q": self.query,
        }
        return {k: v for k, v in params.items() if v is not None}


def map_events_request(arguments: Mapping[str, Any]) -> EventsRequest:
    """Map tool arguments onto an :class:`EventsRequest`.

    Every field is optional; missing ones take the local defaults
    (primary calendar, 100 results, expanded recurring events, ordered by
    start time).

    Raises:
        ValidationError: If ``orderBy`` is not a known ordering.
    """
    order_by = arguments.get("orderBy") or "startTime"
    if order_by not in ORDER_BY_OPTIONS:
        raise ValidationError(f"orderBy must be one of {', '.join(ORDER_BY_OPTIONS)}")

    max_results = arguments.get("maxResults")
    single_events = arguments.get("singleEvents")

    return EventsRequest(
        calendar_id=arguments.get("calendarId") or "primary",
        time_min=arguments.get("timeMin") or None,
        time_max=arguments.get("timeMax") or None,
        max_results=100 if max_results is None else max_results,
        single_events=True if single_events is None else single_events,
        order_by=order_by,
        query=arguments.get("q") or None,
    )


class CalendarClient:
    """Google Calendar API client authorized by a stored refresh token.

    Usage:
        client = CalendarClient()
        events = await client.list_events(map_events_request({"timeMin": "2026-01-01T00:00:00Z"}))
        events["items"]

    Note:
        Credentials are read from the environment on first use unless a
        config is passed in. Run `workspace-mcp token` to mint a refresh token.
    """

    def __init__(
        self,
        config: GoogleClientConfig | None = None,
        service: Any = None,
    ) -> None:
        """Initialize Calendar client.

        Args:
            config: OAuth client settings. Loaded from the environment if None.
            service: Prebuilt Calendar service, mainly for tests.
        """
        self._config = config
        self._service = service
        # One httplib2 connection per service; it must not be shared across threads
        self._lock = asyncio.Lock()

    def _get_service(self) -> Any:
        """Get or create Calendar API service."""
        if self._service is None:
            if self._config is None:
                self._config = GoogleClientConfig.from_env()
            credentials = build_credentials(self._config)
            self._service = build_service("calendar", "v3", credentials)
            logger.info("Calendar API service ready")
        return self._service

    # =========================================================================
    # Calendars
    # =========================================================================

    async def list_calendars(self, max_results: int = 5) -> list[dict[str, Any]]:
        """List calendars on the user's calendar list.

        Args:
            max_results: Maximum number of entries to return.

        Returns:
            The ``items`` of the first result page.
        """
        service = self._get_service()
        async with self._lock:
            result = await execute(service.calendarList().list(maxResults=max_results))
        return result.get("items", [])

    # =========================================================================
    # Events
    # =========================================================================

    async def list_events(self, request: EventsRequest) -> dict[str, Any]:
        """List events in a calendar.

        Only the first result page is returned; ``nextPageToken`` is left in
        the body for the caller.

        Args:
            request: Validated request.

        Returns:
            The ``Events`` body (summary, timeZone, items, ...).
        """
        service = self._get_service()
        params = request.to_params()
        logger.debug(f"calendar.events.list {params}")
        async with self._lock:
            return await execute(service.events().list(**params))
