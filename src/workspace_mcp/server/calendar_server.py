"""
Google Calendar MCP adapter.

Exposes one tool, ``get_calendar_events``, a thin wrapper around
``calendar.events.list``.
"""

from __future__ import annotations

import sys

import mcp.types as types

from workspace_mcp.calendar.client import ORDER_BY_OPTIONS, CalendarClient, map_events_request
from workspace_mcp.server.base import AdapterServer, ToolBinding

SERVER_NAME = "calendar-mcp"
SERVER_VERSION = "1.0.0"

GET_CALENDAR_EVENTS = types.Tool(
    name="get_calendar_events",
    description="List events from a Google Calendar (calendar.events.list).",
    inputSchema={
        "type": "object",
        "properties": {
            "calendarId": {
                "type": "string",
                "description": 'Calendar ID. Defaults to "primary"',
                "default": "primary",
            },
            "timeMin": {
                "type": "string",
                "description": "Lower bound (exclusive) for an event's end time, RFC 3339 (e.g. 2026-01-01T00:00:00Z)",
            },
            "timeMax": {
                "type": "string",
                "description": "Upper bound (exclusive) for an event's start time, RFC 3339",
            },
            "maxResults": {
                "type": "number",
                "description": "Maximum number of events returned. Defaults to 100",
                "default": 100,
            },
            "singleEvents": {
                "type": "boolean",
                "description": "Expand recurring events into instances. Defaults to true",
                "default": True,
            },
            "orderBy": {
                "type": "string",
                "enum": list(ORDER_BY_OPTIONS),
                "description": "Sort order. Defaults to startTime",
                "default": "startTime",
            },
            "q": {
                "type": "string",
                "description": "Free text search over event fields",
            },
        },
    },
)


def create_server(client: CalendarClient | None = None) -> AdapterServer:
    """Build the Calendar adapter.

    Args:
        client: Calendar client to use. A client reading the environment is
            created if None.
    """
    client = client or CalendarClient()
    return AdapterServer(
        SERVER_NAME,
        SERVER_VERSION,
        [
            ToolBinding(
                tool=GET_CALENDAR_EVENTS,
                operation="Calendar",
                map_arguments=map_events_request,
                invoke=client.list_events,
            )
        ],
    )


def main() -> int:
    """Run the Calendar adapter over stdio."""
    return create_server().main()


if __name__ == "__main__":
    sys.exit(main())
