"""Google Calendar event listing with refresh-token authentication.

Usage:
    from workspace_mcp.calendar import CalendarClient, map_events_request

    client = CalendarClient()
    events = await client.list_events(map_events_request({}))

OAuth Setup:
    1. Create an OAuth client in Google Cloud Console
    2. Export GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET
    3. Mint a refresh token: workspace-mcp token
"""

from __future__ import annotations

from workspace_mcp.calendar.client import CalendarClient, EventsRequest, map_events_request

__all__ = ["CalendarClient", "EventsRequest", "map_events_request"]
