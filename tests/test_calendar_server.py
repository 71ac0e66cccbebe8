"""Tests for the Google Calendar MCP adapter."""

import asyncio
import json
import os
import threading
import time
from unittest.mock import patch

import pytest

from conftest import make_http_error
from workspace_mcp.calendar import CalendarClient, EventsRequest, map_events_request
from workspace_mcp.server import UnknownToolError, ValidationError
from workspace_mcp.server.calendar_server import create_server

DEFAULT_PARAMS = {
    "calendarId": "primary",
    "maxResults": 100,
    "singleEvents": True,
    "orderBy": "startTime",
}


@pytest.fixture
def server(calendar_service):
    return create_server(CalendarClient(service=calendar_service))


def events_list(service):
    return service.events.return_value.list


class TestMapEventsRequest:
    """Test argument defaults and mapping."""

    def test_defaults(self):
        """Should fill in the local defaults."""
        request = map_events_request({})
        assert request == EventsRequest()
        assert request.to_params() == DEFAULT_PARAMS

    def test_all_fields(self):
        """Should forward every field under its API name."""
        request = map_events_request(
            {
                "calendarId": "team@example.com",
                "timeMin": "2026-01-01T00:00:00Z",
                "timeMax": "2026-01-31T23:59:59Z",
                "maxResults": 10,
                "singleEvents": False,
                "orderBy": "updated",
                "q": "standup",
            }
        )
        assert request.to_params() == {
            "calendarId": "team@example.com",
            "timeMin": "2026-01-01T00:00:00Z",
            "timeMax": "2026-01-31T23:59:59Z",
            "maxResults": 10,
            "singleEvents": False,
            "orderBy": "updated",
            "q": "standup",
        }

    def test_time_bounds_not_checked(self):
        """Should forward an inverted time range as-is."""
        request = map_events_request({"timeMin": "2026-02-01", "timeMax": "2026-01-01"})
        assert request.time_min == "2026-02-01"
        assert request.time_max == "2026-01-01"

    def test_unknown_order_by(self):
        """Should reject orderings outside the schema enum."""
        with pytest.raises(ValidationError, match="orderBy"):
            map_events_request({"orderBy": "summary"})


class TestCalendarServer:
    """Test tool listing and dispatch."""

    def test_list_tools(self, server):
        """Should expose exactly one tool with no required fields."""
        tools = server.list_tools()
        assert [t.name for t in tools] == ["get_calendar_events"]
        assert "required" not in tools[0].inputSchema

    @pytest.mark.asyncio
    async def test_call_without_arguments(self, server, calendar_service):
        """Should apply defaults and return the events as JSON."""
        result = await server.call_tool("get_calendar_events", {})

        assert not result.isError
        assert len(result.content) == 1
        assert result.content[0].type == "text"
        data = json.loads(result.content[0].text)
        assert data["items"][0]["summary"] == "Standup"
        events_list(calendar_service).assert_called_once_with(**DEFAULT_PARAMS)

    @pytest.mark.asyncio
    async def test_call_with_window(self, server, calendar_service):
        """Should pass the time window and query through."""
        await server.call_tool(
            "get_calendar_events",
            {"timeMin": "2026-01-05T00:00:00Z", "timeMax": "2026-01-06T00:00:00Z", "q": "standup"},
        )
        events_list(calendar_service).assert_called_once_with(
            **DEFAULT_PARAMS,
            timeMin="2026-01-05T00:00:00Z",
            timeMax="2026-01-06T00:00:00Z",
            q="standup",
        )

    @pytest.mark.asyncio
    async def test_call_unknown_tool(self, server, calendar_service):
        """Should raise instead of returning an error result."""
        with pytest.raises(UnknownToolError, match="Unknown tool"):
            await server.call_tool("get_spreadsheet_values", {})
        events_list(calendar_service).assert_not_called()

    @pytest.mark.asyncio
    async def test_call_invalid_order(self, server, calendar_service):
        """Should flag invalid arguments without calling the API."""
        result = await server.call_tool("get_calendar_events", {"orderBy": "summary"})

        assert result.isError is True
        assert result.content[0].text.startswith("Calendar fetch failed: orderBy must be one of")
        events_list(calendar_service).assert_not_called()

    @pytest.mark.asyncio
    async def test_call_http_error(self, server, calendar_service):
        """Should embed the remote error message."""
        execute = events_list(calendar_service).return_value.execute
        execute.side_effect = make_http_error(400, "Bad Request")

        result = await server.call_tool("get_calendar_events", {"timeMin": "yesterday"})

        assert result.isError is True
        assert result.content[0].text == "Calendar fetch failed: HttpError 400: Bad Request"


class TestCalendarClient:
    """Test client calls and credential loading."""

    @pytest.mark.asyncio
    async def test_list_calendars(self, calendar_service):
        """Should return calendar list items."""
        client = CalendarClient(service=calendar_service)
        calendars = await client.list_calendars(max_results=5)

        assert calendars == [{"id": "primary", "summary": "test@example.com"}]
        calendar_service.calendarList.return_value.list.assert_called_once_with(maxResults=5)

    @pytest.mark.asyncio
    async def test_missing_env_fails_before_network(self):
        """Should name the missing variable and never build a service."""
        server = create_server(CalendarClient())
        env = {"GOOGLE_CLIENT_ID": "id", "GOOGLE_CLIENT_SECRET": "secret"}
        with (
            patch.dict(os.environ, env, clear=True),
            patch("workspace_mcp.calendar.client.build_service") as build,
        ):
            result = await server.call_tool("get_calendar_events", {})

        assert result.isError is True
        assert result.content[0].text == "Calendar fetch failed: Missing env GOOGLE_REFRESH_TOKEN"
        build.assert_not_called()

    @pytest.mark.asyncio
    async def test_requests_share_service_one_at_a_time(self, calendar_service):
        """Should not overlap calendar list and event list requests."""
        lock = threading.Lock()
        state = {"active": 0, "peak": 0}

        def slow(body):
            def execute():
                with lock:
                    state["active"] += 1
                    state["peak"] = max(state["peak"], state["active"])
                time.sleep(0.2)
                with lock:
                    state["active"] -= 1
                return body

            return execute

        calendar_service.events.return_value.list.return_value.execute.side_effect = slow({"items": []})
        calendar_service.calendarList.return_value.list.return_value.execute.side_effect = slow(
            {"items": [{"id": "primary"}]}
        )
        client = CalendarClient(service=calendar_service)

        events, calendars, more_events = await asyncio.gather(
            client.list_events(EventsRequest()),
            client.list_calendars(),
            client.list_events(EventsRequest()),
        )

        assert state["peak"] == 1
        assert events == more_events == {"items": []}
        assert calendars == [{"id": "primary"}]
