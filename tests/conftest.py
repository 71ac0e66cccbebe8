"""Shared fixtures: fake Google services, no network."""

import json
from unittest.mock import MagicMock

import httplib2
import pytest
from googleapiclient.errors import HttpError


def make_http_error(status: int, message: str) -> HttpError:
    """Build an HttpError the way the API client raises it."""
    content = json.dumps({"error": {"code": status, "message": message}}).encode("utf-8")
    return HttpError(httplib2.Response({"status": status}), content)


@pytest.fixture
def sheets_service():
    """Fake Sheets v4 service returning a small value range."""
    service = MagicMock()
    get = service.spreadsheets.return_value.values.return_value.get
    get.return_value.execute.return_value = {
        "range": "Sheet1!A1:B2",
        "majorDimension": "ROWS",
        "values": [["Name", "Age"], ["Alice", "30"]],
    }
    return service


@pytest.fixture
def calendar_service():
    """Fake Calendar v3 service returning one event."""
    service = MagicMock()
    events_list = service.events.return_value.list
    events_list.return_value.execute.return_value = {
        "kind": "calendar#events",
        "summary": "test@example.com",
        "items": [
            {
                "id": "evt1",
                "summary": "Standup",
                "start": {"dateTime": "2026-01-05T09:00:00Z"},
                "end": {"dateTime": "2026-01-05T09:15:00Z"},
            }
        ],
    }
    service.calendarList.return_value.list.return_value.execute.return_value = {
        "items": [{"id": "primary", "summary": "test@example.com"}]
    }
    return service
