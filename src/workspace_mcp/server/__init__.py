"""MCP adapters for Google Sheets and Google Calendar.

Usage:
    workspace-sheets-mcp        # get_spreadsheet_values over stdio
    workspace-calendar-mcp      # get_calendar_events over stdio
"""

from workspace_mcp.server.base import AdapterServer, ToolBinding
from workspace_mcp.server.exceptions import UnknownToolError, ValidationError

__all__ = [
    "AdapterServer",
    "ToolBinding",
    "UnknownToolError",
    "ValidationError",
]
