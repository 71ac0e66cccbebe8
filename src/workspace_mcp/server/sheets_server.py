"""
Google Sheets MCP adapter.

Exposes one tool, ``get_spreadsheet_values``, a thin wrapper around
``spreadsheets.values.get``.
"""

from __future__ import annotations

import sys

import mcp.types as types

from workspace_mcp.server.base import AdapterServer, ToolBinding
from workspace_mcp.sheets.client import (
    DATE_TIME_RENDER_OPTIONS,
    MAJOR_DIMENSIONS,
    VALUE_RENDER_OPTIONS,
    SheetsClient,
    map_values_request,
)

SERVER_NAME = "spreadsheet-mcp"
SERVER_VERSION = "1.0.0"

GET_SPREADSHEET_VALUES = types.Tool(
    name="get_spreadsheet_values",
    description="Read the values of a range from a Google Sheets spreadsheet (spreadsheets.values.get).",
    inputSchema={
        "type": "object",
        "properties": {
            "spreadsheetId": {
                "type": "string",
                "description": "Spreadsheet ID (the part after /spreadsheets/d/ in the URL)",
            },
            "range": {
                "type": "string",
                "description": (
                    'Range in A1 notation (e.g. "Sheet1!A2:D100"). '
                    "Without a sheet name the first visible sheet is used."
                ),
            },
            "majorDimension": {
                "type": "string",
                "enum": list(MAJOR_DIMENSIONS),
                "description": "Dimension of the values array. Defaults to ROWS",
            },
            "valueRenderOption": {
                "type": "string",
                "enum": list(VALUE_RENDER_OPTIONS),
                "description": "How values are rendered. Defaults to FORMATTED_VALUE",
            },
            "dateTimeRenderOption": {
                "type": "string",
                "enum": list(DATE_TIME_RENDER_OPTIONS),
                "description": "How dates and times are rendered. Defaults to a locale-formatted string",
            },
        },
        "required": ["spreadsheetId", "range"],
    },
)


def create_server(client: SheetsClient | None = None) -> AdapterServer:
    """Build the Sheets adapter.

    Args:
        client: Sheets client to use. A client reading the environment is
            created if None.
    """
    client = client or SheetsClient()
    return AdapterServer(
        SERVER_NAME,
        SERVER_VERSION,
        [
            ToolBinding(
                tool=GET_SPREADSHEET_VALUES,
                operation="Spreadsheet",
                map_arguments=map_values_request,
                invoke=client.get_values,
            )
        ],
    )


def main() -> int:
    """Run the Sheets adapter over stdio."""
    return create_server().main()


if __name__ == "__main__":
    sys.exit(main())
