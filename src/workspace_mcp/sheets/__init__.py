"""Google Sheets values access with refresh-token authentication.

Usage:
    from workspace_mcp.sheets import SheetsClient, map_values_request

    client = SheetsClient()
    request = map_values_request({"spreadsheetId": "1abc", "range": "Sheet1!A2:D100"})
    data = await client.get_values(request)

OAuth Setup:
    1. Create an OAuth client in Google Cloud Console
    2. Export GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET
    3. Mint a refresh token: workspace-mcp token
"""

from __future__ import annotations

from workspace_mcp.sheets.client import SheetsClient, ValuesRequest, map_values_request

__all__ = ["SheetsClient", "ValuesRequest", "map_values_request"]
