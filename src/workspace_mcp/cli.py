"""CLI for workspace-mcp - token minting and diagnostics.

Usage:
    workspace-mcp token                    # Mint a refresh token via loopback OAuth
    workspace-mcp check                    # Test the configured refresh token
    workspace-mcp env                      # Show masked credential variables
    workspace-mcp serve sheets             # Run the Sheets MCP adapter over stdio
    workspace-mcp serve calendar           # Run the Calendar MCP adapter over stdio
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import webbrowser
from datetime import datetime, timedelta, timezone

DEFAULT_SCOPES = "sheets_readonly,calendar_readonly"


def cmd_token(scopes: list[str], port: int, no_browser: bool = False, timeout: float | None = None) -> int:
    """Interactive OAuth consent that prints a refresh token."""
    from workspace_mcp.config import require_env
    from workspace_mcp.google import ConfigurationError, GoogleOAuth, LoopbackServer

    try:
        client_id = require_env("GOOGLE_CLIENT_ID")
        client_secret = require_env("GOOGLE_CLIENT_SECRET")
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Set GOOGLE_CLIENT_ID / GOOGLE_CLIENT_SECRET in the environment or .env", file=sys.stderr)
        return 1

    auth: GoogleOAuth | None = None

    def exchange(code: str) -> dict:
        return auth.exchange_code(code)

    with LoopbackServer(exchange=exchange, port=port) as server:
        try:
            auth = GoogleOAuth(client_id, client_secret, server.redirect_uri, scopes=scopes)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        url = auth.get_authorization_url()
        print("=" * 60)
        print("WORKSPACE-MCP TOKEN")
        print("=" * 60)
        print(f"\nScopes: {', '.join(auth.required_scopes)}")
        print(f"Listening on {server.redirect_uri}")
        print(f"\nOpen this URL in your browser:\n{url}\n")

        if not no_browser:
            webbrowser.open(url)

        result = server.wait_for_callback(timeout=timeout)

    if result.error:
        print(f"\nError: {result.error}", file=sys.stderr)
        return 1

    token = result.token or {}
    print("\n=== TOKENS RECEIVED ===")
    print(f"access_token : {'(hidden)' if token.get('access_token') else '(none)'}")
    print(f"refresh_token: {result.refresh_token or '(none)'}")
    print(f"expires_at   : {token.get('expires_at') or '(unknown)'}")

    if not result.refresh_token:
        print(
            "\nNo refresh_token was issued. Remove this app's access from your "
            "Google account (https://myaccount.google.com/permissions) and try again.",
            file=sys.stderr,
        )
        return 1

    print("\n--- Add to .env ---")
    print(f"GOOGLE_REFRESH_TOKEN={result.refresh_token}")
    return 0


async def _check() -> tuple[int, int]:
    from workspace_mcp.calendar import CalendarClient, EventsRequest
    from workspace_mcp.config import GoogleClientConfig
    from workspace_mcp.google import build_credentials, build_service, get_access_token

    config = GoogleClientConfig.from_env()
    credentials = build_credentials(config)
    token = await asyncio.to_thread(get_access_token, credentials)
    print(f"access_token OK: {bool(token)}")

    client = CalendarClient(service=build_service("calendar", "v3", credentials))
    calendars = await client.list_calendars(max_results=5)

    now = datetime.now(timezone.utc)
    events = await client.list_events(
        EventsRequest(
            time_min=now.isoformat(),
            time_max=(now + timedelta(days=7)).isoformat(),
            max_results=5,
        )
    )
    return len(calendars), len(events.get("items", []))


def cmd_check() -> int:
    """Refresh an access token and read the primary calendar."""
    try:
        calendar_count, event_count = asyncio.run(_check())
    except Exception as e:
        print(f"TEST FAILED: {e}", file=sys.stderr)
        return 1

    print(f"calendarList entries: {calendar_count}")
    print(f"events: {event_count}")
    return 0


def cmd_env() -> int:
    """Show masked credential variables."""
    from workspace_mcp.config import preview_env

    for name, value in preview_env().items():
        print(f"{name:22} {value}")
    return 0


def cmd_serve(adapter: str) -> int:
    """Run one of the MCP adapters over stdio."""
    if adapter == "sheets":
        from workspace_mcp.server.sheets_server import main as serve
    else:
        from workspace_mcp.server.calendar_server import main as serve
    return serve()


def parse_scopes(scope_str: str | None) -> list[str]:
    """Parse comma-separated scopes."""
    if not scope_str:
        scope_str = DEFAULT_SCOPES
    return [s.strip() for s in scope_str.split(",") if s.strip()]


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    from workspace_mcp.google.loopback import DEFAULT_PORT

    parser = argparse.ArgumentParser(
        prog="workspace-mcp",
        description="Google Sheets and Calendar MCP adapters",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # token command
    token_parser = subparsers.add_parser("token", help="Mint a refresh token")
    token_parser.add_argument(
        "--scopes",
        type=str,
        default=DEFAULT_SCOPES,
        help=f"Comma-separated scopes (default: {DEFAULT_SCOPES})",
    )
    token_parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help=f"Loopback port for the OAuth redirect (default: {DEFAULT_PORT})",
    )
    token_parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Don't open browser automatically",
    )
    token_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for the OAuth callback (default: wait forever)",
    )

    # check command
    subparsers.add_parser("check", help="Test the configured refresh token")

    # env command
    subparsers.add_parser("env", help="Show masked credential variables")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Run an MCP adapter over stdio")
    serve_parser.add_argument("adapter", choices=["sheets", "calendar"], help="Adapter to run")

    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "token":
        return cmd_token(parse_scopes(args.scopes), args.port, args.no_browser, args.timeout)

    if args.command == "check":
        return cmd_check()

    if args.command == "env":
        return cmd_env()

    if args.command == "serve":
        return cmd_serve(args.adapter)

    return 0


if __name__ == "__main__":
    sys.exit(main())
