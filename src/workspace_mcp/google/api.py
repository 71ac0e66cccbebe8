"""Execution of prepared Google API requests."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from googleapiclient.errors import HttpError

from workspace_mcp.google.exceptions import RemoteApiError

logger = logging.getLogger(__name__)


async def execute(request: Any) -> dict[str, Any]:
    """Run ``request.execute()`` in a worker thread.

    The Google API client is blocking; the event loop stays free while the
    call is in flight. Exactly one attempt is made.

    Args:
        request: An ``HttpRequest`` from a discovery-built service.

    Returns:
        The decoded response body.

    Raises:
        RemoteApiError: If the API answered with an HTTP error.
    """
    try:
        return await asyncio.to_thread(request.execute)
    except HttpError as e:
        logger.warning(f"Google API error {e.resp.status}: {e.reason}")
        raise RemoteApiError(e.resp.status, e.reason) from e
