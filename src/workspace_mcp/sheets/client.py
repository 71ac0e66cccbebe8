"""Google Sheets values client."""

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

MAJOR_DIMENSIONS = ("ROWS", "COLUMNS")
VALUE_RENDER_OPTIONS = ("FORMATTED_VALUE", "UNFORMATTED_VALUE", "FORMULA")
DATE_TIME_RENDER_OPTIONS = ("SERIAL_NUMBER", "FORMATTED_STRING")


@dataclass(frozen=True)
class ValuesRequest:
    """Validated arguments for ``spreadsheets.values.get``.

    Optional fields left as None are not sent, so the API applies its own
    defaults.
    """

    spreadsheet_id: str
    range: str
    major_dimension: str | None = None
    value_render_option: str | None = None
    date_time_render_option: str | None = None

    def to_params(self) -> dict[str, Any]:
        """Render API keyword arguments."""
        params: dict[str, Any] = {
            "spreadsheetId": self.spreadsheet_id,
            "range": self.range,
            "majorDimension": self.major_dimension,
            "valueRenderOption": self.value_render_option,
            "dateTimeRenderOption": self.date_time_render_option,
        }
        return {k: v for k, v in params.items() if v is not None}


def _choice(arguments: Mapping[str, Any], field: str, choices: tuple[str, ...]) -> str | None:
    value = arguments.get(field)
    if value is None:
        return None
    if value not in choices:
        raise ValidationError(f"{field} must be one of {', '.join(choices)}")
    return value


def map_values_request(arguments: Mapping[str, Any]) -> ValuesRequest:
    """Map tool arguments onto a :class:`ValuesRequest`.

    Args:
        arguments: The ``arguments`` object of the tool call.

    Returns:
        The validated request.

    Raises:
        ValidationError: If ``spreadsheetId`` or ``range`` is missing or
            empty, or an enum field holds an unknown value.
    """
    spreadsheet_id = arguments.get("spreadsheetId")
    if not spreadsheet_id:
        raise ValidationError("spreadsheetId is required")

    range_notation = arguments.get("range")
    if not range_notation:
        raise ValidationError("range is required (A1 notation)")

    return ValuesRequest(
        spreadsheet_id=spreadsheet_id,
        range=range_notation,
        major_dimension=_choice(arguments, "majorDimension", MAJOR_DIMENSIONS),
        value_render_option=_choice(arguments, "valueRenderOption", VALUE_RENDER_OPTIONS),
        date_time_render_option=_choice(arguments, "dateTimeRenderOption", DATE_TIME_RENDER_OPTIONS),
    )


class SheetsClient:
    """Google Sheets API client authorized by a stored refresh token.

    Usage:
        client = SheetsClient()
        request = map_values_request({"spreadsheetId": "1abc", "range": "Sheet1!A1:C10"})
        data = await client.get_values(request)
        data["values"]

    Note:
        Credentials are read from the environment on first use unless a
        config is passed in. Run `workspace-mcp token` to mint a refresh token.
    """

    def __init__(
        self,
        config: GoogleClientConfig | None = None,
        service: Any = None,
    ) -> None:
        """Initialize Sheets client.

        Args:
            config: OAuth client settings. Loaded from the environment if None.
            service: Prebuilt Sheets service, mainly for tests.
        """
        self._config = config
        self._service = service
        # One httplib2 connection per service; it must not be shared across threads
        self._lock = asyncio.Lock()

    def _get_service(self) -> Any:
        """Get or create Sheets API service."""
        if self._service is None:
            if self._config is None:
                self._config = GoogleClientConfig.from_env()
            credentials = build_credentials(self._config)
            self._service = build_service("sheets", "v4", credentials)
            logger.info("Sheets API service ready")
        return self._service

    async def get_values(self, request: ValuesRequest) -> dict[str, Any]:
        """Read a range of values.

        Args:
            request: Validated request.

        Returns:
            The ``ValueRange`` body (range, majorDimension, values).
        """
        service = self._get_service()
        params = request.to_params()
        logger.debug(f"spreadsheets.values.get {params}")
        async with self._lock:
            return await execute(service.spreadsheets().values().get(**params))
