"""Tool dispatch exceptions."""

from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, ErrorData

from workspace_mcp.exceptions import ValidationError

__all__ = ["UnknownToolError", "ValidationError"]


class UnknownToolError(McpError):
    """Raised when a call names a tool the server does not expose.

    Being an ``McpError``, it is answered as a JSON-RPC error rather than
    an error-flagged tool result.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(ErrorData(code=INVALID_PARAMS, message=f"Unknown tool: {name}"))
