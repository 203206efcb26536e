"""
Tool dispatch and the failure boundary.

An unknown tool name is a protocol error and raises ``McpError`` before
the argument bag is looked at. Everything that goes wrong inside a known
tool (bad arguments, credentials, API errors, anything unexpected) is
logged and returned as an ``isError`` result with text ``Error: <msg>``.
"""

import logging
from typing import Any, Callable, Optional

from mcp import types
from mcp.shared.exceptions import McpError

from gads_mcp.api.client import GoogleAdsClient
from gads_mcp.errors import ArgumentsRequiredError
from gads_mcp.mcp.tools import TOOL_REGISTRY

logger = logging.getLogger(__name__)

Handler = Callable[[GoogleAdsClient, dict], str]


def text_result(text: str, is_error: bool = False) -> types.CallToolResult:
    return types.CallToolResult(content=[types.TextContent(type="text", text=text)], isError=is_error)


class ToolDispatcher:
    """Routes a tool call to its handler and converts failures into results."""

    def __init__(self, client: GoogleAdsClient, registry: Optional[dict[str, Handler]] = None):
        self.client = client
        self.registry = registry if registry is not None else TOOL_REGISTRY

    def dispatch(self, name: str, arguments: Any) -> types.CallToolResult:
        handler = self.registry.get(name)
        if handler is None:
            raise McpError(types.ErrorData(code=types.METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))

        try:
            if not isinstance(arguments, dict):
                raise ArgumentsRequiredError()
            text = handler(self.client, arguments)
        except Exception as e:
            logger.exception(f"Tool {name} failed: {e}")
            return text_result(f"Error: {e}", is_error=True)

        return text_result(text)
