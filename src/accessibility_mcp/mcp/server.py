"""MCP protocol adapter exposing the accessibility engines as tools.

A thin layer that unpacks tool arguments and hands them to the
AuditExecutor; every tool returns the normalized AuditResult payload.
"""

import logging
from typing import Any

from accessibility_mcp.errors.exceptions import InvalidInputError, UnknownToolError
from accessibility_mcp.services.audit_executor import AuditExecutor

from .tools import TOOL_DEFINITIONS

logger = logging.getLogger(__name__)


def _options(arguments: dict) -> dict:
    options = arguments.get("options")
    if options is None:
        return {}
    if not isinstance(options, dict):
        raise InvalidInputError("'options' must be an object")
    return dict(options)


class MCPServer:
    """Model Context Protocol server for the accessibility engines."""

    def __init__(self, executor: AuditExecutor | None = None) -> None:
        self.executor = executor or AuditExecutor()

    def list_tools(self) -> list[dict]:
        """Return available tool definitions."""
        return TOOL_DEFINITIONS

    async def call_tool(self, tool_name: str, arguments: dict[str, Any] | None) -> dict:
        """Dispatch a tool call and return the AuditResult payload."""
        handler = self._route(tool_name)
        if handler is None:
            raise UnknownToolError(tool_name)
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise InvalidInputError("Tool arguments must be an object")
        result = await handler(arguments)
        return result.to_payload()

    async def close(self) -> None:
        await self.executor.close()

    def _route(self, tool_name: str):
        routes = {
            "axe_audit": self._axe_audit,
            "lighthouse_audit": self._lighthouse_audit,
            "wave_audit": self._wave_audit,
        }
        return routes.get(tool_name)

    # --- Tool handlers ---

    async def _axe_audit(self, args: dict):
        return await self.executor.run_axe(args.get("url"), _options(args))

    async def _lighthouse_audit(self, args: dict):
        options = _options(args)
        if args.get("categories") is not None:
            options["categories"] = args["categories"]
        return await self.executor.run_lighthouse(args.get("url"), options)

    async def _wave_audit(self, args: dict):
        options = _options(args)
        if args.get("apiKey") is not None:
            options["apiKey"] = args["apiKey"]
        return await self.executor.run_wave(args.get("url"), options)
