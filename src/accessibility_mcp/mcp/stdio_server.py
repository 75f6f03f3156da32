"""MCP stdio server for the accessibility audit tools.

Reads JSON-RPC 2.0 messages from stdin, dispatches them to MCPServer, and
writes responses to stdout. Everything runs on one event loop so the axe
adapter's browser survives across calls.

Usage:
    accessibility-mcp --log-level info
"""

import asyncio
import json
import logging
import sys
from typing import Any, TextIO

from accessibility_mcp.errors.exceptions import AccessibilityMCPError
from accessibility_mcp.logging_config import bind_call_context, clear_call_context
from accessibility_mcp.mcp.server import MCPServer

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_INFO = {"name": "accessibility-mcp", "version": "1.0.0"}

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601


class AccessibilityMCPStdioServer:
    """JSON-RPC 2.0 stdio transport for the accessibility MCP server."""

    def __init__(
        self,
        mcp: MCPServer | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self._mcp = mcp or MCPServer()
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout

    def run_stdio(self) -> None:
        asyncio.run(self.serve())

    async def serve(self) -> None:
        """Process requests line-by-line until stdin closes."""
        logger.info("accessibility-mcp stdio server started")
        try:
            while True:
                line = await asyncio.to_thread(self._stdin.readline)
                if not line:
                    break
                line = line.strip()
                if not line:
                    continue
                try:
                    request = json.loads(line)
                except json.JSONDecodeError:
                    self._write_error(None, PARSE_ERROR, "Parse error")
                    continue
                response = await self.handle_message(request)
                if response is not None:
                    self._write(response)
        finally:
            await self._mcp.close()
            logger.info("accessibility-mcp stdio server stopped")

    async def handle_message(self, request: Any) -> dict | None:
        """Return the JSON-RPC response for one request, or None for notifications."""
        if not isinstance(request, dict):
            return self._error(None, INVALID_REQUEST, "Invalid Request")

        method = request.get("method", "")
        req_id = request.get("id")

        if method == "initialize":
            return self._result(req_id, {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {"listChanged": False}},
                "serverInfo": SERVER_INFO,
            })
        if method == "ping":
            return self._result(req_id, {})
        if method == "tools/list":
            return self._result(req_id, {"tools": self._mcp.list_tools()})
        if method == "tools/call":
            params = request.get("params") or {}
            if not isinstance(params, dict):
                return self._error(req_id, INVALID_REQUEST, "Invalid params: expected an object")
            return self._result(req_id, await self._call_tool(
                params.get("name", ""), params.get("arguments"), req_id
            ))
        if isinstance(method, str) and method.startswith("notifications/"):
            return None  # Client notification, no response needed
        return self._error(req_id, METHOD_NOT_FOUND, f"Method not found: {method}")

    async def _call_tool(self, tool_name: str, arguments: Any, req_id: Any) -> dict:
        bind_call_context(tool_name, req_id)
        try:
            result = await self._mcp.call_tool(tool_name, arguments)
            return {"content": [{"type": "text", "text": json.dumps(result, indent=2)}]}
        except AccessibilityMCPError as exc:
            logger.warning("Tool %s failed (%s): %s", tool_name, exc.code, exc.message)
            return self._tool_error(exc.to_dict())
        except Exception as exc:
            logger.exception("Tool %s raised an unexpected error", tool_name)
            return self._tool_error({"error": str(exc), "code": "INTERNAL_ERROR"})
        finally:
            clear_call_context()

    @staticmethod
    def _tool_error(payload: dict) -> dict:
        return {
            "content": [{"type": "text", "text": json.dumps(payload)}],
            "isError": True,
        }

    @staticmethod
    def _result(req_id: Any, result: Any) -> dict:
        return {"jsonrpc": "2.0", "id": req_id, "result": result}

    @staticmethod
    def _error(req_id: Any, code: int, message: str) -> dict:
        return {"jsonrpc": "2.0", "id": req_id, "error": {"code": code, "message": message}}

    def _write(self, response: dict) -> None:
        self._stdout.write(json.dumps(response) + "\n")
        self._stdout.flush()

    def _write_error(self, req_id: Any, code: int, message: str) -> None:
        self._write(self._error(req_id, code, message))
