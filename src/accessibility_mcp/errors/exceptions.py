"""Custom exception classes for the accessibility audit server."""


class AccessibilityMCPError(Exception):
    """Base exception for accessibility-mcp."""

    kind: str = "internal"

    def __init__(self, code: str, message: str, details=None):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        payload = {"error": self.message, "code": self.code}
        if self.details is not None:
            payload["details"] = self.details
        return payload


# --- Input errors: surfaced immediately, never retried ---


class InvalidInputError(AccessibilityMCPError):
    """Missing or malformed tool arguments."""

    kind = "input"

    def __init__(self, message: str, details=None):
        super().__init__("INVALID_INPUT", message, details)


class UnsupportedProtocolError(AccessibilityMCPError):
    """The resolved target uses a scheme the engine cannot audit."""

    kind = "input"

    def __init__(self, tool: str, url: str):
        super().__init__(
            "UNSUPPORTED_PROTOCOL",
            f"{tool} only supports HTTP/HTTPS URLs, got '{url}'",
            {"tool": tool, "url": url},
        )


class MissingCredentialsError(AccessibilityMCPError):
    """An engine requires credentials that were not configured."""

    kind = "input"

    def __init__(self, message: str):
        super().__init__("MISSING_CREDENTIALS", message)


class UnknownToolError(AccessibilityMCPError):
    """Tool name not exposed by this server."""

    kind = "input"

    def __init__(self, tool_name: str):
        super().__init__("UNKNOWN_TOOL", f"Unknown tool: {tool_name}")


# --- Upstream errors: the wrapped engine failed ---


class EngineError(AccessibilityMCPError):
    """The wrapped engine failed or returned an unusable response."""

    kind = "upstream"

    def __init__(self, tool: str, message: str, details=None, code: str = "ENGINE_ERROR"):
        self.tool = tool
        super().__init__(code, message, details)


class EngineTimeoutError(EngineError):
    """The engine did not finish within the configured timeout."""

    def __init__(self, tool: str, timeout_ms: int):
        super().__init__(
            tool,
            f"{tool} audit timed out after {timeout_ms}ms",
            {"timeout_ms": timeout_ms},
            code="ENGINE_TIMEOUT",
        )


class EmptyReportError(EngineError):
    """The engine returned no report at all."""

    def __init__(self, tool: str):
        super().__init__(tool, f"{tool} audit returned no result", code="EMPTY_REPORT")


class InvalidReportError(EngineError):
    """The report is not an object and cannot be normalized."""

    def __init__(self, tool: str, received: str):
        super().__init__(
            tool,
            f"Invalid {tool} report: expected an object, got {received}",
            {"received": received},
            code="INVALID_REPORT",
        )
