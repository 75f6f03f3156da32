"""Logging for the stdio MCP server.

The JSON-RPC stream owns stdout, so every log record goes to stderr, where
MCP clients collect server diagnostics. Records emitted while a tool call is
running carry the tool name and JSON-RPC request id.
"""

import logging
import sys

import structlog

# Engine-side libraries that log each request or event-loop detail at INFO/DEBUG
QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")


def configure_logging(log_level: str = "info", json_output: bool = False) -> None:
    """Route stdlib and structlog records through one stderr handler.

    Args:
        log_level: Logging level string (debug/info/warning/error).
        json_output: One JSON object per line (for clients that parse stderr)
            instead of plain console text.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        # Tracebacks from failed tool calls become a string field
        render_chain = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        # MCP clients show stderr verbatim; ANSI colours would be noise
        render_chain = [structlog.dev.ConsoleRenderer(colors=False)]

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *render_chain],
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def bind_call_context(tool: str, request_id: str | int | None = None) -> None:
    """Tag subsequent records with the tool being called and its JSON-RPC id."""
    ctx: dict[str, object] = {"tool": tool}
    if request_id is not None:
        ctx["request_id"] = request_id
    structlog.contextvars.bind_contextvars(**ctx)


def clear_call_context() -> None:
    structlog.contextvars.clear_contextvars()
