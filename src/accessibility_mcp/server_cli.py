"""CLI entry point for the accessibility MCP stdio server."""

import argparse

from accessibility_mcp.config import settings
from accessibility_mcp.logging_config import configure_logging


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="accessibility-mcp",
        description="MCP stdio server exposing axe-core, Lighthouse and WAVE accessibility audits",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level.lower(),
        type=str.lower,
        choices=["debug", "info", "warning", "error"],
        help=f"Log level (default: {settings.log_level})",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=settings.json_logs,
        help="Emit JSON log lines on stderr",
    )
    args = parser.parse_args(argv)

    configure_logging(args.log_level, json_output=args.json_logs)

    from accessibility_mcp.mcp.stdio_server import AccessibilityMCPStdioServer

    AccessibilityMCPStdioServer().run_stdio()


if __name__ == "__main__":
    main()
