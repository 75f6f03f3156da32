"""Resolve a user-supplied URL or HTML file path into an auditable address.

Local ``.html``/``.htm`` files are served by a throwaway HTTP server bound to
127.0.0.1 for the duration of the audit.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from contextlib import asynccontextmanager
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import AsyncIterator
from urllib.parse import urlsplit

from accessibility_mcp.errors.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})
HTML_SUFFIXES = frozenset({".html", ".htm"})


@dataclass(frozen=True)
class ResolvedTarget:
    url: str
    is_local: bool


def _html_file(value: str) -> Path | None:
    path = Path(value).expanduser()
    if path.suffix.lower() not in HTML_SUFFIXES:
        return None
    path = path.resolve()
    return path if path.is_file() else None


def _make_handler(content: bytes) -> type[BaseHTTPRequestHandler]:
    class _SingleFileHandler(BaseHTTPRequestHandler):
        def do_GET(self):
            if self.path in ("/", "/index.html"):
                self.send_response(200)
                self.send_header("Content-Type", "text/html; charset=utf-8")
                self.send_header("Content-Length", str(len(content)))
                self.end_headers()
                self.wfile.write(content)
            else:
                self.send_error(404, "Not found")

        def log_message(self, format, *args):
            logger.debug("local server: " + format, *args)

    return _SingleFileHandler


@asynccontextmanager
async def serve_file(path: Path) -> AsyncIterator[str]:
    """Serve one HTML file at ``/`` on an OS-assigned port; yields the base URL."""
    content = path.read_bytes()
    server = ThreadingHTTPServer(("127.0.0.1", 0), _make_handler(content))
    thread = threading.Thread(target=server.serve_forever, name="a11y-local-server", daemon=True)
    thread.start()
    port = server.server_address[1]
    logger.info("Serving %s on http://127.0.0.1:%d/", path, port)
    try:
        yield f"http://127.0.0.1:{port}/"
    finally:
        await asyncio.to_thread(server.shutdown)
        server.server_close()
        thread.join(timeout=5)
        logger.debug("Stopped local server for %s", path)


@asynccontextmanager
async def resolve_target(value: str) -> AsyncIterator[ResolvedTarget]:
    """Yield a reachable address for ``value``.

    http(s) URLs pass through unchanged, as do ``file://`` URLs. An existing
    HTML file path is served locally until the block exits. Anything else
    raises InvalidInputError.
    """
    parts = urlsplit(value)
    if parts.scheme in ("http", "https") and parts.netloc:
        yield ResolvedTarget(url=value, is_local=(parts.hostname or "") in LOCAL_HOSTS)
        return
    if parts.scheme == "file":
        yield ResolvedTarget(url=value, is_local=True)
        return

    path = _html_file(value)
    if path is None:
        raise InvalidInputError(
            f'Invalid input: "{value}" is not a valid URL, file:// URL, or local HTML file path',
            {"url": value},
        )
    async with serve_file(path) as url:
        yield ResolvedTarget(url=url, is_local=True)
