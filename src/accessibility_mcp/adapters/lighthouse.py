"""Lighthouse adapter: runs the Lighthouse CLI and reshapes its JSON report."""

from __future__ import annotations

import asyncio
import json
import logging

from accessibility_mcp.adapters.base import EngineAdapter
from accessibility_mcp.errors.exceptions import (
    EmptyReportError,
    EngineError,
    EngineTimeoutError,
    InvalidReportError,
)
from accessibility_mcp.models.enums import AuditTool
from accessibility_mcp.models.options import LighthouseAuditOptions

logger = logging.getLogger(__name__)

_STDERR_TAIL = 500


def _convert_audit(audit: dict) -> dict:
    details = audit.get("details")
    return {
        "id": audit.get("id", ""),
        "title": audit.get("title", ""),
        "description": audit.get("description", ""),
        "score": audit.get("score"),
        "scoreDisplayMode": audit.get("scoreDisplayMode"),
        "displayValue": audit.get("displayValue"),
        "details": {
            "type": details.get("type"),
            "headings": details.get("headings"),
            "items": details.get("items"),
            "nodes": details.get("nodes"),
        } if isinstance(details, dict) else None,
    }


def _convert_category(category: dict) -> dict:
    return {
        "id": category.get("id", ""),
        "title": category.get("title", ""),
        "score": category.get("score"),
        "description": category.get("description"),
        "manualDescription": category.get("manualDescription"),
        "auditRefs": [
            {"id": ref.get("id", ""), "weight": ref.get("weight", 0), "group": ref.get("group")}
            for ref in category.get("auditRefs") or []
        ],
    }


def build_lighthouse_report(lhr: dict) -> dict:
    """Reduce a full Lighthouse result (LHR) to the fields the normalizer reads."""
    audits = lhr.get("audits") or {}
    categories = lhr.get("categories") or {}
    return {
        "url": lhr.get("finalUrl") or lhr.get("finalDisplayedUrl") or lhr.get("requestedUrl", ""),
        "fetchTime": lhr.get("fetchTime", ""),
        "audits": {key: _convert_audit(audit) for key, audit in audits.items()},
        "categories": {key: _convert_category(cat) for key, cat in categories.items()},
    }


class LighthouseAdapter(EngineAdapter):
    """Runs ``lighthouse <url> --output=json`` as a subprocess per audit.

    Each call spawns its own headless Chrome through the CLI, so there is no
    long-lived state to share between concurrent calls.
    """

    tool = AuditTool.LIGHTHOUSE

    def __init__(
        self,
        binary: str = "lighthouse",
        default_timeout_ms: int = 60000,
        chrome_flags: list[str] | None = None,
    ):
        self.binary = binary
        self.default_timeout_ms = default_timeout_ms
        self.chrome_flags = list(chrome_flags if chrome_flags is not None else ["--headless", "--no-sandbox"])

    def build_command(self, url: str, options: LighthouseAuditOptions) -> list[str]:
        command = [
            self.binary,
            url,
            "--output=json",
            "--output-path=stdout",
            "--quiet",
            f"--only-categories={','.join(options.resolved_categories())}",
        ]
        if self.chrome_flags:
            command.append(f"--chrome-flags={' '.join(self.chrome_flags)}")
        if options.skip_audits:
            command.append(f"--skip-audits={','.join(options.skip_audits)}")
        return command

    async def audit(self, url: str, options: LighthouseAuditOptions) -> dict:
        timeout_ms = options.timeout or self.default_timeout_ms
        command = self.build_command(url, options)
        logger.info("Running Lighthouse on %s (categories=%s)", url, options.resolved_categories())

        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            logger.error("Could not start Lighthouse binary %r: %s", self.binary, exc)
            raise EngineError(
                self.tool.value, f"Could not start Lighthouse ({self.binary}): {exc}"
            ) from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout_ms / 1000)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            logger.error("Lighthouse audit of %s timed out after %dms", url, timeout_ms)
            raise EngineTimeoutError(self.tool.value, timeout_ms) from None

        if proc.returncode != 0:
            tail = stderr.decode(errors="replace").strip()[-_STDERR_TAIL:]
            logger.error("Lighthouse exited with %s for %s: %s", proc.returncode, url, tail)
            raise EngineError(
                self.tool.value,
                f"Lighthouse exited with status {proc.returncode}",
                {"stderr": tail},
            )

        if not stdout.strip():
            raise EmptyReportError(self.tool.value)

        try:
            lhr = json.loads(stdout)
        except ValueError as exc:
            raise EngineError(self.tool.value, f"Lighthouse produced invalid JSON: {exc}") from exc
        if not isinstance(lhr, dict):
            raise InvalidReportError(self.tool.value, type(lhr).__name__)

        runtime_error = lhr.get("runtimeError")
        if isinstance(runtime_error, dict) and runtime_error.get("code"):
            raise EngineError(
                self.tool.value,
                f"Lighthouse runtime error: {runtime_error.get('message') or runtime_error['code']}",
                {"code": runtime_error["code"]},
            )

        return build_lighthouse_report(lhr)
