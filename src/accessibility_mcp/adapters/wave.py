"""WAVE adapter: requests a scan from the WebAIM WAVE API."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from urllib.parse import urlsplit

import httpx

from accessibility_mcp.adapters.base import EngineAdapter
from accessibility_mcp.errors.exceptions import (
    EngineError,
    EngineTimeoutError,
    InvalidReportError,
    MissingCredentialsError,
    UnsupportedProtocolError,
)
from accessibility_mcp.models.enums import AuditTool
from accessibility_mcp.models.options import WaveAuditOptions

logger = logging.getLogger(__name__)

DEFAULT_WAVE_API_URL = "https://wave.webaim.org/api/request"

# reporttype 1 returns category counts only; 2 adds the per-item listing
WAVE_REPORT_TYPE = "2"

WAVE_CATEGORIES = ("error", "contrast", "alert", "feature", "structure", "aria")


def _convert_item(item: dict, fallback_code: str = "") -> dict:
    converted = {
        "code": item.get("code") or item.get("id") or fallback_code,
        "count": item.get("count", 0),
        "pages": item.get("pages", 0),
        "description": item.get("description", ""),
    }
    contrast = item.get("contrast")
    if isinstance(contrast, dict):
        converted["contrast"] = {
            "ratio": contrast.get("ratio", ""),
            "large": contrast.get("large", False),
            "expected": contrast.get("expected", ""),
        }
    return converted


def _category_items(raw) -> list[dict]:
    """Items of one category, in either the flat-list or the keyed layout.

    The live API nests items as ``{"count": n, "items": {"alt_missing": {...}}}``.
    """
    if isinstance(raw, list):
        return [_convert_item(item) for item in raw if isinstance(item, dict)]
    if isinstance(raw, dict):
        items = raw.get("items")
        if isinstance(items, dict):
            return [
                _convert_item(item, key) for key, item in items.items() if isinstance(item, dict)
            ]
        if isinstance(items, list):
            return [_convert_item(item) for item in items if isinstance(item, dict)]
    return []


def build_wave_report(data: dict, url: str) -> dict:
    """Shape a WAVE API response into the native WAVE report dict."""
    raw_categories = data.get("categories") or {}
    raw_summary = data.get("statsummary") or {}
    categories = {name: _category_items(raw_categories.get(name)) for name in WAVE_CATEGORIES}

    statsummary = {}
    for name in WAVE_CATEGORIES:
        raw = raw_categories.get(name)
        if name in raw_summary:
            statsummary[name] = raw_summary[name]
        elif isinstance(raw, dict) and "count" in raw:
            statsummary[name] = raw["count"]
        else:
            statsummary[name] = len(categories[name])
    statsummary["total"] = raw_summary.get("total", sum(statsummary.values()))

    return {
        "statsummary": statsummary,
        "categories": categories,
        "url": url,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


class WaveAdapter(EngineAdapter):
    """Pulls a WAVE scan for a publicly reachable http(s) URL.

    Expected configuration:
        api_key:  WebAIM API key (``WAVE_API_KEY``); may be overridden per call.
        api_url:  defaults to ``https://wave.webaim.org/api/request``.
    """

    tool = AuditTool.WAVE

    def __init__(
        self,
        api_key: str | None = None,
        api_url: str = DEFAULT_WAVE_API_URL,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def audit(self, url: str, options: WaveAuditOptions) -> dict:
        if urlsplit(url).scheme not in ("http", "https"):
            raise UnsupportedProtocolError(self.tool.value, url)

        api_key = options.api_key or self.api_key
        if not api_key:
            raise MissingCredentialsError(
                "WAVE API key is required. Set WAVE_API_KEY or pass the apiKey option."
            )
        api_url = options.api_url or self.api_url
        timeout = options.timeout / 1000 if options.timeout else self.timeout_seconds
        params = {"key": api_key, "url": url, "format": "json", "reporttype": WAVE_REPORT_TYPE}

        logger.info("Requesting WAVE scan for %s", url)
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.get(
                    api_url,
                    params=params,
                    headers={"Accept": "application/json"},
                    timeout=timeout,
                )
                resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "WAVE API returned HTTP %s for %s", exc.response.status_code, url
            )
            raise EngineError(
                self.tool.value,
                f"WAVE API request failed: {exc.response.status_code} {exc.response.reason_phrase}",
                {"status_code": exc.response.status_code},
            ) from exc
        except httpx.TimeoutException:
            logger.error("WAVE API timed out for %s", url)
            raise EngineTimeoutError(self.tool.value, int(timeout * 1000)) from None
        except httpx.HTTPError as exc:
            logger.error("HTTP error requesting WAVE scan for %s: %s", url, exc)
            raise EngineError(self.tool.value, f"WAVE API request failed: {exc}") from exc

        try:
            data = resp.json()
        except ValueError:
            raise InvalidReportError(self.tool.value, "non-JSON body") from None
        if not isinstance(data, dict):
            raise InvalidReportError(self.tool.value, type(data).__name__)

        status = data.get("status")
        if isinstance(status, dict) and status.get("success") is False:
            message = status.get("error") or "unknown error"
            logger.error("WAVE API rejected scan for %s: %s", url, message)
            raise EngineError(self.tool.value, f"WAVE API error: {message}")

        return build_wave_report(data, url)
