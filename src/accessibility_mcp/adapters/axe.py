"""axe-core adapter: runs axe in a Playwright-driven headless browser."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from axe_playwright_python.async_playwright import Axe
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from accessibility_mcp.adapters.base import EngineAdapter
from accessibility_mcp.errors.exceptions import EngineError, EngineTimeoutError
from accessibility_mcp.models.enums import AuditTool, BrowserType
from accessibility_mcp.models.options import AxeAuditOptions

logger = logging.getLogger(__name__)

_RESULT_GROUPS = ("violations", "passes", "incomplete", "inapplicable")


def _target_list(target) -> list[str]:
    """Coerce an axe node target into a list of selector strings."""
    if isinstance(target, str):
        return [target]
    if isinstance(target, (list, tuple)):
        # Shadow DOM targets nest one more level
        return [
            ",".join(str(t) for t in part) if isinstance(part, (list, tuple)) else str(part)
            for part in target
        ]
    return []


def _convert_check(check: dict) -> dict:
    return {
        "id": check.get("id", ""),
        "impact": check.get("impact"),
        "message": check.get("message", ""),
        "data": check.get("data"),
    }


def _convert_node(node: dict) -> dict:
    return {
        "html": node.get("html", ""),
        "target": _target_list(node.get("target")),
        "any": [_convert_check(c) for c in node.get("any") or []],
        "all": [_convert_check(c) for c in node.get("all") or []],
        "none": [_convert_check(c) for c in node.get("none") or []],
    }


def _convert_group(group: dict) -> dict:
    return {
        "id": group.get("id", ""),
        "impact": group.get("impact"),
        "description": group.get("description", ""),
        "help": group.get("help", ""),
        "helpUrl": group.get("helpUrl", ""),
        "tags": list(group.get("tags") or []),
        "nodes": [_convert_node(n) for n in group.get("nodes") or []],
    }


def build_axe_report(response: dict, url: str) -> dict:
    """Shape a raw axe ``run`` response into the native axe report dict."""
    report = {
        key: [_convert_group(g) for g in response.get(key) or []]
        for key in _RESULT_GROUPS
    }
    report["url"] = url
    report["timestamp"] = datetime.now(timezone.utc).isoformat()
    return report


class AxeAdapter(EngineAdapter):
    """Audits pages with axe-core inside a long-lived Playwright browser.

    One browser is launched lazily per browser type and reused. Every audit
    gets its own browser context and page, so concurrent calls never share
    DOM or session state.
    """

    tool = AuditTool.AXE

    def __init__(
        self,
        default_timeout_ms: int = 30000,
        default_browser: BrowserType | str = BrowserType.CHROMIUM,
        playwright_factory=async_playwright,
        axe: Axe | None = None,
    ):
        self.default_timeout_ms = default_timeout_ms
        self.default_browser = BrowserType(default_browser)
        self._playwright_factory = playwright_factory
        self._axe = axe or Axe()
        self._playwright = None
        self._browsers: dict[BrowserType, object] = {}
        self._lock = asyncio.Lock()

    async def audit(self, url: str, options: AxeAuditOptions) -> dict:
        timeout_ms = options.timeout or self.default_timeout_ms
        browser_type = options.browser or self.default_browser
        logger.info("Running axe audit on %s with %s", url, browser_type.value)

        browser = await self._get_browser(browser_type)
        context = None
        try:
            context = await browser.new_context()
            page = await context.new_page()
            try:
                await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
                results = await self._axe.run(page, options=options.axe_run_options())
            finally:
                await page.close()
        except PlaywrightTimeoutError:
            logger.error("axe audit of %s timed out after %dms", url, timeout_ms)
            raise EngineTimeoutError(self.tool.value, timeout_ms) from None
        except PlaywrightError as exc:
            logger.error("axe audit of %s failed: %s", url, exc)
            raise EngineError(self.tool.value, f"axe audit failed: {exc}") from exc
        finally:
            if context is not None:
                await context.close()

        return build_axe_report(results.response, url)

    async def close(self) -> None:
        async with self._lock:
            browsers = list(self._browsers.values())
            self._browsers.clear()
            for browser in browsers:
                await browser.close()
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None

    async def _get_browser(self, browser_type: BrowserType):
        async with self._lock:
            browser = self._browsers.get(browser_type)
            if browser is not None:
                return browser
            if self._playwright is None:
                self._playwright = await self._playwright_factory().start()
            launcher = getattr(self._playwright, browser_type.value)
            try:
                browser = await launcher.launch(headless=True)
            except PlaywrightError as exc:
                logger.error("Failed to launch %s: %s", browser_type.value, exc)
                raise EngineError(
                    self.tool.value, f"Could not launch {browser_type.value}: {exc}"
                ) from exc
            self._browsers[browser_type] = browser
            logger.info("Launched headless %s for axe audits", browser_type.value)
            return browser
