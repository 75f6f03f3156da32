"""Audit orchestration: options validation, target resolution, normalization.

The executor owns one adapter per engine for its whole lifetime. It checks
the URL argument, forwards only recognized options, and hands the adapter's
report to the normalizer untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from accessibility_mcp.adapters import AVAILABLE_ADAPTERS, import_adapter
from accessibility_mcp.adapters.base import EngineAdapter
from accessibility_mcp.config import Settings, settings as default_settings
from accessibility_mcp.errors.exceptions import EmptyReportError, InvalidInputError
from accessibility_mcp.models.enums import AuditTool
from accessibility_mcp.models.normalized import AuditResult
from accessibility_mcp.models.options import (
    AxeAuditOptions,
    LighthouseAuditOptions,
    RuleToggle,
    WaveAuditOptions,
)
from accessibility_mcp.normalization.normalizer import Normalizer
from accessibility_mcp.services.target_resolver import resolve_target

logger = logging.getLogger(__name__)

__all__ = [
    "AuditExecutor",
    "AxeAuditOptions",
    "LighthouseAuditOptions",
    "RuleToggle",
    "WaveAuditOptions",
    "build_default_adapters",
]

OPTIONS_MODELS: dict[AuditTool, type[BaseModel]] = {
    AuditTool.AXE: AxeAuditOptions,
    AuditTool.LIGHTHOUSE: LighthouseAuditOptions,
    AuditTool.WAVE: WaveAuditOptions,
}

# Engines that fetch the page from their own servers, not from this host
REMOTE_ENGINES = frozenset({AuditTool.WAVE})


def _adapter_kwargs(config: Settings) -> dict[AuditTool, dict[str, Any]]:
    return {
        AuditTool.AXE: {
            "default_timeout_ms": config.axe_timeout_ms,
            "default_browser": config.axe_browser,
        },
        AuditTool.LIGHTHOUSE: {
            "binary": config.lighthouse_bin,
            "default_timeout_ms": config.lighthouse_timeout_ms,
            "chrome_flags": config.lighthouse_chrome_flags,
        },
        AuditTool.WAVE: {
            "api_key": config.wave_api_key,
            "api_url": config.wave_api_url,
            "timeout_seconds": config.wave_timeout_seconds,
        },
    }


def build_default_adapters(config: Settings) -> dict[AuditTool, EngineAdapter]:
    """Construct the three engine adapters from settings via the adapter registry."""
    adapters: dict[AuditTool, EngineAdapter] = {}
    for tool, kwargs in _adapter_kwargs(config).items():
        adapter_cls = import_adapter(AVAILABLE_ADAPTERS[tool.value])
        adapters[tool] = adapter_cls(**kwargs)
    return adapters


def parse_options(tool: AuditTool, options: Any) -> BaseModel:
    """Validate raw options into the engine's options model."""
    model = OPTIONS_MODELS[tool]
    if options is None:
        return model()
    if isinstance(options, BaseModel):
        options = options.model_dump(by_alias=True, exclude_none=True)
    if not isinstance(options, Mapping):
        raise InvalidInputError(f"{tool.value} options must be an object")
    try:
        return model.model_validate(dict(options))
    except ValidationError as exc:
        details = [
            {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
            for err in exc.errors()
        ]
        raise InvalidInputError(f"Invalid {tool.value} options", details) from None


class AuditExecutor:
    """Runs audits against the three engines and returns normalized results."""

    def __init__(
        self,
        config: Settings | None = None,
        adapters: Mapping[AuditTool, EngineAdapter] | None = None,
        normalizer: Normalizer | None = None,
    ) -> None:
        self.config = config or default_settings
        self._adapters = dict(adapters) if adapters is not None else build_default_adapters(self.config)
        self.normalizer = normalizer or Normalizer()

    async def __aenter__(self) -> "AuditExecutor":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def adapter(self, tool: AuditTool | str) -> EngineAdapter:
        return self._adapters[AuditTool(tool)]

    async def run_axe(self, url: str, options: Any = None) -> AuditResult:
        return await self.run(AuditTool.AXE, url, options)

    async def run_lighthouse(self, url: str, options: Any = None) -> AuditResult:
        return await self.run(AuditTool.LIGHTHOUSE, url, options)

    async def run_wave(self, url: str, options: Any = None) -> AuditResult:
        return await self.run(AuditTool.WAVE, url, options)

    async def run(self, tool: AuditTool | str, url: Any, options: Any = None) -> AuditResult:
        try:
            tool = AuditTool(tool)
        except ValueError:
            raise InvalidInputError(f"Unknown audit tool: {tool}") from None
        if not isinstance(url, str) or not url.strip():
            raise InvalidInputError("A non-empty 'url' argument is required")
        url = url.strip()
        parsed = parse_options(tool, options)
        adapter = self.adapter(tool)

        async with resolve_target(url) as target:
            # non-http schemes are rejected by the adapter itself
            is_http = target.url.startswith(("http://", "https://"))
            if tool in REMOTE_ENGINES and target.is_local and is_http:
                raise InvalidInputError(
                    f"{tool.value} scans run remotely and cannot reach local target {url}",
                    {"url": url},
                )
            logger.info("Starting %s audit of %s", tool.value, target.url)
            report = await adapter.audit(target.url, parsed)

        if not report:
            raise EmptyReportError(tool.value)

        result = self.normalizer.normalize(tool, report)
        logger.info(
            "Finished %s audit of %s: %d results (%d fail)",
            tool.value,
            url,
            result.summary.total,
            result.summary.fail,
        )
        return result

    async def close(self) -> None:
        """Release every adapter; one failing adapter does not block the rest."""
        for tool, adapter in self._adapters.items():
            try:
                await adapter.close()
            except Exception:
                logger.error("Failed to close %s adapter", tool.value, exc_info=True)
