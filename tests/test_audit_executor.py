"""Tests for AuditExecutor: argument validation, option forwarding, lifecycle."""

import httpx
import pytest

from accessibility_mcp.adapters import AVAILABLE_ADAPTERS, import_adapter
from accessibility_mcp.adapters.axe import AxeAdapter
from accessibility_mcp.adapters.lighthouse import LighthouseAdapter
from accessibility_mcp.adapters.wave import WaveAdapter
from accessibility_mcp.errors.exceptions import (
    EmptyReportError,
    EngineError,
    InvalidInputError,
)
from accessibility_mcp.models.enums import AuditTool, BrowserType
from accessibility_mcp.services.audit_executor import (
    AuditExecutor,
    AxeAuditOptions,
    LighthouseAuditOptions,
    WaveAuditOptions,
    build_default_adapters,
)

PAGE_URL = "https://example.com/"


# ===========================================================================
# Happy paths
# ===========================================================================


@pytest.mark.asyncio
async def test_run_axe(executor, fake_adapters):
    result = await executor.run_axe(PAGE_URL, {"tags": ["wcag2a"], "browser": "firefox"})
    assert result.tool == AuditTool.AXE
    assert result.summary.total == 8

    url, options = fake_adapters[AuditTool.AXE].calls[0]
    assert url == PAGE_URL
    assert isinstance(options, AxeAuditOptions)
    assert options.tags == ["wcag2a"]
    assert options.browser == BrowserType.FIREFOX


@pytest.mark.asyncio
async def test_run_lighthouse(executor, fake_adapters):
    result = await executor.run_lighthouse(PAGE_URL, {"onlyCategories": ["accessibility"], "skipAudits": ["tabindex"]})
    assert result.tool == AuditTool.LIGHTHOUSE
    _, options = fake_adapters[AuditTool.LIGHTHOUSE].calls[0]
    assert isinstance(options, LighthouseAuditOptions)
    assert options.only_categories == ["accessibility"]
    assert options.skip_audits == ["tabindex"]


@pytest.mark.asyncio
async def test_run_wave(executor, fake_adapters):
    result = await executor.run_wave(PAGE_URL, {"apiKey": "abc"})
    assert result.tool == AuditTool.WAVE
    _, options = fake_adapters[AuditTool.WAVE].calls[0]
    assert isinstance(options, WaveAuditOptions)
    assert options.api_key == "abc"


@pytest.mark.asyncio
@pytest.mark.parametrize("tool", ["axe", "lighthouse", "wave"])
async def test_run_by_name(executor, tool):
    result = await executor.run(tool, PAGE_URL)
    assert result.tool == tool


@pytest.mark.asyncio
async def test_options_default_when_absent(executor, fake_adapters):
    await executor.run_axe(PAGE_URL)
    _, options = fake_adapters[AuditTool.AXE].calls[0]
    assert options == AxeAuditOptions()


@pytest.mark.asyncio
async def test_unrecognized_options_not_forwarded(executor, fake_adapters):
    await executor.run_axe(PAGE_URL, {"tags": ["wcag2a"], "headless": False, "script": "alert(1)"})
    _, options = fake_adapters[AuditTool.AXE].calls[0]
    assert options.model_dump() == {"timeout": None, "browser": None, "tags": ["wcag2a"], "rules": None}


@pytest.mark.asyncio
async def test_options_model_accepted(executor, fake_adapters):
    await executor.run_lighthouse(PAGE_URL, LighthouseAuditOptions(categories=["seo"]))
    _, options = fake_adapters[AuditTool.LIGHTHOUSE].calls[0]
    assert options.resolved_categories() == ["seo"]


@pytest.mark.asyncio
async def test_report_passed_untouched(executor, fake_adapters, axe_report):
    """The executor does not inspect or alter the adapter's report."""
    fake_adapters[AuditTool.AXE].report = {"url": "https://other.test/", "violations": []}
    result = await executor.run_axe(PAGE_URL)
    assert result.url == "https://other.test/"
    assert result.results == []


@pytest.mark.asyncio
async def test_local_file_served_during_audit(executor, fake_adapters, tmp_path):
    page = tmp_path / "index.html"
    page.write_text("<html><title>t</title></html>", encoding="utf-8")
    fetched = {}

    async def fetch(url):
        async with httpx.AsyncClient(trust_env=False) as client:
            fetched["body"] = (await client.get(url)).text

    fake_adapters[AuditTool.AXE].on_audit = fetch
    await executor.run_axe(str(page))
    served_url, _ = fake_adapters[AuditTool.AXE].calls[0]
    assert served_url.startswith("http://127.0.0.1:")
    assert fetched["body"] == "<html><title>t</title></html>"


# ===========================================================================
# Input errors
# ===========================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["http://localhost:8000/", "http://127.0.0.1/page"])
async def test_wave_rejects_local_url(executor, fake_adapters, url):
    with pytest.raises(InvalidInputError) as exc_info:
        await executor.run_wave(url)
    assert exc_info.value.details == {"url": url}
    assert fake_adapters[AuditTool.WAVE].calls == []


@pytest.mark.asyncio
async def test_wave_rejects_local_file(executor, fake_adapters, tmp_path):
    """A served local file is only reachable from this host, so WAVE refuses it."""
    page = tmp_path / "index.html"
    page.write_text("<html></html>", encoding="utf-8")
    with pytest.raises(InvalidInputError, match="cannot reach local target"):
        await executor.run_wave(str(page))
    assert fake_adapters[AuditTool.WAVE].calls == []


@pytest.mark.asyncio
async def test_local_url_allowed_for_browser_engines(executor, fake_adapters):
    await executor.run_axe("http://localhost:3000/")
    assert fake_adapters[AuditTool.AXE].calls[0][0] == "http://localhost:3000/"


@pytest.mark.asyncio
@pytest.mark.parametrize("url", [None, "", "   ", 42])
async def test_url_required(executor, fake_adapters, url):
    with pytest.raises(InvalidInputError):
        await executor.run_axe(url)
    assert fake_adapters[AuditTool.AXE].calls == []


@pytest.mark.asyncio
async def test_unresolvable_url(executor, fake_adapters):
    with pytest.raises(InvalidInputError):
        await executor.run_lighthouse("definitely not a url")
    assert fake_adapters[AuditTool.LIGHTHOUSE].calls == []


@pytest.mark.asyncio
async def test_invalid_option_values(executor):
    with pytest.raises(InvalidInputError) as exc_info:
        await executor.run_axe(PAGE_URL, {"timeout": -5, "browser": "netscape"})
    locs = {d["loc"] for d in exc_info.value.details}
    assert locs == {"timeout", "browser"}


@pytest.mark.asyncio
async def test_options_must_be_object(executor):
    with pytest.raises(InvalidInputError):
        await executor.run_wave(PAGE_URL, ["apiKey", "x"])


@pytest.mark.asyncio
async def test_unknown_tool(executor):
    with pytest.raises(InvalidInputError):
        await executor.run("pa11y", PAGE_URL)


# ===========================================================================
# Upstream errors
# ===========================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize("report", [None, {}])
async def test_empty_report(executor, fake_adapters, report):
    fake_adapters[AuditTool.LIGHTHOUSE].report = report
    with pytest.raises(EmptyReportError):
        await executor.run_lighthouse(PAGE_URL)


@pytest.mark.asyncio
async def test_adapter_error_propagates(executor, fake_adapters):
    fake_adapters[AuditTool.WAVE].error = EngineError("wave", "upstream down")
    with pytest.raises(EngineError, match="upstream down"):
        await executor.run_wave(PAGE_URL)


# ===========================================================================
# Lifecycle
# ===========================================================================


@pytest.mark.asyncio
async def test_context_manager_closes_adapters(test_settings, fake_adapters):
    async with AuditExecutor(config=test_settings, adapters=fake_adapters) as ex:
        await ex.run_axe(PAGE_URL)
    assert all(a.closed == 1 for a in fake_adapters.values())


@pytest.mark.asyncio
async def test_close_continues_after_failure(test_settings, fake_adapters):
    async def broken_close():
        raise RuntimeError("browser already gone")

    fake_adapters[AuditTool.AXE].close = broken_close
    ex = AuditExecutor(config=test_settings, adapters=fake_adapters)
    await ex.close()
    assert fake_adapters[AuditTool.LIGHTHOUSE].closed == 1
    assert fake_adapters[AuditTool.WAVE].closed == 1


@pytest.mark.asyncio
async def test_adapters_reused_across_calls(executor, fake_adapters):
    await executor.run_axe(PAGE_URL)
    await executor.run_axe(PAGE_URL)
    assert len(fake_adapters[AuditTool.AXE].calls) == 2
    assert executor.adapter("axe") is fake_adapters[AuditTool.AXE]


def test_default_adapters_from_settings(test_settings):
    adapters = build_default_adapters(test_settings)
    assert isinstance(adapters[AuditTool.AXE], AxeAdapter)
    assert isinstance(adapters[AuditTool.LIGHTHOUSE], LighthouseAdapter)
    assert isinstance(adapters[AuditTool.WAVE], WaveAdapter)
    assert adapters[AuditTool.WAVE].api_key == "test-key"
    assert adapters[AuditTool.AXE].default_timeout_ms == test_settings.axe_timeout_ms


def test_default_adapters_resolved_through_registry(test_settings, monkeypatch):
    """build_default_adapters instantiates whatever class the registry names."""

    class StubWave:
        tool = "wave"

        def __init__(self, **kwargs):
            self.kwargs = kwargs

    monkeypatch.setitem(AVAILABLE_ADAPTERS, "wave", f"{__name__}.StubWave")
    monkeypatch.setattr(
        "accessibility_mcp.services.audit_executor.import_adapter",
        lambda dotted: StubWave if dotted.endswith("StubWave") else import_adapter(dotted),
    )

    adapters = build_default_adapters(test_settings)
    assert isinstance(adapters[AuditTool.WAVE], StubWave)
    assert adapters[AuditTool.WAVE].kwargs["api_key"] == "test-key"
    assert isinstance(adapters[AuditTool.AXE], AxeAdapter)


def test_adapter_registry():
    assert set(AVAILABLE_ADAPTERS) == {tool.value for tool in AuditTool}
    for tool, dotted in AVAILABLE_ADAPTERS.items():
        cls = import_adapter(dotted)
        assert cls.tool == tool
