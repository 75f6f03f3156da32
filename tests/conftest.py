"""Shared test fixtures."""

import copy
import json
from pathlib import Path

import pytest

from accessibility_mcp.config import Settings
from accessibility_mcp.models.enums import AuditTool
from accessibility_mcp.services.audit_executor import AuditExecutor

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _load(name: str) -> dict:
    return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))


@pytest.fixture
def axe_report() -> dict:
    return _load("axe_report.json")


@pytest.fixture
def lighthouse_report() -> dict:
    return _load("lighthouse_report.json")


@pytest.fixture
def wave_report() -> dict:
    return _load("wave_report.json")


@pytest.fixture
def wave_api_response() -> dict:
    return _load("wave_api_response.json")


class FakeAdapter:
    """In-memory engine adapter: returns a canned report and records calls."""

    def __init__(self, tool: AuditTool, report=None, error: Exception | None = None):
        self.tool = tool
        self.report = report
        self.error = error
        self.calls: list[tuple[str, object]] = []
        self.closed = 0
        self.on_audit = None

    async def audit(self, url, options):
        self.calls.append((url, options))
        if self.on_audit is not None:
            await self.on_audit(url)
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.report)

    async def close(self):
        self.closed += 1


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(_env_file=None, wave_api_key="test-key")


@pytest.fixture
def fake_adapters(axe_report, lighthouse_report, wave_report) -> dict[AuditTool, FakeAdapter]:
    return {
        AuditTool.AXE: FakeAdapter(AuditTool.AXE, axe_report),
        AuditTool.LIGHTHOUSE: FakeAdapter(AuditTool.LIGHTHOUSE, lighthouse_report),
        AuditTool.WAVE: FakeAdapter(AuditTool.WAVE, wave_report),
    }


@pytest.fixture
async def executor(test_settings, fake_adapters):
    """AuditExecutor wired to fake adapters; closed after the test."""
    async with AuditExecutor(config=test_settings, adapters=fake_adapters) as ex:
        yield ex
