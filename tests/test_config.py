"""Tests for settings loading and logging configuration."""

import json
import logging

import pytest

from accessibility_mcp.config import Settings
from accessibility_mcp.logging_config import (
    QUIET_LOGGERS,
    bind_call_context,
    clear_call_context,
    configure_logging,
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "WAVE_API_KEY",
        "WAVE_API_URL",
        "A11Y_MCP_WAVE_API_KEY",
        "A11Y_MCP_WAVE_API_URL",
        "A11Y_MCP_AXE_TIMEOUT_MS",
        "A11Y_MCP_LIGHTHOUSE_BIN",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    clear_call_context()
    root.handlers[:] = handlers
    root.setLevel(level)


# ===========================================================================
# Settings
# ===========================================================================


def test_defaults(clean_env):
    s = Settings(_env_file=None)
    assert s.axe_timeout_ms == 30000
    assert s.axe_browser == "chromium"
    assert s.lighthouse_timeout_ms == 60000
    assert s.lighthouse_chrome_flags == ["--headless", "--no-sandbox"]
    assert s.wave_api_key is None
    assert s.wave_api_url == "https://wave.webaim.org/api/request"


def test_prefixed_env(clean_env):
    clean_env.setenv("A11Y_MCP_AXE_TIMEOUT_MS", "1234")
    clean_env.setenv("A11Y_MCP_LIGHTHOUSE_BIN", "/opt/lighthouse")
    s = Settings(_env_file=None)
    assert s.axe_timeout_ms == 1234
    assert s.lighthouse_bin == "/opt/lighthouse"


def test_plain_wave_env_names(clean_env):
    """WAVE_API_KEY / WAVE_API_URL are honoured without the prefix."""
    clean_env.setenv("WAVE_API_KEY", "secret")
    clean_env.setenv("WAVE_API_URL", "https://wave.internal/api")
    s = Settings(_env_file=None)
    assert s.wave_api_key == "secret"
    assert s.wave_api_url == "https://wave.internal/api"


def test_init_overrides(clean_env):
    s = Settings(_env_file=None, wave_api_key="direct", axe_browser="webkit")
    assert s.wave_api_key == "direct"
    assert s.axe_browser == "webkit"


# ===========================================================================
# Logging
# ===========================================================================


def test_logs_go_to_stderr(capsys, restore_root_logger):
    """stdout carries the protocol; log lines must never reach it."""
    configure_logging("info")
    logging.getLogger("accessibility_mcp.test").info("audit finished")
    captured = capsys.readouterr()
    assert "audit finished" in captured.err
    assert captured.out == ""


def test_json_logs_include_call_context(capsys, restore_root_logger):
    configure_logging("debug", json_output=True)
    bind_call_context("axe_audit", request_id=7)
    logging.getLogger("accessibility_mcp.test").info("running")
    clear_call_context()
    line = capsys.readouterr().err.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["event"] == "running"
    assert record["tool"] == "axe_audit"
    assert record["request_id"] == 7
    assert record["level"] == "info"


def test_level_filtering(capsys, restore_root_logger):
    configure_logging("warning")
    logging.getLogger("accessibility_mcp.test").info("hidden")
    logging.getLogger("accessibility_mcp.test").warning("shown")
    err = capsys.readouterr().err
    assert "hidden" not in err
    assert "shown" in err


def test_engine_http_loggers_quieted(restore_root_logger):
    configure_logging("debug")
    for name in QUIET_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_json_logs_render_tracebacks(capsys, restore_root_logger):
    """A failed tool call logged with exc_info stays one parseable JSON line."""
    configure_logging("info", json_output=True)
    try:
        raise RuntimeError("engine crashed")
    except RuntimeError:
        logging.getLogger("accessibility_mcp.test").exception("tool failed")
    line = capsys.readouterr().err.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["event"] == "tool failed"
    assert "RuntimeError: engine crashed" in record["exception"]
