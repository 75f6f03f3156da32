"""String enums shared by the normalized result schema and the adapters."""

from enum import StrEnum


class AuditTool(StrEnum):
    AXE = "axe"
    LIGHTHOUSE = "lighthouse"
    WAVE = "wave"


class Severity(StrEnum):
    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"


class Confidence(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Outcome(StrEnum):
    PASS = "pass"
    FAIL = "fail"
    UNKNOWN = "unknown"


class ReasonCode(StrEnum):
    """Why a result is indeterminate or carries a forced severity."""

    INCOMPLETE_CHECK = "INCOMPLETE_CHECK"
    SCORE_AMBIGUOUS = "SCORE_AMBIGUOUS"
    WAVE_ALERT = "WAVE_ALERT"


class BrowserType(StrEnum):
    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"
