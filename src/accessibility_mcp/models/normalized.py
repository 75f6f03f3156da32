"""Normalized audit models: the single result schema every engine reduces into."""

from collections import Counter
from datetime import datetime, timezone

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field

from accessibility_mcp.models.enums import AuditTool, Confidence, Outcome, Severity


class NormalizedResult(BaseModel):
    """One finding from any engine, keyed by guideline references.

    The attribute is ``guideline_refs``; on the wire it is ``wcag_ref``.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    rule_id: str
    guideline_refs: list[str] = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("guideline_refs", "wcag_ref"),
        serialization_alias="wcag_ref",
    )
    severity: Severity
    confidence: Confidence
    outcome: Outcome
    selector: str = ""
    dom_context: str = ""
    message: str = ""
    reason_code: str | None = None  # Only set for indeterminate or heuristic results


class SeverityCounts(BaseModel):
    model_config = ConfigDict(extra="forbid")

    critical: int = 0
    serious: int = 0
    moderate: int = 0
    minor: int = 0


class AuditSummary(BaseModel):
    model_config = ConfigDict(extra="forbid")

    total: int = 0
    # "pass" is a keyword, so the attribute carries a trailing underscore
    pass_: int = Field(0, alias="pass")
    fail: int = 0
    unknown: int = 0
    by_severity: SeverityCounts = Field(default_factory=SeverityCounts)

    @classmethod
    def from_results(cls, results: list[NormalizedResult]) -> "AuditSummary":
        outcomes = Counter(r.outcome for r in results)
        severities = Counter(r.severity for r in results)
        return cls.model_validate({
            "total": len(results),
            "pass": outcomes[Outcome.PASS],
            "fail": outcomes[Outcome.FAIL],
            "unknown": outcomes[Outcome.UNKNOWN],
            "by_severity": {s.value: severities[s] for s in Severity},
        })


class AuditResult(BaseModel):
    """Normalized results for one (url, engine) pair.

    ``summary`` is derived from ``results`` on every access and cannot be set.
    """

    model_config = ConfigDict(extra="forbid")

    url: str
    tool: AuditTool
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    results: list[NormalizedResult] = Field(default_factory=list)

    @computed_field
    @property
    def summary(self) -> AuditSummary:
        return AuditSummary.from_results(self.results)

    def to_payload(self) -> dict:
        """JSON-ready dict with the public field names (``wcag_ref``, ``pass``)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
