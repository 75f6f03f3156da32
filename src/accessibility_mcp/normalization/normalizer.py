"""Result normalizer: reduces native engine reports to one AuditResult schema.

Three explicit paths, one per engine, because outcome derivation differs
materially between them:

* axe: outcome comes from the group kind (violations / passes / incomplete).
* Lighthouse: outcome comes from a score threshold.
* WAVE: outcome comes from the item category.

All three share ``_build_audit_result``. The normalizer is pure: it keeps no
state between calls and performs no I/O beyond a debug log line.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from accessibility_mcp.errors.exceptions import InvalidInputError, InvalidReportError
from accessibility_mcp.guidelines.mappings import (
    confidence_from_impact,
    map_impact_to_severity,
    resolve,
)
from accessibility_mcp.models.enums import AuditTool, Confidence, Outcome, ReasonCode, Severity
from accessibility_mcp.models.normalized import AuditResult, NormalizedResult
from accessibility_mcp.normalization.selectors import extract_context, normalise_selector

logger = logging.getLogger(__name__)

# Lighthouse's own pass bar for a binary audit
LIGHTHOUSE_PASS_THRESHOLD = 0.9

_AXE_GROUPS: tuple[tuple[str, Outcome], ...] = (
    ("violations", Outcome.FAIL),
    ("passes", Outcome.PASS),
    ("incomplete", Outcome.UNKNOWN),
)

_LIGHTHOUSE_SKIPPED_MODES = frozenset({"notApplicable", "error"})

# feature / structure / aria are informational and never read
_WAVE_FAILING_CATEGORIES = ("error", "contrast")


def _mapping(value) -> Mapping:
    return value if isinstance(value, Mapping) else {}


def _records(value) -> list[Mapping]:
    """Mapping entries of a list; anything else in the list is dropped."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _text(value) -> str:
    return value if isinstance(value, str) else ""


def _score(value) -> float | None:
    # bool is an int subclass; a boolean score is not a score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def lighthouse_outcome(score: float | None) -> Outcome:
    """null → unknown; ≥ 0.9 → pass; exactly 0 → fail; anything between → unknown."""
    if score is None:
        return Outcome.UNKNOWN
    if score >= LIGHTHOUSE_PASS_THRESHOLD:
        return Outcome.PASS
    if score == 0:
        return Outcome.FAIL
    return Outcome.UNKNOWN


def _lighthouse_nodes(details: Mapping) -> list[Mapping] | None:
    """Nodes reported by an audit, or None when the audit carries no node data.

    An explicit ``nodes`` list is authoritative even when empty.
    """
    if isinstance(details.get("nodes"), list):
        return _records(details["nodes"])
    # Lighthouse JSON nests node details inside table items
    nodes = [
        item["node"]
        for item in _records(details.get("items"))
        if isinstance(item.get("node"), Mapping)
    ]
    return nodes or None


class Normalizer:
    """Stateless converter from native engine reports to AuditResult."""

    def normalize(self, tool: AuditTool | str, report) -> AuditResult:
        try:
            tool = AuditTool(tool)
        except ValueError:
            raise InvalidInputError(f"Unknown audit tool: {tool}") from None
        handlers = {
            AuditTool.AXE: self.normalize_axe,
            AuditTool.LIGHTHOUSE: self.normalize_lighthouse,
            AuditTool.WAVE: self.normalize_wave,
        }
        return handlers[tool](report)

    # ------------------------------------------------------------------
    # axe-core
    # ------------------------------------------------------------------

    def normalize_axe(self, report) -> AuditResult:
        report = self._require_mapping(report, AuditTool.AXE)
        results: list[NormalizedResult] = []

        for group_key, outcome in _AXE_GROUPS:
            for group in _records(report.get(group_key)):
                rule_id = _text(group.get("id"))
                mapping = resolve(rule_id, AuditTool.AXE)
                impact = group.get("impact")
                help_text = _text(group.get("help"))
                message = help_text or _text(group.get("description"))

                if outcome == Outcome.UNKNOWN:
                    confidence = Confidence.LOW
                    reason_code = ReasonCode.INCOMPLETE_CHECK if help_text else None
                else:
                    confidence = confidence_from_impact(impact)
                    reason_code = None

                for node in _records(group.get("nodes")):
                    results.append(NormalizedResult(
                        rule_id=rule_id,
                        guideline_refs=list(mapping.guideline_refs),
                        severity=map_impact_to_severity(impact),
                        confidence=confidence,
                        outcome=outcome,
                        selector=normalise_selector(node.get("target")),
                        dom_context=extract_context(node.get("html")),
                        message=message,
                        reason_code=reason_code,
                    ))

        return self._build_audit_result(_text(report.get("url")), AuditTool.AXE, results)

    # ------------------------------------------------------------------
    # Lighthouse
    # ------------------------------------------------------------------

    def normalize_lighthouse(self, report) -> AuditResult:
        report = self._require_mapping(report, AuditTool.LIGHTHOUSE)
        url = _text(report.get("url")) or _text(report.get("finalUrl"))
        category = _mapping(report.get("categories")).get("accessibility")
        if not isinstance(category, Mapping):
            logger.debug("Lighthouse report for %s has no accessibility category", url)
            return self._build_audit_result(url, AuditTool.LIGHTHOUSE, [])

        audits = _mapping(report.get("audits"))
        results: list[NormalizedResult] = []

        for ref in _records(category.get("auditRefs")):
            ref_id = _text(ref.get("id"))
            audit = audits.get(ref_id)
            if not isinstance(audit, Mapping):
                continue
            if audit.get("scoreDisplayMode") in _LIGHTHOUSE_SKIPPED_MODES:
                continue

            rule_id = _text(audit.get("id")) or ref_id
            mapping = resolve(rule_id, AuditTool.LIGHTHOUSE)
            outcome = lighthouse_outcome(_score(audit.get("score")))
            confidence = Confidence.MEDIUM if outcome == Outcome.UNKNOWN else Confidence.HIGH
            reason_code = ReasonCode.SCORE_AMBIGUOUS if outcome == Outcome.UNKNOWN else None
            message = _text(audit.get("description")) or _text(audit.get("title"))

            nodes = _lighthouse_nodes(_mapping(audit.get("details")))
            # No node data at all: one result stands for the whole audit
            targets = [{}] if nodes is None else nodes
            for node in targets:
                results.append(NormalizedResult(
                    rule_id=rule_id,
                    guideline_refs=list(mapping.guideline_refs),
                    severity=mapping.severity,
                    confidence=confidence,
                    outcome=outcome,
                    selector=normalise_selector(node.get("selector")),
                    dom_context=extract_context(node.get("snippet")),
                    message=message,
                    reason_code=reason_code,
                ))

        return self._build_audit_result(url, AuditTool.LIGHTHOUSE, results)

    # ------------------------------------------------------------------
    # WAVE
    # ------------------------------------------------------------------

    def normalize_wave(self, report) -> AuditResult:
        report = self._require_mapping(report, AuditTool.WAVE)
        categories = _mapping(report.get("categories"))
        results: list[NormalizedResult] = []

        for category in _WAVE_FAILING_CATEGORIES:
            for item in _records(categories.get(category)):
                rule_id = _text(item.get("code"))
                mapping = resolve(rule_id, AuditTool.WAVE)
                results.append(NormalizedResult(
                    rule_id=rule_id,
                    guideline_refs=list(mapping.guideline_refs),
                    severity=mapping.severity,
                    confidence=Confidence.HIGH,
                    outcome=Outcome.FAIL,
                    message=_text(item.get("description")),
                ))

        for item in _records(categories.get("alert")):
            rule_id = _text(item.get("code"))
            mapping = resolve(rule_id, AuditTool.WAVE)
            results.append(NormalizedResult(
                rule_id=rule_id,
                guideline_refs=list(mapping.guideline_refs),
                severity=Severity.MODERATE,
                confidence=Confidence.MEDIUM,
                outcome=Outcome.UNKNOWN,
                message=_text(item.get("description")),
                reason_code=ReasonCode.WAVE_ALERT,
            ))

        return self._build_audit_result(_text(report.get("url")), AuditTool.WAVE, results)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_mapping(report, tool: AuditTool) -> Mapping:
        if not isinstance(report, Mapping):
            raise InvalidReportError(tool.value, type(report).__name__)
        return report

    @staticmethod
    def _build_audit_result(
        url: str, tool: AuditTool, results: list[NormalizedResult]
    ) -> AuditResult:
        audit_result = AuditResult(url=url, tool=tool, results=results)
        summary = audit_result.summary
        logger.debug(
            "Normalized %d %s results for %s (pass=%d fail=%d unknown=%d)",
            summary.total,
            tool.value,
            url,
            summary.pass_,
            summary.fail,
            summary.unknown,
        )
        return audit_result
