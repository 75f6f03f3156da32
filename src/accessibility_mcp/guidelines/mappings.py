"""WCAG guideline mappings per audit engine.

Each engine names its checks in its own namespace, so the tables are kept
separate: the same rule id can carry different references or severity
depending on which engine reported it. Unknown rule ids resolve to a generic
default mapping and never raise.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from accessibility_mcp.models.enums import AuditTool, Confidence, Severity

DEFAULT_GUIDELINE_REFS: tuple[str, ...] = ("WCAG2.1:4.1.2",)
DEFAULT_SEVERITY = Severity.MODERATE


@dataclass(frozen=True)
class GuidelineMapping:
    """Guideline references and baseline severity for one rule."""

    rule_id: str
    guideline_refs: tuple[str, ...]
    severity: Severity


def _table(entries: dict[str, tuple[tuple[str, ...], Severity]]) -> Mapping[str, GuidelineMapping]:
    return MappingProxyType({
        rule_id: GuidelineMapping(rule_id, refs, severity)
        for rule_id, (refs, severity) in entries.items()
    })


_CRITICAL = Severity.CRITICAL
_SERIOUS = Severity.SERIOUS
_MODERATE = Severity.MODERATE

# axe-core rule ids
AXE_MAPPINGS = _table({
    "aria-allowed-attr": (("WCAG2.1:4.1.2",), _SERIOUS),
    "aria-hidden-focus": (("WCAG2.1:2.1.1", "WCAG2.1:4.1.2"), _SERIOUS),
    "aria-required-attr": (("WCAG2.1:4.1.2",), _SERIOUS),
    "aria-required-children": (("WCAG2.1:4.1.2",), _SERIOUS),
    "aria-required-parent": (("WCAG2.1:4.1.2",), _SERIOUS),
    "aria-roles": (("WCAG2.1:4.1.2",), _SERIOUS),
    "aria-valid-attr-value": (("WCAG2.1:4.1.2",), _SERIOUS),
    "aria-valid-attr": (("WCAG2.1:4.1.2",), _SERIOUS),
    "button-name": (("WCAG2.1:4.1.2",), _CRITICAL),
    "color-contrast": (("WCAG2.1:1.4.3", "WCAG2.1:1.4.6"), _SERIOUS),
    "document-title": (("WCAG2.1:2.4.2",), _MODERATE),
    "html-has-lang": (("WCAG2.1:3.1.1",), _SERIOUS),
    "image-alt": (("WCAG2.1:1.1.1",), _CRITICAL),
    "input-button-name": (("WCAG2.1:4.1.2",), _CRITICAL),
    "label": (("WCAG2.1:1.3.1", "WCAG2.1:3.3.2", "WCAG2.1:4.1.2"), _SERIOUS),
    "link-name": (("WCAG2.1:2.4.4", "WCAG2.1:4.1.2"), _SERIOUS),
    "list": (("WCAG2.1:1.3.1",), _MODERATE),
    "listitem": (("WCAG2.1:1.3.1",), _MODERATE),
    "meta-refresh": (("WCAG2.1:2.2.1", "WCAG2.1:2.2.4"), _SERIOUS),
    "object-alt": (("WCAG2.1:1.1.1",), _SERIOUS),
    "role-img-alt": (("WCAG2.1:1.1.1",), _SERIOUS),
    "tabindex": (("WCAG2.1:2.1.1",), _SERIOUS),
    "table-fake-caption": (("WCAG2.1:1.3.1",), _MODERATE),
    "td-headers-attr": (("WCAG2.1:1.3.1",), _MODERATE),
    "th-has-data-cells": (("WCAG2.1:1.3.1",), _MODERATE),
    "valid-lang": (("WCAG2.1:3.1.2",), _MODERATE),
    "video-caption": (("WCAG2.1:1.2.2",), _SERIOUS),
})

# Lighthouse audit ids (accessibility category members)
LIGHTHOUSE_MAPPINGS = _table({
    "accessibility": (
        ("WCAG2.1:1.1.1", "WCAG2.1:1.3.1", "WCAG2.1:1.4.3",
         "WCAG2.1:2.1.1", "WCAG2.1:2.4.2", "WCAG2.1:4.1.2"),
        _SERIOUS,
    ),
    "aria-allowed-attr": (("WCAG2.1:4.1.2",), _SERIOUS),
    "aria-hidden-body": (("WCAG2.1:4.1.2",), _SERIOUS),
    "aria-hidden-focus": (("WCAG2.1:2.1.1", "WCAG2.1:4.1.2"), _SERIOUS),
    "aria-input-field-name": (("WCAG2.1:4.1.2",), _SERIOUS),
    "aria-required-attr": (("WCAG2.1:4.1.2",), _SERIOUS),
    "aria-roles": (("WCAG2.1:4.1.2",), _SERIOUS),
    "aria-valid-attr-value": (("WCAG2.1:4.1.2",), _SERIOUS),
    "aria-valid-attr": (("WCAG2.1:4.1.2",), _SERIOUS),
    "button-name": (("WCAG2.1:4.1.2",), _CRITICAL),
    "color-contrast": (("WCAG2.1:1.4.3", "WCAG2.1:1.4.6"), _SERIOUS),
    "document-title": (("WCAG2.1:2.4.2",), _MODERATE),
    "html-has-lang": (("WCAG2.1:3.1.1",), _SERIOUS),
    "html-lang-valid": (("WCAG2.1:3.1.1",), _SERIOUS),
    "image-alt": (("WCAG2.1:1.1.1",), _CRITICAL),
    "input-image-alt": (("WCAG2.1:1.1.1",), _CRITICAL),
    "label": (("WCAG2.1:1.3.1", "WCAG2.1:3.3.2", "WCAG2.1:4.1.2"), _SERIOUS),
    "link-name": (("WCAG2.1:2.4.4", "WCAG2.1:4.1.2"), _SERIOUS),
    "list": (("WCAG2.1:1.3.1",), _MODERATE),
    "listitem": (("WCAG2.1:1.3.1",), _MODERATE),
    "meta-refresh": (("WCAG2.1:2.2.1", "WCAG2.1:2.2.4"), _SERIOUS),
    "object-alt": (("WCAG2.1:1.1.1",), _SERIOUS),
    "tabindex": (("WCAG2.1:2.1.1",), _SERIOUS),
    "td-headers-attr": (("WCAG2.1:1.3.1",), _MODERATE),
    "th-has-data-cells": (("WCAG2.1:1.3.1",), _MODERATE),
    "valid-lang": (("WCAG2.1:3.1.2",), _MODERATE),
    "video-caption": (("WCAG2.1:1.2.2",), _SERIOUS),
    "video-description": (("WCAG2.1:1.2.3",), _MODERATE),
})

# WAVE item ids
WAVE_MAPPINGS = _table({
    "error_alt_missing": (("WCAG2.1:1.1.1",), _CRITICAL),
    "error_alt_link": (("WCAG2.1:1.1.1",), _SERIOUS),
    "error_alt_spacer": (("WCAG2.1:1.1.1",), _MODERATE),
    "error_button_empty": (("WCAG2.1:4.1.2",), _CRITICAL),
    "error_heading_empty": (("WCAG2.1:1.3.1",), _SERIOUS),
    "error_label_empty": (("WCAG2.1:1.3.1", "WCAG2.1:3.3.2"), _SERIOUS),
    "error_link_empty": (("WCAG2.1:2.4.4", "WCAG2.1:4.1.2"), _SERIOUS),
    "error_missing_form_label": (("WCAG2.1:1.3.1", "WCAG2.1:3.3.2"), _SERIOUS),
    "contrast": (("WCAG2.1:1.4.3", "WCAG2.1:1.4.6"), _SERIOUS),
})

_TABLES: Mapping[AuditTool, Mapping[str, GuidelineMapping]] = MappingProxyType({
    AuditTool.AXE: AXE_MAPPINGS,
    AuditTool.LIGHTHOUSE: LIGHTHOUSE_MAPPINGS,
    AuditTool.WAVE: WAVE_MAPPINGS,
})


def lookup(rule_id: str, tool: AuditTool | str) -> GuidelineMapping | None:
    """Return the engine-specific mapping for ``rule_id``, or None."""
    try:
        table = _TABLES[AuditTool(tool)]
    except ValueError:
        return None
    return table.get(rule_id)


def default_mapping(rule_id: str) -> GuidelineMapping:
    return GuidelineMapping(rule_id, DEFAULT_GUIDELINE_REFS, DEFAULT_SEVERITY)


def resolve(rule_id: str, tool: AuditTool | str) -> GuidelineMapping:
    return lookup(rule_id, tool) or default_mapping(rule_id)


def map_impact_to_severity(impact) -> Severity:
    """Map an axe impact level onto Severity; null or unrecognized → moderate."""
    try:
        return Severity(impact)
    except ValueError:
        return Severity.MODERATE


def confidence_from_impact(impact) -> Confidence:
    if impact in (Severity.CRITICAL, Severity.SERIOUS):
        return Confidence.HIGH
    if impact == Severity.MODERATE:
        return Confidence.MEDIUM
    return Confidence.LOW
