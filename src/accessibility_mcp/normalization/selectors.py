"""Selector and DOM-context formatting helpers."""

SELECTOR_SEPARATOR = " > "
TRUNCATION_MARKER = "..."
DEFAULT_CONTEXT_LENGTH = 200


def build_selector_path(parts) -> str:
    return SELECTOR_SEPARATOR.join(str(part) for part in parts)


def normalise_selector(target) -> str:
    """Turn an engine target into one selector string.

    A list or tuple is a frame-nesting chain (outermost first) and is joined
    with `` > ``. Anything that is neither a string nor a sequence yields "".
    """
    if isinstance(target, str):
        return target
    if isinstance(target, (list, tuple)):
        return build_selector_path(target)
    return ""


def extract_context(html, max_length: int = DEFAULT_CONTEXT_LENGTH) -> str:
    """Trim an HTML snippet and cap it at ``max_length`` characters plus a marker."""
    if not html or not isinstance(html, str):
        return ""
    trimmed = html.strip()
    if len(trimmed) <= max_length:
        return trimmed
    return trimmed[:max_length] + TRUNCATION_MARKER
