from accessibility_mcp.normalization.normalizer import Normalizer, lighthouse_outcome
from accessibility_mcp.normalization.selectors import (
    build_selector_path,
    extract_context,
    normalise_selector,
)

__all__ = [
    "Normalizer",
    "build_selector_path",
    "extract_context",
    "lighthouse_outcome",
    "normalise_selector",
]
