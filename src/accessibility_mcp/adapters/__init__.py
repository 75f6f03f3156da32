"""Adapter registry: maps engine name → lazy-import class path."""

AVAILABLE_ADAPTERS: dict[str, str] = {
    "axe": "accessibility_mcp.adapters.axe.AxeAdapter",
    "lighthouse": "accessibility_mcp.adapters.lighthouse.LighthouseAdapter",
    "wave": "accessibility_mcp.adapters.wave.WaveAdapter",
}


def import_adapter(dotted_path: str):
    """Import an adapter class from its dotted module path."""
    import importlib

    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
