"""Abstract base class for engine adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel

from accessibility_mcp.models.enums import AuditTool


class EngineAdapter(ABC):
    """Runs one accessibility engine and returns its native report dict."""

    tool: AuditTool

    @abstractmethod
    async def audit(self, url: str, options: BaseModel) -> dict:
        """Audit a reachable URL.

        Args:
            url: Resolved http(s) or file URL.
            options: The engine's validated options model.

        Returns:
            The engine's native report as a plain dict.
        """
        ...

    async def close(self) -> None:
        """Release long-lived engine resources. Safe to call repeatedly."""
        return None
