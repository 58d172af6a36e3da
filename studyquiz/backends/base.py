"""Base protocol for generative model clients."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class GenerativeModel(Protocol):
    """Interface the extractors and the question generator rely on."""

    async def generate(
        self,
        prompt: str,
        *,
        system: str | None = None,
        schema: dict[str, Any] | None = None,
        model: str | None = None,
    ) -> str:
        """Send a prompt (plus optional system instruction and JSON schema), return text."""
        ...
