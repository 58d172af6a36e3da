"""Base protocol for content extractors."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from studyquiz.models.source import SourceType


@runtime_checkable
class ContentExtractor(Protocol):
    """Turns an upload target (a file path or a URL) into plain text."""

    source_type: SourceType

    async def extract(self, target: str) -> str:
        ...
