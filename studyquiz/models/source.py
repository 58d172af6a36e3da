"""Source data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4


class SourceType(Enum):
    PDF = "pdf"
    TEXT = "text"
    YOUTUBE = "youtube"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


@dataclass
class Source:
    """A unit of uploaded study material and the text extracted from it."""

    name: str
    type: SourceType
    content: str
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)
