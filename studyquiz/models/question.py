"""Question data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from studyquiz.models.source import _new_id, _now

OPTION_KEYS = ("a", "b", "c", "d")


@dataclass
class GeneratedQuestion:
    """A question as produced by the generator, before it is stored."""

    text: str
    options: dict[str, str]
    correct_answer: str


@dataclass
class Question:
    """A multiple-choice question tied to a Source by ``source_id``."""

    source_id: str
    text: str
    options: dict[str, str]
    correct_answer: str
    liked: bool = False
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)
