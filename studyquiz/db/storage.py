"""In-memory storage for sources and questions.

Nothing here survives a restart. One ``MemStorage`` is built per application
and handed to the route handlers, so tests get a fresh store per app.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Iterable, TypeVar

from studyquiz.errors import QuestionNotFoundError
from studyquiz.models.question import Question
from studyquiz.models.source import Source, SourceType

T = TypeVar("T", Source, Question)


def _newest_first(items: Iterable[T]) -> list[T]:
    # Walk newest insertions first so equal timestamps keep that order.
    return sorted(reversed(list(items)), key=lambda item: item.created_at, reverse=True)


def _copy_question(question: Question) -> Question:
    return replace(question, options=dict(question.options))


class MemStorage:
    """Async key-value store of Sources and Questions keyed by UUID strings."""

    def __init__(self) -> None:
        self._sources: dict[str, Source] = {}
        self._questions: dict[str, Question] = {}
        self._lock = asyncio.Lock()

    # -- Sources --

    async def create_source(self, name: str, type: SourceType, content: str) -> Source:
        source = Source(name=name, type=type, content=content)
        self._sources[source.id] = source
        return replace(source)

    async def get_all_sources(self) -> list[Source]:
        return [replace(s) for s in _newest_first(self._sources.values())]

    async def get_source_by_id(self, source_id: str) -> Source | None:
        source = self._sources.get(source_id)
        return replace(source) if source else None

    # -- Questions --

    async def create_question(
        self,
        source_id: str,
        text: str,
        options: dict[str, str],
        correct_answer: str,
    ) -> Question:
        question = Question(
            source_id=source_id,
            text=text,
            options=dict(options),
            correct_answer=correct_answer,
        )
        self._questions[question.id] = question
        return _copy_question(question)

    async def get_all_questions(self) -> list[Question]:
        return [_copy_question(q) for q in _newest_first(self._questions.values())]

    async def get_liked_questions(self) -> list[Question]:
        liked = (q for q in self._questions.values() if q.liked)
        return [_copy_question(q) for q in _newest_first(liked)]

    async def get_questions_by_source_id(self, source_id: str) -> list[Question]:
        owned = (q for q in self._questions.values() if q.source_id == source_id)
        return [_copy_question(q) for q in _newest_first(owned)]

    async def get_question_by_id(self, question_id: str) -> Question | None:
        question = self._questions.get(question_id)
        return _copy_question(question) if question else None

    async def toggle_question_like(self, question_id: str) -> Question:
        """Flip ``liked`` on a question and return the updated record.

        Raises QuestionNotFoundError for an unknown id.
        """
        async with self._lock:
            question = self._questions.get(question_id)
            if question is None:
                raise QuestionNotFoundError(question_id)
            updated = replace(question, liked=not question.liked)
            self._questions[question_id] = updated
        return _copy_question(updated)
