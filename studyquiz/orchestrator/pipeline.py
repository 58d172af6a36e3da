"""Upload pipeline — extract, generate, then persist."""

from __future__ import annotations

import logging

from studyquiz.db.storage import MemStorage
from studyquiz.extractors.base import ContentExtractor
from studyquiz.models.question import Question
from studyquiz.models.source import Source
from studyquiz.orchestrator.generator import QuestionGenerator

logger = logging.getLogger(__name__)


class IngestPipeline:
    """Runs one upload from raw target to stored Source and Questions."""

    def __init__(self, storage: MemStorage, generator: QuestionGenerator) -> None:
        self.storage = storage
        self.generator = generator

    async def ingest(
        self, name: str, extractor: ContentExtractor, target: str
    ) -> tuple[Source, list[Question]]:
        """Extract text from ``target``, generate questions and store both.

        Nothing is stored when extraction or generation fails. Questions are
        written one at a time after the Source, so a storage failure part way
        through can leave a Source with only some of its Questions.
        """
        source_type = extractor.source_type
        logger.info("Extracting %s content for %r", source_type.value, name)
        content = await extractor.extract(target)

        generated = await self.generator.generate_questions(content, name)

        source = await self.storage.create_source(name=name, type=source_type, content=content)
        questions: list[Question] = []
        for item in generated:
            questions.append(
                await self.storage.create_question(
                    source_id=source.id,
                    text=item.text,
                    options=item.options,
                    correct_answer=item.correct_answer,
                )
            )

        logger.info("Stored source %s with %d questions", source.id, len(questions))
        return source, questions
