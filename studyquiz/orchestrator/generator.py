"""Question generator — turns extracted text into multiple-choice questions."""

from __future__ import annotations

import json
import logging

from studyquiz.backends.base import GenerativeModel
from studyquiz.config import settings
from studyquiz.errors import GenerationError, StudyQuizError
from studyquiz.models.question import OPTION_KEYS, GeneratedQuestion

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are an educational AI that generates high-quality multiple choice questions \
from study materials.
Generate engaging, challenging questions that test comprehension and critical \
thinking. Always provide exactly 4 options (A, B, C, D) and indicate the correct answer.
Respond with JSON in this format:
{"questions": [{"text": "Question text here?", "options": {"a": "Option A text", \
"b": "Option B text", "c": "Option C text", "d": "Option D text"}, "correctAnswer": "a"}]}\
"""

QUESTIONS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "questions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "text": {"type": "STRING"},
                    "options": {
                        "type": "OBJECT",
                        "properties": {key: {"type": "STRING"} for key in OPTION_KEYS},
                        "required": list(OPTION_KEYS),
                    },
                    "correctAnswer": {"type": "STRING"},
                },
                "required": ["text", "options", "correctAnswer"],
            },
        },
    },
    "required": ["questions"],
}


class QuestionGenerator:
    """Asks a generative model for a batch of questions and validates the reply.

    A reply is accepted only if every question has the four option keys and a
    ``correctAnswer`` naming one of them; otherwise the whole batch is rejected.
    """

    def __init__(
        self,
        model: GenerativeModel,
        count: int | None = None,
        model_name: str | None = None,
    ) -> None:
        self.model = model
        self.count = count or settings.questions_per_upload
        self.model_name = model_name or settings.question_model

    async def generate_questions(self, content: str, source_name: str) -> list[GeneratedQuestion]:
        prompt = (
            f"Generate {self.count} multiple choice questions from this content "
            f'from "{source_name}":\n\n{content}'
        )
        try:
            raw_text = await self.model.generate(
                prompt,
                system=SYSTEM_PROMPT,
                schema=QUESTIONS_SCHEMA,
                model=self.model_name,
            )
        except StudyQuizError:
            raise
        except Exception as exc:
            logger.error("Question generation call failed: %s", exc)
            raise GenerationError("Failed to generate questions from content") from exc

        logger.debug("Raw question JSON for %r: %s", source_name, raw_text)
        if not raw_text or not raw_text.strip():
            raise GenerationError("Empty response from model")

        questions = self._parse_response(raw_text)
        logger.info("Generated %d questions for %r", len(questions), source_name)
        return questions

    def _parse_response(self, raw_text: str) -> list[GeneratedQuestion]:
        text = raw_text.strip()
        if text.startswith("```"):
            text = text.split("\n", 1)[1] if "\n" in text else ""
            text = text.rsplit("```", 1)[0]

        try:
            parsed = json.loads(text)
            items = parsed["questions"]
            if not isinstance(items, list):
                raise TypeError("questions is not a list")
            return [self._parse_item(item) for item in items]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Rejecting malformed question output: %s", exc)
            raise GenerationError("Failed to generate questions from content") from exc

    def _parse_item(self, item: dict) -> GeneratedQuestion:
        text = item["text"]
        if not isinstance(text, str) or not text.strip():
            raise ValueError("question text is empty")

        raw_options = item["options"]
        options = {key: raw_options[key] for key in OPTION_KEYS}
        if not all(isinstance(value, str) for value in options.values()):
            raise ValueError(f"non-string option in {text!r}")

        correct = str(item["correctAnswer"]).strip().lower()
        if correct not in OPTION_KEYS:
            raise ValueError(f"correctAnswer {item['correctAnswer']!r} is not an option key")

        return GeneratedQuestion(text=text, options=options, correct_answer=correct)
