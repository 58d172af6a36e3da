"""Shared fixtures: fake model, fresh storage, and an app per test."""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from studyquiz.config import Settings
from studyquiz.db.storage import MemStorage
from studyquiz.main import create_app


def make_questions_json(count: int) -> str:
    return json.dumps({
        "questions": [
            {
                "text": f"Question {i}?",
                "options": {"a": "one", "b": "two", "c": "three", "d": "four"},
                "correctAnswer": "b",
            }
            for i in range(1, count + 1)
        ]
    })


class FakeModel:
    """Stands in for GeminiClient; replies are consumed in order."""

    def __init__(self, replies: list | None = None) -> None:
        self.replies = list(replies or [])
        self.calls: list[dict] = []

    async def generate(self, prompt, *, system=None, schema=None, model=None):
        self.calls.append({"prompt": prompt, "system": system, "schema": schema, "model": model})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def storage() -> MemStorage:
    return MemStorage()


@pytest.fixture
def fake_model() -> FakeModel:
    return FakeModel()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        gemini_api_key="test-key",
        upload_dir=str(tmp_path / "uploads"),
        max_upload_bytes=1024,
    )


@pytest.fixture
def client(test_settings, storage, fake_model) -> TestClient:
    app = create_app(settings_=test_settings, storage=storage, model=fake_model)
    return TestClient(app)
