"""MemStorage behaviour."""

import pytest

from studyquiz.db.storage import MemStorage
from studyquiz.errors import QuestionNotFoundError
from studyquiz.models.source import SourceType

OPTIONS = {"a": "1", "b": "2", "c": "3", "d": "4"}


async def test_create_source_round_trip(storage: MemStorage):
    source = await storage.create_source(name="notes.txt", type=SourceType.TEXT, content="body")

    fetched = await storage.get_source_by_id(source.id)
    assert fetched == source
    assert fetched.name == "notes.txt"
    assert fetched.type is SourceType.TEXT
    assert fetched.content == "body"
    assert fetched.created_at is not None


async def test_get_source_by_unknown_id_returns_none(storage: MemStorage):
    assert await storage.get_source_by_id("missing") is None


async def test_source_ids_are_unique(storage: MemStorage):
    ids = {
        (await storage.create_source(name=str(i), type=SourceType.TEXT, content="")).id
        for i in range(50)
    }
    assert len(ids) == 50


async def test_sources_are_newest_first(storage: MemStorage):
    created = [
        await storage.create_source(name=f"s{i}", type=SourceType.PDF, content="")
        for i in range(5)
    ]

    listed = await storage.get_all_sources()
    assert [s.id for s in listed] == [s.id for s in reversed(created)]


async def test_create_question_defaults(storage: MemStorage):
    question = await storage.create_question(
        source_id="src", text="Why?", options=OPTIONS, correct_answer="c"
    )
    assert question.liked is False
    assert question.source_id == "src"
    assert question.options == OPTIONS
    assert await storage.get_question_by_id(question.id) == question


async def test_questions_filtered_by_source_newest_first(storage: MemStorage):
    first = await storage.create_question(source_id="x", text="1", options=OPTIONS, correct_answer="a")
    await storage.create_question(source_id="y", text="2", options=OPTIONS, correct_answer="a")
    third = await storage.create_question(source_id="x", text="3", options=OPTIONS, correct_answer="a")

    owned = await storage.get_questions_by_source_id("x")
    assert [q.id for q in owned] == [third.id, first.id]
    assert len(await storage.get_all_questions()) == 3
    assert await storage.get_questions_by_source_id("nope") == []


async def test_toggle_like_is_an_involution(storage: MemStorage):
    question = await storage.create_question(source_id="s", text="q", options=OPTIONS, correct_answer="a")

    liked = await storage.toggle_question_like(question.id)
    assert liked.liked is True
    unliked = await storage.toggle_question_like(question.id)
    assert unliked.liked is False
    assert (await storage.get_question_by_id(question.id)).liked is False


async def test_toggle_does_not_mutate_returned_records(storage: MemStorage):
    question = await storage.create_question(source_id="s", text="q", options=OPTIONS, correct_answer="a")
    await storage.toggle_question_like(question.id)
    assert question.liked is False


async def test_editing_returned_options_leaves_store_untouched(storage: MemStorage):
    question = await storage.create_question(source_id="s", text="q", options=OPTIONS, correct_answer="a")
    question.options["a"] = "changed"

    fetched = await storage.get_question_by_id(question.id)
    assert fetched.options == OPTIONS

    fetched.options["b"] = "changed"
    (listed,) = await storage.get_all_questions()
    listed.options["c"] = "changed"
    toggled = await storage.toggle_question_like(question.id)
    toggled.options["d"] = "changed"

    assert (await storage.get_question_by_id(question.id)).options == OPTIONS


async def test_toggle_unknown_question_raises(storage: MemStorage):
    with pytest.raises(QuestionNotFoundError):
        await storage.toggle_question_like("does-not-exist")


async def test_liked_questions(storage: MemStorage):
    assert await storage.get_liked_questions() == []

    questions = [
        await storage.create_question(source_id="s", text=str(i), options=OPTIONS, correct_answer="a")
        for i in range(4)
    ]
    await storage.toggle_question_like(questions[0].id)
    await storage.toggle_question_like(questions[2].id)

    liked = await storage.get_liked_questions()
    assert [q.id for q in liked] == [questions[2].id, questions[0].id]
    assert all(q.liked for q in liked)
