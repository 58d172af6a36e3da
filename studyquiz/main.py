"""StudyQuiz — FastAPI application entry point."""

from __future__ import annotations

import asyncio
import logging
import os
import uuid
from contextlib import asynccontextmanager
from datetime import date, datetime
from pathlib import Path

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from studyquiz.backends.base import GenerativeModel
from studyquiz.backends.gemini import GeminiClient
from studyquiz.config import Settings, settings
from studyquiz.db.storage import MemStorage
from studyquiz.errors import InvalidRequestError, StudyQuizError, UploadTooLargeError
from studyquiz.extractors.base import ContentExtractor
from studyquiz.extractors.files import PdfExtractor, TextFileExtractor, validate_file_type
from studyquiz.extractors.youtube import YouTubeExtractor
from studyquiz.models.question import Question
from studyquiz.models.source import Source, SourceType
from studyquiz.orchestrator.generator import QuestionGenerator
from studyquiz.orchestrator.pipeline import IngestPipeline

logger = logging.getLogger(__name__)

UPLOAD_CHUNK_SIZE = 1024 * 1024


# --- Request / Response models ---


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SourceResponse(_CamelModel):
    id: str
    name: str
    type: SourceType
    content: str
    created_at: datetime

    @classmethod
    def from_source(cls, source: Source) -> SourceResponse:
        return cls(
            id=source.id,
            name=source.name,
            type=source.type,
            content=source.content,
            created_at=source.created_at,
        )


class QuestionResponse(_CamelModel):
    id: str
    source_id: str
    text: str
    options: dict[str, str]
    correct_answer: str
    liked: bool
    created_at: datetime

    @classmethod
    def from_question(cls, question: Question) -> QuestionResponse:
        return cls(
            id=question.id,
            source_id=question.source_id,
            text=question.text,
            options=question.options,
            correct_answer=question.correct_answer,
            liked=question.liked,
            created_at=question.created_at,
        )


class UploadResponse(_CamelModel):
    source: SourceResponse
    questions_generated: int


class YouTubeUploadRequest(BaseModel):
    url: str | None = None
    name: str | None = None


# --- Dependencies ---


def get_storage(request: Request) -> MemStorage:
    return request.app.state.storage


def get_pipeline(request: Request) -> IngestPipeline:
    return request.app.state.pipeline


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_extractor(kind: SourceType):
    def _dependency(request: Request) -> ContentExtractor:
        return request.app.state.extractors[kind]

    return _dependency


# --- Upload helpers ---


async def _spool_upload(upload: UploadFile, cfg: Settings) -> Path:
    """Copy an upload into the upload directory, enforcing the size limit."""
    upload_dir = Path(cfg.upload_dir)
    await asyncio.to_thread(upload_dir.mkdir, parents=True, exist_ok=True)
    path = upload_dir / uuid.uuid4().hex

    written = 0
    out = await asyncio.to_thread(path.open, "wb")
    try:
        while chunk := await upload.read(UPLOAD_CHUNK_SIZE):
            written += len(chunk)
            if written > cfg.max_upload_bytes:
                raise UploadTooLargeError(
                    f"File exceeds the {cfg.max_upload_bytes // (1024 * 1024)}MB upload limit"
                )
            await asyncio.to_thread(out.write, chunk)
    except BaseException:
        await asyncio.to_thread(out.close)
        await asyncio.to_thread(path.unlink, missing_ok=True)
        raise
    await asyncio.to_thread(out.close)
    return path


async def _run_ingest(
    pipeline: IngestPipeline,
    name: str,
    extractor: ContentExtractor,
    target: str,
    failure_message: str,
) -> UploadResponse:
    try:
        source, questions = await pipeline.ingest(name, extractor, target)
    except StudyQuizError as exc:
        logger.warning("%s upload %r failed: %s", extractor.source_type.value, name, exc.message)
        raise
    except Exception as exc:
        logger.exception("%s upload %r failed", extractor.source_type.value, name)
        raise StudyQuizError(failure_message) from exc

    return UploadResponse(
        source=SourceResponse.from_source(source),
        questions_generated=len(questions),
    )


async def _upload_file(
    file: UploadFile | None,
    kind_label: str,
    allowed_extensions: list[str],
    extractor: ContentExtractor,
    pipeline: IngestPipeline,
    cfg: Settings,
) -> UploadResponse:
    if file is None or not file.filename:
        raise InvalidRequestError(f"No {kind_label} file provided")
    if not validate_file_type(file.filename, allowed_extensions):
        raise InvalidRequestError(f"Only {kind_label} files are allowed")

    path = await _spool_upload(file, cfg)
    try:
        return await _run_ingest(
            pipeline, file.filename, extractor, str(path), f"Failed to process {kind_label} file"
        )
    finally:
        try:
            await asyncio.to_thread(os.remove, path)
        except OSError:
            logger.warning("Could not remove spooled upload %s", path)


def default_youtube_name(today: date | None = None) -> str:
    today = today or date.today()
    return f"YouTube Video - {today.month}/{today.day}/{today.year}"


# --- Application ---


def create_app(
    settings_: Settings | None = None,
    storage: MemStorage | None = None,
    model: GenerativeModel | None = None,
    generator: QuestionGenerator | None = None,
) -> FastAPI:
    """Build the app with its own storage handle and model client."""
    cfg = settings_ or settings
    storage = storage or MemStorage()
    model = model or GeminiClient(
        api_key=cfg.gemini_api_key,
        model=cfg.question_model,
        base_url=cfg.gemini_base_url,
        timeout=cfg.request_timeout,
    )
    generator = generator or QuestionGenerator(
        model, count=cfg.questions_per_upload, model_name=cfg.question_model
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        Path(cfg.upload_dir).mkdir(parents=True, exist_ok=True)
        logger.info("StudyQuiz ready (uploads in %s)", cfg.upload_dir)
        yield

    app = FastAPI(
        title="StudyQuiz",
        description="Multiple-choice questions generated from study material",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.storage = storage
    app.state.pipeline = IngestPipeline(storage, generator)
    app.state.extractors = {
        SourceType.TEXT: TextFileExtractor(),
        SourceType.PDF: PdfExtractor(),
        SourceType.YOUTUBE: YouTubeExtractor(model, cfg.transcript_model),
    }

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)
    _register_routes(app)
    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StudyQuizError)
    async def studyquiz_error_handler(request: Request, exc: StudyQuizError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        detail = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return JSONResponse(status_code=400, content={"error": detail})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def _register_routes(app: FastAPI) -> None:
    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/api/sources", response_model=list[SourceResponse])
    async def list_sources(storage: MemStorage = Depends(get_storage)):
        return [SourceResponse.from_source(s) for s in await storage.get_all_sources()]

    @app.get("/api/sources/{source_id}/questions", response_model=list[QuestionResponse])
    async def list_source_questions(source_id: str, storage: MemStorage = Depends(get_storage)):
        questions = await storage.get_questions_by_source_id(source_id)
        return [QuestionResponse.from_question(q) for q in questions]

    @app.get("/api/questions", response_model=list[QuestionResponse])
    async def list_questions(storage: MemStorage = Depends(get_storage)):
        return [QuestionResponse.from_question(q) for q in await storage.get_all_questions()]

    @app.get("/api/questions/liked", response_model=list[QuestionResponse])
    async def list_liked_questions(storage: MemStorage = Depends(get_storage)):
        return [QuestionResponse.from_question(q) for q in await storage.get_liked_questions()]

    @app.patch("/api/questions/{question_id}/like", response_model=QuestionResponse)
    async def toggle_like(question_id: str, storage: MemStorage = Depends(get_storage)):
        question = await storage.toggle_question_like(question_id)
        return QuestionResponse.from_question(question)

    @app.post("/api/upload/pdf", response_model=UploadResponse)
    async def upload_pdf(
        file: UploadFile | None = File(None),
        extractor: ContentExtractor = Depends(get_extractor(SourceType.PDF)),
        pipeline: IngestPipeline = Depends(get_pipeline),
        cfg: Settings = Depends(get_settings),
    ):
        """Upload a PDF and generate questions from it."""
        return await _upload_file(file, "PDF", [".pdf"], extractor, pipeline, cfg)

    @app.post("/api/upload/text", response_model=UploadResponse)
    async def upload_text(
        file: UploadFile | None = File(None),
        extractor: ContentExtractor = Depends(get_extractor(SourceType.TEXT)),
        pipeline: IngestPipeline = Depends(get_pipeline),
        cfg: Settings = Depends(get_settings),
    ):
        """Upload a .txt file and generate questions from it."""
        return await _upload_file(file, "text", [".txt"], extractor, pipeline, cfg)

    @app.post("/api/upload/youtube", response_model=UploadResponse)
    async def upload_youtube(
        req: YouTubeUploadRequest,
        extractor: ContentExtractor = Depends(get_extractor(SourceType.YOUTUBE)),
        pipeline: IngestPipeline = Depends(get_pipeline),
    ):
        """Generate questions for a YouTube link.

        ``name`` falls back to a date-stamped label.
        """
        if not req.url:
            raise InvalidRequestError("YouTube URL is required")
        name = req.name or default_youtube_name()
        return await _run_ingest(
            pipeline, name, extractor, req.url, "Failed to process YouTube content"
        )


app = create_app()


def run() -> None:
    """Console entry point: serve the default app with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.host, port=settings.port)
