"""StudyQuiz configuration — loaded from environment variables."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {
        "env_prefix": "STUDYQUIZ_",
        "env_file": ".env",
        "extra": "ignore",
        "populate_by_name": True,
    }

    # Gemini
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("STUDYQUIZ_GEMINI_API_KEY", "GEMINI_API_KEY"),
    )
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    question_model: str = "gemini-2.5-pro"
    transcript_model: str = "gemini-2.5-flash"
    request_timeout: float = 120.0

    # Generation
    questions_per_upload: int = 10

    # Uploads
    upload_dir: str = "uploads"
    max_upload_bytes: int = 10 * 1024 * 1024

    # Server
    cors_origins: list[str] = ["http://localhost:5173"]
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"


settings = Settings()
