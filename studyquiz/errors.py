"""Error taxonomy shared by the pipeline and the HTTP layer."""

from __future__ import annotations


class StudyQuizError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRequestError(StudyQuizError):
    """The client sent something we cannot work with."""

    status_code = 400


class InvalidYouTubeURLError(InvalidRequestError):
    def __init__(self, message: str = "Invalid YouTube URL format") -> None:
        super().__init__(message)


class UploadTooLargeError(StudyQuizError):
    status_code = 413


class ExtractionError(StudyQuizError):
    """Turning an upload into plain text failed."""


class GenerationError(StudyQuizError):
    """The model call failed or returned something unusable."""


class QuestionNotFoundError(StudyQuizError):
    # The HTTP surface reports unknown questions as a server error.
    status_code = 500

    def __init__(self, question_id: str) -> None:
        super().__init__("Question not found")
        self.question_id = question_id
