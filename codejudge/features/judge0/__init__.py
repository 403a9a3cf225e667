"""Judge0 judging client: language registry, codec, submitter, poller and batch runner."""

from .errors import (
    BatchTimeout,
    Judge0Error,
    ParseError,
    PollTimeout,
    SubmitFailed,
    UnsupportedLanguage,
)
from .schemas import JudgementResult, SubmissionRequest, TestCaseInput
from .service import Judge0Client
from .statuses import JudgementStatus

__all__ = [
    "BatchTimeout",
    "Judge0Client",
    "Judge0Error",
    "JudgementResult",
    "JudgementStatus",
    "ParseError",
    "PollTimeout",
    "SubmissionRequest",
    "SubmitFailed",
    "TestCaseInput",
    "UnsupportedLanguage",
]
