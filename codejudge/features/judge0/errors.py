from __future__ import annotations

from typing import Iterable, Optional


class Judge0Error(Exception):
    """Base class for every failure surfaced by the Judge0 client."""


class UnsupportedLanguage(Judge0Error):
    def __init__(self, language: str) -> None:
        self.language = language
        super().__init__(f"Unsupported language: {language}")


class SubmitFailed(Judge0Error):
    """Transport error or remote rejection of a submission.

    ``detail`` carries the remote error body verbatim when the service sent one,
    otherwise the transport error message.
    """

    def __init__(self, message: str, detail: Optional[str] = None, status_code: Optional[int] = None) -> None:
        self.detail = detail
        self.status_code = status_code
        text = message if detail is None else f"{message}: {detail}"
        super().__init__(text)


class PollTimeout(Judge0Error):
    def __init__(self, token: str, attempts: int) -> None:
        self.token = token
        self.attempts = attempts
        super().__init__(f"Judge0 polling timed out after {attempts} attempts for token: {token}")


class BatchTimeout(Judge0Error):
    def __init__(self, pending: Iterable[int], total: int) -> None:
        self.pending = sorted(pending)
        self.total = total
        super().__init__(f"Batch polling timed out: {len(self.pending)}/{total} unfinished")


class ParseError(Judge0Error):
    """A Judge0 response body was missing required fields or had the wrong shape."""
