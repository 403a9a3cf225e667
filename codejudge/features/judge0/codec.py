"""Translation between client objects and the base64 Judge0 wire format."""

from __future__ import annotations

import base64
import binascii
from typing import Any, Dict, Optional

from pydantic import ValidationError

from codejudge.core.config import Settings
from .errors import ParseError
from .schemas import (
    Judge0RawResult,
    Judge0SubmissionPayload,
    JudgementResult,
    SubmissionRequest,
    TestCaseInput,
)

# Judge0 refuses memory_limit above this many KB
MEMORY_LIMIT_CAP_KB = 512_000


def cpu_time_limit_seconds(max_execution_time_ms: int) -> float:
    return max_execution_time_ms / 1000


def memory_limit_kb(max_memory_mb: int) -> int:
    # mb * 1000 (not 1024) keeps 512 MB exactly at the cap
    return min(max_memory_mb * 1000, MEMORY_LIMIT_CAP_KB)


def encode_text(value: Optional[str]) -> str:
    return base64.b64encode((value or "").encode("utf-8")).decode("ascii")


def decode_text(value: Optional[str]) -> str:
    if not value:
        return ""
    # Judge0 wraps long base64 output across lines
    compact = "".join(value.split())
    try:
        return base64.b64decode(compact, validate=True).decode("utf-8", errors="replace")
    except (binascii.Error, ValueError) as exc:
        raise ParseError(f"Invalid base64 field from Judge0: {exc}") from exc


def build_request(
    source_code: str,
    language_id: int,
    test_case: TestCaseInput,
    settings: Settings,
) -> SubmissionRequest:
    return SubmissionRequest(
        source_code=source_code,
        language_id=language_id,
        stdin=test_case.input,
        expected_output=test_case.expected_output,
        cpu_time_limit=cpu_time_limit_seconds(settings.max_execution_time_ms),
        memory_limit=memory_limit_kb(settings.max_memory_limit_mb),
    )


def encode_submission(request: SubmissionRequest) -> Dict[str, Any]:
    payload = Judge0SubmissionPayload(
        source_code=encode_text(request.source_code),
        language_id=request.language_id,
        stdin=encode_text(request.stdin),
        expected_output=encode_text(request.expected_output),
        cpu_time_limit=request.cpu_time_limit,
        memory_limit=request.memory_limit,
    )
    return payload.model_dump()


def _parse_time(value: Optional[str]) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise ParseError(f"Invalid time value from Judge0: {value!r}") from exc


def decode_result(payload: Any, token: Optional[str] = None) -> JudgementResult:
    """Decode a Judge0 submission body into a ``JudgementResult``.

    ``token`` fills in the token when the body omits it (for example when a
    poll asked for a field subset). Without either, the body is rejected.
    """
    if not isinstance(payload, dict):
        raise ParseError(f"Expected a JSON object from Judge0, got {type(payload).__name__}")
    try:
        raw = Judge0RawResult.model_validate(payload)
    except ValidationError as exc:
        raise ParseError(f"Malformed Judge0 result: {exc}") from exc
    resolved_token = raw.token or token
    if not resolved_token:
        raise ParseError("Judge0 result is missing its token")
    return JudgementResult(
        token=resolved_token,
        status=raw.status,
        stdout=decode_text(raw.stdout),
        stderr=decode_text(raw.stderr),
        compile_output=decode_text(raw.compile_output),
        message=decode_text(raw.message),
        exit_code=raw.exit_code,
        exit_signal=raw.exit_signal,
        time=_parse_time(raw.time),
        memory=raw.memory,
    )


def decode_token(payload: Any) -> str:
    token = payload.get("token") if isinstance(payload, dict) else None
    if not isinstance(token, str) or not token:
        raise ParseError(f"Judge0 acknowledgement is missing a token: {payload!r}")
    return token
