"""Judge0 status taxonomy.

Judge0 reports progress as a numeric status id. Ids 1 and 2 mean the submission
is still queued or running; every id from ``ACCEPTED`` upwards is final.
"""

from __future__ import annotations

import enum

IN_QUEUE = 1
PROCESSING = 2
ACCEPTED = 3
WRONG_ANSWER = 4
TIME_LIMIT_EXCEEDED = 5
COMPILATION_ERROR = 6
RUNTIME_ERROR_MIN = 7  # SIGSEGV
RUNTIME_ERROR_MAX = 12  # other runtime error
# 13 internal error, 14 exec format error


class JudgementStatus(str, enum.Enum):
    IN_QUEUE = "in_queue"
    PROCESSING = "processing"
    ACCEPTED = "accepted"
    WRONG_ANSWER = "wrong_answer"
    TIME_LIMIT_EXCEEDED = "time_limit_exceeded"
    COMPILATION_ERROR = "compilation_error"
    RUNTIME_ERROR = "runtime_error"
    INTERNAL_ERROR = "internal_error"


_BY_ID = {
    IN_QUEUE: JudgementStatus.IN_QUEUE,
    PROCESSING: JudgementStatus.PROCESSING,
    ACCEPTED: JudgementStatus.ACCEPTED,
    WRONG_ANSWER: JudgementStatus.WRONG_ANSWER,
    TIME_LIMIT_EXCEEDED: JudgementStatus.TIME_LIMIT_EXCEEDED,
    COMPILATION_ERROR: JudgementStatus.COMPILATION_ERROR,
}


def is_terminal(status_id: int) -> bool:
    """True once Judge0 will not change the status any more.

    Anything numbered at or above ACCEPTED counts, including ids past the
    runtime-error range.
    """
    return status_id >= ACCEPTED


def decode_status(status_id: int) -> JudgementStatus:
    status = _BY_ID.get(status_id)
    if status is not None:
        return status
    if RUNTIME_ERROR_MIN <= status_id <= RUNTIME_ERROR_MAX:
        return JudgementStatus.RUNTIME_ERROR
    if status_id > RUNTIME_ERROR_MAX:
        return JudgementStatus.INTERNAL_ERROR
    raise ValueError(f"Unknown Judge0 status id: {status_id}")
