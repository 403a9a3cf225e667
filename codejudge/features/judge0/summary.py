from __future__ import annotations

from typing import Sequence

from .schemas import JudgementResult, JudgementSummary
from .statuses import JudgementStatus


def summarize(results: Sequence[JudgementResult]) -> JudgementSummary:
    """Collapse per-test results into one verdict.

    The overall verdict is the first non-accepted result in test order.
    """
    verdict = JudgementStatus.ACCEPTED
    for res in results:
        if not res.passed:
            verdict = res.verdict
            break
    times = [r.time for r in results if r.time is not None]
    memories = [r.memory for r in results if r.memory is not None]
    return JudgementSummary(
        passed=sum(1 for r in results if r.passed),
        total=len(results),
        verdict=verdict,
        max_time=max(times) if times else None,
        max_memory=max(memories) if memories else None,
    )
