from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from .errors import BatchTimeout, ParseError, PollTimeout, SubmitFailed, UnsupportedLanguage
from .schemas import HealthResponse, LanguageInfo, RunBatchRequest, RunBatchResponse
from .service import Judge0Client
from .summary import summarize

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/judge0", tags=["judge0"])


def get_judge0_client(request: Request) -> Judge0Client:
    """The shared client created at startup (see ``codejudge.main``)."""
    client = getattr(request.app.state, "judge0_client", None)
    if client is None:
        raise HTTPException(status_code=503, detail="Judge0 client not initialised")
    return client


@router.get("/health", response_model=HealthResponse)
async def judge0_health(client: Judge0Client = Depends(get_judge0_client)):
    return HealthResponse(healthy=await client.is_healthy())


@router.get("/languages", response_model=List[LanguageInfo])
async def judge0_languages(client: Judge0Client = Depends(get_judge0_client)):
    return client.registry.supported()


@router.post("/run", response_model=RunBatchResponse)
async def judge0_run(payload: RunBatchRequest, client: Judge0Client = Depends(get_judge0_client)):
    try:
        results = await client.run_batch(payload.source_code, payload.language, payload.test_cases)
    except UnsupportedLanguage as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except (PollTimeout, BatchTimeout) as exc:
        logger.warning("Judge0 run timed out: %s", exc)
        raise HTTPException(status_code=504, detail=str(exc)) from exc
    except (SubmitFailed, ParseError) as exc:
        logger.error("Judge0 run failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return RunBatchResponse(results=results, summary=summarize(results))
