"""FastAPI app exposing the Judge0 judging client."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from codejudge.core.config import Settings, get_settings
from codejudge.features.judge0.endpoints import router as judge0_router
from codejudge.features.judge0.service import Judge0Client


def create_app(settings: Optional[Settings] = None, client: Optional[Judge0Client] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        judge0_client = client or Judge0Client(settings)
        app.state.judge0_client = judge0_client
        logging.getLogger("startup").info("Judge0 client ready for %s", judge0_client.base_url)
        try:
            yield
        finally:
            await judge0_client.aclose()
            app.state.judge0_client = None

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.include_router(judge0_router)

    @app.get("/")
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()
