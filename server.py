import uvicorn

from codejudge.core.config import get_settings


if __name__ == "__main__":
    settings = get_settings()
    # reload only for local dev
    uvicorn.run(
        "codejudge.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_dev,
        log_level=settings.log_level.lower(),
    )
