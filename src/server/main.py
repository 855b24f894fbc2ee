"""FastAPI application."""

from fastapi import FastAPI

from pagecraft.utils.logging_config import get_logger
from server.routers import convert
from server.server_config import APP_DESCRIPTION, APP_TITLE, APP_VERSION

logger = get_logger(__name__)

app = FastAPI(title=APP_TITLE, description=APP_DESCRIPTION, version=APP_VERSION)
app.include_router(convert.router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}
