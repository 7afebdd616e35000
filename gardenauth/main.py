"""Garden Auth Server - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from gardenauth.config import settings
from gardenauth.database import init_db
from gardenauth.errors import GardenAuthError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Check secrets and initialize the database on startup."""
    settings.require_secrets()
    init_db()
    logger.info("%s ready, token refresh threshold %ds", settings.server_name, settings.token_refresh_threshold_seconds)
    yield


app = FastAPI(
    title="Garden Auth",
    description="Token issuance and ownership claims for IoT garden controllers",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(GardenAuthError)
async def garden_auth_error_handler(request: Request, exc: GardenAuthError):
    return PlainTextResponse(exc.code, status_code=exc.status_code)


# --- Register API routers ---
from gardenauth.api.auth import router as auth_router  # noqa: E402
from gardenauth.api.devices import router as devices_router  # noqa: E402
from gardenauth.api.gardens import router as gardens_router  # noqa: E402

app.include_router(auth_router)
app.include_router(devices_router)
app.include_router(gardens_router)


@app.get("/health")
def health():
    return {"status": "ok"}
