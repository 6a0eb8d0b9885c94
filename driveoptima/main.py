import logging

from fastapi import FastAPI

from driveoptima.config import get_settings
from driveoptima.routers import auth, dashboard, drive, session
from driveoptima.schemas.session import HealthResponse
from driveoptima.services.session import session_service
from driveoptima.websocket import manager

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

if settings.classifier == "gemini" and not settings.gemini_api_key:
    logger.warning("No Gemini API key configured; analysis requests will fail until one is set")

app = FastAPI(title="DriveOptima", description="AI-assisted drive reorganization dashboard")

app.include_router(auth.router)
app.include_router(drive.router)
app.include_router(session.router)
app.include_router(dashboard.router)

# Every session transition is pushed to the user's open dashboards
session_service.notifier = manager.broadcast


@app.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="ok")
