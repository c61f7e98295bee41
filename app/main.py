from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.api.deps import get_session_registry
from app.api.v1.router import api_router
from app.jobs.scheduler import start_scheduler, shutdown_scheduler


logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
    - Start background scheduler (draft autosave)

    Shutdown:
    - Close open inspection sessions, dropping pending autosaves
    - Stop the scheduler
    """
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    start_scheduler()

    yield

    # Shutdown
    get_session_registry().close_all()
    shutdown_scheduler()
    logger.info("Shutting down...")


OPENAPI_TAGS = [
    {"name": "QC Inspection", "description": "Sample readings, tolerance checks, drafts and submission of QC jobs"},
    {"name": "Health", "description": "Service health"},
]

API_DESCRIPTION = """
## QC Inspection API

Sampling inspection of received lots against a quality plan.

- **Job queue**: pending, in-progress and completed QC jobs
- **Sessions**: one open inspection per job, restored from its saved draft
- **Readings**: pass/fail toggles and measured values checked against limits
- **Summary**: per-checkpoint results, pass rate and lot disposition
- **Drafts**: saved on demand and automatically after edits

### Error Codes

| Code | Description |
|------|-------------|
| 404 | Job or session not found |
| 409 | Session busy, in the wrong state, or readings incomplete |
| 422 | Bad index, input type or reading; submission rejected |
| 502 | QC API unreachable or failing |
"""

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=API_DESCRIPTION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=OPENAPI_TAGS,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Return unexpected errors as JSON."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    content = {
        "error": str(exc) if settings.DEBUG else "Internal server error",
        "type": type(exc).__name__,
        "path": str(request.url.path),
        "method": request.method,
    }
    return JSONResponse(status_code=500, content=content)


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "mock_api": settings.USE_MOCK_API,
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint."""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
    }
