"""FastAPI server for Briefly NoteGen"""

from __future__ import annotations

from typing import Any

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from briefly.api.routes.feedback import router as feedback_router
from briefly.api.routes.health import router as health_router
from briefly.api.routes.notegen import router as notegen_router
from briefly.api.routes.notes import router as notes_router
from briefly.config import API_HOST, API_PORT, APP_VERSION, is_development
from briefly.errors import BrieflyError
from briefly.observability.logging import get_logger
from briefly.observability.telemetry import counter, log_event

# Load environment variables from .env file
load_dotenv()

app = FastAPI(title="Briefly NoteGen API", version=APP_VERSION)

logger = get_logger(__name__)


@app.exception_handler(BrieflyError)
async def briefly_error_handler(request: Request, exc: BrieflyError) -> JSONResponse:
    """Domain errors carry their own status; the body is always ``{"error": ...}``."""
    counter(f"api.errors.{type(exc).__name__}")
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    else:
        logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
    counter("api.validation_errors")
    first = exc.errors()[0] if exc.errors() else {"loc": (), "msg": "Invalid request"}
    field = ".".join(str(p) for p in first["loc"])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": f"Invalid request: {field}: {first['msg']}" if field else first["msg"]},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    counter("api.errors.unhandled")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc) or "Internal server error"},
    )


ALLOWED_ORIGINS: list[str] = []

# Allow the local client in development only
if is_development():
    ALLOWED_ORIGINS.extend(
        [
            "http://localhost:3000",
            "http://localhost:5000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ]
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
)

app.include_router(health_router)
app.include_router(notes_router)
app.include_router(notegen_router)
app.include_router(feedback_router)

log_event("api.startup", service="briefly-notegen", version=APP_VERSION)


@app.get("/")
def root() -> dict[str, Any]:
    return {
        "service": "Briefly NoteGen API",
        "version": APP_VERSION,
        "status": "running",
        "endpoints": {
            "health": "/health",
            "notes": "/api/notes",
            "process": "/api/process",
            "download_pdf": "/api/notes/{id}/download-pdf",
            "study_notes": "/api/generate-study-notes",
            "advanced_notes": "/api/generate-advanced-notes",
            "feedback": "/api/notegen-feedback",
            "analytics": "/api/notegen-analytics",
        },
    }


def main() -> None:
    import uvicorn

    uvicorn.run("briefly.api.app:app", host=API_HOST, port=API_PORT)
