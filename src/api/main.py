"""FastAPI application entry point."""

import logging
import warnings
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import calendar_router, health_router
from core import config

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup: request logging needs the database created by init_db
    if not config.DB_PATH.exists():
        warnings.warn(f"Request log database not found at {config.DB_PATH}")
    if not config.CALENDAR_API_KEY:
        warnings.warn("CALENDAR_API_KEY is not set, calendar endpoints will reject requests")

    yield


app = FastAPI(
    title="Calendar Scheduling API",
    description="Lays out task allocations, recurring occurrences, time entries, calls and lunch as calendar events",
    version=config.API_VERSION,
    debug=config.API_DEBUG,
    lifespan=lifespan,
)

# CORS middleware (for development)
if config.API_DEBUG:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with standard error format."""
    logging.getLogger(__name__).exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code=ErrorCodes.INTERNAL_ERROR,
            details=[],
        ).model_dump(),
    )


# Include routers
app.include_router(health_router)
app.include_router(calendar_router)


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        reload=config.API_DEBUG,
    )
