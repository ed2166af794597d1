"""runrun - FastAPI Application."""

import argparse
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from runrun import __version__
from runrun.api import api_router
from runrun.config import settings
from runrun.database import init_db
from runrun.errors import ResponseError
from runrun.rate_limit import limiter

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown."""
    logger.info("Starting runrun server...")
    try:
        await init_db()
        logger.info("Database initialized")
    except Exception as e:
        logger.warning(f"Database initialization skipped: {e}")

    yield

    logger.info("Shutting down runrun server...")


app = FastAPI(
    title="runrun API",
    description="Runners and race results tracking",
    version=__version__,
    lifespan=lifespan,
)

# Store limiter on app state for slowapi
app.state.limiter = limiter


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"message": message, "status": status_code},
    )


def _response_error_handler(request: Request, exc: ResponseError) -> JSONResponse:
    return _error_response(exc.message, exc.status_code)


def _http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return _error_response(str(exc.detail), exc.status_code)


def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()))
        message = f"Invalid {location}: {errors[0].get('msg', 'invalid value')}"
    else:
        message = "Invalid request"
    return _error_response(message, status.HTTP_400_BAD_REQUEST)


def _storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Storage error on %s %s", request.method, request.url.path)
    return _error_response("Storage error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return _error_response(
        "Rate limit exceeded. Please try again later.", status.HTTP_429_TOO_MANY_REQUESTS
    )


def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)


app.add_exception_handler(ResponseError, _response_error_handler)  # type: ignore[arg-type]
app.add_exception_handler(HTTPException, _http_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
app.add_exception_handler(SQLAlchemyError, _storage_error_handler)  # type: ignore[arg-type]
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
app.add_exception_handler(Exception, _unhandled_error_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type", "Token"],
)

app.include_router(api_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def main() -> None:
    """Run the server."""
    import uvicorn

    parser = argparse.ArgumentParser(description="runrun Server")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    args = parser.parse_args()

    logger.info(f"Starting server on http://{args.host}:{args.port}")
    logger.info(f"API docs: http://localhost:{args.port}/docs")

    uvicorn.run(
        "runrun.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
