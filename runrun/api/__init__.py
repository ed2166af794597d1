"""API routes aggregation."""

from typing import Any

from fastapi import APIRouter

from runrun.api.auth import router as auth_router
from runrun.api.results import router as results_router
from runrun.api.runners import router as runners_router
from runrun.schemas import ErrorResponse

# Documents the {message, status} envelope rendered by the exception handlers
_error_responses: dict[int | str, dict[str, Any]] = {
    code: {"model": ErrorResponse} for code in (400, 401, 404, 500)
}

api_router = APIRouter(responses=_error_responses)

api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(runners_router, prefix="/runner", tags=["runners"])
api_router.include_router(results_router, prefix="/result", tags=["results"])
