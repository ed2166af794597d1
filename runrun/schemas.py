"""Pydantic schemas for API requests and responses."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from runrun.models import RunnerStatus

# =============================================================================
# Request Schemas
# =============================================================================
#
# Fields default to empty values so that missing input reaches the service
# validators and is reported with their messages.


class RunnerRequest(BaseModel):
    """Runner payload for create (no id) and update (with id).

    Best times are derived from results and ignored if sent.
    """

    id: UUID | None = None
    first_name: str = ""
    last_name: str = ""
    age: int = 0
    country: str = ""


class ResultRequest(BaseModel):
    """Race result payload."""

    runner_id: str = ""
    race_result: str = ""
    location: str = ""
    position: int = 0
    year: int = 0


# =============================================================================
# Response Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Error envelope returned by every failing endpoint."""

    message: str
    status: int


class ResultResponse(BaseModel):
    """Race result in responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    runner_id: UUID
    race_result: str
    location: str
    position: int
    year: int


class RunnerResponse(BaseModel):
    """Runner in list responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    age: int
    country: str
    status: RunnerStatus
    is_active: bool
    personal_best: str | None
    season_best: str | None


class RunnerDetailResponse(RunnerResponse):
    """Runner with all of its results."""

    results: list[ResultResponse] = []
