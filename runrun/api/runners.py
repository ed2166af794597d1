"""Runner API routes."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from runrun.api.helpers import runner_detail_response, runner_response
from runrun.auth import require_admin, require_any_role
from runrun.database import get_db
from runrun.schemas import RunnerDetailResponse, RunnerRequest, RunnerResponse
from runrun.services import (
    create_runner,
    delete_runner,
    get_runner,
    get_runners_batch,
    update_runner,
)

router = APIRouter()


@router.post(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def create_runner_route(
    body: RunnerRequest,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Create a runner. Requires admin role."""
    await create_runner(
        db,
        first_name=body.first_name,
        last_name=body.last_name,
        age=body.age,
        country=body.country,
    )


@router.put(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def update_runner_route(
    body: RunnerRequest,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Update a runner's details. Requires admin role."""
    await update_runner(
        db,
        body.id,
        first_name=body.first_name,
        last_name=body.last_name,
        age=body.age,
        country=body.country,
    )


@router.get(
    "",
    response_model=list[RunnerResponse],
    dependencies=[Depends(require_any_role)],
)
async def list_runners_route(
    country: Annotated[str | None, Query()] = None,
    year: Annotated[str | None, Query()] = None,
    db: AsyncSession = Depends(get_db),
) -> list[RunnerResponse]:
    """List runners.

    Optional filters (mutually exclusive): ?country=X for the 10 fastest
    active runners of a country, ?year=YYYY for the 10 fastest of a year.
    """
    runners = await get_runners_batch(db, country=country, year=year)
    return [runner_response(runner, season_best) for runner, season_best in runners]


@router.get(
    "/{runner_id}",
    response_model=RunnerDetailResponse,
    dependencies=[Depends(require_any_role)],
)
async def get_runner_route(
    runner_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> RunnerDetailResponse:
    """Get a runner with all of its results."""
    runner = await get_runner(db, runner_id)
    return runner_detail_response(runner)


@router.delete(
    "/{runner_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
async def delete_runner_route(
    runner_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Mark a runner inactive. Requires admin role."""
    await delete_runner(db, runner_id)
