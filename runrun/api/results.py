"""Race result API routes."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from runrun.api.helpers import result_response
from runrun.auth import require_admin
from runrun.database import get_db
from runrun.schemas import ResultRequest, ResultResponse
from runrun.services import record_result, remove_result

router = APIRouter(dependencies=[Depends(require_admin)])


@router.post("", response_model=ResultResponse)
async def create_result_route(
    body: ResultRequest,
    db: AsyncSession = Depends(get_db),
) -> ResultResponse:
    """Record a race result and update the runner's best times."""
    result = await record_result(
        db,
        runner_id=body.runner_id,
        race_result=body.race_result,
        location=body.location,
        position=body.position,
        year=body.year,
    )
    return result_response(result)


@router.delete("/{result_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_result_route(
    result_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a race result and recompute the runner's best times."""
    await remove_result(db, result_id)
