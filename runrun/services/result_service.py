"""Result store: persistence and best-time aggregates for race results.

``race_result`` is fixed-width ``HH:MM:SS`` text, so ``MIN()`` over the
column yields the fastest time without parsing.
"""

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from runrun.models import Result


async def create_result(
    db: AsyncSession,
    runner_id: uuid.UUID,
    race_result: str,
    location: str,
    position: int,
    year: int,
) -> Result:
    """Add a result to the session and flush it so it gets an id."""
    result = Result(
        runner_id=runner_id,
        race_result=race_result,
        location=location,
        position=position,
        year=year,
    )
    db.add(result)
    await db.flush()
    return result


async def delete_result(db: AsyncSession, result_id: uuid.UUID) -> Result | None:
    """Delete a result and return the removed row, or None if it does not exist.

    The row is locked before deletion and the delete is flushed, so later
    aggregate queries in the same transaction no longer see it.
    """
    result = await db.get(Result, result_id, with_for_update=True)
    if result is None:
        return None
    await db.delete(result)
    await db.flush()
    return result


async def personal_best_for_runner(db: AsyncSession, runner_id: uuid.UUID) -> str | None:
    """Fastest race time among all of a runner's results."""
    best: str | None = await db.scalar(
        select(func.min(Result.race_result)).where(Result.runner_id == runner_id)
    )
    return best


async def season_best_for_runner(db: AsyncSession, runner_id: uuid.UUID, year: int) -> str | None:
    """Fastest race time among a runner's results in *year*."""
    best: str | None = await db.scalar(
        select(func.min(Result.race_result)).where(
            Result.runner_id == runner_id,
            Result.year == year,
        )
    )
    return best
