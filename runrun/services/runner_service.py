"""Runner store: validation, CRUD and leaderboard queries for runners."""

import logging
import uuid

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from runrun.errors import BadRequestError, NotFoundError
from runrun.models import Result, Runner, RunnerStatus
from runrun.race_time import current_year

logger = logging.getLogger(__name__)

LEADERBOARD_SIZE = 10


def validate_runner(first_name: str, last_name: str, age: int, country: str) -> None:
    """Check runner fields supplied by a client.

    Raises:
        BadRequestError: On the first invalid field.
    """
    if not first_name:
        raise BadRequestError("Invalid first name")
    if not last_name:
        raise BadRequestError("Invalid last name")
    if age <= 5 or age > 125:
        raise BadRequestError("Invalid age range. Must be between 5 - 125")
    if not country:
        raise BadRequestError("Invalid Country")


def parse_runner_id(runner_id: str | uuid.UUID | None) -> uuid.UUID:
    """Coerce a client-supplied runner id, rejecting empty or malformed ones."""
    if isinstance(runner_id, uuid.UUID):
        return runner_id
    if not runner_id:
        raise BadRequestError("Invalid runner ID")
    try:
        return uuid.UUID(runner_id)
    except ValueError:
        raise BadRequestError("Invalid runner ID") from None


async def create_runner(
    db: AsyncSession,
    *,
    first_name: str,
    last_name: str,
    age: int,
    country: str,
) -> Runner:
    validate_runner(first_name, last_name, age, country)
    runner = Runner(
        first_name=first_name,
        last_name=last_name,
        age=age,
        country=country,
        status=RunnerStatus.ACTIVE,
    )
    db.add(runner)
    await db.commit()
    logger.info("Created runner %s (%s %s)", runner.id, first_name, last_name)
    return runner


async def update_runner(
    db: AsyncSession,
    runner_id: uuid.UUID | None,
    *,
    first_name: str,
    last_name: str,
    age: int,
    country: str,
) -> None:
    """Update a runner's personal details. Best times are left untouched."""
    runner_id = parse_runner_id(runner_id)
    validate_runner(first_name, last_name, age, country)
    result = await db.execute(
        update(Runner)
        .where(Runner.id == runner_id)
        .values(first_name=first_name, last_name=last_name, age=age, country=country)
    )
    if result.rowcount == 0:  # type: ignore[attr-defined]
        raise NotFoundError("Runner not found")
    await db.commit()


async def delete_runner(db: AsyncSession, runner_id: uuid.UUID) -> None:
    """Soft-delete a runner by marking it inactive."""
    result = await db.execute(
        update(Runner).where(Runner.id == runner_id).values(status=RunnerStatus.INACTIVE)
    )
    if result.rowcount == 0:  # type: ignore[attr-defined]
        raise NotFoundError("Runner not found")
    await db.commit()
    logger.info("Deactivated runner %s", runner_id)


async def get_runner(db: AsyncSession, runner_id: uuid.UUID) -> Runner:
    """Get a runner with its results loaded, or raise NotFoundError."""
    result = await db.execute(
        select(Runner).where(Runner.id == runner_id).options(selectinload(Runner.results))
    )
    runner = result.scalar_one_or_none()
    if runner is None:
        raise NotFoundError("Runner not found")
    return runner


async def get_runner_for_update(db: AsyncSession, runner_id: uuid.UUID) -> Runner | None:
    """Get a runner and lock its row until the current transaction ends."""
    result = await db.execute(
        select(Runner)
        .where(Runner.id == runner_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def update_best_times(
    db: AsyncSession,
    runner: Runner,
    *,
    personal_best: str | None,
    season_best: str | None,
) -> None:
    """Write both cached best times of *runner* in a single UPDATE."""
    runner.personal_best = personal_best
    runner.season_best = season_best
    await db.flush()


async def list_runners(db: AsyncSession) -> list[Runner]:
    result = await db.execute(select(Runner).order_by(Runner.last_name, Runner.first_name))
    return list(result.scalars().all())


async def list_runners_by_country(db: AsyncSession, country: str) -> list[Runner]:
    """Fastest active runners of a country, by personal best."""
    result = await db.execute(
        select(Runner)
        .where(Runner.country == country, Runner.status == RunnerStatus.ACTIVE)
        .order_by(Runner.personal_best.asc().nulls_last())
        .limit(LEADERBOARD_SIZE)
    )
    return list(result.scalars().all())


async def list_runners_by_year(db: AsyncSession, year: int) -> list[tuple[Runner, str]]:
    """Fastest runners of a given year.

    Returns (runner, best race time in *year*) pairs, fastest first.
    """
    yearly_best = (
        select(Result.runner_id, func.min(Result.race_result).label("race_result"))
        .where(Result.year == year)
        .group_by(Result.runner_id)
        .subquery()
    )
    result = await db.execute(
        select(Runner, yearly_best.c.race_result)
        .join(yearly_best, Runner.id == yearly_best.c.runner_id)
        .order_by(yearly_best.c.race_result)
        .limit(LEADERBOARD_SIZE)
    )
    return [(runner, best) for runner, best in result.all()]


async def get_runners_batch(
    db: AsyncSession,
    country: str | None = None,
    year: str | None = None,
) -> list[tuple[Runner, str | None]]:
    """List runners, optionally as a country or yearly leaderboard.

    *country* and *year* are mutually exclusive. Returns (runner, season
    best to display) pairs; for a yearly leaderboard the displayed season
    best is the runner's best time in that year.

    Raises:
        BadRequestError: If both filters are given or *year* is invalid.
    """
    if country and year:
        raise BadRequestError("Only one parameter can be passed. Country or Year.")
    if country:
        return [(r, r.season_best) for r in await list_runners_by_country(db, country)]
    if year:
        try:
            int_year = int(year)
        except ValueError:
            raise BadRequestError("Invalid year") from None
        if int_year < 0 or int_year > current_year():
            raise BadRequestError("Invalid year.")
        return list(await list_runners_by_year(db, int_year))
    return [(r, r.season_best) for r in await list_runners(db)]
