"""Best-time reconciliation between results and runners.

A runner's ``personal_best`` and ``season_best`` cache the fastest of its
results, overall and within the current calendar year. They are written
nowhere else:

- recording a result keeps the cached personal best unless the new time is
  strictly faster, and a current-year result re-reads the season best from
  that year's results, so a value left over from a previous year is dropped;
- removing a result recomputes a cached value from the remaining results
  when the removed result was the one backing it, whatever its year.

Both paths run as one transaction that holds the runner row lock, so a
runner never points at a best time missing from its results.
"""

import logging
import uuid
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from runrun.errors import BadRequestError, InvalidFormatError, NotFoundError, StorageError
from runrun.models import Result, Runner
from runrun.race_time import current_year, parse_race_time
from runrun.services.result_service import (
    create_result,
    delete_result,
    personal_best_for_runner,
    season_best_for_runner,
)
from runrun.services.runner_service import (
    get_runner_for_update,
    parse_runner_id,
    update_best_times,
)

logger = logging.getLogger(__name__)


def validate_result(
    runner_id: str,
    race_result: str,
    location: str,
    position: int,
    year: int,
) -> tuple[uuid.UUID, timedelta]:
    """Check a result supplied by a client.

    Returns:
        The parsed runner id and race time.

    Raises:
        BadRequestError: On the first invalid field (InvalidFormatError for
            an unparseable race time).
    """
    if not runner_id:
        raise BadRequestError("Invalid runner ID")
    if not race_result:
        raise BadRequestError("Invalid race results")
    if not location:
        raise BadRequestError("Invalid Location of result")
    if position < 0:
        raise BadRequestError("Invalid position in result.")
    if year < 0 or year > current_year():
        raise BadRequestError("Invalid year for race result.")
    duration = parse_race_time(race_result)
    return parse_runner_id(runner_id), duration


def cached_time(cached: str | None, label: str) -> timedelta | None:
    """Parse a cached best time.

    An unparseable cached value is corrupt stored state, not a client error.
    """
    if not cached:
        return None
    try:
        return parse_race_time(cached)
    except InvalidFormatError:
        raise StorageError(f"Failed to parse {label}") from None


def faster_time(cached: str | None, race_result: str, duration: timedelta, label: str) -> str:
    """Pick the cached best or the new race time, whichever is strictly faster.

    *duration* is the parsed *race_result*.
    """
    cached_duration = cached_time(cached, label)
    if cached is None or cached_duration is None or duration < cached_duration:
        return race_result
    return cached


async def record_result(
    db: AsyncSession,
    *,
    runner_id: str,
    race_result: str,
    location: str,
    position: int,
    year: int,
) -> Result:
    """Store a new result and fold it into the runner's best times.

    The result insert and the runner update are committed together; any
    failure rolls both back.

    Raises:
        BadRequestError: Invalid input.
        NotFoundError: The runner does not exist.
        StorageError: A cached best time is corrupt.
    """
    runner_uuid, duration = validate_result(runner_id, race_result, location, position, year)

    try:
        runner = await get_runner_for_update(db, runner_uuid)
        if runner is None:
            raise NotFoundError("Invalid runner not found.")

        result = await create_result(db, runner_uuid, race_result, location, position, year)

        personal_best = faster_time(runner.personal_best, race_result, duration, "personal best")
        season_best = runner.season_best
        if year == current_year():
            # The cached value may date from a previous year; it still has to parse.
            cached_time(season_best, "season best")
            season_best = await season_best_for_runner(db, runner_uuid, year)

        await update_best_times(db, runner, personal_best=personal_best, season_best=season_best)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Recorded result %s (%s) for runner %s, bests now pb=%s sb=%s",
        result.id,
        race_result,
        runner_uuid,
        personal_best,
        season_best,
    )
    return result


async def recompute_bests(
    db: AsyncSession,
    runner: Runner,
    *,
    personal: bool = True,
    season: bool = True,
) -> None:
    """Recompute cached best times of *runner* from its stored results.

    Only the selected fields are recomputed; a runner without matching
    results ends up with an empty best. Does not commit.
    """
    personal_best = runner.personal_best
    season_best = runner.season_best
    if personal:
        personal_best = await personal_best_for_runner(db, runner.id)
    if season:
        season_best = await season_best_for_runner(db, runner.id, current_year())
    await update_best_times(db, runner, personal_best=personal_best, season_best=season_best)


async def remove_result(db: AsyncSession, result_id: uuid.UUID) -> None:
    """Delete a result and repair the best times it was backing.

    Runs as a single transaction: on any failure nothing is deleted and the
    runner is left as it was.

    Raises:
        NotFoundError: No result with this id.
    """
    try:
        deleted = await delete_result(db, result_id)
        if deleted is None:
            raise NotFoundError("Result not found")

        runner = await get_runner_for_update(db, deleted.runner_id)
        if runner is None:
            raise StorageError(f"Runner {deleted.runner_id} of result {result_id} not found")

        await recompute_bests(
            db,
            runner,
            personal=runner.personal_best == deleted.race_result,
            season=runner.season_best == deleted.race_result,
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "Deleted result %s of runner %s, bests now pb=%s sb=%s",
        result_id,
        deleted.runner_id,
        runner.personal_best,
        runner.season_best,
    )
