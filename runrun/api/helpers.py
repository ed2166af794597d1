"""Shared API response helpers."""

from runrun.models import Result, Runner
from runrun.schemas import ResultResponse, RunnerDetailResponse, RunnerResponse


def result_response(result: Result) -> ResultResponse:
    """Convert Result model to ResultResponse."""
    return ResultResponse.model_validate(result)


def runner_response(runner: Runner, season_best: str | None = None) -> RunnerResponse:
    """Convert Runner model to RunnerResponse.

    *season_best* overrides the cached value (yearly leaderboards show the
    best time of the requested year there).
    """
    return RunnerResponse(
        id=runner.id,
        first_name=runner.first_name,
        last_name=runner.last_name,
        age=runner.age,
        country=runner.country,
        status=runner.status,
        is_active=runner.is_active,
        personal_best=runner.personal_best,
        season_best=season_best if season_best is not None else runner.season_best,
    )


def runner_detail_response(runner: Runner) -> RunnerDetailResponse:
    """Convert Runner model (with results loaded) to RunnerDetailResponse."""
    return RunnerDetailResponse(
        **runner_response(runner).model_dump(),
        results=[result_response(r) for r in runner.results],
    )
