"""Business logic services."""

from runrun.services.best_times import record_result, recompute_bests, remove_result
from runrun.services.runner_service import (
    create_runner,
    delete_runner,
    get_runner,
    get_runners_batch,
    update_runner,
    validate_runner,
)

__all__ = [
    "record_result",
    "recompute_bests",
    "remove_result",
    "create_runner",
    "delete_runner",
    "get_runner",
    "get_runners_batch",
    "update_runner",
    "validate_runner",
]
