"""Race time codec.

Race results are stored and transmitted as fixed-width ``HH:MM:SS`` text and
only compared once parsed. Minutes and seconds are capped at 59 so that the
ordering of parsed values matches the lexicographic ordering of the stored
text, which the ``MIN()`` aggregates in the result store depend on.
"""

import re
from datetime import UTC, datetime, timedelta

from runrun.errors import InvalidFormatError

# [0-9] rather than \d: only ASCII digits are accepted
_RACE_TIME_RE = re.compile(r"([0-9]{2}):([0-5][0-9]):([0-5][0-9])")


def parse_race_time(text: str) -> timedelta:
    """Parse ``HH:MM:SS`` into a timedelta.

    Raises:
        InvalidFormatError: If *text* is not exactly ``HH:MM:SS``.
    """
    match = _RACE_TIME_RE.fullmatch(text) if isinstance(text, str) else None
    if match is None:
        raise InvalidFormatError(f"Invalid race time {text!r}, expected HH:MM:SS")
    hours, minutes, seconds = (int(part) for part in match.groups())
    return timedelta(hours=hours, minutes=minutes, seconds=seconds)


def current_year() -> int:
    """Calendar year that season bests are tracked for."""
    return datetime.now(UTC).year
