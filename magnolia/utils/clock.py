"""Time helpers. Components take a `clock` callable so tests can pin time."""

from datetime import datetime
from typing import Callable

Clock = Callable[[], datetime]


def now_iso(clock: Clock = datetime.now) -> str:
    return clock().isoformat()


def today_iso(clock: Clock = datetime.now) -> str:
    """Date only, YYYY-MM-DD."""
    return clock().date().isoformat()
