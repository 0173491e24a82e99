"""
Grid construction.

A grid is the list of instants that close each sampling interval:
[start + interval, start + 2 * interval, ...], running up to the first
instant at or after the latest measurement time.
"""

from datetime import datetime, timedelta
from typing import Iterable, List

from .errors import InvalidArgument
from .measurement import as_utc


def validate_interval(interval_minutes: int) -> int:
    if isinstance(interval_minutes, bool) or not isinstance(interval_minutes, int):
        raise InvalidArgument(
            f"interval must be an integer number of minutes, got {interval_minutes!r}"
        )
    if interval_minutes < 1:
        raise InvalidArgument("interval must be greater than 0.")
    return interval_minutes


class GridBuilder:
    """Creates a grid with a fixed interval given in minutes."""

    def __init__(self, interval_minutes: int):
        self.interval_minutes = validate_interval(interval_minutes)
        self.interval = timedelta(minutes=interval_minutes)

    def build_grid(self, start: datetime, times: Iterable[datetime]) -> List[datetime]:
        """
        The first grid time is start + interval. Subsequent grid times follow
        at the same interval, and the last one is the first grid time that is
        not before the latest measurement time.

        Args:
            start: instant the grid is generated from. Never part of the grid.
            times: unordered measurement times of all kinds. May be empty.

        Returns:
            The grid, strictly increasing. Empty when no time lies after start.
        """
        if start is None:
            raise InvalidArgument("start is None.")
        if times is None:
            raise InvalidArgument("times is None.")

        start = as_utc(start, "start")
        last_time = self._last_time(times)

        grid: List[datetime] = []
        if last_time is None or last_time <= start:
            return grid

        current = start
        while current < last_time:
            current = current + self.interval
            grid.append(current)
        return grid

    @staticmethod
    def _last_time(times: Iterable[datetime]):
        # None when there are no times at all
        return max((as_utc(t, "time") for t in times), default=None)
