"""
Measurement sampler.

Samples measurements from a medical device onto a grid with a fixed interval
(5 minutes by default). Every MeasurementKind is sampled separately: from each
interval the latest reading of a kind is carried onto the grid time that
closes the interval. Intervals without readings produce no entry.

Usage:
    sampler = MeasurementSampler()
    sample_set = sampler.sample(start, measurements)
    temperatures = sample_set.get(MeasurementKind.TEMP, [])
"""

from collections import defaultdict
from datetime import datetime
from operator import attrgetter
from typing import Dict, Iterable, List, Sequence

from .errors import InvalidArgument
from .grid import GridBuilder
from .measurement import Measurement, MeasurementKind, as_utc

DEFAULT_INTERVAL_MINUTES = 5

SampleSet = Dict[MeasurementKind, List[Measurement]]


class MeasurementSampler:
    def __init__(self, interval_minutes: int = DEFAULT_INTERVAL_MINUTES):
        """
        Args:
            interval_minutes: grid interval in minutes. Must be greater than 0.
        """
        self._grid_builder = GridBuilder(interval_minutes)

    @classmethod
    def default(cls) -> "MeasurementSampler":
        return cls(DEFAULT_INTERVAL_MINUTES)

    @property
    def interval_minutes(self) -> int:
        return self._grid_builder.interval_minutes

    def build_grid(self, start: datetime, times: Iterable[datetime]) -> List[datetime]:
        return self._grid_builder.build_grid(start, times)

    def sample(self, start: datetime, measurements: Iterable[Measurement]) -> SampleSet:
        """
        Sample measurements onto the grid, per MeasurementKind.

        Args:
            start: the instant sampling starts from. The grid is computed from
                it, and every measurement at or before it is ignored.
            measurements: unordered measurements of any kinds. May be empty.

        Returns:
            A dict from kind to its sampled measurements ordered by grid time.
            Kinds without any sampled measurement are left out.
        """
        if start is None:
            raise InvalidArgument("start is None.")
        if measurements is None:
            raise InvalidArgument("measurements is None.")

        start = as_utc(start, "start")
        measurements = list(measurements)
        for measurement in measurements:
            if not isinstance(measurement, Measurement):
                raise InvalidArgument(
                    f"expected a Measurement, got {type(measurement).__name__}"
                )

        grid = self.build_grid(start, [m.time for m in measurements])
        valid_measurements = self._measurements_in_grid(grid, measurements, start)

        # Readings of every kind, in input order
        measurements_per_kind: Dict[MeasurementKind, List[Measurement]] = defaultdict(list)
        for measurement in valid_measurements:
            measurements_per_kind[measurement.kind].append(measurement)

        sample_set: SampleSet = {}
        for kind in MeasurementKind:
            if kind not in measurements_per_kind:
                continue
            sampled = self._sample_kind(start, grid, measurements_per_kind[kind])
            if sampled:
                sample_set[kind] = sampled
        return sample_set

    def _sample_kind(
        self, start: datetime, grid: Sequence[datetime], measurements: List[Measurement]
    ) -> List[Measurement]:
        """
        Sample the readings of a single kind. Returns them ordered by grid time.
        """
        measurements_per_interval: Dict[int, List[Measurement]] = defaultdict(list)
        for measurement in measurements:
            measurements_per_interval[self._grid_index(start, measurement.time)].append(measurement)

        sampled: List[Measurement] = []
        for index in sorted(measurements_per_interval):
            chosen = _representative(measurements_per_interval[index])
            sampled.append(Measurement(grid[index], chosen.value, chosen.kind))
        return sampled

    def _grid_index(self, start: datetime, time: datetime) -> int:
        """
        Position in the grid of the first grid time at or after ``time``.
        Exact: timedelta floor division works on whole microseconds.
        """
        return -((start - time) // self._grid_builder.interval) - 1

    @staticmethod
    def _measurements_in_grid(
        grid: Sequence[datetime], measurements: List[Measurement], start: datetime
    ) -> List[Measurement]:
        """Valid measurements lie in (start, last grid time]."""
        if not grid or not measurements:
            return []
        last_grid_time = grid[-1]
        return [m for m in measurements if start < m.time <= last_grid_time]


def _representative(bucket: List[Measurement]) -> Measurement:
    # stable sort: equal times keep input order
    return sorted(bucket, key=attrgetter("time"))[-1]
