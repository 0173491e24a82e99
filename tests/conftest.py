from datetime import datetime, timezone

import pytest

from vitalsampler.measurement import Measurement, MeasurementKind
from vitalsampler.sampler import MeasurementSampler

TEMP = MeasurementKind.TEMP
SPO2 = MeasurementKind.SPO2
HEART_RATE = MeasurementKind.HEART_RATE


def at(hms: str, day: str = "2017-01-03") -> datetime:
    """UTC instant on the test day, e.g. at("10:09:07")."""
    return datetime.fromisoformat(f"{day}T{hms}").replace(tzinfo=timezone.utc)


@pytest.fixture
def start() -> datetime:
    """
    Default start of sampling used by most scenarios.
    """
    return at("10:00:00")


@pytest.fixture
def sampler() -> MeasurementSampler:
    return MeasurementSampler()


@pytest.fixture
def mixed_measurements() -> list[Measurement]:
    """
    Unordered temperature and SpO2 readings spanning two 5-minute intervals.
    """
    return [
        Measurement(at("10:04:45"), 35.79, TEMP),
        Measurement(at("10:01:18"), 98.78, SPO2),
        Measurement(at("10:09:07"), 35.01, TEMP),
        Measurement(at("10:03:34"), 96.49, SPO2),
        Measurement(at("10:02:01"), 35.82, TEMP),
        Measurement(at("10:05:00"), 97.17, SPO2),
        Measurement(at("10:05:01"), 95.08, SPO2),
    ]
