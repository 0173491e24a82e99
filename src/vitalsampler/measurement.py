"""
Measurement domain model.

Defines the MeasurementKind enumeration and the immutable Measurement
dataclass for point readings taken by a medical device.
"""

import numbers
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, auto

from .errors import InvalidArgument


class MeasurementKind(Enum):
    """
    Enumeration of the measurement types a device reports.
    New types are added here; nothing else may act as a kind.
    """
    TEMP = auto()
    SPO2 = auto()
    HEART_RATE = auto()

    @classmethod
    def from_label(cls, label: str) -> "MeasurementKind":
        """
        Convert a human-readable label into the corresponding enum.
        Strips punctuation and normalizes spacing/casing.
        """
        key = str(label).strip().lower().replace("-", "_").replace(" ", "_")
        mapping = {
            "temp": cls.TEMP,
            "temperature": cls.TEMP,
            "spo2": cls.SPO2,
            "sp_o2": cls.SPO2,
            "oxygen_saturation": cls.SPO2,
            "heart_rate": cls.HEART_RATE,
            "heartrate": cls.HEART_RATE,
            "hr": cls.HEART_RATE,
            "pulse": cls.HEART_RATE,
        }
        try:
            return mapping[key]
        except KeyError:
            raise InvalidArgument(f"Unknown measurement kind label: {label!r}")


def as_utc(value: datetime, name: str) -> datetime:
    """
    Return ``value`` as a timezone-aware UTC datetime.
    Naive datetimes are taken to already be in UTC.
    """
    if value is None:
        raise InvalidArgument(f"{name} is None.")
    if not isinstance(value, datetime):
        raise InvalidArgument(
            f"{name} must be a datetime, got {type(value).__name__}"
        )
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class Measurement:
    """
    Represents a single reading of one kind at one instant.

    Attributes:
        time: Instant of the reading (normalized to UTC).
        value: Numeric value of the reading, stored as float.
        kind: The MeasurementKind the value belongs to.
    """

    time: datetime
    value: float
    kind: MeasurementKind

    def __post_init__(self):
        # Validate time
        object.__setattr__(self, "time", as_utc(self.time, "time"))

        # Validate value
        if self.value is None:
            raise InvalidArgument("value is None.")
        if isinstance(self.value, bool) or not isinstance(self.value, numbers.Real):
            raise InvalidArgument(
                f"value must be a real number, got {type(self.value).__name__}"
            )
        object.__setattr__(self, "value", float(self.value))

        # Validate kind
        if self.kind is None:
            raise InvalidArgument("kind is None.")
        if not isinstance(self.kind, MeasurementKind):
            raise InvalidArgument(
                f"kind must be a MeasurementKind, got {type(self.kind).__name__}"
            )
