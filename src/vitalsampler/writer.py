"""
Sample set output.

Flattens a sample set into rows and writes it as CSV, Excel or JSON.
"""

import json
import logging
import pathlib

import pandas as pd

from .errors import InvalidArgument
from .measurement import Measurement, MeasurementKind
from .sampler import SampleSet

logger = logging.getLogger(__name__)

COLUMNS = ["time", "kind", "value"]


def flatten(sample_set: SampleSet) -> list[Measurement]:
    """All sampled measurements, kind by kind in enum order, each kind in time order."""
    return [m for kind in MeasurementKind for m in sample_set.get(kind, [])]


def sample_set_to_frame(sample_set: SampleSet) -> pd.DataFrame:
    rows = [
        {"time": m.time, "kind": m.kind.name.lower(), "value": m.value}
        for m in flatten(sample_set)
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


def sample_set_to_json(sample_set: SampleSet) -> str:
    payload = {
        kind.name.lower(): [
            {"time": m.time.isoformat(), "value": m.value} for m in sample_set[kind]
        ]
        for kind in MeasurementKind
        if kind in sample_set
    }
    return json.dumps(payload, indent=2)


def write_sample_set(sample_set: SampleSet, path: str) -> pathlib.Path:
    """
    Write the flattened sample set to ``path``; the suffix picks the format.
    Excel cannot hold timezone-aware datetimes, so times go out as naive UTC.
    """
    out = pathlib.Path(path)
    df = sample_set_to_frame(sample_set)
    suffix = out.suffix.lower()
    if suffix == ".csv":
        df.to_csv(out, index=False)
    elif suffix == ".xlsx":
        df["time"] = pd.to_datetime(df["time"], utc=True).dt.tz_localize(None)
        with pd.ExcelWriter(out, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="samples", index=False)
    else:
        raise InvalidArgument(f"Unsupported output format {suffix!r} for {path!r}")
    logger.info(f"Wrote {len(df)} sampled measurements to {out}")
    return out
