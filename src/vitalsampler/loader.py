"""
Tabular measurement loader.

Reads a CSV file or the first sheet of an Excel workbook into a DataFrame,
normalizes its headers, and maps each row to a Measurement. Row-level
problems are collected in a stairval Notepad instead of aborting the load.
"""

import logging
import numbers
import pathlib
import typing
from datetime import datetime

import pandas as pd
from stairval.notepad import Notepad

from .errors import InvalidArgument
from .measurement import Measurement, MeasurementKind

logger = logging.getLogger(__name__)

# Columns that need renaming → Measurement fields
RENAME_MAP = {
    "timestamp": "time",
    "measurement_time": "time",
    "measurement_timestamp": "time",
    "measurement_value": "value",
    "type": "kind",
    "measurement_type": "kind",
}

REQUIRED_COLUMNS = {"time", "value", "kind"}


def parse_instant(value: typing.Any) -> datetime:
    """
    Parse a cell or command-line value into a UTC-aware datetime.
    - datetime / pandas.Timestamp values are converted to UTC (naive means UTC)
    - strings are parsed as ISO-8601, a trailing 'Z' is accepted
    - None, NaN, NaT, numbers and blank strings are rejected
    """
    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        raise InvalidArgument("instant is missing.")
    if isinstance(value, str) and not value.strip():
        raise InvalidArgument("instant is missing.")
    if isinstance(value, numbers.Number):
        raise InvalidArgument(f"Cannot parse instant from number {value!r}")
    try:
        timestamp = pd.Timestamp(value.strip() if isinstance(value, str) else value)
    except (ValueError, TypeError) as e:
        raise InvalidArgument(f"Cannot parse instant from {value!r}") from e
    if pd.isna(timestamp):
        raise InvalidArgument(f"Cannot parse instant from {value!r}")

    if timestamp.tzinfo is None:
        timestamp = timestamp.tz_localize("UTC")
    else:
        timestamp = timestamp.tz_convert("UTC")
    return timestamp.to_pydatetime()


def load_table(path: str) -> pd.DataFrame:
    """
    Read a measurement table:
      - '.csv' through pandas.read_csv
      - '.xlsx' through pandas.read_excel (first sheet, first row = header)
      - normalize all headers to snake_case lowercase
      - apply renames from RENAME_MAP
    """
    suffix = pathlib.Path(path).suffix.lower()
    if suffix == ".csv":
        df = pd.read_csv(path)
    elif suffix == ".xlsx":
        df = pd.read_excel(path, sheet_name=0, header=0, engine="openpyxl")
    else:
        raise InvalidArgument(f"Unsupported table format {suffix!r} for {path!r}")

    # CLEAN & NORMALIZE headers:
    df.columns = (
        df.columns.astype(str)
        .str.strip()
        .str.replace(r"\s*\(.*?\)", "", regex=True)  # drop any "(…)" such as units
        .str.replace(r"\s+", "_", regex=True)
        .str.lower()
    )
    df = df.rename(
        columns={orig: target for orig, target in RENAME_MAP.items() if orig in df.columns}
    )
    logger.debug(f"Loaded {len(df)} rows with columns {list(df.columns)} from {path!r}")
    return df


def map_measurement_table(
    df: pd.DataFrame, notepad: Notepad, sheet_name: str = "measurements"
) -> list[Measurement]:
    """
    Map each row of a measurement table to a Measurement.
    Required columns: time, value, kind.
    Rows that cannot be mapped are reported to the notepad and skipped.
    """
    records: list[Measurement] = []
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        notepad.add_error(f"Sheet {sheet_name!r}: missing required columns: {sorted(missing)}")
        return records

    for index, row in df.iterrows():
        try:
            value = row["value"]
            if value is None or pd.isna(value):
                raise InvalidArgument("value is missing.")
            measurement = Measurement(
                time=parse_instant(row["time"]),
                value=float(value),
                kind=MeasurementKind.from_label(row["kind"]),
            )
            records.append(measurement)
        except (ValueError, TypeError) as exception:
            notepad.add_error(f"Sheet {sheet_name!r}, row {index}: {exception}")

    if df.empty:
        notepad.add_warning(f"Sheet {sheet_name!r}: no rows to map")
    logger.info(f"Sheet {sheet_name!r}: mapped {len(records)} of {len(df)} rows")
    return records


def load_measurements(path: str, notepad: Notepad) -> list[Measurement]:
    df = load_table(path)
    return map_measurement_table(df, notepad, sheet_name=pathlib.Path(path).name)
