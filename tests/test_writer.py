import json

import pandas as pd
import pytest

from conftest import SPO2, TEMP, at
from vitalsampler.errors import InvalidArgument
from vitalsampler.measurement import Measurement
from vitalsampler.writer import (
    flatten,
    sample_set_to_frame,
    sample_set_to_json,
    write_sample_set,
)


@pytest.fixture
def sample_set():
    # SPO2 deliberately inserted first; output follows enum order
    return {
        SPO2: [Measurement(at("10:05:00"), 97.17, SPO2)],
        TEMP: [
            Measurement(at("10:05:00"), 35.79, TEMP),
            Measurement(at("10:10:00"), 35.01, TEMP),
        ],
    }


def test_flatten_orders_by_kind_then_time(sample_set):
    assert [(m.kind, m.time) for m in flatten(sample_set)] == [
        (TEMP, at("10:05:00")),
        (TEMP, at("10:10:00")),
        (SPO2, at("10:05:00")),
    ]


def test_sample_set_to_frame(sample_set):
    df = sample_set_to_frame(sample_set)
    assert list(df.columns) == ["time", "kind", "value"]
    assert df["kind"].tolist() == ["temp", "temp", "spo2"]
    assert df["value"].tolist() == [35.79, 35.01, 97.17]


def test_empty_sample_set_to_frame():
    df = sample_set_to_frame({})
    assert df.empty
    assert list(df.columns) == ["time", "kind", "value"]


def test_sample_set_to_json(sample_set):
    payload = json.loads(sample_set_to_json(sample_set))
    assert list(payload) == ["temp", "spo2"]
    assert payload["spo2"] == [{"time": "2017-01-03T10:05:00+00:00", "value": 97.17}]


def test_write_csv(sample_set, tmp_path):
    out = write_sample_set(sample_set, str(tmp_path / "sampled.csv"))
    df = pd.read_csv(out)
    assert len(df) == 3
    assert df["kind"].tolist() == ["temp", "temp", "spo2"]


def test_write_excel(sample_set, tmp_path):
    out = write_sample_set(sample_set, str(tmp_path / "sampled.xlsx"))
    df = pd.read_excel(out, sheet_name="samples", engine="openpyxl")
    assert df["value"].tolist() == [35.79, 35.01, 97.17]
    assert df["time"].iloc[1] == pd.Timestamp("2017-01-03 10:10:00")


def test_write_unsupported_suffix(sample_set, tmp_path):
    with pytest.raises(InvalidArgument):
        write_sample_set(sample_set, str(tmp_path / "sampled.parquet"))
