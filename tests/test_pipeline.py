#   SOG Ocean exploratory data analysis
#   Copyright (C) 2025 John Kennedy
#
#   This program is free software: you can redistribute it and/or modify
#   it under the terms of the GNU General Public License as published by
#   the Free Software Foundation, either version 3 of the License, or
#   (at your option) any later version.
#
#   This program is distributed in the hope that it will be useful,
#   but WITHOUT ANY WARRANTY; without even the implied warranty of
#   MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#   GNU General Public License for more details.
#
#   You should have received a copy of the GNU General Public License
#   along with this program.  If not, see <https://www.gnu.org/licenses/>.
from itertools import product

import pytest

import numpy as np
import pandas as pd

import sog_ocean.pipeline as pipeline
from sog_ocean.config import PipelineConfig
from sog_ocean.ctd import VARIABLE_NAMES
from sog_ocean.omissions import OmissionLog


@pytest.fixture
def metadata():
    rng = np.random.default_rng(3)
    station = ["GEO1"] * 50 + ["CPF1"] * 40 + ["CPF2"] * 30 + ["XYZ9"] * 5
    n = len(station)
    return pd.DataFrame(
        {
            "CTDKey": np.arange(n),
            "Station": station,
            "Longitude": rng.uniform(-124.0, -123.0, n),
            "Latitude": rng.uniform(49.0, 50.0, n),
            "Year": rng.integers(2010, 2013, n),
            "Month": rng.integers(1, 13, n),
            "Day": rng.integers(1, 29, n),
        }
    )


@pytest.fixture
def physical(metadata):
    rng = np.random.default_rng(4)
    n = len(metadata)
    data = {"CTDKey": np.arange(n)}
    for name in VARIABLE_NAMES:
        values = rng.normal(10.0, 1.0, n)
        values[rng.random(n) < 0.2] = np.nan
        data[name] = values
    return pd.DataFrame(data)


@pytest.fixture
def sat():
    rng = np.random.default_rng(5)
    rows = []
    for lon, lat, year, month in product([-123.5, -123.0], [49.0, 49.5], range(1995, 2021), range(1, 13)):
        rows.append({"lon": lon, "lat": lat, "year": year, "month": month, "chl": rng.lognormal(0.0, 0.5)})
    return pd.DataFrame(rows)


def test_run_pipeline(physical, metadata, sat):
    result = pipeline.run_pipeline(physical, metadata, sat)

    assert result.primary_stations == ["GEO1", "CPF1", "CPF2"]
    assert set(result.stations.Station2) == {"GEO1", "CPF1", "CPF2", "Other"}
    assert np.all(result.stations[result.stations.Station == "XYZ9"].Station2 == "Other")

    assert set(result.ctd_summary.Variable) == set(VARIABLE_NAMES)
    assert result.ctd_summary.n.sum() == np.count_nonzero(
        ~np.isnan(physical[VARIABLE_NAMES].values[:120])
    )

    assert len(result.chl_series) == 22 * 12
    assert result.omissions.count(reason="non_primary_station") == 5
    assert result.omissions.count(reason="outside_year_range") == 2 * 2 * 12 * 4


def test_run_pipeline_fixed_stations(physical, metadata, sat):
    config = PipelineConfig(primary_stations=["XYZ9"], coverage_threshold=1000)
    omissions = OmissionLog()
    result = pipeline.run_pipeline(physical, metadata, sat, config=config, omissions=omissions)

    assert result.primary_stations == ["XYZ9"]
    assert result.omissions is omissions
    assert set(result.stations.Station2) == {"XYZ9", "Other"}

    # Every grid cell fails the coverage threshold
    assert len(result.chl_series) == 0
    assert omissions.count(reason="insufficient_coverage") == 4 * 22 * 12


def test_run_pipeline_idempotent(physical, metadata, sat):
    first = pipeline.run_pipeline(physical, metadata, sat)
    second = pipeline.run_pipeline(physical, metadata, sat)

    pd.testing.assert_frame_equal(first.stations, second.stations)
    pd.testing.assert_frame_equal(first.ctd_summary, second.ctd_summary)
    pd.testing.assert_frame_equal(first.chl_series, second.chl_series)
    pd.testing.assert_frame_equal(first.omissions.to_dataframe(), second.omissions.to_dataframe())


def test_run_pipeline_does_not_change_inputs(physical, metadata, sat):
    copies = [physical.copy(), metadata.copy(), sat.copy()]
    pipeline.run_pipeline(physical, metadata, sat)
    for original, copy in zip([physical, metadata, sat], copies):
        pd.testing.assert_frame_equal(original, copy)


def test_pivot_ctd_summary(physical, metadata, sat):
    result = pipeline.run_pipeline(physical, metadata, sat)
    wide = pipeline.pivot_ctd_summary(result.ctd_summary)

    assert list(wide.columns[:2]) == ["Year", "Month"]
    assert len(wide) == len(result.ctd_summary[["Year", "Month"]].drop_duplicates())


def test_pivot_empty_summary():
    wide = pipeline.pivot_ctd_summary(pd.DataFrame(columns=["Year", "Month", "Variable", "Value", "n"]))
    assert len(wide) == 0
