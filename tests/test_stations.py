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
import pytest

import numpy as np
import pandas as pd

import sog_ocean.stations as stations
from sog_ocean.omissions import OmissionLog


@pytest.fixture
def ctd():
    station = ["GEO1"] * 50 + ["CPF1"] * 40 + ["CPF2"] * 30 + ["XYZ9"] * 5
    rng = np.random.default_rng(42)
    order = rng.permutation(len(station))
    return pd.DataFrame(
        {
            "CTDKey": np.arange(len(station)),
            "Station": np.array(station)[order],
        }
    )


def test_count_stations(ctd):
    counts = stations.count_stations(ctd)
    assert list(counts.index) == ["GEO1", "CPF1", "CPF2", "XYZ9"]
    assert list(counts.values) == [50, 40, 30, 5]


def test_get_primary_stations(ctd):
    assert stations.get_primary_stations(ctd) == ["GEO1", "CPF1", "CPF2"]
    assert stations.get_primary_stations(ctd, n=1) == ["GEO1"]


def test_get_primary_stations_bad_n(ctd):
    with pytest.raises(ValueError):
        stations.get_primary_stations(ctd, n=0)


def test_ties_broken_by_first_appearance():
    df = pd.DataFrame({"Station": ["B", "A", "C", "A", "B", "D", "C"]})
    # A, B and C all have two casts, B turns up first
    assert stations.get_primary_stations(df) == ["B", "A", "C"]


def test_classify_stations(ctd):
    result = stations.classify_stations(ctd)

    assert len(result) == len(ctd)
    assert "Station2" not in ctd.columns

    xyz = result[result.Station == "XYZ9"]
    assert np.all(xyz.Station2 == "Other")

    primary = result[result.Station != "XYZ9"]
    assert np.all(primary.Station2 == primary.Station)


def test_classify_stations_is_total():
    df = pd.DataFrame({"Station": ["GEO1", None, "CPF1", "ABC1", np.nan, "GEO1"]})
    result = stations.classify_stations(df, primary_stations=["GEO1", "CPF1", "CPF2"])
    assert list(result.Station2) == ["GEO1", "Other", "CPF1", "Other", "Other", "GEO1"]


def test_single_cast_station_is_other():
    df = pd.DataFrame({"Station": ["A", "A", "B", "B", "C", "C", "D"]})
    result = stations.classify_stations(df)
    assert result.Station2.iloc[-1] == "Other"


def test_classify_stations_notes_other(ctd):
    omissions = OmissionLog()
    stations.classify_stations(ctd, omissions=omissions)
    assert omissions.count_notes(stage="stations", reason="relabelled_other") == 5
    # Relabelled rows are still in the table, nothing was omitted
    assert omissions.count() == 0
    assert omissions.summary() == "No rows or groups were omitted"


def test_classify_stations_deterministic(ctd):
    first = stations.classify_stations(ctd)
    second = stations.classify_stations(ctd)
    pd.testing.assert_frame_equal(first, second)
