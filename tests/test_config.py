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
import json
from pathlib import Path

import pytest

from sog_ocean.config import PipelineConfig, get_data_dir, load_config


def test_defaults():
    config = load_config()
    assert config.primary_stations is None
    assert config.n_primary_stations == 3
    assert config.year_range == (1997, 2018)
    assert config.coverage_threshold == 100
    assert config.files["ctd"] == "ctd_physical.csv"


def test_load_config(tmp_path):
    settings = {
        "primary_stations": ["GEO1", "CPF1", "CPF2"],
        "year_range": [2000, 2010],
        "coverage_threshold": 3,
        "files": {"satellite": "chl.csv"},
    }
    path = tmp_path / "config.json"
    with open(path, 'w') as f:
        json.dump(settings, f)

    config = load_config(path)
    assert config.primary_stations == ["GEO1", "CPF1", "CPF2"]
    assert config.year_range == (2000, 2010)
    assert config.coverage_threshold == 3
    assert config.files["satellite"] == "chl.csv"
    assert config.files["ctd"] == "ctd_physical.csv"


def test_load_shipped_config():
    config = load_config(Path(__file__).parents[1] / "scripts" / "sog_config.json")
    assert config == PipelineConfig()


def test_unknown_key(tmp_path):
    path = tmp_path / "config.json"
    with open(path, 'w') as f:
        json.dump({"threshold": 3}, f)
    with pytest.raises(ValueError):
        load_config(path)


@pytest.mark.parametrize(
    "settings",
    [
        {"year_range": (2018, 1997)},
        {"year_range": (1997,)},
        {"coverage_threshold": -1},
        {"n_primary_stations": 0},
        {"primary_stations": []},
    ]
)
def test_invalid_config(settings):
    with pytest.raises(ValueError):
        PipelineConfig(**settings)


def test_get_data_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("SOGDIR", str(tmp_path))
    assert get_data_dir() == tmp_path

    monkeypatch.delenv("SOGDIR")
    with pytest.raises(RuntimeError):
        get_data_dir()
