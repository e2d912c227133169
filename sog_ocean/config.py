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
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional
import json
import os

DEFAULT_FILES = {
    "ctd": "ctd_physical.csv",
    "metadata": "ctd_metadata.csv",
    "satellite": "sog_chl_monthly.nc",
}


@dataclass
class PipelineConfig:
    """Parameters for the three aggregation stages.

    primary_stations of None means the station set is recomputed from the CTD table by ranking
    stations on the number of casts and taking the top n_primary_stations.
    """
    primary_stations: Optional[list] = None
    n_primary_stations: int = 3
    year_range: tuple = (1997, 2018)
    coverage_threshold: int = 100
    na_values: tuple = (-99.0,)
    files: dict = field(default_factory=lambda: dict(DEFAULT_FILES))
    sources: dict = field(default_factory=dict)

    def __post_init__(self):
        self.year_range = tuple(self.year_range)
        self.na_values = tuple(self.na_values)
        if self.primary_stations is not None:
            self.primary_stations = list(self.primary_stations)
            if len(self.primary_stations) == 0:
                raise ValueError("primary_stations must contain at least one station")

        if self.n_primary_stations < 1:
            raise ValueError("n_primary_stations must be at least 1")
        if len(self.year_range) != 2:
            raise ValueError("year_range must have two elements")
        if self.year_range[0] > self.year_range[1]:
            raise ValueError("First element of year_range must be less than or equal to the second")
        if self.coverage_threshold < 0:
            raise ValueError("coverage_threshold must not be negative")

        files = dict(DEFAULT_FILES)
        files.update(self.files)
        self.files = files


def load_config(path=None):
    """Read a PipelineConfig from a JSON file. With no path the defaults are returned."""
    if path is None:
        return PipelineConfig()

    with open(path, 'r') as f:
        settings = json.load(f)

    known = {f.name for f in fields(PipelineConfig)}
    unknown = [key for key in settings if key not in known]
    if unknown:
        raise ValueError(f"Unknown configuration keys in {path}: {unknown}")

    return PipelineConfig(**settings)


def get_data_dir():
    data_dir = os.getenv("SOGDIR")
    if data_dir is None:
        raise RuntimeError("Environment variable SOGDIR is not set. Point it at the SOG data directory")
    return Path(data_dir)
