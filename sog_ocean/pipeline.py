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
from collections import namedtuple

import pandas as pd

from sog_ocean import ctd as ctd_stage
from sog_ocean import satellite as satellite_stage
from sog_ocean import stations as station_stage
from sog_ocean.config import PipelineConfig
from sog_ocean.omissions import OmissionLog

PipelineResult = namedtuple(
    "PipelineResult", ["stations", "ctd_summary", "chl_series", "primary_stations", "omissions"]
)


def merge_observations(physical, metadata):
    """Join physical variables and metadata into the full CTD observation table."""
    return ctd_stage.join_metadata(physical, metadata)


def run_pipeline(physical, metadata, satellite, config=None, ctd=None, omissions=None):
    """Run the station classifier, CTD aggregator and satellite aggregator.

    Parameters
    ----------
    physical: pandas.DataFrame
        CTD physical variables.
    metadata: pandas.DataFrame
        CTD cast metadata.
    satellite: pandas.DataFrame
        Satellite chlorophyll records.
    config: PipelineConfig or None
        Station set and thresholds. Defaults are used if None.
    ctd: pandas.DataFrame or None
        Observation table to classify. If None it is made by joining physical and metadata.
    omissions: OmissionLog or None
        Log for dropped rows. A new one is made if None.

    Returns
    -------
    PipelineResult
    """
    if config is None:
        config = PipelineConfig()
    if omissions is None:
        omissions = OmissionLog()
    if ctd is None:
        ctd = merge_observations(physical, metadata)

    primary_stations = config.primary_stations
    if primary_stations is None:
        primary_stations = station_stage.get_primary_stations(ctd, n=config.n_primary_stations)

    stations = station_stage.classify_stations(ctd, primary_stations=primary_stations, omissions=omissions)

    ctd_summary = ctd_stage.monthly_ctd_summary(
        physical, metadata, primary_stations, omissions=omissions
    )

    chl_series = satellite_stage.chl_time_series(
        satellite,
        year_range=config.year_range,
        threshold=config.coverage_threshold,
        omissions=omissions,
    )

    return PipelineResult(stations, ctd_summary, chl_series, list(primary_stations), omissions)


def pivot_ctd_summary(ctd_summary):
    """Wide table of the monthly CTD means, one column per variable, for writing out."""
    if len(ctd_summary) == 0:
        return pd.DataFrame(columns=["Year", "Month"])
    wide = ctd_summary.pivot(index=["Year", "Month"], columns="Variable", values="Value")
    wide.columns.name = None
    return wide.reset_index()
