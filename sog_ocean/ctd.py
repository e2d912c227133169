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
from operator import itemgetter

import pandas as pd

from sog_ocean.omissions import record
from sog_ocean.utils import require_columns

# Physical variables at the three integration depths: 10 m, 50 m and net-tow depth.
CTD_VARIABLES = [
    ("Temperature_I10", itemgetter("Temperature_I10")),
    ("Temperature_I50", itemgetter("Temperature_I50")),
    ("Temperature_INet", itemgetter("Temperature_INet")),
    ("Salinity_I10", itemgetter("Salinity_I10")),
    ("Salinity_I50", itemgetter("Salinity_I50")),
    ("Salinity_INet", itemgetter("Salinity_INet")),
    ("Density_I10", itemgetter("Density_I10")),
    ("Density_I50", itemgetter("Density_I50")),
    ("Density_INet", itemgetter("Density_INet")),
    ("Oxygen_I10", itemgetter("Oxygen_I10")),
    ("Oxygen_I50", itemgetter("Oxygen_I50")),
    ("Oxygen_INet", itemgetter("Oxygen_INet")),
]

VARIABLE_NAMES = [name for name, _ in CTD_VARIABLES]

METADATA_COLUMNS = ["CTDKey", "Station", "Longitude", "Latitude", "Year", "Month", "Day"]


def join_metadata(physical, metadata, omissions=None):
    """Left join the physical variables onto the cast metadata using CTDKey.

    Parameters
    ----------
    physical: pandas.DataFrame
        CTDKey and the physical variable columns.
    metadata: pandas.DataFrame
        One row per cast with at least the columns in METADATA_COLUMNS. Any other columns, such as
        DayOfYear, are carried through. Exact duplicate rows are allowed.
    omissions: OmissionLog or None
        Rows with no matching metadata are recorded here.

    Returns
    -------
    pandas.DataFrame
        Physical table with the metadata columns attached. Unmatched rows have nan metadata.
    """
    require_columns(physical, ["CTDKey"], "CTD physical table")
    require_columns(metadata, METADATA_COLUMNS, "CTD metadata table")

    # Metadata columns that also turn up in the physical table come from the metadata
    physical_columns = [c for c in physical.columns if c == "CTDKey" or c not in metadata.columns]
    meta = metadata.drop_duplicates()

    joined = pd.merge(
        physical[physical_columns], meta, on="CTDKey", how="left", validate="many_to_one", indicator=True
    )
    unmatched = joined["_merge"] == "left_only"
    record(omissions, "ctd", "unmatched_join_key", unmatched.sum())

    return joined.drop(columns="_merge")


def filter_stations(joined, primary_stations, omissions=None):
    """Keep only the rows from the primary stations. Rows with no Station are dropped."""
    keep = joined["Station"].isin(list(primary_stations))
    record(omissions, "ctd", "non_primary_station", (~keep).sum())
    return joined[keep].reset_index(drop=True)


def reshape_long(df, variables=None):
    """
    Convert the wide table, one column per physical variable, into a long table with a Variable
    and Value column. Each input row turns into one row per variable.
    """
    if variables is None:
        variables = CTD_VARIABLES

    require_columns(df, ["Year", "Month"], "CTD table")
    keys = [c for c in ["CTDKey", "Station", "Year", "Month"] if c in df.columns]

    pieces = []
    for name, accessor in variables:
        piece = df[keys].copy()
        piece["Variable"] = name
        piece["Value"] = pd.to_numeric(accessor(df), errors="coerce").to_numpy()
        pieces.append(piece)

    if len(pieces) == 0:
        return pd.DataFrame(columns=keys + ["Variable", "Value"])

    return pd.concat(pieces, ignore_index=True)


def drop_missing(long, omissions=None):
    missing = long["Value"].isna()
    record(omissions, "ctd", "missing_value", missing.sum())
    return long[~missing].reset_index(drop=True)


def monthly_means(long):
    """Average the long table by Year, Month and Variable.

    Returns
    -------
    pandas.DataFrame
        Year, Month, Variable, Value (the arithmetic mean) and n (the number of values averaged).
        Months with no data do not appear.
    """
    columns = ["Year", "Month", "Variable", "Value", "n"]

    long = long.dropna(subset=["Value"])
    if len(long) == 0:
        return pd.DataFrame(columns=columns)

    grouped = long.groupby(["Year", "Month", "Variable"])

    summary = grouped["Value"].agg(["mean", "count"]).reset_index()
    summary = summary.rename(columns={"mean": "Value", "count": "n"})
    summary = summary.astype({"Year": int, "Month": int, "n": int})

    return summary[columns]


def monthly_ctd_summary(physical, metadata, primary_stations, variables=None, omissions=None):
    """Calculate monthly means of each physical variable at the primary stations.

    Parameters
    ----------
    physical: pandas.DataFrame
        CTDKey and the physical variable columns.
    metadata: pandas.DataFrame
        Cast metadata, see join_metadata.
    primary_stations: list
        Stations to include, all others are left out.
    variables: list or None
        (name, accessor) pairs of the variables to average. Defaults to CTD_VARIABLES.
    omissions: OmissionLog or None
        Log to record dropped rows in.

    Returns
    -------
    pandas.DataFrame
        One row per Year, Month and Variable with at least one non-missing value.
    """
    joined = join_metadata(physical, metadata, omissions=omissions)
    primary = filter_stations(joined, primary_stations, omissions=omissions)
    long = reshape_long(primary, variables=variables)
    long = drop_missing(long, omissions=omissions)
    return monthly_means(long)
