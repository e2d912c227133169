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
import pandas as pd

from sog_ocean.omissions import note, record
from sog_ocean.utils import decimal_year, require_columns

SATELLITE_COLUMNS = ["lon", "lat", "year", "month", "chl"]

SERIES_COLUMNS = [
    "year", "month", "year.month", "chla.sog", "chla.sog.sd", "n", "chla.sog.clim", "chla.sog.anom"
]


def filter_years(sat, year_range=(1997, 2018), omissions=None):
    """Keep records with year in year_range. Both ends of the range are included."""
    if year_range[0] > year_range[1]:
        raise ValueError("First element of year range must be less than or equal to the second")
    require_columns(sat, SATELLITE_COLUMNS, "satellite table")

    keep = (sat["year"] >= year_range[0]) & (sat["year"] <= year_range[1])
    record(omissions, "satellite", "outside_year_range", (~keep).sum())
    return sat[keep].reset_index(drop=True)


def count_coverage(sat):
    """Count the non-missing chlorophyll values in each grid cell.

    Returns
    -------
    pandas.DataFrame
        lon, lat and n_obs for every grid cell in the table, including cells with no data.
    """
    grouped = sat.groupby(["lon", "lat"])
    return grouped["chl"].count().rename("n_obs").reset_index()


def filter_coverage(sat, threshold=100, omissions=None):
    """
    Keep the records from grid cells that have at least threshold non-missing chlorophyll values
    over the whole table. The counts are made once over the entire input, not month by month, so
    filter years first if the count should only cover a particular period.
    """
    if threshold < 0:
        raise ValueError("Coverage threshold must not be negative")

    n_obs = sat.groupby(["lon", "lat"])["chl"].transform("count")
    keep = (n_obs >= threshold).to_numpy()

    record(omissions, "satellite", "insufficient_coverage", (~keep).sum())
    return sat[keep].reset_index(drop=True)


def monthly_spatial_mean(sat, omissions=None):
    """Average chlorophyll over all grid cells in each month.

    Parameters
    ----------
    sat: pandas.DataFrame
        Satellite records, normally after filter_years and filter_coverage.
    omissions: OmissionLog or None
        Months with no valid chlorophyll at all are noted as empty_month. They are not omitted.

    Returns
    -------
    pandas.DataFrame
        One row per year and month with chla.sog (mean), chla.sog.sd (sample standard deviation)
        and n (number of grid cells with data). Missing values are skipped. A month with no data
        keeps its row, with n of 0 and a nan mean rather than zero, so the monthly axis has no
        gaps. A month with a single value has a nan standard deviation.
    """
    if len(sat) == 0:
        return pd.DataFrame({
            "year": pd.Series(dtype=int),
            "month": pd.Series(dtype=int),
            "chla.sog": pd.Series(dtype=float),
            "chla.sog.sd": pd.Series(dtype=float),
            "n": pd.Series(dtype=int),
        })

    grouped = sat.groupby(["year", "month"])
    ts = grouped["chl"].agg(["mean", "std", "count"]).reset_index()
    ts = ts.rename(columns={"mean": "chla.sog", "std": "chla.sog.sd", "count": "n"})

    note(omissions, "satellite", "empty_month", (ts["n"] == 0).sum())
    return ts.astype({"year": int, "month": int, "n": int})


def add_year_month(ts):
    out = ts.copy()
    out["year.month"] = decimal_year(out["year"], out["month"])
    return out


def calculate_climatology(ts):
    """Calculate the mean of chla.sog in each calendar month across all years.

    Parameters
    ----------
    ts: pandas.DataFrame
        Monthly time series from monthly_spatial_mean.

    Returns
    -------
    pandas.DataFrame
        month and chla.sog.clim. Months with no data in any year have a nan climatology.
    """
    grouped = ts.groupby("month")
    return grouped["chla.sog"].mean().rename("chla.sog.clim").reset_index()


def calculate_anomalies(ts, climatology):
    """Calculate chlorophyll anomalies relative to the input climatology.

    Parameters
    ----------
    ts: pandas.DataFrame
        Monthly time series with year, month and chla.sog.
    climatology: pandas.DataFrame
        Climatology with month and chla.sog.clim, see calculate_climatology.

    Returns
    -------
    pandas.DataFrame
        Copy of the time series with chla.sog.clim and chla.sog.anom added.
    """
    out = ts.drop(columns=["chla.sog.clim", "chla.sog.anom"], errors="ignore")
    out = pd.merge(out, climatology[["month", "chla.sog.clim"]], on="month", how="left", validate="many_to_one")
    out["chla.sog.anom"] = out["chla.sog"] - out["chla.sog.clim"]
    return out


def chl_time_series(sat, year_range=(1997, 2018), threshold=100, omissions=None):
    """
    Make the Strait of Georgia chlorophyll time series: select the years, drop poorly sampled grid
    cells, average across the strait each month and then calculate the monthly climatology and the
    anomalies from it.
    """
    selection = filter_years(sat, year_range=year_range, omissions=omissions)
    selection = filter_coverage(selection, threshold=threshold, omissions=omissions)

    ts = monthly_spatial_mean(selection, omissions=omissions)
    ts = add_year_month(ts)

    climatology = calculate_climatology(ts)
    ts = calculate_anomalies(ts, climatology)

    ts = ts.sort_values(["year", "month"]).reset_index(drop=True)
    return ts[SERIES_COLUMNS]
