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
import numpy as np

from sog_ocean.omissions import note
from sog_ocean.utils import require_columns

OTHER = "Other"


def count_stations(ctd):
    """Count the CTD casts at each station.

    Parameters
    ----------
    ctd: pandas.DataFrame
        CTD observations with a Station column.

    Returns
    -------
    pandas.Series
        Number of casts per station, largest first. Stations with equal counts stay in the order
        in which they first appear in the table.
    """
    require_columns(ctd, ["Station"], "CTD table")
    counts = ctd.groupby("Station", sort=False).size()
    return counts.sort_values(ascending=False, kind="stable")


def get_primary_stations(ctd, n=3):
    """Return the n most frequently sampled stations."""
    if n < 1:
        raise ValueError("Number of primary stations must be at least 1")
    return list(count_stations(ctd).index[:n])


def classify_stations(ctd, primary_stations=None, n=3, omissions=None):
    """
    Label each CTD observation with Station2, which is the Station if it is one of the primary
    stations and "Other" if it isn't. A missing Station is always "Other". If no primary stations
    are given they are worked out from the input table with get_primary_stations.

    Returns a new DataFrame, the input is not changed.
    """
    require_columns(ctd, ["Station"], "CTD table")
    if primary_stations is None:
        primary_stations = get_primary_stations(ctd, n=n)

    in_primary = ctd["Station"].isin(list(primary_stations)).to_numpy()
    note(omissions, "stations", "relabelled_other", np.count_nonzero(~in_primary))

    out = ctd.copy()
    out["Station2"] = np.where(in_primary, ctd["Station"].to_numpy(dtype=object), OTHER)
    return out
