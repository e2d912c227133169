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
from datetime import datetime

import numpy as np


def decimal_year(year, month):
    """Continuous time axis for plotting, January of each year sits on the integer."""
    return np.asarray(year) + (np.asarray(month) - 1) / 12.


def convert_dates(years, months, days):
    return [datetime(int(years[i]), int(months[i]), int(days[i])) for i in range(len(months))]


def day_of_year(years, months, days):
    """Calculate the day of year (1-366) for each year, month, day triple.

    Parameters
    ----------
    years: array-like
    months: array-like
    days: array-like

    Returns
    -------
    np.ndarray
        Day of year for each date. Dates with a missing component give nan.
    """
    years, months, days = (np.asarray(a, dtype=float) for a in (years, months, days))
    valid = ~(np.isnan(years) | np.isnan(months) | np.isnan(days))

    out = np.full(len(years), np.nan)
    dates = convert_dates(years[valid], months[valid], days[valid])
    out[valid] = [d.timetuple().tm_yday for d in dates]
    return out


def require_columns(df, columns, name="table"):
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"{name} is missing required columns: {missing}")
