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

from pathlib import Path
import shutil

import pandas as pd
import requests
import xarray as xr

from sog_ocean.ctd import METADATA_COLUMNS
from sog_ocean.satellite import SATELLITE_COLUMNS
from sog_ocean.utils import day_of_year, require_columns


def download_file(url, out_path):
    """Download url to out_path unless the file is already there. Returns True if a file was written."""
    out_path = Path(out_path)

    if out_path.exists():
        print(f"File {out_path} already exists, skipping.")
        return False

    out_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        r = requests.get(url, stream=True, headers={'User-agent': 'Mozilla/5.0'})

        if r.status_code == 200:
            with open(out_path, 'wb') as f:
                r.raw.decode_content = True
                shutil.copyfileobj(r.raw, f)
            return True

        print(f"Download of {url} failed with status {r.status_code}")

    except requests.exceptions.ConnectionError:
        print(f"Couldn't connect to {url}")

    return False


def read_ctd(path, na_values=(-99.0,)):
    """Read the CTD physical variable table. Values equal to any of na_values become nan."""
    print(f"Reading CTD data from {path}")
    ctd = pd.read_csv(path, na_values=list(na_values))
    require_columns(ctd, ["CTDKey"], "CTD physical table")
    return ctd


def read_ctd_metadata(path):
    """Read the cast metadata, one row per cast. A DayOfYear column is added if there isn't one."""
    print(f"Reading CTD metadata from {path}")
    metadata = pd.read_csv(path)
    require_columns(metadata, METADATA_COLUMNS, "CTD metadata table")

    metadata = metadata.drop_duplicates().reset_index(drop=True)
    if "DayOfYear" not in metadata.columns:
        metadata["DayOfYear"] = day_of_year(metadata.Year, metadata.Month, metadata.Day)
    return metadata


def read_satellite(path, variable="chl"):
    """Read the gridded satellite chlorophyll as a table of lon, lat, year, month and chl.

    Parameters
    ----------
    path: str or Path
        A csv file with the columns already in place or a netCDF file.
    variable: str
        Name of the chlorophyll variable in the file.

    Returns
    -------
    pandas.DataFrame
        One row per grid cell and month.
    """
    path = Path(path)
    print(f"Reading satellite data from {path}")

    if path.suffix == ".csv":
        sat = pd.read_csv(path)
    elif path.suffix == ".nc":
        with xr.open_dataset(path) as ds:
            sat = ds[variable].to_dataframe().reset_index()
        sat = sat.rename(columns={"longitude": "lon", "latitude": "lat"})
        if "time" in sat.columns:
            times = pd.to_datetime(sat["time"])
            sat["year"] = times.dt.year
            sat["month"] = times.dt.month
    else:
        raise ValueError(f"Unrecognised satellite file type {path.suffix}")

    sat = sat.rename(columns={variable: "chl"})
    require_columns(sat, SATELLITE_COLUMNS, "satellite table")
    return sat[SATELLITE_COLUMNS]
