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
import matplotlib.pyplot as plt
import cartopy.crs as ccrs

from sog_ocean.ctd import VARIABLE_NAMES
from sog_ocean.stations import OTHER
from sog_ocean.utils import decimal_year

# Strait of Georgia: lon_min, lon_max, lat_min, lat_max
SOG_EXTENT = [-125.5, -122.5, 48.2, 50.5]


def finish_plot(filename=None):
    if filename is None:
        plt.show()
    else:
        plt.savefig(filename)
    plt.close('all')


def station_order(labels):
    """Primary stations in alphabetical order with Other last."""
    labels = sorted(set(labels) - {OTHER})
    return labels + [OTHER]


def make_map_axes(extent=None, coastlines=True):
    plt.figure()
    plt.gcf().set_size_inches(9, 9)
    proj = ccrs.PlateCarree()
    ax = plt.axes(projection=proj)
    if extent is None:
        extent = SOG_EXTENT
    ax.set_extent(extent, crs=proj)
    if coastlines:
        ax.coastlines(resolution='10m')
    ax.gridlines(draw_labels=True)
    return ax, proj


def plot_station_map(stations, filename=None, coastlines=True, extent=None):
    """Map the CTD casts, coloured by Station2."""
    ax, proj = make_map_axes(extent=extent, coastlines=coastlines)
    for label in station_order(stations.Station2):
        selection = stations[stations.Station2 == label]
        colour = 'lightgrey' if label == OTHER else None
        ax.scatter(
            selection.Longitude, selection.Latitude, s=12, transform=proj, label=label, color=colour
        )
    plt.legend()
    plt.title("CTD casts")
    finish_plot(filename)


def plot_coverage_map(coverage, threshold=None, filename=None, coastlines=True, extent=None):
    """Map the number of non-missing chlorophyll values in each satellite grid cell.

    Parameters
    ----------
    coverage: pandas.DataFrame
        lon, lat and n_obs as returned by satellite.count_coverage.
    threshold: int or None
        If given, grid cells with fewer than threshold values are marked with a cross.
    filename: str, Path or None
        File to save the plot to. The plot is shown if None.
    """
    ax, proj = make_map_axes(extent=extent, coastlines=coastlines)
    p = ax.scatter(coverage.lon, coverage.lat, c=coverage.n_obs, s=10, transform=proj, cmap='viridis')
    if threshold is not None:
        low = coverage[coverage.n_obs < threshold]
        ax.scatter(low.lon, low.lat, marker='x', s=10, color='red', transform=proj, label=f"< {threshold}")
        plt.legend()
    plt.colorbar(p, ax=ax, shrink=0.7, label="Number of months with data")
    plt.title("Satellite chlorophyll coverage")
    finish_plot(filename)


def plot_temporal_coverage(stations, filename=None):
    """Day of year against year for each cast, and the number of casts in each year."""
    fig, axs = plt.subplots(2, 1, sharex=True)
    fig.set_size_inches(12, 9)

    labels = station_order(stations.Station2)
    for label in labels:
        selection = stations[stations.Station2 == label]
        colour = 'lightgrey' if label == OTHER else None
        axs[0].scatter(selection.Year, selection.DayOfYear, s=8, label=label, color=colour)
    axs[0].set_ylabel("Day of year")
    axs[0].set_ylim(0, 367)
    axs[0].legend()

    counts = stations.groupby(["Year", "Station2"]).size().unstack(fill_value=0)
    bottom = np.zeros(len(counts))
    for label in labels:
        if label not in counts.columns:
            continue
        colour = 'lightgrey' if label == OTHER else None
        axs[1].bar(counts.index, counts[label].values, bottom=bottom, label=label, color=colour)
        bottom = bottom + counts[label].values
    axs[1].set_ylabel("Number of casts")
    axs[1].set_xlabel("Year")

    finish_plot(filename)


def plot_monthly_ctd(summary, filename=None, variables=None):
    """One panel per physical variable showing the monthly means at the primary stations."""
    if variables is None:
        variables = [v for v in VARIABLE_NAMES if v in set(summary.Variable)]
    if len(variables) == 0:
        raise ValueError("No variables to plot")

    ncols = 3
    nrows = int(np.ceil(len(variables) / ncols))
    fig, axs = plt.subplots(nrows, ncols, sharex=True, squeeze=False)
    fig.set_size_inches(16, 3 * nrows)

    for ax, variable in zip(axs.flatten(), variables):
        selection = summary[summary.Variable == variable].sort_values(["Year", "Month"])
        time = decimal_year(selection.Year, selection.Month)
        ax.plot(time, selection.Value, marker='.', linewidth=0.5)
        ax.set_title(variable)

    for ax in axs.flatten()[len(variables):]:
        ax.set_visible(False)

    plt.tight_layout()
    finish_plot(filename)


def plot_chl_time_series(series, filename=None):
    """Monthly mean chlorophyll in the strait, the spread across grid cells and the climatology."""
    plt.figure()
    plt.gcf().set_size_inches(16, 6)
    sd = series['chla.sog.sd'].fillna(0.0)
    plt.fill_between(
        series['year.month'], series['chla.sog'] + sd, series['chla.sog'] - sd,
        color="green", alpha=0.3, label="Standard deviation"
    )
    plt.plot(series['year.month'], series['chla.sog'], color="green", label="Monthly mean")
    plt.plot(series['year.month'], series['chla.sog.clim'], color="black", linestyle="--", label="Climatology")
    plt.ylabel("Chlorophyll (mg m$^{-3}$)")
    plt.legend()
    finish_plot(filename)


def plot_chl_anomaly(series, filename=None):
    """Bar chart of chlorophyll anomalies, positive anomalies in green, negative in brown."""
    anomaly = series['chla.sog.anom'].to_numpy()
    colours = np.where(anomaly >= 0, 'green', 'saddlebrown')

    plt.figure()
    plt.gcf().set_size_inches(16, 6)
    plt.bar(series['year.month'], anomaly, width=1 / 12., color=colours)
    plt.axhline(0.0, color="black", linewidth=0.5)
    plt.ylabel("Chlorophyll anomaly (mg m$^{-3}$)")
    finish_plot(filename)
