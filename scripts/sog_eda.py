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
import sys

from sog_ocean import get_data
from sog_ocean import plotting
from sog_ocean.config import get_data_dir, load_config
from sog_ocean.pipeline import pivot_ctd_summary, run_pipeline
from sog_ocean.satellite import count_coverage, filter_years

if __name__ == "__main__":
    config_file = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).parent / "sog_config.json"
    config = load_config(config_file)

    data_dir = get_data_dir()
    out_dir = data_dir / "Output"
    out_dir.mkdir(parents=True, exist_ok=True)

    for name, url in config.sources.items():
        get_data.download_file(url, data_dir / config.files[name])

    physical = get_data.read_ctd(data_dir / config.files["ctd"], na_values=config.na_values)
    metadata = get_data.read_ctd_metadata(data_dir / config.files["metadata"])
    satellite = get_data.read_satellite(data_dir / config.files["satellite"])

    result = run_pipeline(physical, metadata, satellite, config=config)

    print(f"Primary stations: {', '.join(str(s) for s in result.primary_stations)}")
    print(result.omissions.summary())
    print(f"Relabelled as Other: {result.omissions.count_notes(reason='relabelled_other')}, "
          f"months with no satellite data: {result.omissions.count_notes(reason='empty_month')}")

    result.stations.to_csv(out_dir / "ctd_stations.csv", index=False)
    result.ctd_summary.to_csv(out_dir / "ctd_monthly_summary.csv", index=False)
    pivot_ctd_summary(result.ctd_summary).to_csv(out_dir / "ctd_monthly_summary_wide.csv", index=False)
    result.chl_series.to_csv(out_dir / "chl_time_series.csv", index=False)

    # Figures
    plotting.plot_station_map(result.stations, filename=out_dir / "station_map.png")
    plotting.plot_temporal_coverage(result.stations, filename=out_dir / "temporal_coverage.png")

    coverage = count_coverage(filter_years(satellite, year_range=config.year_range))
    plotting.plot_coverage_map(
        coverage, threshold=config.coverage_threshold, filename=out_dir / "satellite_coverage.png"
    )

    plotting.plot_monthly_ctd(result.ctd_summary, filename=out_dir / "ctd_monthly_means.png")
    plotting.plot_chl_time_series(result.chl_series, filename=out_dir / "chl_time_series.png")
    plotting.plot_chl_anomaly(result.chl_series, filename=out_dir / "chl_anomaly.png")
