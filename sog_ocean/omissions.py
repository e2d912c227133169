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

REASONS = [
    "missing_value",
    "unmatched_join_key",
    "non_primary_station",
    "outside_year_range",
    "insufficient_coverage",
]

# Rows that are kept but changed or left undefined. These are not omissions.
NOTES = [
    "relabelled_other",
    "empty_month",
]


def total(entries, stage=None, reason=None):
    n = 0
    for entry in entries:
        if stage is not None and entry["stage"] != stage:
            continue
        if reason is not None and entry["reason"] != reason:
            continue
        n += entry["count"]
    return n


class OmissionLog:
    """
    Record of the rows and groups that the aggregation steps leave out. Nothing in the pipeline is
    fatal, data-quality problems are dealt with by dropping rows, so this is the place to look when
    a month or station is missing from the output.

    Rows that stay in the output but are relabelled or have an undefined value are kept apart in
    notes, so that they don't get counted as omissions.
    """

    def __init__(self):
        self.entries = []
        self.notes = []

    def record(self, stage, reason, count):
        if reason not in REASONS:
            raise ValueError(f"Unknown omission reason {reason}")
        count = int(count)
        if count > 0:
            self.entries.append({"stage": stage, "reason": reason, "count": count})

    def note(self, stage, reason, count):
        if reason not in NOTES:
            raise ValueError(f"Unknown note {reason}")
        count = int(count)
        if count > 0:
            self.notes.append({"stage": stage, "reason": reason, "count": count})

    def count(self, stage=None, reason=None):
        return total(self.entries, stage=stage, reason=reason)

    def count_notes(self, stage=None, reason=None):
        return total(self.notes, stage=stage, reason=reason)

    def to_dataframe(self):
        return pd.DataFrame(self.entries, columns=["stage", "reason", "count"])

    def summary(self):
        if len(self.entries) == 0:
            return "No rows or groups were omitted"
        df = self.to_dataframe().groupby(["stage", "reason"], sort=False)["count"].sum()
        return "\n".join(f"{stage:>12} {reason:<22} {n:>8d}" for (stage, reason), n in df.items())

    def __len__(self):
        return len(self.entries)


def record(omissions, stage, reason, count):
    """Record an omission if a log has been supplied."""
    if omissions is not None:
        omissions.record(stage, reason, count)


def note(omissions, stage, reason, count):
    if omissions is not None:
        omissions.note(stage, reason, count)
