"""Assign release timestamps to strata (season, year, weekday, ...).

The stratum is written to a new column named after the type, e.g. ``season``.
A callable can be supplied instead of a type name; it receives each release
timestamp and returns a string label, stored in the ``stratum`` column.
"""

from __future__ import annotations

import logging
from typing import Callable, Union

import pandas as pd

from trajcluster.exceptions import ConfigurationError

DEFAULT_LABEL = "all data"
CALLABLE_COLUMN = "stratum"

_NORTHERN_SEASONS = {
    12: "winter (DJF)", 1: "winter (DJF)", 2: "winter (DJF)",
    3: "spring (MAM)", 4: "spring (MAM)", 5: "spring (MAM)",
    6: "summer (JJA)", 7: "summer (JJA)", 8: "summer (JJA)",
    9: "autumn (SON)", 10: "autumn (SON)", 11: "autumn (SON)",
}
_SOUTHERN_SEASONS = {
    12: "summer (DJF)", 1: "summer (DJF)", 2: "summer (DJF)",
    3: "autumn (MAM)", 4: "autumn (MAM)", 5: "autumn (MAM)",
    6: "winter (JJA)", 7: "winter (JJA)", 8: "winter (JJA)",
    9: "spring (SON)", 10: "spring (SON)", 11: "spring (SON)",
}


def type_column(type: Union[str, Callable]) -> str:
    """Name of the column that holds the stratum for ``type``."""

    return type if isinstance(type, str) else CALLABLE_COLUMN


def _labels(dates: pd.Series, type: str, hemisphere: str) -> pd.Series:
    if type == "default":
        return pd.Series(DEFAULT_LABEL, index=dates.index).where(dates.notna())
    if type == "year":
        return dates.dt.year.map(lambda y: str(int(y)), na_action="ignore")
    if type == "month":
        return dates.dt.month_name()
    if type == "season":
        seasons = _NORTHERN_SEASONS if hemisphere == "northern" else _SOUTHERN_SEASONS
        return dates.dt.month.map(seasons)
    if type == "weekday":
        return dates.dt.day_name()
    if type == "weekend":
        return dates.dt.dayofweek.map(lambda d: "weekend" if d >= 5 else "weekday", na_action="ignore")
    if type == "hour":
        return dates.dt.hour.map(lambda h: str(int(h)), na_action="ignore")
    raise ConfigurationError(f"Unsupported type: {type!r}")


def cut_data(
    traj: pd.DataFrame,
    type: Union[str, Callable] = "default",
    hemisphere: str = "northern",
) -> pd.DataFrame:
    """Return a copy of ``traj`` with a stratum column computed from ``date``."""

    if "date" not in traj.columns:
        raise ValueError("A 'date' column is required for stratification.")

    dates = pd.to_datetime(traj["date"], errors="coerce")
    col = type_column(type)
    if callable(type):
        # one call per release time, not per sample
        lookup = {d: str(type(d)) for d in dates.dropna().drop_duplicates()}
        labels = dates.map(lookup)
    else:
        labels = _labels(dates, type, hemisphere)

    out = traj.copy()
    out[col] = labels.to_numpy()
    missing = out[col].isna()
    if missing.any():
        logging.warning(
            "%d rows (%d trajectories) have a missing or unparseable date and no %s stratum",
            int(missing.sum()),
            len(out.loc[missing, "date"].drop_duplicates()),
            col,
        )
    logging.info("Split %d rows into %d strata by %s", len(out), out[col].nunique(), col)
    return out
