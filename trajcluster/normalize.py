"""Reshape raw trajectory samples into fixed-length lon/lat matrices.

Trajectories are grouped by release timestamp and only those with exactly the
expected number of samples are kept. Kept samples are ordered oldest first
(``hour_inc`` ascending), so row ``L - 1`` of each matrix is the receptor
origin.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import pandas as pd

from trajcluster.exceptions import InsufficientDataError

REQUIRED_COLUMNS: List[str] = ["date", "hour_inc", "lat", "lon"]


@dataclass
class TrajectorySet:
    """M valid trajectories of length L, column j is trajectory ``dates[j]``."""

    dates: pd.Index
    lon: np.ndarray
    lat: np.ndarray
    records: pd.DataFrame
    n_dropped: int = 0

    @property
    def n_traj(self) -> int:
        return int(self.lon.shape[1])

    @property
    def traj_length(self) -> int:
        return int(self.lon.shape[0])


def ensure_required_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Validate that the DataFrame contains the trajectory columns."""

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")
    return df


def normalize_trajectories(
    traj: pd.DataFrame,
    traj_length: int = 97,
    stratum: Optional[str] = None,
) -> TrajectorySet:
    """
    Filter ``traj`` to trajectories of exactly ``traj_length`` samples and build
    the (traj_length, M) longitude and latitude matrices.
    """

    ensure_required_columns(traj)

    # encounter order of release timestamps fixes the column order
    counts = traj.groupby("date", sort=False)["lat"].transform("size")
    kept = traj[counts == traj_length]

    n_total = int(traj["date"].nunique())
    kept_dates = pd.unique(kept["date"])
    n_dropped = n_total - len(kept_dates)
    if n_dropped:
        logging.info(
            "Dropped %d of %d trajectories without exactly %d samples%s",
            n_dropped,
            n_total,
            traj_length,
            f" (stratum {stratum})" if stratum is not None else "",
        )

    if len(kept_dates) == 0:
        raise InsufficientDataError(
            f"No trajectories with exactly {traj_length} samples out of {n_total}",
            stratum=stratum,
        )

    records = kept.assign(_col=kept.groupby("date", sort=False).ngroup())
    records = records.sort_values(["_col", "hour_inc"], kind="mergesort").drop(columns="_col")
    records = records.reset_index(drop=True)

    # column-major fill: each column holds one trajectory, oldest sample first
    lon = records["lon"].to_numpy(dtype=float).reshape(len(kept_dates), traj_length).T
    lat = records["lat"].to_numpy(dtype=float).reshape(len(kept_dates), traj_length).T

    return TrajectorySet(
        dates=pd.Index(kept_dates),
        lon=np.ascontiguousarray(lon),
        lat=np.ascontiguousarray(lat),
        records=records,
        n_dropped=n_dropped,
    )
