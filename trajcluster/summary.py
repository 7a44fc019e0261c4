"""Derived per-cluster views of clustered trajectories.

Computes the mean trajectory of each cluster (per hour increment and stratum)
and the share of trajectories falling in each cluster. Both return new
DataFrames and leave the clustered data untouched.
"""

from __future__ import annotations

import pandas as pd


def cluster_frequencies(data: pd.DataFrame, type_col: str) -> pd.DataFrame:
    """Number and percentage of trajectories per (stratum, cluster)."""

    if data.empty or "cluster" not in data.columns:
        return pd.DataFrame(columns=[type_col, "cluster", "n_traj", "freq"])

    counts = (
        data.groupby([type_col, "cluster"])["date"]
        .nunique()
        .rename("n_traj")
        .reset_index()
    )
    totals = counts.groupby(type_col)["n_traj"].transform("sum")
    counts["freq"] = 100.0 * counts["n_traj"] / totals
    return counts


def mean_trajectories(data: pd.DataFrame, type_col: str) -> pd.DataFrame:
    """
    Mean lat/lon for each (cluster, hour_inc, stratum), with the cluster's
    trajectory count and percentage attached.
    """

    if data.empty or "cluster" not in data.columns:
        return pd.DataFrame(columns=["cluster", "hour_inc", type_col, "lat", "lon", "n_traj", "freq"])

    agg = (
        data.groupby(["cluster", "hour_inc", type_col])[["lat", "lon"]]
        .mean()
        .reset_index()
    )
    freq = cluster_frequencies(data, type_col)
    agg = agg.merge(freq, on=[type_col, "cluster"], how="left")
    return agg.sort_values([type_col, "cluster", "hour_inc"]).reset_index(drop=True)
