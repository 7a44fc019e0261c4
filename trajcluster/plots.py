"""Plot mean cluster trajectories, one panel per stratum."""

from __future__ import annotations

import math
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402


def plot_cluster_means(
    agg: pd.DataFrame,
    type_col: str,
    output_path: Path,
    cols: str = "Set1",
) -> None:
    """Draw the mean trajectory of every cluster as lon/lat lines."""

    if agg.empty:
        return

    strata = sorted(agg[type_col].unique())
    n_panels = len(strata)
    ncols = min(n_panels, 2)
    nrows = math.ceil(n_panels / ncols)
    fig, axes = plt.subplots(nrows, ncols, figsize=(6 * ncols, 5 * nrows), squeeze=False)

    n_clusters = int(agg["cluster"].max())
    cmap = plt.get_cmap(cols, max(n_clusters, 1))

    for ax, stratum in zip(axes.flat, strata):
        panel = agg[agg[type_col] == stratum]
        for cluster_id, track in panel.groupby("cluster"):
            track = track.sort_values("hour_inc")
            label = f"C{cluster_id}"
            if "freq" in track and track["freq"].notna().any():
                label += f" ({track['freq'].iloc[0]:.0f}%)"
            ax.plot(track["lon"], track["lat"], "-", lw=2, color=cmap(int(cluster_id) - 1), label=label)
        origin = panel[panel["hour_inc"] == panel["hour_inc"].max()]
        if not origin.empty:
            ax.plot(origin["lon"].iloc[0], origin["lat"].iloc[0], "ko", ms=5)
        ax.set_xlabel("Longitude")
        ax.set_ylabel("Latitude")
        ax.set_title(str(stratum))
        ax.legend(loc="best", fontsize=8)

    for ax in list(axes.flat)[n_panels:]:
        ax.set_visible(False)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
