"""Stratified orchestration of trajectory clustering.

Runs normalization, distance computation and medoid partitioning either once
per stratum (clusters only meaningful inside their stratum) or once over the
whole data set followed by a split into strata for reporting
(``split_after=True``, one global labelling).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from trajcluster import distances
from trajcluster.config import ClusterConfig
from trajcluster.evaluation import compute_internal_metrics
from trajcluster.exceptions import InsufficientDataError, TrajClusterError
from trajcluster.normalize import ensure_required_columns, normalize_trajectories
from trajcluster.partition import Partition, check_cluster_count, pam_partition
from trajcluster.strata import cut_data, type_column
from trajcluster.summary import cluster_frequencies, mean_trajectories

GLOBAL_STRATUM = "all data"
UNASSIGNED_STRATUM = "unassigned"


@dataclass
class StratumOutcome:
    """Result of one clustering run; ``error`` is set when the run failed."""

    stratum: str
    data: Optional[pd.DataFrame] = None
    partition: Optional[Partition] = None
    metrics: Dict[str, object] = field(default_factory=dict)
    n_dropped: int = 0
    error: Optional[TrajClusterError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ClusterResult:
    """Clustered records plus per-stratum bookkeeping."""

    data: pd.DataFrame
    type_col: str
    config: ClusterConfig
    outcomes: List[StratumOutcome]

    @property
    def failures(self) -> List[StratumOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def partitions(self) -> Dict[str, Partition]:
        return {o.stratum: o.partition for o in self.outcomes if o.ok}

    def report(self) -> pd.DataFrame:
        """One row per clustering run: trajectories used/dropped, status and failing stage."""

        rows = []
        for o in self.outcomes:
            rows.append(
                {
                    "stratum": o.stratum,
                    "n_traj": 0 if o.data is None else int(o.data["date"].nunique()),
                    "n_dropped": o.n_dropped,
                    "status": "ok" if o.ok else "failed",
                    "stage": None if o.ok else o.error.stage,
                    "message": None if o.ok else o.error.message,
                    **{k: v for k, v in o.metrics.items() if k in ("silhouette", "loss")},
                }
            )
        return pd.DataFrame(rows)

    def summary(self) -> pd.DataFrame:
        """Mean trajectory per cluster, hour increment and stratum."""

        return mean_trajectories(self.data, self.type_col)

    def frequencies(self) -> pd.DataFrame:
        return cluster_frequencies(self.data, self.type_col)

    def cluster_sizes(self) -> Dict[Tuple[str, int], int]:
        freq = self.frequencies()
        return {(row[self.type_col], int(row["cluster"])): int(row["n_traj"]) for _, row in freq.iterrows()}

    def plot(self, output_path: str | Path) -> None:
        from trajcluster.plots import plot_cluster_means

        plot_cluster_means(self.summary(), self.type_col, Path(output_path), cols=self.config.cols)


def calc_traj(traj: pd.DataFrame, config: ClusterConfig, stratum: Optional[str] = None) -> StratumOutcome:
    """
    Cluster one set of trajectories.

    The cluster count is checked against the number of valid trajectories
    before the distance matrix is built.
    """

    tset = normalize_trajectories(traj, traj_length=config.traj_length, stratum=stratum)
    check_cluster_count(config.n_cluster, tset.n_traj, stratum=stratum)

    logging.info(
        "Computing %s distances for %d trajectories%s",
        config.method,
        tset.n_traj,
        f" in stratum {stratum}" if stratum is not None else "",
    )
    try:
        dist = distances.distance_matrix(tset.lon, tset.lat, config.method)
    except ValueError as exc:
        if isinstance(exc, TrajClusterError):
            raise
        raise TrajClusterError(str(exc), stage="distance", stratum=stratum) from exc

    partition = pam_partition(dist, config.n_cluster, max_iter=config.max_iter, stratum=stratum)

    # records are grouped per trajectory in matrix column order
    records = tset.records.copy()
    records["cluster"] = np.repeat(partition.labels, tset.traj_length)

    metrics = compute_internal_metrics(dist, partition.labels, partition.medoids) if config.evaluate else {}
    return StratumOutcome(
        stratum=stratum if stratum is not None else GLOBAL_STRATUM,
        data=records,
        partition=partition,
        metrics=metrics,
        n_dropped=tset.n_dropped,
    )


def _cluster_stratum(stratum: str, traj: pd.DataFrame, config: ClusterConfig) -> StratumOutcome:
    """Run :func:`calc_traj` for one stratum, capturing failures instead of raising."""

    try:
        return calc_traj(traj, config, stratum=stratum)
    except TrajClusterError as exc:
        logging.warning("Skipping stratum %s: %s", stratum, exc)
        return StratumOutcome(stratum=stratum, error=exc, n_dropped=int(traj["date"].nunique()))


def traj_cluster(
    traj: pd.DataFrame,
    config: Optional[ClusterConfig] = None,
    **overrides,
) -> ClusterResult:
    """
    Cluster back trajectories and return the records with a ``cluster`` column.

    Keyword overrides replace fields of ``config`` (or of the defaults), e.g.
    ``traj_cluster(traj, method="Angle", n_cluster=4, type="season")``.
    """

    config = (config or ClusterConfig()).update(**overrides).validate()
    ensure_required_columns(traj)
    col = type_column(config.type)

    if config.split_after:
        # one global computation, so any error is fatal
        outcome = calc_traj(traj, config)
        outcome.data = cut_data(outcome.data, config.type, hemisphere=config.hemisphere)
        logging.info(
            "Clustered %d trajectories into %d clusters, reported by %s",
            outcome.data["date"].nunique(),
            config.n_cluster,
            col,
        )
        return ClusterResult(data=outcome.data, type_col=col, config=config, outcomes=[outcome])

    cut = cut_data(traj, config.type, hemisphere=config.hemisphere)
    groups = [(str(name), group) for name, group in cut.groupby(col, sort=True)]
    if not groups:
        raise InsufficientDataError("No trajectory records to cluster")

    outcomes: List[StratumOutcome] = Parallel(n_jobs=config.n_jobs)(
        delayed(_cluster_stratum)(name, group, config) for name, group in groups
    )

    unassigned = cut[cut[col].isna()]
    if not unassigned.empty:
        n_unassigned = len(unassigned["date"].drop_duplicates())
        outcomes.append(
            StratumOutcome(
                stratum=UNASSIGNED_STRATUM,
                error=TrajClusterError(
                    f"{n_unassigned} trajectories have a missing or unparseable date",
                    stage="stratification",
                    stratum=UNASSIGNED_STRATUM,
                ),
                n_dropped=n_unassigned,
            )
        )

    succeeded = [o for o in outcomes if o.ok]
    if not succeeded:
        raise outcomes[0].error
    for o in outcomes:
        if not o.ok:
            logging.warning("Stratum %s failed at %s stage: %s", o.stratum, o.error.stage, o.error.message)

    data = pd.concat([o.data for o in succeeded], ignore_index=True)
    logging.info(
        "Clustered %d trajectories in %d of %d strata by %s",
        data["date"].nunique(),
        len(succeeded),
        len(outcomes),
        col,
    )
    return ClusterResult(data=data, type_col=col, config=config, outcomes=outcomes)
