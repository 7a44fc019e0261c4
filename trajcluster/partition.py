"""Medoid partitioning of a precomputed trajectory dissimilarity matrix.

Wraps the PAM implementation of the ``kmedoids`` package. The matrix is
checked before it is handed over, and the 0-based labels it returns are
shifted to 1..k in the row order of the matrix.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import kmedoids
import numpy as np

from trajcluster.exceptions import InvalidClusterCountError, MalformedMatrixError


@dataclass
class Partition:
    """Cluster labels (1..k) per matrix row, plus the k medoid row indices."""

    labels: np.ndarray
    medoids: np.ndarray
    loss: float

    @property
    def n_cluster(self) -> int:
        return int(len(self.medoids))


def check_cluster_count(n_cluster: int, n_items: int, stratum: Optional[str] = None) -> None:
    """Require 1 <= n_cluster <= n_items."""

    if n_items < 1:
        raise InvalidClusterCountError("Cannot cluster an empty set of trajectories", stratum=stratum)
    if n_cluster < 1:
        raise InvalidClusterCountError(f"n_cluster must be at least 1, got {n_cluster}", stratum=stratum)
    if n_cluster > n_items:
        raise InvalidClusterCountError(
            f"n_cluster={n_cluster} exceeds the number of trajectories ({n_items})",
            stratum=stratum,
        )


def check_distance_matrix(dist: np.ndarray, atol: float = 1e-8, stratum: Optional[str] = None) -> np.ndarray:
    """Validate a dissimilarity matrix: square, finite, symmetric, zero diagonal, non-negative."""

    dist = np.asarray(dist, dtype=float)
    if dist.ndim != 2 or dist.shape[0] != dist.shape[1]:
        raise MalformedMatrixError(f"Distance matrix must be square, got shape {dist.shape}", stratum=stratum)
    if not np.isfinite(dist).all():
        raise MalformedMatrixError("Distance matrix contains NaN or infinite values", stratum=stratum)
    if not np.allclose(dist, dist.T, rtol=0.0, atol=atol):
        raise MalformedMatrixError("Distance matrix is not symmetric", stratum=stratum)
    if np.any(np.diag(dist) != 0.0):
        raise MalformedMatrixError("Distance matrix has a non-zero diagonal", stratum=stratum)
    if np.any(dist < 0.0):
        raise MalformedMatrixError("Distance matrix has negative entries", stratum=stratum)
    return dist


def pam_partition(
    dist: np.ndarray,
    n_cluster: int,
    max_iter: int = 100,
    stratum: Optional[str] = None,
) -> Partition:
    """
    Partition the rows of ``dist`` into ``n_cluster`` groups around medoids.

    Uses PAM with BUILD initialisation, so repeated calls on the same matrix
    return the same partition.
    """

    dist = check_distance_matrix(dist, stratum=stratum)
    n_items = dist.shape[0]
    check_cluster_count(n_cluster, n_items, stratum=stratum)

    if n_cluster == n_items:
        # every item is its own medoid
        idx = np.arange(n_items)
        return Partition(labels=idx + 1, medoids=idx, loss=0.0)

    result = kmedoids.pam(np.ascontiguousarray(dist), n_cluster, max_iter=max_iter, init="build")
    labels = np.asarray(result.labels, dtype=int) + 1
    medoids = np.asarray(result.medoids, dtype=int)
    logging.debug("PAM converged: k=%d, loss=%.4f, swaps=%s", n_cluster, result.loss, getattr(result, "n_swap", "?"))
    return Partition(labels=labels, medoids=medoids, loss=float(result.loss))
