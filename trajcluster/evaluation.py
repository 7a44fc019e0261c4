"""Cluster quality metrics on a precomputed trajectory distance matrix."""

from __future__ import annotations

import numpy as np
from sklearn.metrics import silhouette_score


def within_cluster_loss(dist: np.ndarray, labels, medoids) -> float:
    """Total dissimilarity of every item to the medoid of its cluster."""

    labels = np.asarray(labels)
    medoids = np.asarray(medoids)
    return float(dist[np.arange(len(labels)), medoids[labels - 1]].sum())


def compute_internal_metrics(dist: np.ndarray, labels, medoids=None) -> dict:
    labels = np.asarray(labels)
    unique = np.unique(labels)

    metrics = {
        "n_clusters": len(unique),
        "n_traj": len(labels),
        "loss": within_cluster_loss(dist, labels, medoids) if medoids is not None else float("nan"),
    }
    # silhouette is only defined for 2 <= n_clusters <= n_samples - 1
    if len(unique) < 2 or len(unique) >= len(labels):
        metrics["silhouette"] = float("nan")
        metrics["reason"] = "<2 clusters" if len(unique) < 2 else "singleton clusters"
        return metrics

    metrics["silhouette"] = float(silhouette_score(dist, labels, metric="precomputed"))
    return metrics
