"""Cluster analysis of atmospheric back trajectories.

This package turns fixed-length back trajectories sharing one receptor into a
pairwise dissimilarity matrix ("Euclid" or "Angle"), partitions it around
medoids, and labels every trajectory with its cluster, optionally per stratum
such as season or year.
"""

from trajcluster.config import ClusterConfig
from trajcluster.distances import DistanceMetric, distance_matrix
from trajcluster.exceptions import (
    ConfigurationError,
    InsufficientDataError,
    InvalidClusterCountError,
    MalformedMatrixError,
    TrajClusterError,
)
from trajcluster.pipeline import ClusterResult, traj_cluster

__all__ = [
    "ClusterConfig",
    "ClusterResult",
    "ConfigurationError",
    "DistanceMetric",
    "InsufficientDataError",
    "InvalidClusterCountError",
    "MalformedMatrixError",
    "TrajClusterError",
    "distance_matrix",
    "traj_cluster",
]
