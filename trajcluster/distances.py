"""Pairwise trajectory dissimilarity matrices using only NumPy.

Two metrics are available. ``Euclid`` sums the planar distance between the
(lon, lat) positions of two trajectories at every time step. ``Angle``
follows Sirois and Bottenheim (1995) and sums, over consecutive steps, the
angle between the movement vectors of the two trajectories, so it groups
trajectories by transport direction rather than position.

Inputs are the (L, M) longitude and latitude matrices built by
:func:`trajcluster.normalize.normalize_trajectories`, one column per
trajectory ordered oldest sample first.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Dict

import numpy as np

from trajcluster.exceptions import ConfigurationError

DistanceFn = Callable[[np.ndarray, np.ndarray], np.ndarray]


class DistanceMetric(str, enum.Enum):
    EUCLID = "euclid"
    ANGLE = "angle"


def get_metric(name: str | DistanceMetric) -> DistanceMetric:
    """Resolve a metric name case-insensitively ("Euclid" or "Angle")."""

    if isinstance(name, DistanceMetric):
        return name
    try:
        return DistanceMetric(str(name).lower())
    except ValueError:
        raise ConfigurationError(f"Unsupported distance method: {name!r} (expected 'Euclid' or 'Angle')") from None


def _validate_matrices(lon: np.ndarray, lat: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Ensure lon/lat are matching 2-D float arrays of shape (L, M)."""

    lon = np.asarray(lon, dtype=float)
    lat = np.asarray(lat, dtype=float)
    if lon.ndim != 2 or lat.ndim != 2:
        raise ValueError("Longitude and latitude must be 2-D arrays of shape (L, M).")
    if lon.shape != lat.shape:
        raise ValueError(f"Shape mismatch: lon {lon.shape} vs lat {lat.shape}.")
    return lon, lat


def dist_euclid(lon: np.ndarray, lat: np.ndarray) -> np.ndarray:
    """
    Sum over all time steps of the Euclidean distance between positions.

    D[i, j] = sum_t sqrt((lon[t, i] - lon[t, j])**2 + (lat[t, i] - lat[t, j])**2)
    """

    lon, lat = _validate_matrices(lon, lat)
    n = lon.shape[1]
    res = np.zeros((n, n), dtype=float)

    for i in range(n - 1):
        dx = lon[:, i + 1 :] - lon[:, i : i + 1]
        dy = lat[:, i + 1 :] - lat[:, i : i + 1]
        row = np.sqrt(dx * dx + dy * dy).sum(axis=0)
        res[i, i + 1 :] = row
        res[i + 1 :, i] = row
    return res


def dist_angle(lon: np.ndarray, lat: np.ndarray) -> np.ndarray:
    """
    Sum over consecutive steps of the angle (radians) between movement vectors.

    A step where either trajectory stands still has no defined angle and
    contributes zero; the remaining steps still count towards the pair.
    """

    lon, lat = _validate_matrices(lon, lat)
    n = lon.shape[1]
    res = np.zeros((n, n), dtype=float)
    if lon.shape[0] < 2:
        return res

    mx = np.diff(lon, axis=0)
    my = np.diff(lat, axis=0)
    still = (mx == 0.0) & (my == 0.0)

    for i in range(n - 1):
        dot = mx[:, i + 1 :] * mx[:, i : i + 1] + my[:, i + 1 :] * my[:, i : i + 1]
        cross = mx[:, i + 1 :] * my[:, i : i + 1] - my[:, i + 1 :] * mx[:, i : i + 1]
        # no direction at a step where either trajectory stands still
        theta = np.arctan2(np.abs(cross), dot)
        theta[still[:, i + 1 :] | still[:, i : i + 1]] = 0.0
        row = theta.sum(axis=0)
        res[i, i + 1 :] = row
        res[i + 1 :, i] = row
    return res


_METRICS: Dict[DistanceMetric, DistanceFn] = {
    DistanceMetric.EUCLID: dist_euclid,
    DistanceMetric.ANGLE: dist_angle,
}


def get_distance_fn(name: str | DistanceMetric) -> DistanceFn:
    """Return the matrix function for a given metric name."""

    return _METRICS[get_metric(name)]


def distance_matrix(lon: np.ndarray, lat: np.ndarray, metric: str | DistanceMetric = "euclid") -> np.ndarray:
    """Compute the symmetric (M, M) dissimilarity matrix with a zero diagonal.

    NaN entries (only possible from NaN coordinates in the input) are set
    to zero: no directional signal counts as no dissimilarity.
    """

    dist_fn = get_distance_fn(metric)
    res = dist_fn(lon, lat)

    nan_mask = np.isnan(res)
    n_nan = int(np.count_nonzero(nan_mask[np.triu_indices_from(res, k=1)]))
    if n_nan:
        logging.warning("Replaced %d undefined %s distances with 0", n_nan, get_metric(metric).value)
        res[nan_mask] = 0.0
    np.fill_diagonal(res, 0.0)
    return res
