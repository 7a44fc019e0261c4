import numpy as np
import pytest

from trajcluster.distances import DistanceMetric, dist_angle, dist_euclid, distance_matrix, get_metric
from trajcluster.exceptions import ConfigurationError


def _random_matrices(n_steps=12, n_traj=6, seed=0):
    rng = np.random.default_rng(seed)
    lon = np.cumsum(rng.normal(size=(n_steps, n_traj)), axis=0)
    lat = np.cumsum(rng.normal(size=(n_steps, n_traj)), axis=0)
    return lon, lat


@pytest.mark.parametrize("metric", ["Euclid", "Angle"])
def test_distance_matrix_symmetry(metric):
    lon, lat = _random_matrices()
    D = distance_matrix(lon, lat, metric=metric)
    assert D.shape == (6, 6)
    assert np.array_equal(D, D.T)
    assert np.all(np.diag(D) == 0.0)
    assert np.all(D >= 0.0)


def test_euclid_sums_pointwise_distances():
    lon = np.array([[0.0, 3.0], [1.0, 4.0], [2.0, 5.0]])
    lat = np.array([[0.0, 4.0], [0.0, 4.0], [0.0, 4.0]])
    D = dist_euclid(lon, lat)
    assert D[0, 1] == pytest.approx(15.0)


def test_euclid_identical_copy_is_zero():
    lon, lat = _random_matrices(n_traj=1)
    lon = np.hstack([lon, lon])
    lat = np.hstack([lat, lat])
    assert distance_matrix(lon, lat, "euclid")[0, 1] == 0.0


def test_angle_identical_movement_is_zero():
    lon, lat = _random_matrices(n_traj=1)
    # same movement vectors, shifted start
    lon = np.hstack([lon, lon + 5.0])
    lat = np.hstack([lat, lat - 2.0])
    assert dist_angle(lon, lat)[0, 1] == 0.0


def test_angle_perpendicular_and_opposite_steps():
    lon = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, -1.0]])
    lat = np.array([[0.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    D = dist_angle(lon, lat)
    assert D[0, 1] == pytest.approx(np.pi / 2)
    assert D[0, 2] == pytest.approx(np.pi)


def test_angle_steps_without_movement_contribute_zero():
    lon = np.array([[0.0, 0.0], [0.0, 0.0], [1.0, 0.0]])
    lat = np.array([[0.0, 1.0], [0.0, 1.0], [0.0, 2.0]])
    # step 1: both still; step 2: east vs north
    assert dist_angle(lon, lat)[0, 1] == pytest.approx(np.pi / 2)


def test_angle_still_trajectory_contributes_zero():
    lon, lat = _random_matrices(n_traj=2)
    lon = np.hstack([lon, np.full((lon.shape[0], 1), 1.5)])
    lat = np.hstack([lat, np.full((lat.shape[0], 1), -0.5)])

    raw = dist_angle(lon, lat)
    assert not np.isnan(raw).any()
    assert raw[0, 2] == 0.0 and raw[1, 2] == 0.0

    D = distance_matrix(lon, lat, "angle")
    assert D[0, 2] == 0.0 and D[2, 1] == 0.0
    assert D[0, 1] > 0.0


def test_angle_single_still_step_keeps_other_steps():
    steps = np.arange(6, dtype=float)[:, None]
    east = np.hstack([steps, np.zeros_like(steps)])
    stall = east.copy()
    stall[3:, 0] -= 1.0  # no movement between steps 2 and 3
    lon = np.hstack([east[:, :1], stall[:, :1], np.zeros_like(steps)])
    lat = np.hstack([np.zeros_like(steps), np.zeros_like(steps), steps])

    D = distance_matrix(lon, lat, "angle")

    assert D[0, 1] == 0.0
    # east vs north: 5 perpendicular steps; stalled east: 4 perpendicular steps
    assert D[0, 2] == pytest.approx(5 * np.pi / 2)
    assert D[1, 2] == pytest.approx(4 * np.pi / 2)


def test_nan_coordinates_are_sanitized_to_zero():
    lon, lat = _random_matrices(n_traj=3)
    lon[4, 2] = np.nan

    D = distance_matrix(lon, lat, "angle")

    assert not np.isnan(D).any()
    assert D[0, 2] == 0.0 and D[1, 2] == 0.0
    assert D[0, 1] > 0.0


def test_metric_names_are_case_insensitive():
    assert get_metric("EUCLID") is DistanceMetric.EUCLID
    assert get_metric("Angle") is DistanceMetric.ANGLE


def test_unknown_metric_raises():
    with pytest.raises(ConfigurationError):
        get_metric("dtw")


def test_shape_mismatch_raises():
    with pytest.raises(ValueError, match="Shape mismatch"):
        dist_euclid(np.zeros((3, 2)), np.zeros((3, 3)))
