import numpy as np
import pandas as pd
import pytest

ORIGIN = (-0.12, 51.5)


def straight_trajectory(date, dlon, dlat, length=97, origin=ORIGIN):
    """Records for a trajectory moving (dlon, dlat) degrees per hour towards the origin."""

    hour_inc = np.arange(-(length - 1), 1)
    return pd.DataFrame(
        {
            "date": pd.Timestamp(date),
            "hour_inc": hour_inc,
            "lon": origin[0] + dlon * hour_inc,
            "lat": origin[1] + dlat * hour_inc,
        }
    )


@pytest.fixture
def make_traj():
    return straight_trajectory


@pytest.fixture
def seasonal_traj():
    """Westerly and northerly trajectories spread over January and July."""

    parts = [
        straight_trajectory("2009-01-05 00:00", 0.20, 0.0),
        straight_trajectory("2009-01-06 00:00", 0.22, 0.0),
        straight_trajectory("2009-01-07 00:00", 0.0, -0.20),
        straight_trajectory("2009-07-05 00:00", 0.21, 0.0),
        straight_trajectory("2009-07-06 00:00", 0.0, -0.21),
        straight_trajectory("2009-07-07 00:00", 0.0, -0.23),
    ]
    return pd.concat(parts, ignore_index=True)
