import pandas as pd
import pytest

from trajcluster.exceptions import ConfigurationError
from trajcluster.strata import cut_data


def _frame():
    dates = pd.to_datetime(["2009-01-15 06:00", "2009-04-15 12:00", "2009-07-18 18:00", "2009-10-15 00:00"])
    return pd.DataFrame({"date": dates, "lat": 0.0, "lon": 0.0, "hour_inc": 0})


def test_default_is_a_single_bucket():
    out = cut_data(_frame())
    assert set(out["default"]) == {"all data"}


def test_seasons_by_hemisphere():
    north = cut_data(_frame(), "season")["season"].tolist()
    south = cut_data(_frame(), "season", hemisphere="southern")["season"].tolist()
    assert north == ["winter (DJF)", "spring (MAM)", "summer (JJA)", "autumn (SON)"]
    assert south == ["summer (DJF)", "autumn (MAM)", "winter (JJA)", "spring (SON)"]


def test_calendar_types():
    frame = _frame()
    assert cut_data(frame, "year")["year"].unique().tolist() == ["2009"]
    assert cut_data(frame, "weekday")["weekday"].iloc[0] == "Thursday"
    assert cut_data(frame, "weekend")["weekend"].tolist() == ["weekday", "weekday", "weekend", "weekday"]
    assert cut_data(frame, "hour")["hour"].tolist() == ["6", "12", "18", "0"]


def test_input_is_not_modified():
    frame = _frame()
    cut_data(frame, "month")
    assert "month" not in frame.columns


def test_unknown_type_raises():
    with pytest.raises(ConfigurationError):
        cut_data(_frame(), "fortnight")


def test_missing_dates_get_no_stratum():
    frame = _frame()
    frame.loc[1, "date"] = pd.NaT

    year = cut_data(frame, "year")["year"]
    hour = cut_data(frame, "hour")["hour"]
    weekend = cut_data(frame, "weekend")["weekend"]

    assert year.isna().tolist() == [False, True, False, False]
    assert year.dropna().unique().tolist() == ["2009"]
    assert pd.isna(hour[1])
    assert pd.isna(weekend[1])
    assert pd.isna(cut_data(frame)["default"][1])
