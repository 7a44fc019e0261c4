"""Input/output helpers for trajectory clustering.

Covers CSV loading of trajectory records, column renaming from the common
``hour.inc`` spelling, and CSV saving.
"""

from __future__ import annotations

import glob
import logging
from pathlib import Path
from typing import List

import pandas as pd

from trajcluster.normalize import ensure_required_columns

COLUMN_ALIASES = {"hour.inc": "hour_inc", "latitude": "lat", "longitude": "lon"}


def load_trajectories(csv_glob: str) -> pd.DataFrame:
    """Load and concatenate trajectory CSVs matching the glob."""

    paths = sorted(glob.glob(csv_glob))
    if not paths:
        raise FileNotFoundError(f"No CSV files matched glob: {csv_glob}")

    frames: List[pd.DataFrame] = []
    for path in paths:
        logging.info("Reading %s", path)
        frame = pd.read_csv(path, low_memory=False)
        frames.append(frame.rename(columns={k: v for k, v in COLUMN_ALIASES.items() if k in frame.columns}))

    combined = pd.concat(frames, ignore_index=True)
    ensure_required_columns(combined)
    combined["date"] = pd.to_datetime(combined["date"])
    combined["hour_inc"] = combined["hour_inc"].astype(int)
    logging.info("Loaded %d rows (%d trajectories) from %d files", len(combined), combined["date"].nunique(), len(paths))
    return combined


def save_dataframe(df: pd.DataFrame, path: str | Path) -> None:
    """Persist a DataFrame to CSV."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    logging.info("Saved %d rows to %s", len(df), path)
