"""CLI entry point for the trajectory clustering pipeline.

Loads trajectory CSVs, clusters them as configured in a YAML file, and writes
the clustered records, mean cluster trajectories, a per-stratum run report and
an optional plot.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict

from trajcluster.config import config_from_dict, get_nested, load_config
from trajcluster.io import load_trajectories, save_dataframe
from trajcluster.pipeline import traj_cluster


def configure_logging(log_cfg: Dict[str, object]) -> None:
    """Configure root logger with both file and console handlers."""

    log_dir = Path(log_cfg.get("dir", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    filename = log_cfg.get("filename", "trajcluster.log")
    log_path = log_dir / filename
    level_name = str(log_cfg.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s - %(levelname)s - %(message)s"
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    file_handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(fmt))
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(fmt))

    root.addHandler(file_handler)
    root.addHandler(stream_handler)
    root.info("Logging to %s (level=%s)", log_path, level_name)


def main(config_path: str = "config/trajcluster.yaml") -> None:
    cfg = load_config(config_path)

    configure_logging(cfg.get("logging", {}) or {})
    config = config_from_dict(cfg.get("clustering", {}) or {})
    logging.info("Clustering settings: %s", config.as_dict())

    traj = load_trajectories(get_nested(cfg, ["input", "csv_glob"], "trajectories/*.csv"))

    output_dir = Path(get_nested(cfg, ["output", "dir"], "output"))
    exp_name = str(get_nested(cfg, ["output", "experiment_name"], f"{config.method}_{config.n_cluster}"))
    run_dir = output_dir / exp_name

    result = traj_cluster(traj, config)

    save_dataframe(result.data, run_dir / "clustered_trajectories.csv")
    save_dataframe(result.summary(), run_dir / "cluster_means.csv")
    save_dataframe(result.report(), run_dir / "run_report.csv")
    for failure in result.failures:
        logging.warning("No clusters for stratum %s (%s)", failure.stratum, failure.error)

    if config.plot:
        result.plot(run_dir / "figures" / f"cluster_means_{exp_name}.png")


def run() -> None:
    parser = argparse.ArgumentParser(description="Back-trajectory clustering pipeline.")
    parser.add_argument(
        "-c",
        "--config",
        default="config/trajcluster.yaml",
        help="Path to YAML config file.",
    )
    args = parser.parse_args()
    main(args.config)


if __name__ == "__main__":
    run()
