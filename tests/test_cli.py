import logging

import pandas as pd

from trajcluster.cli import main


def test_cli_writes_outputs(tmp_path, seasonal_traj):
    csv_path = tmp_path / "traj.csv"
    seasonal_traj.rename(columns={"hour_inc": "hour.inc"}).to_csv(csv_path, index=False)
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "\n".join(
            [
                "input:",
                f"  csv_glob: '{csv_path}'",
                "clustering:",
                "  method: Angle",
                "  n_cluster: 2",
                "  type: season",
                "  evaluate: true",
                "  plot: true",
                "output:",
                f"  dir: '{tmp_path / 'out'}'",
                "  experiment_name: test",
                "logging:",
                f"  dir: '{tmp_path / 'logs'}'",
            ]
        ),
        encoding="utf-8",
    )

    try:
        main(str(config_path))
    finally:
        for handler in logging.getLogger().handlers[:]:
            handler.close()
            logging.getLogger().removeHandler(handler)

    run_dir = tmp_path / "out" / "test"
    clustered = pd.read_csv(run_dir / "clustered_trajectories.csv")
    assert {"cluster", "season", "hour_inc"} <= set(clustered.columns)
    assert clustered["date"].nunique() == 6
    assert len(pd.read_csv(run_dir / "run_report.csv")) == 2
    assert (run_dir / "cluster_means.csv").exists()
    assert (run_dir / "figures" / "cluster_means_test.png").exists()
