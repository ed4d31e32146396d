from __future__ import annotations

import argparse
from pathlib import Path

from magicbox_config import load_magicbox_config
from magicbox_runtime_utils import print_results, write_report

from .config import DetectorConfig
from .evaluate import run_detection_test


def main() -> None:
    parser = argparse.ArgumentParser(description="Test detector boxes against ground-truth polygons")
    parser.add_argument("--config", type=Path, default=Path("config.json"))
    parser.add_argument("--assets-root", type=Path, default=None)
    args = parser.parse_args()

    shared = load_magicbox_config(args.config)
    assets_root = (args.assets_root or shared.paths["assets_root"]).resolve()

    config = DetectorConfig(
        assets_root=assets_root,
        reports_dir=shared.paths["reports_dir"],
        report_assets_root=shared.paths["report_assets_root"],
        credentials=shared.credentials("detection"),
        expectations=list(shared.detector["expectations"]),
        extensions=list(shared.detector["extensions"]),
    )

    aggregator = run_detection_test(config)
    print_results(aggregator)
    report_path = write_report(config.reports_dir, aggregator)
    print(f"report: {report_path}")
    print(f"overlays: {config.report_assets_root}")


if __name__ == "__main__":
    main()
