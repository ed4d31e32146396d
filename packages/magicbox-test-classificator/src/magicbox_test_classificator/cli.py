from __future__ import annotations

import argparse
from pathlib import Path

from magicbox_config import build_layout, load_magicbox_config
from magicbox_runtime_utils import print_results, write_report

from .config import ClassificatorConfig
from .evaluate import run_classification_test


def main() -> None:
    parser = argparse.ArgumentParser(description="Test classifier predictions against expected labels")
    parser.add_argument("--config", type=Path, default=Path("config.json"))
    parser.add_argument("--assets-root", type=Path, default=None)
    args = parser.parse_args()

    shared = load_magicbox_config(args.config)
    layout = build_layout(
        assets_root=(args.assets_root or shared.paths["assets_root"]).resolve(),
        reports_dir=shared.paths["reports_dir"],
        report_assets_root=shared.paths["report_assets_root"],
    )

    config = ClassificatorConfig(
        assets_root=layout.assets_root,
        reports_dir=layout.reports_dir,
        credentials=shared.credentials("classification"),
        workers=int(shared.evaluate["workers"]),
        extensions=list(shared.evaluate["extensions"]),
    )

    aggregator = run_classification_test(config)
    print_results(aggregator)
    report_path = write_report(layout.reports_dir, aggregator)
    print(f"report: {report_path}")


if __name__ == "__main__":
    main()
