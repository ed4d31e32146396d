from __future__ import annotations

import argparse
from pathlib import Path

from magicbox_config import load_magicbox_config

from .config import GeneratorConfig, parse_start_time
from .generator import generate_dataset


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a labeled dataset from classification and detection predictions")
    parser.add_argument("--config", type=Path, default=Path("config.json"))
    parser.add_argument("--assets-root", type=Path, default=None)
    args = parser.parse_args()

    shared = load_magicbox_config(args.config)
    gen = shared.generator

    config = GeneratorConfig(
        assets_root=(args.assets_root or shared.paths["assets_root"]).resolve(),
        result_json=shared.paths["result_json"],
        classification=shared.credentials("classification"),
        detection=shared.credentials("detection"),
        bad_label=str(gen["bad_label"]),
        start_time=parse_start_time(str(gen["start_time"])),
        step_minutes=int(gen["step_minutes"]),
        extensions=list(gen["extensions"]),
    )

    records = generate_dataset(config)
    print(f"generated {len(records)} records in {config.result_json}")


if __name__ == "__main__":
    main()
