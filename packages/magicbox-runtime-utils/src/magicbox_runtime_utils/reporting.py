from __future__ import annotations

from datetime import datetime, timezone
import json
from pathlib import Path
from typing import Any

from .results import ClassResult, ResultAggregator


def format_ratio(name: str, result: ClassResult) -> str:
    return f"{name} {result.n_success}/{result.n_total}, Percentage: {result.success_ratio():.4f}"


def report_timestamp(now: datetime | None = None) -> str:
    now = now if now is not None else datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def build_report_payload(aggregator: ResultAggregator) -> dict[str, Any]:
    general = aggregator.general()
    return {
        "general": general.to_dict(),
        "results": {name: r.to_dict() for name, r in aggregator.results.items()},
        "failedImages": [f.to_dict() for f in aggregator.failed_images],
        "skipped": {
            "total": aggregator.skipped_total(),
            "byClass": {name: dict(by_reason) for name, by_reason in aggregator.skipped.items()},
        },
    }


def print_results(aggregator: ResultAggregator) -> None:
    print(json.dumps([f.to_dict() for f in aggregator.failed_images], indent=2))
    print(">>>>>>>>>>>>>>>>>>>>>>>>>>>>>>")

    for name, result in aggregator.results.items():
        print(format_ratio(name, result))
        print("------------------------")
    print(format_ratio("Total", aggregator.general()))
    print(f"Skipped images: {aggregator.skipped_total()}")


def write_report(reports_dir: Path, aggregator: ResultAggregator, now: datetime | None = None) -> Path:
    reports_dir.mkdir(parents=True, exist_ok=True)
    report_path = reports_dir / f"{report_timestamp(now)}.json"
    report_path.write_text(json.dumps(build_report_payload(aggregator), indent=2), encoding="utf-8")
    return report_path
