from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from magicbox_config import PredictionCredentials


@dataclass(slots=True)
class DetectorConfig:
    assets_root: Path
    reports_dir: Path
    report_assets_root: Path
    credentials: PredictionCredentials | None = None
    expectations: list[str] = field(default_factory=lambda: ["bad"])
    extensions: list[str] = field(default_factory=lambda: ["png"])

    def validate(self) -> None:
        if not self.assets_root.exists():
            raise FileNotFoundError(f"assets root not found: {self.assets_root}")
        if not self.expectations:
            raise ValueError("expectations must not be empty")
        if not self.extensions:
            raise ValueError("extensions must not be empty")
