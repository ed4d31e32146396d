from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from magicbox_config import PredictionCredentials


@dataclass(slots=True)
class ClassificatorConfig:
    assets_root: Path
    reports_dir: Path
    credentials: PredictionCredentials | None = None
    workers: int = 8
    extensions: list[str] = field(default_factory=lambda: ["jpg", "jpeg", "png"])

    def validate(self) -> None:
        if not self.assets_root.exists():
            raise FileNotFoundError(f"assets root not found: {self.assets_root}")
        if self.workers < 1:
            raise ValueError("workers must be >= 1")
        if not self.extensions:
            raise ValueError("extensions must not be empty")
