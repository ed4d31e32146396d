from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from magicbox_config import PredictionCredentials

DEFAULT_START_TIME = datetime(2021, 11, 20, 23, 45, 30, tzinfo=timezone.utc)


def parse_start_time(raw: str) -> datetime:
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    value = datetime.fromisoformat(text)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


@dataclass(slots=True)
class GeneratorConfig:
    assets_root: Path
    result_json: Path = Path("result.json")
    classification: PredictionCredentials | None = None
    detection: PredictionCredentials | None = None
    bad_label: str = "bad"
    start_time: datetime = DEFAULT_START_TIME
    step_minutes: int = 5
    extensions: list[str] = field(default_factory=lambda: ["jpg", "jpeg", "png"])

    def validate(self) -> None:
        if not self.assets_root.exists():
            raise FileNotFoundError(f"assets root not found: {self.assets_root}")
        if self.step_minutes < 1:
            raise ValueError("step_minutes must be >= 1")
        if not self.bad_label:
            raise ValueError("bad_label must not be empty")
        if not self.extensions:
            raise ValueError("extensions must not be empty")
