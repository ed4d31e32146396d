from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
import json
from pathlib import Path
from typing import Any

from tqdm import tqdm

from magicbox_runtime_utils import (
    BoundingBox,
    Prediction,
    PredictionClient,
    PredictionError,
    log_debug,
    log_error,
    log_warning,
    report_timestamp,
    scan_images,
    top_prediction,
)

from .config import DEFAULT_START_TIME, GeneratorConfig


@dataclass(frozen=True, slots=True)
class GeneratedImageRecord:
    id: int
    date: datetime
    img_url: str
    scratch: float
    box: BoundingBox | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": report_timestamp(self.date),
            "imgUrl": self.img_url,
            "scratch": self.scratch,
            "box": None if self.box is None else self.box.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class GeneratorState:
    next_id: int = 0
    current_date: datetime = DEFAULT_START_TIME

    def advance(self, step: timedelta) -> "GeneratorState":
        return GeneratorState(next_id=self.next_id + 1, current_date=self.current_date + step)


def scratch_score(prediction: Prediction, bad_label: str = "bad") -> float:
    """Confidence that the image is defective, whichever tag won."""
    probability = float(prediction.probability or 0.0)
    if prediction.tag_name == bad_label:
        return probability
    return 1.0 - probability


def build_record(
    image_path: Path,
    prediction: Prediction,
    box: BoundingBox | None,
    state: GeneratorState,
    *,
    bad_label: str = "bad",
    step: timedelta = timedelta(minutes=5),
) -> tuple[GeneratedImageRecord, GeneratorState]:
    record = GeneratedImageRecord(
        id=state.next_id,
        date=state.current_date,
        img_url=image_path.as_posix(),
        scratch=scratch_score(prediction, bad_label),
        box=box,
    )
    return record, state.advance(step)


def _detect_box(detector: PredictionClient, image_path: Path) -> BoundingBox | None:
    try:
        predictions = detector.detect(image_path)
    except PredictionError as exc:
        log_warning(f"Detection failed for {image_path}: {exc}")
        return None
    prediction = top_prediction(predictions)
    if prediction is None:
        log_warning(f"No predictions detection for {image_path}")
        return None
    return prediction.bounding_box


def write_records(path: Path, records: list[GeneratedImageRecord]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps([r.to_dict() for r in records], indent=2), encoding="utf-8")


def generate_dataset(
    config: GeneratorConfig,
    classifier: PredictionClient | None = None,
    detector: PredictionClient | None = None,
) -> list[GeneratedImageRecord]:
    config.validate()
    if classifier is None:
        if config.classification is None:
            raise ValueError("classification credentials are required")
        classifier = PredictionClient(config.classification)
    if detector is None:
        if config.detection is None:
            raise ValueError("detection credentials are required")
        detector = PredictionClient(config.detection)

    step = timedelta(minutes=config.step_minutes)
    state = GeneratorState(next_id=0, current_date=config.start_time)
    records: list[GeneratedImageRecord] = []

    files = scan_images(config.assets_root, config.extensions)
    for image_path in tqdm(files, desc="data-generator", unit="img", dynamic_ncols=True):
        log_debug(f"Processing file {image_path}")
        try:
            predictions = classifier.classify(image_path)
        except PredictionError as exc:
            log_error(f"Error processing image {image_path}: {exc}")
            continue

        prediction = top_prediction(predictions)
        if prediction is None:
            log_warning(f"No predictions for {image_path}")
            continue

        box = _detect_box(detector, image_path)
        record, state = build_record(image_path, prediction, box, state, bad_label=config.bad_label, step=step)
        records.append(record)

    write_records(config.result_json, records)
    return records
