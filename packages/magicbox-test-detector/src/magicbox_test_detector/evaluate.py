from __future__ import annotations

from pathlib import Path

import cv2
from tqdm import tqdm

from magicbox_config import build_layout
from magicbox_runtime_utils import (
    Evaluated,
    FailRecord,
    ImageSample,
    Outcome,
    PredictionClient,
    PredictionError,
    ResultAggregator,
    Skipped,
    bbox_to_corners,
    corners_norm_to_px,
    expectation_dirs,
    format_ratio,
    image_shape_fast,
    index_samples,
    list_subdirs,
    log_debug,
    log_info,
    log_warning,
    points_px_to_norm,
    polygons_overlap,
    top_prediction,
)

from .config import DetectorConfig
from .data import load_ground_truth_shape
from .overlays import render_overlay


def evaluate_image(
    predictor: PredictionClient,
    image_path: Path,
    shape_path: Path,
    expected: str,
    overlay_path: Path,
) -> Outcome:
    try:
        predictions = predictor.detect(image_path)
    except PredictionError as exc:
        log_warning(f"There was a network error: {exc}")
        return Skipped("prediction_error", str(exc))

    prediction = top_prediction(predictions)
    if prediction is None or prediction.bounding_box is None:
        log_warning(f"Could not detect anything in image {image_path}")
        return Skipped("no_predictions", str(image_path))

    shape = image_shape_fast(image_path)
    if shape is None:
        log_warning(f"Could not read image size of {image_path}")
        return Skipped("image_shape", str(image_path))
    h, w = shape

    try:
        gt_norm = points_px_to_norm(load_ground_truth_shape(shape_path), w, h)
    except (OSError, ValueError) as exc:
        log_warning(f"Invalid ground truth for {image_path}: {exc}")
        return Skipped("ground_truth", str(exc))

    bb = prediction.bounding_box
    pred_norm = bbox_to_corners(bb.left, bb.top, bb.width, bb.height)
    gt_px = corners_norm_to_px(gt_norm, w, h)
    pred_px = corners_norm_to_px(pred_norm, w, h)

    try:
        render_overlay(
            image_path,
            overlay_path,
            gt_px,
            pred_px,
            f"{prediction.tag_name} {prediction.score:.2f}",
        )
    except (cv2.error, OSError, ValueError) as exc:
        log_warning(f"There was an overlay render error for {image_path}: {exc}")
        return Skipped("render", str(exc))

    log_debug(f"{image_path.name} box={bb.to_dict()}")

    if not polygons_overlap(gt_px, pred_px):
        return Evaluated(
            passed=False,
            failure=FailRecord(
                path=str(image_path),
                expected=expected,
                actual=prediction.tag_name,
                accuracy=prediction.probability,
            ),
        )
    return Evaluated(passed=True)


def run_detection_test(config: DetectorConfig, predictor: PredictionClient | None = None) -> ResultAggregator:
    config.validate()
    if predictor is None:
        if config.credentials is None:
            raise ValueError("detection credentials are required")
        predictor = PredictionClient(config.credentials)

    layout = build_layout(
        assets_root=config.assets_root,
        reports_dir=config.reports_dir,
        report_assets_root=config.report_assets_root,
    )

    aggregator = ResultAggregator()
    plan: list[tuple[Path, list[ImageSample]]] = []
    for class_dir in list_subdirs(config.assets_root):
        samples: list[ImageSample] = []
        for expected, directory in expectation_dirs(class_dir, config.expectations):
            if not directory.is_dir():
                log_warning(f"Missing expectation directory {directory}")
                continue
            samples.extend(index_samples(class_dir, expected, directory, config.extensions, with_shapes=True))
        plan.append((class_dir, samples))

    total = sum(len(samples) for _, samples in plan)
    with tqdm(total=total, desc="test-detector", unit="img", dynamic_ncols=True) as progress:
        for class_dir, samples in plan:
            log_info(f"Testing class {class_dir.name}")
            aggregator.ensure_class(class_dir.name)
            for sample in samples:
                assert sample.shape_path is not None
                outcome = evaluate_image(
                    predictor,
                    sample.image_path,
                    sample.shape_path,
                    sample.expected,
                    layout.overlay_path(sample.image_path, sample.class_name, sample.expected),
                )
                aggregator.record(sample.class_name, outcome)
                progress.update(1)
            log_debug(format_ratio(class_dir.name, aggregator.results[class_dir.name]))

    return aggregator
