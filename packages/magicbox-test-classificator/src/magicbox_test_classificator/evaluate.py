from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path

from tqdm import tqdm

from magicbox_runtime_utils import (
    Evaluated,
    FailRecord,
    ImageSample,
    Outcome,
    PredictionClient,
    PredictionError,
    ResultAggregator,
    Skipped,
    expectation_dirs,
    format_ratio,
    index_samples,
    list_subdirs,
    log_debug,
    log_info,
    log_warning,
    top_prediction,
)

from .config import ClassificatorConfig


def evaluate_image(predictor: PredictionClient, image_path: Path, expected: str) -> Outcome:
    try:
        predictions = predictor.classify(image_path)
    except PredictionError as exc:
        log_warning(f"There was a network error: {exc}")
        return Skipped("prediction_error", str(exc))

    prediction = top_prediction(predictions)
    if prediction is None:
        log_warning(f"Could not classify image {image_path}")
        return Skipped("no_predictions", str(image_path))

    if prediction.tag_name != expected:
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


def _evaluate_and_record(predictor: PredictionClient, sample: ImageSample, aggregator: ResultAggregator) -> None:
    outcome = evaluate_image(predictor, sample.image_path, sample.expected)
    aggregator.record(sample.class_name, outcome)


def evaluate_expectation_dir(
    predictor: PredictionClient,
    samples: list[ImageSample],
    aggregator: ResultAggregator,
    workers: int,
) -> None:
    """Evaluate one expected-label directory concurrently, returning once every image is recorded."""
    if not samples:
        return
    with ThreadPoolExecutor(max_workers=min(workers, len(samples))) as pool:
        futures = [pool.submit(_evaluate_and_record, predictor, s, aggregator) for s in samples]
        wait(futures)
    for fut in futures:
        fut.result()


def run_classification_test(config: ClassificatorConfig, predictor: PredictionClient | None = None) -> ResultAggregator:
    config.validate()
    if predictor is None:
        if config.credentials is None:
            raise ValueError("classification credentials are required")
        predictor = PredictionClient(config.credentials)

    aggregator = ResultAggregator()
    plan: list[tuple[Path, list[tuple[str, list[ImageSample]]]]] = []
    total = 0
    for class_dir in list_subdirs(config.assets_root):
        groups = []
        for expected, directory in expectation_dirs(class_dir):
            samples = index_samples(class_dir, expected, directory, config.extensions)
            total += len(samples)
            groups.append((expected, samples))
        plan.append((class_dir, groups))

    with tqdm(total=total, desc="test-classificator", unit="img", dynamic_ncols=True) as progress:
        for class_dir, groups in plan:
            log_info(f"Testing class {class_dir.name}")
            aggregator.ensure_class(class_dir.name)
            for expected, samples in groups:
                log_info(f"Testing class expectation {expected}")
                evaluate_expectation_dir(predictor, samples, aggregator, config.workers)
                progress.update(len(samples))
            log_debug(format_ratio(class_dir.name, aggregator.results[class_dir.name]))

    return aggregator
