"""Detector test: top bounding box against a ground-truth polygon."""

from .config import DetectorConfig
from .evaluate import evaluate_image, run_detection_test

__all__ = ["DetectorConfig", "evaluate_image", "run_detection_test"]
