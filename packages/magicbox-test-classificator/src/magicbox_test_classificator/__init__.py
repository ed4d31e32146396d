"""Classifier accuracy test over a class/expected-label image tree."""

from .config import ClassificatorConfig
from .evaluate import evaluate_image, run_classification_test

__all__ = ["ClassificatorConfig", "evaluate_image", "run_classification_test"]
