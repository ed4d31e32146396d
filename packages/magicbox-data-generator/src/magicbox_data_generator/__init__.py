"""Labeled dataset generator backed by the classification and detection endpoints."""

from .config import GeneratorConfig
from .generator import GeneratedImageRecord, GeneratorState, build_record, generate_dataset, scratch_score

__all__ = [
    "GeneratorConfig",
    "GeneratedImageRecord",
    "GeneratorState",
    "build_record",
    "generate_dataset",
    "scratch_score",
]
