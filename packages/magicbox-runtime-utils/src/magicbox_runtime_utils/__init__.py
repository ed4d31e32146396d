from .console import log_debug, log_error, log_info, log_warning
from .dataset import (
    ImageSample,
    expectation_dirs,
    image_shape_fast,
    index_samples,
    list_images,
    list_subdirs,
    scan_images,
    sidecar_shape_path,
)
from .geometry import bbox_to_corners, corners_norm_to_px, points_px_to_norm, polygons_overlap
from .prediction import BoundingBox, Prediction, PredictionClient, PredictionError, top_prediction
from .reporting import build_report_payload, format_ratio, print_results, report_timestamp, write_report
from .results import ClassResult, Evaluated, FailRecord, Outcome, ResultAggregator, Skipped

__all__ = [
    "log_debug",
    "log_error",
    "log_info",
    "log_warning",
    "ImageSample",
    "expectation_dirs",
    "image_shape_fast",
    "index_samples",
    "list_images",
    "list_subdirs",
    "scan_images",
    "sidecar_shape_path",
    "bbox_to_corners",
    "corners_norm_to_px",
    "points_px_to_norm",
    "polygons_overlap",
    "BoundingBox",
    "Prediction",
    "PredictionClient",
    "PredictionError",
    "top_prediction",
    "build_report_payload",
    "format_ratio",
    "print_results",
    "report_timestamp",
    "write_report",
    "ClassResult",
    "Evaluated",
    "FailRecord",
    "Outcome",
    "ResultAggregator",
    "Skipped",
]
