from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np

GROUND_TRUTH_COLOR = (0, 255, 0)
PREDICTION_COLOR = (0, 0, 255)


def _draw_polygon(image: np.ndarray, corners: np.ndarray, color: tuple[int, int, int], text: str) -> None:
    poly = np.round(corners).reshape((-1, 1, 2)).astype(np.int32)
    cv2.polylines(image, [poly], isClosed=True, color=color, thickness=2)
    x0, y0 = int(poly[0][0][0]), int(poly[0][0][1])
    cv2.putText(image, text, (x0, max(12, y0 - 4)), cv2.FONT_HERSHEY_SIMPLEX, 0.5, color, 1, cv2.LINE_AA)


def render_overlay(
    image_path: Path,
    output_path: Path,
    ground_truth_px: np.ndarray,
    prediction_px: np.ndarray,
    prediction_text: str,
) -> Path:
    img = cv2.imread(str(image_path), cv2.IMREAD_COLOR)
    if img is None:
        raise ValueError(f"failed to read image {image_path}")

    _draw_polygon(img, ground_truth_px, GROUND_TRUTH_COLOR, "GT")
    _draw_polygon(img, prediction_px, PREDICTION_COLOR, prediction_text)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(output_path), img):
        raise OSError(f"failed to write overlay {output_path}")
    return output_path
