from __future__ import annotations

import json
from pathlib import Path

import numpy as np


def load_ground_truth_shape(path: Path) -> np.ndarray:
    """Pixel polygon of the first annotated shape in a sidecar file."""
    if not path.exists():
        raise FileNotFoundError(f"ground truth not found: {path}")
    payload = json.loads(path.read_text(encoding="utf-8"))
    shapes = payload.get("shapes") if isinstance(payload, dict) else None
    if not isinstance(shapes, list) or not shapes:
        raise ValueError(f"no shapes in {path}")
    points = shapes[0].get("points") if isinstance(shapes[0], dict) else None
    if points is None:
        raise ValueError(f"first shape has no points in {path}")
    try:
        poly = np.array(points, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"shape in {path} is not numeric: {exc}") from exc
    if poly.ndim != 2 or poly.shape[1] != 2 or poly.shape[0] < 3:
        raise ValueError(f"shape in {path} must have at least 3 [x, y] points, got {poly.shape}")
    return poly
