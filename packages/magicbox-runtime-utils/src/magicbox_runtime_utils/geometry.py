from __future__ import annotations

import cv2
import numpy as np


def corners_norm_to_px(corners_norm: np.ndarray, width: int, height: int) -> np.ndarray:
    out = np.asarray(corners_norm, dtype=np.float64).copy()
    out[:, 0] *= width
    out[:, 1] *= height
    return out


def points_px_to_norm(points_px: np.ndarray, width: int, height: int) -> np.ndarray:
    out = np.asarray(points_px, dtype=np.float64).copy()
    out[:, 0] /= float(width)
    out[:, 1] /= float(height)
    return out


def bbox_to_corners(left: float, top: float, width: float, height: float) -> np.ndarray:
    """Four corners clockwise from top-left."""
    return np.array(
        [
            [left, top],
            [left + width, top],
            [left + width, top + height],
            [left, top + height],
        ],
        dtype=np.float64,
    )


def _cross(o: np.ndarray, a: np.ndarray, b: np.ndarray) -> float:
    return float((a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0]))


def _on_segment(p: np.ndarray, q: np.ndarray, r: np.ndarray) -> bool:
    # r is collinear with p-q
    return (
        min(p[0], q[0]) <= r[0] <= max(p[0], q[0])
        and min(p[1], q[1]) <= r[1] <= max(p[1], q[1])
    )


def segments_intersect(p1: np.ndarray, p2: np.ndarray, q1: np.ndarray, q2: np.ndarray) -> bool:
    d1 = _cross(q1, q2, p1)
    d2 = _cross(q1, q2, p2)
    d3 = _cross(p1, p2, q1)
    d4 = _cross(p1, p2, q2)
    if ((d1 > 0 and d2 < 0) or (d1 < 0 and d2 > 0)) and ((d3 > 0 and d4 < 0) or (d3 < 0 and d4 > 0)):
        return True
    if d1 == 0 and _on_segment(q1, q2, p1):
        return True
    if d2 == 0 and _on_segment(q1, q2, p2):
        return True
    if d3 == 0 and _on_segment(p1, p2, q1):
        return True
    if d4 == 0 and _on_segment(p1, p2, q2):
        return True
    return False


def point_in_polygon(point: np.ndarray, poly: np.ndarray) -> bool:
    contour = np.asarray(poly, dtype=np.float32).reshape(-1, 1, 2)
    return cv2.pointPolygonTest(contour, (float(point[0]), float(point[1])), False) >= 0


def polygons_overlap(a: np.ndarray, b: np.ndarray) -> bool:
    """True when any pair of edges crosses or one polygon lies inside the other."""
    pa = np.asarray(a, dtype=np.float64).reshape(-1, 2)
    pb = np.asarray(b, dtype=np.float64).reshape(-1, 2)
    if len(pa) < 3 or len(pb) < 3:
        raise ValueError("polygons need at least 3 points")

    na = len(pa)
    nb = len(pb)
    for i in range(na):
        a0 = pa[i]
        a1 = pa[(i + 1) % na]
        for j in range(nb):
            if segments_intersect(a0, a1, pb[j], pb[(j + 1) % nb]):
                return True
    return point_in_polygon(pa[0], pb) or point_in_polygon(pb[0], pa)
