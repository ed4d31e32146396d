from __future__ import annotations

import cv2
import numpy as np

from magicbox_runtime_utils import (
    expectation_dirs,
    image_shape_fast,
    index_samples,
    list_images,
    list_subdirs,
    scan_images,
    sidecar_shape_path,
)


def _touch(path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x")


def test_walk_groups_by_class_and_expected_label(tmp_path) -> None:
    root = tmp_path / "assets"
    _touch(root / "wood" / "good" / "b.png")
    _touch(root / "wood" / "good" / "a.JPG")
    _touch(root / "wood" / "good" / "notes.txt")
    _touch(root / "wood" / "bad" / "c.jpeg")
    _touch(root / "metal" / "bad" / "d.png")
    _touch(root / "stray.png")

    classes = list_subdirs(root)
    assert [c.name for c in classes] == ["metal", "wood"]

    wood = classes[1]
    assert [e for e, _ in expectation_dirs(wood)] == ["bad", "good"]
    assert [e for e, _ in expectation_dirs(wood, ["bad"])] == ["bad"]

    samples = index_samples(wood, "good", wood / "good", ["jpg", "jpeg", "png"])
    assert [s.image_path.name for s in samples] == ["a.JPG", "b.png"]
    assert all(s.class_name == "wood" and s.expected == "good" and s.shape_path is None for s in samples)


def test_index_samples_pairs_sidecar_shapes(tmp_path) -> None:
    d = tmp_path / "metal" / "bad"
    _touch(d / "img.png")
    samples = index_samples(tmp_path / "metal", "bad", d, [".png"], with_shapes=True)
    assert samples[0].shape_path == d / "img.json"
    assert sidecar_shape_path(d / "img.png") == d / "img.json"


def test_list_images_missing_directory_is_empty(tmp_path) -> None:
    assert list_images(tmp_path / "missing", ["png"]) == []
    assert list_subdirs(tmp_path / "missing") == []


def test_scan_images_is_recursive_and_sorted(tmp_path) -> None:
    _touch(tmp_path / "b" / "deep" / "z.png")
    _touch(tmp_path / "a" / "y.jpg")
    _touch(tmp_path / "a" / "skip.gif")
    found = scan_images(tmp_path, ["jpg", "jpeg", "png"])
    assert [p.relative_to(tmp_path).as_posix() for p in found] == ["a/y.jpg", "b/deep/z.png"]


def test_image_shape_fast_reads_png_and_jpeg_headers(tmp_path) -> None:
    img = np.zeros((20, 30, 3), dtype=np.uint8)
    png = tmp_path / "img.png"
    jpg = tmp_path / "img.jpg"
    assert cv2.imwrite(str(png), img)
    assert cv2.imwrite(str(jpg), img)

    assert image_shape_fast(png) == (20, 30)
    assert image_shape_fast(jpg) == (20, 30)


def test_image_shape_fast_rejects_non_images(tmp_path) -> None:
    bogus = tmp_path / "bogus.png"
    bogus.write_bytes(b"not an image")
    assert image_shape_fast(bogus) is None
    assert image_shape_fast(tmp_path / "missing.png") is None
    assert image_shape_fast(None) is None
