from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import struct
from typing import Iterable


@dataclass(slots=True)
class ImageSample:
    class_name: str
    expected: str
    image_path: Path
    shape_path: Path | None = None


def normalize_extensions(extensions: Iterable[str]) -> set[str]:
    out: set[str] = set()
    for ext in extensions:
        e = ext.strip().lower()
        if not e:
            continue
        out.add(e if e.startswith(".") else f".{e}")
    return out


def list_subdirs(root: Path) -> list[Path]:
    if not root.exists():
        return []
    return sorted(p for p in root.iterdir() if p.is_dir())


def list_images(directory: Path, extensions: Iterable[str]) -> list[Path]:
    if not directory.exists():
        return []
    exts = normalize_extensions(extensions)
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in exts)


def scan_images(root: Path, extensions: Iterable[str]) -> list[Path]:
    """Every matching image below ``root``, at any depth."""
    exts = normalize_extensions(extensions)
    return sorted(p for p in root.rglob("*") if p.is_file() and p.suffix.lower() in exts)


def sidecar_shape_path(image_path: Path) -> Path:
    return image_path.with_suffix(".json")


def expectation_dirs(class_dir: Path, expectations: Iterable[str] | None = None) -> list[tuple[str, Path]]:
    """``(expected_label, directory)`` pairs of one class, all subdirectories unless named."""
    if expectations is None:
        return [(p.name, p) for p in list_subdirs(class_dir)]
    return [(str(e), class_dir / str(e)) for e in expectations]


def index_samples(
    class_dir: Path,
    expected: str,
    directory: Path,
    extensions: Iterable[str],
    *,
    with_shapes: bool = False,
) -> list[ImageSample]:
    return [
        ImageSample(
            class_name=class_dir.name,
            expected=expected,
            image_path=p,
            shape_path=sidecar_shape_path(p) if with_shapes else None,
        )
        for p in list_images(directory, extensions)
    ]


def _png_shape(path: Path) -> tuple[int, int] | None:
    with path.open("rb") as f:
        sig = f.read(8)
        if sig != b"\x89PNG\r\n\x1a\n":
            return None
        length = struct.unpack(">I", f.read(4))[0]
        chunk_type = f.read(4)
        if length != 13 or chunk_type != b"IHDR":
            return None
        data = f.read(13)
        w, h = struct.unpack(">II", data[:8])
        return int(h), int(w)


def _jpeg_shape(path: Path) -> tuple[int, int] | None:
    with path.open("rb") as f:
        if f.read(2) != b"\xff\xd8":
            return None
        while True:
            marker_prefix = f.read(1)
            if not marker_prefix:
                return None
            if marker_prefix != b"\xff":
                continue
            marker = f.read(1)
            if not marker:
                return None
            while marker == b"\xff":
                marker = f.read(1)
                if not marker:
                    return None
            m = marker[0]
            if m in (0xD8, 0xD9):
                continue
            seg_len_raw = f.read(2)
            if len(seg_len_raw) != 2:
                return None
            seg_len = struct.unpack(">H", seg_len_raw)[0]
            if seg_len < 2:
                return None
            if m in (0xC0, 0xC1, 0xC2, 0xC3, 0xC5, 0xC6, 0xC7, 0xC9, 0xCA, 0xCB, 0xCD, 0xCE, 0xCF):
                payload = f.read(seg_len - 2)
                if len(payload) < 5:
                    return None
                h = struct.unpack(">H", payload[1:3])[0]
                w = struct.unpack(">H", payload[3:5])[0]
                return int(h), int(w)
            f.seek(seg_len - 2, 1)


def image_shape_fast(path: Path | None) -> tuple[int, int] | None:
    """``(height, width)`` read from the file header, None when unreadable."""
    if path is None or not path.exists():
        return None
    suffix = path.suffix.lower()
    try:
        if suffix == ".png":
            return _png_shape(path)
        if suffix in {".jpg", ".jpeg"}:
            return _jpeg_shape(path)
    except (OSError, struct.error):
        return None
    return None
