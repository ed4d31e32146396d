from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ReportLayout:
    assets_root: Path
    reports_dir: Path
    report_assets_root: Path

    def overlay_path(self, image_path: Path, class_name: str, expected: str) -> Path:
        try:
            rel_dir = image_path.parent.relative_to(self.assets_root)
        except ValueError:
            rel_dir = Path(class_name) / expected
        return self.report_assets_root / rel_dir / f"{image_path.stem}_{class_name}_{expected}.png"



def build_layout(
    *,
    assets_root: Path,
    reports_dir: Path = Path("reports"),
    report_assets_root: Path = Path("report_assets"),
) -> ReportLayout:
    return ReportLayout(
        assets_root=assets_root,
        reports_dir=reports_dir,
        report_assets_root=report_assets_root,
    )
