from __future__ import annotations

from dataclasses import dataclass, field
import json
import os
from pathlib import Path
from typing import Any, Mapping


_ALLOWED_TOP = {
    "paths",
    "classification",
    "detection",
    "evaluate",
    "detector",
    "generator",
}

_CREDENTIAL_FIELDS = ("endpoint", "project_id", "iteration_name", "prediction_key")

# Names the classificator read before the per-section prefix existed.
_LEGACY_ENV = {
    "classification": {
        "endpoint": "PREDICTION_ENDPOINT",
        "project_id": "PREDICTION_PROJECT_ID",
        "iteration_name": "PREDICTION_ITERATION_NAME",
        "prediction_key": "PREDICTION_KEY",
    },
}


@dataclass(frozen=True, slots=True)
class PredictionCredentials:
    endpoint: str
    project_id: str
    iteration_name: str
    prediction_key: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class MagicboxConfig:
    config_path: Path
    paths: dict[str, Path]
    classification: dict[str, Any]
    detection: dict[str, Any]
    evaluate: dict[str, Any]
    detector: dict[str, Any]
    generator: dict[str, Any]

    def credentials(self, section: str, environ: Mapping[str, str] | None = None) -> PredictionCredentials:
        if section not in {"classification", "detection"}:
            raise ValueError(f"no credentials section named {section!r}")
        return resolve_credentials(section, getattr(self, section), os.environ if environ is None else environ)



def _expect_dict(payload: Any, where: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValueError(f"{where} must be an object")
    return payload



def _expect_keys(obj: dict[str, Any], allowed: set[str], where: str, required: set[str] | None = None) -> None:
    extra = sorted(set(obj) - allowed)
    if extra:
        raise ValueError(f"unknown keys in {where}: {extra}")
    req = required if required is not None else set()
    missing = sorted(req - set(obj))
    if missing:
        raise ValueError(f"missing required keys in {where}: {missing}")



def _expect_str_list(value: Any, where: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) and v for v in value):
        raise ValueError(f"{where} must be a list of non-empty strings")
    return list(value)



def _resolve_path(config_root: Path, raw: str | Path) -> Path:
    p = Path(raw)
    if not p.is_absolute():
        p = (config_root / p).resolve()
    else:
        p = p.resolve()
    return p



def resolve_credentials(section: str, payload: Mapping[str, Any], environ: Mapping[str, str]) -> PredictionCredentials:
    """Fill every credential field from the config section, then ``<SECTION>_<FIELD>``, then the legacy
    ``PREDICTION_<FIELD>`` names (classification only)."""
    legacy = _LEGACY_ENV.get(section, {})
    values: dict[str, str] = {}
    missing: list[str] = []
    for name in _CREDENTIAL_FIELDS:
        raw = payload.get(name)
        if raw is None or raw == "":
            raw = environ.get(f"{section.upper()}_{name.upper()}")
        if (raw is None or raw == "") and name in legacy:
            raw = environ.get(legacy[name])
        if raw is None or raw == "":
            missing.append(name)
            continue
        values[name] = str(raw)
    if missing:
        env_names = [f"{section.upper()}_{m.upper()}" for m in missing]
        raise ValueError(f"missing {section} credentials: {missing} (set them in config or via {env_names})")
    return PredictionCredentials(**values)



def load_magicbox_config(path: Path | str = "config.json") -> MagicboxConfig:
    config_path = Path(path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"config not found: {config_path}")

    payload = json.loads(config_path.read_text(encoding="utf-8"))
    payload = _expect_dict(payload, "config")
    _expect_keys(payload, _ALLOWED_TOP, "config", required={"paths"})

    config_root = config_path.parent

    paths = _expect_dict(payload.get("paths", {}), "paths")
    _expect_keys(
        paths,
        {"assets_root", "reports_dir", "report_assets_root", "result_json"},
        "paths",
        required={"assets_root"},
    )

    credential_sections: dict[str, dict[str, Any]] = {}
    for section in ("classification", "detection"):
        obj = _expect_dict(payload.get(section, {}), section)
        _expect_keys(obj, set(_CREDENTIAL_FIELDS), section)
        credential_sections[section] = obj

    evaluate = _expect_dict(payload.get("evaluate", {}), "evaluate")
    _expect_keys(evaluate, {"workers", "extensions"}, "evaluate")
    workers = int(evaluate.get("workers", 8))
    if workers < 1:
        raise ValueError("evaluate.workers must be >= 1")

    detector = _expect_dict(payload.get("detector", {}), "detector")
    _expect_keys(detector, {"expectations", "extensions"}, "detector")
    expectations = _expect_str_list(detector.get("expectations", ["bad"]), "detector.expectations")
    if not expectations:
        raise ValueError("detector.expectations must not be empty")

    generator = _expect_dict(payload.get("generator", {}), "generator")
    _expect_keys(generator, {"bad_label", "start_time", "step_minutes", "extensions"}, "generator")
    step_minutes = int(generator.get("step_minutes", 5))
    if step_minutes < 1:
        raise ValueError("generator.step_minutes must be >= 1")

    paths_norm = {
        "assets_root": _resolve_path(config_root, str(paths["assets_root"])),
        "reports_dir": _resolve_path(config_root, str(paths.get("reports_dir", "reports"))),
        "report_assets_root": _resolve_path(config_root, str(paths.get("report_assets_root", "report_assets"))),
        "result_json": _resolve_path(config_root, str(paths.get("result_json", "result.json"))),
    }

    return MagicboxConfig(
        config_path=config_path,
        paths=paths_norm,
        classification=credential_sections["classification"],
        detection=credential_sections["detection"],
        evaluate={
            "workers": workers,
            "extensions": _expect_str_list(evaluate.get("extensions", ["jpg", "jpeg", "png"]), "evaluate.extensions"),
        },
        detector={
            "expectations": expectations,
            "extensions": _expect_str_list(detector.get("extensions", ["png"]), "detector.extensions"),
        },
        generator={
            "bad_label": str(generator.get("bad_label", "bad")),
            "start_time": str(generator.get("start_time", "2021-11-20T23:45:30Z")),
            "step_minutes": step_minutes,
            "extensions": _expect_str_list(generator.get("extensions", ["jpg", "jpeg", "png"]), "generator.extensions"),
        },
    )
