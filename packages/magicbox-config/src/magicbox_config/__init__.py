from .schema import MagicboxConfig, PredictionCredentials, load_magicbox_config, resolve_credentials
from .layout import ReportLayout, build_layout

__all__ = [
    "MagicboxConfig",
    "PredictionCredentials",
    "ReportLayout",
    "load_magicbox_config",
    "resolve_credentials",
    "build_layout",
]
