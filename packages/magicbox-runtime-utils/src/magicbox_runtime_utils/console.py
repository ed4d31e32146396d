"""Console lines that stay readable under tqdm progress bars."""

from __future__ import annotations

from tqdm import tqdm


def log(level: str, message: str) -> None:
    tqdm.write(f"[{level}] {message}")


def log_info(message: str) -> None:
    log("info", message)


def log_warning(message: str) -> None:
    log("warn", message)


def log_error(message: str) -> None:
    log("error", message)


def log_debug(message: str) -> None:
    log("debug", message)
