from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock
from typing import Union


@dataclass(slots=True)
class ClassResult:
    n_total: int = 0
    n_success: int = 0
    n_failed: int = 0

    def success_ratio(self) -> float:
        if self.n_total == 0:
            return float("nan")
        return self.n_success / self.n_total

    def to_dict(self) -> dict[str, int]:
        return {"nFailed": self.n_failed, "nSuccess": self.n_success, "nTotal": self.n_total}


@dataclass(frozen=True, slots=True)
class FailRecord:
    path: str
    expected: str
    actual: str
    accuracy: float | None

    def to_dict(self) -> dict[str, object]:
        return {"path": self.path, "expected": self.expected, "actual": self.actual, "accuracy": self.accuracy}


@dataclass(frozen=True, slots=True)
class Evaluated:
    passed: bool
    failure: FailRecord | None = None


@dataclass(frozen=True, slots=True)
class Skipped:
    reason: str
    message: str = ""


Outcome = Union[Evaluated, Skipped]


@dataclass(slots=True)
class ResultAggregator:
    """Per-class counters, failures and skips shared by concurrent evaluations."""

    results: dict[str, ClassResult] = field(default_factory=dict)
    failed_images: list[FailRecord] = field(default_factory=list)
    skipped: dict[str, dict[str, int]] = field(default_factory=dict)
    _lock: Lock = field(default_factory=Lock, repr=False)

    def ensure_class(self, class_name: str) -> ClassResult:
        with self._lock:
            return self._ensure(class_name)

    def _ensure(self, class_name: str) -> ClassResult:
        result = self.results.get(class_name)
        if result is None:
            result = ClassResult()
            self.results[class_name] = result
        return result

    def record(self, class_name: str, outcome: Outcome) -> None:
        with self._lock:
            result = self._ensure(class_name)
            if isinstance(outcome, Skipped):
                by_reason = self.skipped.setdefault(class_name, {})
                by_reason[outcome.reason] = by_reason.get(outcome.reason, 0) + 1
                return
            if outcome.passed:
                result.n_success += 1
            else:
                if outcome.failure is not None:
                    self.failed_images.append(outcome.failure)
                result.n_failed += 1
            result.n_total += 1

    def general(self) -> ClassResult:
        with self._lock:
            total = ClassResult()
            for result in self.results.values():
                total.n_failed += result.n_failed
                total.n_success += result.n_success
                total.n_total += result.n_total
            return total

    def skipped_total(self) -> int:
        with self._lock:
            return sum(sum(by_reason.values()) for by_reason in self.skipped.values())
