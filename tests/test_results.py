from __future__ import annotations

from datetime import datetime, timezone
import json
import math
from concurrent.futures import ThreadPoolExecutor

from magicbox_runtime_utils import (
    Evaluated,
    FailRecord,
    ResultAggregator,
    Skipped,
    build_report_payload,
    format_ratio,
    print_results,
    report_timestamp,
    write_report,
)


def _fail(path: str = "a.png") -> Evaluated:
    return Evaluated(passed=False, failure=FailRecord(path=path, expected="good", actual="bad", accuracy=0.87))


def test_mismatch_appends_one_fail_record() -> None:
    agg = ResultAggregator()
    agg.record("metal", _fail())

    assert agg.failed_images == [FailRecord(path="a.png", expected="good", actual="bad", accuracy=0.87)]
    r = agg.results["metal"]
    assert (r.n_total, r.n_success, r.n_failed) == (1, 0, 1)


def test_match_increments_success_without_fail_record() -> None:
    agg = ResultAggregator()
    agg.record("metal", Evaluated(passed=True))

    assert agg.failed_images == []
    r = agg.results["metal"]
    assert (r.n_total, r.n_success, r.n_failed) == (1, 1, 0)


def test_skipped_leaves_counters_untouched() -> None:
    agg = ResultAggregator()
    agg.ensure_class("metal")
    agg.record("metal", Skipped("prediction_error", "timeout"))
    agg.record("metal", Skipped("no_predictions"))
    agg.record("metal", Skipped("no_predictions"))

    r = agg.results["metal"]
    assert (r.n_total, r.n_success, r.n_failed) == (0, 0, 0)
    assert agg.failed_images == []
    assert agg.skipped == {"metal": {"prediction_error": 1, "no_predictions": 2}}
    assert agg.skipped_total() == 3


def test_classes_keep_first_seen_order_and_are_not_reallocated() -> None:
    agg = ResultAggregator()
    first = agg.ensure_class("wood")
    agg.ensure_class("metal")
    assert agg.ensure_class("wood") is first
    assert list(agg.results) == ["wood", "metal"]


def test_general_is_elementwise_sum() -> None:
    agg = ResultAggregator()
    g = agg.general()
    assert (g.n_total, g.n_success, g.n_failed) == (0, 0, 0)

    agg.record("wood", Evaluated(passed=True))
    agg.record("wood", _fail())
    agg.record("metal", Evaluated(passed=True))
    agg.record("metal", Evaluated(passed=True))
    agg.record("glass", _fail("g.png"))

    g = agg.general()
    assert (g.n_total, g.n_success, g.n_failed) == (5, 3, 2)
    for r in agg.results.values():
        assert r.n_success + r.n_failed == r.n_total


def test_concurrent_records_are_not_lost() -> None:
    agg = ResultAggregator()
    outcomes = [Evaluated(passed=True) if i % 3 else _fail(f"{i}.png") for i in range(600)]
    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(lambda o: agg.record("metal", o), outcomes))

    r = agg.results["metal"]
    assert r.n_total == 600
    assert r.n_failed == 200
    assert r.n_success == 400
    assert len(agg.failed_images) == 200


def test_zero_total_ratio_is_nan() -> None:
    agg = ResultAggregator()
    agg.ensure_class("empty")
    assert math.isnan(agg.results["empty"].success_ratio())
    assert format_ratio("empty", agg.results["empty"]) == "empty 0/0, Percentage: nan"


def test_format_ratio_uses_four_digits() -> None:
    agg = ResultAggregator()
    agg.record("metal", Evaluated(passed=True))
    agg.record("metal", Evaluated(passed=True))
    agg.record("metal", _fail())
    assert format_ratio("metal", agg.results["metal"]) == "metal 2/3, Percentage: 0.6667"


def test_report_timestamp_is_utc_iso_with_millis() -> None:
    stamp = report_timestamp(datetime(2021, 11, 20, 23, 45, 30, 123456, tzinfo=timezone.utc))
    assert stamp == "2021-11-20T23:45:30.123Z"


def test_write_report_serializes_general_results_and_failures(tmp_path) -> None:
    agg = ResultAggregator()
    agg.record("metal", Evaluated(passed=True))
    agg.record("metal", _fail())
    agg.record("metal", Skipped("render"))

    now = datetime(2022, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    path = write_report(tmp_path / "reports", agg, now=now)

    assert path.name == "2022-01-02T03:04:05.000Z.json"
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["general"] == {"nFailed": 1, "nSuccess": 1, "nTotal": 2}
    assert payload["results"] == {"metal": {"nFailed": 1, "nSuccess": 1, "nTotal": 2}}
    assert payload["failedImages"] == [{"path": "a.png", "expected": "good", "actual": "bad", "accuracy": 0.87}]
    assert payload["skipped"] == {"total": 1, "byClass": {"metal": {"render": 1}}}


def test_report_payload_with_no_classes() -> None:
    payload = build_report_payload(ResultAggregator())
    assert payload["general"] == {"nFailed": 0, "nSuccess": 0, "nTotal": 0}
    assert payload["results"] == {}
    assert payload["failedImages"] == []


def test_print_results_lists_classes_and_total(capsys) -> None:
    agg = ResultAggregator()
    agg.record("metal", Evaluated(passed=True))
    agg.record("wood", _fail())
    print_results(agg)

    out = capsys.readouterr().out
    assert "metal 1/1, Percentage: 1.0000" in out
    assert "wood 0/1, Percentage: 0.0000" in out
    assert "Total 1/2, Percentage: 0.5000" in out
    assert "Skipped images: 0" in out
