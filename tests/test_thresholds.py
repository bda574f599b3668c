from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from scriptcov.core.coverage import CoverageMap
from scriptcov.core.thresholds import ThresholdConfig, Validator, format_pct, required_pct
from scriptcov.core.types import Metric
from scriptcov.errors import InvalidThresholdError

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any


def test_validates_full_coverage_without_thresholds(full_coverage: CoverageMap) -> None:
    assert Validator().validate(full_coverage)


def test_full_coverage_meets_hundred_percent_everywhere(full_coverage: CoverageMap) -> None:
    assert Validator({"global": 100, "each": 100}).validate(full_coverage)


def test_empty_map_is_vacuously_covered() -> None:
    assert Validator().validate(CoverageMap())
    assert Validator({"global": 100, "each": 100}).validate(CoverageMap())


def test_global_hundred_reports_each_metric(
    average_coverage: CoverageMap, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING, logger="scriptcov"):
        assert not Validator({"global": 100}).validate(average_coverage)
    assert caplog.messages == [
        "Coverage threshold for statements (100%) not met globally (66.67%)",
        "Coverage threshold for functions (100%) not met globally (50%)",
        "Coverage threshold for lines (100%) not met globally (66.67%)",
    ]


def test_each_hundred_lists_offending_file(average_coverage: CoverageMap) -> None:
    result = Validator({"each": 100}).evaluate(average_coverage)
    assert not result.passed
    assert result.messages == [
        "Coverage threshold for statements (100%) not met for:\n- my-view2.js (66.67%)",
        "Coverage threshold for functions (100%) not met for:\n- my-view2.js (50%)",
        "Coverage threshold for lines (100%) not met for:\n- my-view2.js (66.67%)",
    ]


def test_each_lists_files_in_map_order(make_file_coverage: Callable[..., dict[str, Any]]) -> None:
    cov = CoverageMap(
        {
            "b.js": make_file_coverage("b.js", statements=[0, 1]),
            "ok.js": make_file_coverage("ok.js", statements=[1]),
            "a.js": make_file_coverage("a.js", statements=[0, 0, 1, 1]),
        }
    )
    result = Validator({"each": {"statements": 80}}).evaluate(cov)
    assert result.messages == [
        "Coverage threshold for statements (80%) not met for:\n- b.js (50%)\n- a.js (50%)",
    ]


def test_global_and_each_failures_are_all_reported(average_coverage: CoverageMap) -> None:
    result = Validator({"global": {"functions": 60}, "each": {"functions": 60}}).evaluate(average_coverage)
    assert result.messages == [
        "Coverage threshold for functions (60%) not met globally (50%)",
        "Coverage threshold for functions (60%) not met for:\n- my-view2.js (50%)",
    ]


def test_negative_global_threshold_allows_shortfall(even_coverage: CoverageMap) -> None:
    assert Validator({"global": -40}).validate(even_coverage)


def test_negative_threshold_is_a_floor_below_hundred(even_coverage: CoverageMap) -> None:
    result = Validator({"global": -30}).evaluate(even_coverage)
    assert not result.passed
    assert result.messages[0] == "Coverage threshold for statements (-30%) not met globally (66.67%)"
    assert len(result.messages) == len(Metric)


def test_negative_each_threshold(even_coverage: CoverageMap) -> None:
    assert Validator({"each": -34}).validate(even_coverage)
    assert not Validator({"each": -33}).validate(even_coverage)


def test_global_hundred_on_even_map_reports_all_metrics(even_coverage: CoverageMap) -> None:
    result = Validator({"global": 100}).evaluate(even_coverage)
    assert result.messages == [
        f"Coverage threshold for {metric} (100%) not met globally (66.67%)" for metric in Metric
    ]


@pytest.mark.parametrize(
    "thresholds",
    [
        {"global": {"statements": 60}},
        {"global": {"lines": 60}},
        {"global": {"functions": 50}},
        {"each": {"statements": 60}},
        {"each": {"lines": 60}},
        {"each": {"functions": 50}},
        {"global": {"branches": 100}},
    ],
)
def test_metric_objects_only_constrain_named_metrics(
    average_coverage: CoverageMap, thresholds: dict[str, Any]
) -> None:
    assert Validator(thresholds).validate(average_coverage)


@pytest.mark.parametrize(
    ("thresholds", "message"),
    [
        (
            {"global": {"statements": 100}},
            "Coverage threshold for statements (100%) not met globally (66.67%)",
        ),
        ({"global": {"lines": 100}}, "Coverage threshold for lines (100%) not met globally (66.67%)"),
        ({"global": {"functions": 100}}, "Coverage threshold for functions (100%) not met globally (50%)"),
        (
            {"each": {"statements": 100}},
            "Coverage threshold for statements (100%) not met for:\n- my-view2.js (66.67%)",
        ),
        ({"each": {"lines": 100}}, "Coverage threshold for lines (100%) not met for:\n- my-view2.js (66.67%)"),
        (
            {"each": {"functions": 100}},
            "Coverage threshold for functions (100%) not met for:\n- my-view2.js (50%)",
        ),
    ],
)
def test_single_metric_failures(average_coverage: CoverageMap, thresholds: dict[str, Any], message: str) -> None:
    result = Validator(thresholds).evaluate(average_coverage)
    assert not result.passed
    assert result.messages == [message]


def test_scalar_and_object_agree_on_the_constrained_metric(even_coverage: CoverageMap) -> None:
    assert Validator({"global": 60}).validate(even_coverage)
    assert Validator({"global": {"statements": 60}}).validate(even_coverage)


def test_branches_follow_the_same_rules(make_file_coverage: Callable[..., dict[str, Any]]) -> None:
    cov = CoverageMap({"x.js": make_file_coverage("x.js", statements=[1], branches=[[1, 0], [0, 0]])})
    result = Validator({"global": {"branches": 30}, "each": {"branches": 20}}).evaluate(cov)
    assert result.messages == ["Coverage threshold for branches (30%) not met globally (25%)"]


def test_config_expands_scalars() -> None:
    cfg = ThresholdConfig.from_dict({"global": 80, "each": {"lines": -10}})
    assert cfg.global_ == dict.fromkeys(Metric, 80.0)
    assert cfg.each == {Metric.LINES: -10.0}
    assert not cfg.is_empty()
    assert ThresholdConfig.from_dict(None).is_empty()


@pytest.mark.parametrize(
    "bad",
    [
        {"global": "100"},
        {"global": {"conditions": 50}},
        {"every": 50},
        {"each": 101},
        {"global": True},
        {"each": {"lines": -101}},
    ],
)
def test_config_rejects_shapes_outside_contract(bad: dict[str, Any]) -> None:
    with pytest.raises(InvalidThresholdError):
        Validator(bad)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(66.666666, "66.67"), (50.0, "50"), (100.0, "100"), (99.5, "99.5"), (0.0, "0"), (-40.0, "-40")],
)
def test_format_pct(value: float, expected: str) -> None:
    assert format_pct(value) == expected


def test_required_pct() -> None:
    assert required_pct(80) == 80
    assert required_pct(-40) == 60
    assert required_pct(0) == 0
