"""Coverage threshold configuration and evaluation.

A configuration has two optional scopes:

``global``
    checked against the aggregate of every file in the coverage map;
``each``
    checked against every file on its own.

A scope is either a single number applied to all four metrics or a mapping
constraining only the metrics it names.  Non-negative numbers are minimum
percentages; negative numbers are an allowed shortfall from 100%
(``-40`` accepts anything down to 60%).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from jsonschema import Draft202012Validator

from scriptcov import logger
from scriptcov.config import get_schema
from scriptcov.core.types import FULL_COVERAGE, Metric
from scriptcov.errors import InvalidThresholdError

if TYPE_CHECKING:
    from scriptcov.core.coverage import CoverageMap


def format_pct(value: float) -> str:
    """Two decimals with trailing zeros trimmed: ``66.67``, ``50``, ``99.5``."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in {"-0", ""} else text


def required_pct(threshold: float) -> float:
    """Translate a signed threshold into the minimum acceptable percentage."""
    return threshold if threshold >= 0 else FULL_COVERAGE + threshold


def _expand_scope(value: float | Mapping[str, float] | None) -> dict[Metric, float]:
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return {Metric(k): float(v) for k, v in value.items()}
    return dict.fromkeys(Metric, float(value))


@dataclass(frozen=True, slots=True)
class ThresholdConfig:
    """Per-metric thresholds for the ``global`` and ``each`` scopes."""

    global_: dict[Metric, float] = field(default_factory=dict)
    each: dict[Metric, float] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> ThresholdConfig:
        """Validate a ``{"global": ..., "each": ...}`` mapping and expand scalars."""
        data = dict(data or {})
        validator = Draft202012Validator(get_schema("thresholds"))
        errors = sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path))
        if errors:
            first = errors[0]
            where = "/".join(str(p) for p in first.absolute_path) or "<root>"
            msg = f"invalid threshold configuration at {where}: {first.message}"
            raise InvalidThresholdError(msg)
        return cls(global_=_expand_scope(data.get("global")), each=_expand_scope(data.get("each")))

    def is_empty(self) -> bool:
        return not self.global_ and not self.each


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of a validation run: the verdict plus one message per unmet threshold."""

    passed: bool
    messages: list[str]


class Validator:
    """Check a finished coverage map against a :class:`ThresholdConfig`."""

    def __init__(self, thresholds: ThresholdConfig | Mapping[str, Any] | None = None) -> None:
        if not isinstance(thresholds, ThresholdConfig):
            thresholds = ThresholdConfig.from_dict(thresholds)
        self.thresholds = thresholds

    def evaluate(self, coverage_map: CoverageMap) -> ValidationResult:
        """Compute every failure without logging; no metric or scope short-circuits."""
        messages: list[str] = []
        global_summary = coverage_map.summary()
        file_summaries = [(fc.path, fc.summary()) for fc in coverage_map]

        for metric in Metric:
            threshold = self.thresholds.global_.get(metric)
            if threshold is not None:
                actual = global_summary[metric].pct
                if actual < required_pct(threshold):
                    messages.append(
                        f"Coverage threshold for {metric} ({format_pct(threshold)}%) "
                        f"not met globally ({format_pct(actual)}%)"
                    )

            threshold = self.thresholds.each.get(metric)
            if threshold is not None:
                failing = [
                    f"- {path} ({format_pct(summary[metric].pct)}%)"
                    for path, summary in file_summaries
                    if summary[metric].pct < required_pct(threshold)
                ]
                if failing:
                    header = f"Coverage threshold for {metric} ({format_pct(threshold)}%) not met for:"
                    messages.append("\n".join([header, *failing]))

        return ValidationResult(passed=not messages, messages=messages)

    def validate(self, coverage_map: CoverageMap) -> bool:
        """Log each unmet threshold and return whether all thresholds were met."""
        result = self.evaluate(coverage_map)
        for message in result.messages:
            logger.warning(message)
        return result.passed


__all__ = [
    "ThresholdConfig",
    "ValidationResult",
    "Validator",
    "format_pct",
    "required_pct",
]
