from scriptcov.core.coverage import CoverageMap, CoverageSummary, FileCoverage, Totals
from scriptcov.core.parse import load_coverage, parse_coverage
from scriptcov.core.thresholds import (
    ThresholdConfig,
    ValidationResult,
    Validator,
    format_pct,
    required_pct,
)
from scriptcov.core.types import CapabilityProfile, CompileMode, Metric, ModuleResolution

__all__ = [
    "CapabilityProfile",
    "CompileMode",
    "CoverageMap",
    "CoverageSummary",
    "FileCoverage",
    "Metric",
    "ModuleResolution",
    "ThresholdConfig",
    "Totals",
    "ValidationResult",
    "Validator",
    "format_pct",
    "load_coverage",
    "parse_coverage",
    "required_pct",
]
