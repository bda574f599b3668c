from scriptcov._meta import __version__, logger
from scriptcov.core.thresholds import ThresholdConfig, ValidationResult, Validator
from scriptcov.middleware import CoverageMiddleware, RequestDescriptor, Response

__all__ = [
    "CoverageMiddleware",
    "RequestDescriptor",
    "Response",
    "ThresholdConfig",
    "ValidationResult",
    "Validator",
    "__version__",
    "logger",
]
