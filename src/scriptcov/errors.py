"""Centralised exception hierarchy for scriptcov."""

from __future__ import annotations


class ScriptcovError(Exception):
    """Base class for all custom scriptcov exceptions."""


class ConfigError(ScriptcovError):
    """Configuration could not be read or has an invalid shape."""


class InvalidPatternError(ConfigError):
    """An include/exclude glob pattern could not be compiled."""


class InvalidThresholdError(ConfigError):
    """A threshold configuration does not follow the documented contract."""


class CoverageJSONError(ScriptcovError):
    """Base class for errors related to coverage JSON handling."""


class CoverageJSONNotFoundError(CoverageJSONError):
    """Coverage JSON file could not be located on disk."""


class InvalidCoverageJSONError(CoverageJSONError):
    """Coverage JSON file was found but does not contain a valid coverage map."""


__all__ = [
    "ConfigError",
    "CoverageJSONError",
    "CoverageJSONNotFoundError",
    "InvalidCoverageJSONError",
    "InvalidPatternError",
    "InvalidThresholdError",
    "ScriptcovError",
]
