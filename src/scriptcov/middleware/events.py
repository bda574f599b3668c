"""Observational trace events emitted by the middleware."""

from __future__ import annotations

import logging
from typing import Protocol

from scriptcov import logger

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class EventEmitter(Protocol):
    def emit(self, level: str, component: str, action: str, detail: str) -> None: ...


class LoggingEmitter:
    """Forward events to the ``scriptcov`` logger."""

    def __init__(self, log: logging.Logger = logger) -> None:
        self.log = log

    def emit(self, level: str, component: str, action: str, detail: str) -> None:
        self.log.log(_LEVELS.get(level, logging.INFO), "%s: %s %s", component, action, detail)


__all__ = ["EventEmitter", "LoggingEmitter"]
