from __future__ import annotations

import logging
from importlib.metadata import version

__version__ = version("scriptcov")

logger = logging.getLogger("scriptcov")

__all__ = ["__version__", "logger"]
