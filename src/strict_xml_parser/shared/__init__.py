"""Shared utilities for strict XML parsing.

This module provides the configuration objects and logging helpers used
across the grammar engine, the API layer and the command-line tool.
"""

from .config import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_SOURCE_NAME,
    ConfigError,
    ConfigValidationError,
    ParserConfig,
)
from .logging import (
    CorrelationLogger,
    get_logger,
    preview,
)

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_SOURCE_NAME",
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "CorrelationLogger",
    "get_logger",
    "preview",
]
