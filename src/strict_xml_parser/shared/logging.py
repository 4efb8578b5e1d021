"""Structured logging utilities for strict XML parsing.

Every record carries the emitting component and an optional correlation ID in
its ``extra`` mapping so parse runs can be traced through handlers that format
structured output.
"""

import logging
from typing import Any, Dict, Optional

# Longest source excerpt attached to a log record
PREVIEW_LENGTH = 100


class CorrelationLogger:
    """Wrapper around :class:`logging.Logger` that tags records for tracing.

    Attributes:
        logger: The underlying standard-library logger
        correlation_id: Identifier shared by all records of one parse run
        component: Subsystem that emitted the record (``grammar``, ``cli`` ...)
    """

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.rsplit(".", 1)[-1]

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        tagged = dict(extra) if extra else {}
        tagged["component"] = self.component
        tagged["correlation_id"] = self.correlation_id
        return tagged

    def _log(self, level: int, message: str, extra: Optional[Dict[str, Any]],
             **kwargs: Any) -> None:
        self.logger.log(level, message, extra=self._get_extra(extra), **kwargs)

    def is_enabled_for(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, extra)

    def warning(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        self._log(logging.WARNING, message, extra, exc_info=exc_info)

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = True
    ) -> None:
        """Log at error level, with the active traceback unless disabled."""
        self._log(logging.ERROR, message, extra, exc_info=exc_info)

    def exception(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log the exception being handled at error level."""
        self._log(logging.ERROR, message, extra, exc_info=True)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Return a :class:`CorrelationLogger` for module ``name``.

    Args:
        name: Module name, normally ``__name__``
        correlation_id: Identifier to stamp on every record
        component: Subsystem label, defaults to the last dotted segment of ``name``
    """
    return CorrelationLogger(name, correlation_id, component)


def preview(text: str, limit: int = PREVIEW_LENGTH) -> str:
    """Shorten ``text`` for inclusion in a log record."""
    if len(text) > limit:
        return text[:limit] + "..."
    return text
