"""Structured logging utilities for fluent XML building, querying and flattening.

Every record carries the emitting component and an optional correlation ID so
that a caller can follow one flatten or query request through the log stream.
Handler and formatter setup is left to the application.
"""

import logging
from typing import Any, Dict, Optional


class CorrelationLogger:
    """Wrap a stdlib logger, tagging records with component and correlation ID.

    Only the levels the package emits are exposed: DEBUG for compiled
    patterns and matches, INFO for flatten progress, and ``exception`` for
    never-fail error paths.
    """

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Component name; defaults to the last part of ``name``
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.rsplit(".", 1)[-1]

    def _fields(self, extra: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        fields = {"component": self.component, "correlation_id": self.correlation_id}
        fields.update(extra or {})
        return fields

    def is_enabled_for(self, level: int) -> bool:
        """Check whether records at ``level`` would be emitted."""
        return self.logger.isEnabledFor(level)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.debug(message, extra=self._fields(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.info(message, extra=self._fields(extra))

    def exception(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log at ERROR with the active exception's traceback."""
        self.logger.exception(message, extra=self._fields(extra))


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance."""
    return CorrelationLogger(name, correlation_id, component)
