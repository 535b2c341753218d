"""
Structured JSON Logger
======================

Bounded Context: Observability Infrastructure

One JSON object per line on stderr, built on the standard logging module.
Each record carries the component that emitted it, a typed event name and
an optional metadata dict (polygon ids, segment counts, scene ids...).

Example:
    >>> logger = create_logger("sweep")
    >>> logger.debug(
    ...     event=LogEvent.SWEEP_COMPLETED,
    ...     message="Sweep finished",
    ...     metadata={'segments': 8, 'intersections': 2}
    ... )

Output:
    {"timestamp": "2026-10-18T15:30:45.123456+00:00", "level": "DEBUG",
     "component": "sweep", "event": "sweep.completed",
     "message": "Sweep finished", "metadata": {"segments": 8, "intersections": 2}}

Context:
    `bind()` returns a logger that merges fixed context into every record's
    metadata, e.g. `create_logger("scene").bind(scene_id="crypt/torch")`.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .events import LogEvent

LOGGER_PREFIX = "umbra"


class StructuredLogger:
    """
    Typed-event logger writing JSON lines.

    Attributes:
        component: Short component name ("polygon", "boolean", "scene"...)
        context: Metadata merged into every record
        logger: Underlying `logging.Logger` (`umbra.<component>`)
    """

    def __init__(
        self,
        component: str,
        level: int = logging.INFO,
        context: Optional[Dict[str, Any]] = None
    ):
        self.component = component
        self.context = dict(context or {})
        self.logger = logging.getLogger(f"{LOGGER_PREFIX}.{component}")
        self.logger.setLevel(level)

        # one handler per component logger, shared by bound children
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            self.logger.addHandler(handler)
            self.logger.propagate = False

    def bind(self, **context: Any) -> "StructuredLogger":
        """Child logger with extra fixed metadata; level stays shared."""
        child = StructuredLogger.__new__(StructuredLogger)
        child.component = self.component
        child.context = {**self.context, **context}
        child.logger = self.logger
        return child

    def _log(
        self,
        level: int,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        # split/walk loops call debug() often; skip serialization when filtered
        if not self.logger.isEnabledFor(level):
            return

        entry: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': logging.getLevelName(level),
            'component': self.component,
            'event': event.value,
            'message': message,
        }

        merged = {**self.context, **(metadata or {})}
        if merged:
            entry['metadata'] = merged

        if exc_info is not None:
            entry['exception'] = {
                'type': type(exc_info).__name__,
                'message': str(exc_info),
            }

        self.logger.log(level, json.dumps(entry, default=str))

    def debug(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, event, message, metadata)

    def info(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, event, message, metadata)

    def warning(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.WARNING, event, message, metadata)

    def error(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        """
        Log an error; `exc_info` is summarized as {"type", "message"}.

        Example:
            >>> try:
            ...     SceneConfig.from_yaml(path)
            ... except ValueError as e:
            ...     logger.error(event=LogEvent.CONFIG_ERROR, message="Invalid scene", exc_info=e)
        """
        self._log(logging.ERROR, event, message, metadata, exc_info)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)


class JSONFormatter(logging.Formatter):
    """Records are pre-serialized by StructuredLogger; emit the message as-is."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def create_logger(component: str, level: int = logging.INFO) -> StructuredLogger:
    """
    Logger for `component` (`umbra.<component>` in the logging tree).

    Example:
        >>> logger = create_logger("boolean", level=logging.DEBUG)
    """
    return StructuredLogger(component=component, level=level)
