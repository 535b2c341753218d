"""
Structured Logging for Umbra
============================

Bounded Context: Observability

JSON-structured logging shared by the geometry core and the shadow layer.

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from umbra_geometry.logging import create_logger, LogEvent
    >>> logger = create_logger("boolean")
    >>> logger.info(
    ...     event=LogEvent.SET_OPERATION_COMPLETED,
    ...     message="Intersection produced 1 polygon",
    ...     metadata={'operation': 'intersection', 'polygons': 1}
    ... )
"""

from .events import LogEvent
from .structured import StructuredLogger, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
