"""
Geometry Error Types
====================

Structural failures of the linked topology, surfaced to the caller.

- GeometryError: malformed input (unclosed ring, too few points,
  split point off the segment, zero-length segment)
- TopologyError: invalid linking (second incoming/outgoing segment on a
  vertex, segment not incident to a vertex, inconsistent caches)

Numeric degeneracies (parallel lines, zero-length walls) are NOT errors:
they are handled by explicit branches returning "no intersection" or
"no shadow".
"""


class GeometryError(ValueError):
    """Raised when input geometry is malformed."""
    pass


class TopologyError(Exception):
    """Raised when a vertex/segment link would leave the topology invalid."""
    pass
