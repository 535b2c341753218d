"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

This module defines typed event names for structured logging.

Design:
- Enum-based (prevents typos, enables autocomplete)
- Hierarchical naming (namespace.category.action)
- Searchable in log aggregators

Event Naming Convention:
    <component>.<category>.<action>

    component: polygon, sweep, boolean, shadow, scene, config, error
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - polygon.*: Linked polygon construction and splitting
    - sweep.*: Sweep-line intersection search
    - boolean.*: Polygon set operations
    - shadow.*, scene.*: Shadow evaluation and scene preparation
    - config.*: Configuration loading
    - error.*: Error conditions
    """

    # ========== Polygon Events ==========
    POLYGON_BUILT = "polygon.built"
    """Vertex and segment caches constructed from a point ring."""

    SEGMENT_SPLIT = "polygon.segment.split"
    """Segment split into two halves at an interior point."""

    # ========== Sweep Events ==========
    SWEEP_COMPLETED = "sweep.completed"
    """Sweep line finished; intersection points collected."""

    # ========== Boolean Events ==========
    EDGIFY_COMPLETED = "boolean.edgify.completed"
    """Participating polygons split at their mutual intersections."""

    SET_OPERATION_COMPLETED = "boolean.set_operation.completed"
    """Intersection / union / xor produced its result polygons."""

    WALK_ABANDONED = "boolean.walk.abandoned"
    """A walk revisited a non-start vertex and was dropped."""

    HOLES_SPLIT = "boolean.holes.split"
    """Region with holes cut into simple polygons."""

    # ========== Shadow Events ==========
    SCENE_PREPARED = "scene.prepared"
    """Walls below the source selected and transformed to light space."""

    SHADOW_MAP_RENDERED = "shadow.map.rendered"
    """Depth map evaluated over a sample grid."""

    # ========== Config Events ==========
    CONFIG_LOADED = "config.loaded"
    """Scene configuration loaded from YAML."""

    # ========== Error Events ==========
    GEOMETRY_ERROR = "error.geometry"
    """Malformed input geometry."""

    TOPOLOGY_ERROR = "error.topology"
    """Invalid vertex/segment linking."""

    CONFIG_ERROR = "error.config"
    """Configuration failed validation."""

