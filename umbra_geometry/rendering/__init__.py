"""
Rendering Layer
===============

Bounded Context: Debug drawing of the linked topology.

Responsibilities:
- Draw polygon outlines and per-segment split leaves
- Draw vertices and intersection points

Non-responsibilities:
- Topology construction (handled by polygon / graph)
- Shadow overlays (handled by umbra_shadow.rendering)

Design:
- Stateless drawing onto numpy frames
- Uses supervision draw utilities
"""

from umbra_geometry.rendering.visualizer import TopologyVisualizer, to_color

__all__ = [
    "TopologyVisualizer",
    "to_color",
]
