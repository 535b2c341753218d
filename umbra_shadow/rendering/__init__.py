"""
Rendering Layer
===============

Bounded Context: Shadow map visualization.

Responsibilities:
- Overlay shadow depth on frames
- Draw walls and light circles
- Render depth maps as images

Non-responsibilities:
- Shadow computation (handled by evaluator / batch)

Design:
- Stateless drawing on numpy frames
- Extends TopologyVisualizer; uses supervision and OpenCV
"""

from umbra_shadow.rendering.visualizer import ShadowVisualizer

__all__ = [
    "ShadowVisualizer",
]
