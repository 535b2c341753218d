"""
Vectorized Shadow Evaluation
============================

numpy rendition of `evaluate_walls` over arrays of samples. Same
short-circuit order as the scalar evaluator, expressed as boolean masks.
"""

from typing import Optional, Sequence, Tuple

import numpy as np

from umbra_shadow.evaluator import Source, Wall


def _orient(ax, ay, bx, by, cx, cy):
    return (ay - cy) * (bx - cx) - (ax - cx) * (by - cy)


def shadow_depth_map(
    source: Source,
    walls: Sequence[Wall],
    xs,
    ys,
    elevations=0.0,
    wall_distances: Optional[Sequence[Optional[float]]] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Evaluate every wall at every sample.

    Args:
        source: Light/vision source
        walls: Occluding walls
        xs, ys: Sample coordinates (broadcastable)
        elevations: Sample elevations (broadcastable, default ground level)
        wall_distances: Optional precomputed source -> wall line distances

    Returns:
        (mask, depth): boolean in-shadow mask and float depth, 0.0 outside
        shadow
    """
    px, py, pe = np.broadcast_arrays(
        np.asarray(xs, dtype=np.float64),
        np.asarray(ys, dtype=np.float64),
        np.asarray(elevations, dtype=np.float64),
    )
    sx, sy = source.position.x, source.position.y
    src = source.elevation

    mask = np.zeros(px.shape, dtype=bool)
    depth = np.full(px.shape, np.inf)
    above = pe > src

    for i, wall in enumerate(walls):
        top = wall.top_elevation
        if src <= top:
            continue

        wall_distance = wall_distances[i] if wall_distances is not None else None
        if wall_distance is None:
            wall_distance = wall.distance_to(source.position)
        if wall_distance is None or wall_distance <= 0:
            continue

        ax, ay, bx, by = wall.a.x, wall.a.y, wall.b.x, wall.b.y
        dx, dy = bx - ax, by - ay
        dab = dx * dx + dy * dy
        if dab == 0:
            continue

        below = pe < top

        # sample -> source against the wall
        xa = _orient(px, py, sx, sy, ax, ay)
        xb = _orient(px, py, sx, sy, bx, by)
        crosses = (xa * xb <= 0.0) & ~((xa == 0.0) & (xb == 0.0))
        crosses &= _orient(ax, ay, bx, by, px, py) * _orient(ax, ay, bx, by, sx, sy) <= 0.0

        u = ((px - ax) * dx + (py - ay) * dy) / dab
        dist_wp = np.hypot(px - (ax + u * dx), py - (ay + u * dy))

        adj_wall = top - pe
        adj_source = src - pe
        with np.errstate(divide="ignore", invalid="ignore"):
            theta = np.arctan((adj_source - adj_wall) / wall_distance)
            dist_ov = adj_source / np.tan(theta)
            max_dist_wp = dist_ov - wall_distance
            ratio = dist_wp / max_dist_wp

        hit = below & crosses & (dist_wp < max_dist_wp) & ~above
        depth = np.where(hit, np.minimum(depth, ratio), depth)
        mask |= hit

    depth = np.where(mask, depth, 0.0)
    if source.is_vision:
        mask = mask | above
    depth[above] = 0.0
    return mask, depth
