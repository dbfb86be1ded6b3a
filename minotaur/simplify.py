"""Polyline simplification."""

from __future__ import annotations

from collections.abc import Sequence

from .base import Point


def rdp(points: Sequence[Point], eps: float) -> list[Point]:
    """Ramer-Douglas-Peucker simplification with tolerance *eps*.

    Works iteratively, so long polylines do not hit the recursion limit.
    The first and last points are always kept.
    """
    pts = list(points)
    if len(pts) <= 2 or eps <= 0.0:
        return pts

    eps_sq = eps * eps
    keep = [False] * len(pts)
    keep[0] = keep[-1] = True

    stack = [(0, len(pts) - 1)]
    while stack:
        i0, i1 = stack.pop()
        if i1 <= i0 + 1:
            continue
        ax, ay = pts[i0]
        bx, by = pts[i1]
        dx = bx - ax
        dy = by - ay
        length_sq = dx * dx + dy * dy
        denom = length_sq if length_sq > 1e-20 else 1e-12

        max_dist_sq = -1.0
        split = i0
        for i in range(i0 + 1, i1):
            px, py = pts[i]
            u = ((px - ax) * dx + (py - ay) * dy) / denom
            ddx = ax + u * dx - px
            ddy = ay + u * dy - py
            d2 = ddx * ddx + ddy * ddy
            if d2 > max_dist_sq:
                max_dist_sq = d2
                split = i

        if max_dist_sq > eps_sq:
            keep[split] = True
            stack.append((i0, split))
            stack.append((split, i1))

    return [p for p, k in zip(pts, keep) if k]