"""Parallel hatch lines drawn over the dark parts of a bitmap."""

from __future__ import annotations

import math

from .base import WHITE, Bitmap, Filter, FilterParameter, Path, PathSet, Point, lround

_EPS = 1e-6


def _clamp(v: int, lo: int, hi: int) -> int:
    return lo if v < lo else (hi if v > hi else v)


def _border_intersections(s: float, nx: float, ny: float, width: int, height: int) -> list[Point]:
    """Up to two points where the line n . p = s crosses the image rectangle."""
    pts: list[Point] = []
    if abs(ny) > _EPS:
        y0 = s / ny
        if 0.0 <= y0 <= height:
            pts.append((0.0, y0))
        y_w = (s - nx * width) / ny
        if 0.0 <= y_w <= height:
            pts.append((float(width), y_w))
    if abs(nx) > _EPS:
        x0 = s / nx
        if 0.0 <= x0 <= width:
            pts.append((x0, 0.0))
        x_h = (s - ny * height) / nx
        if 0.0 <= x_h <= width:
            pts.append((x_h, float(height)))

    unique: list[Point] = []
    for p in pts:
        if all((q[0] - p[0]) ** 2 + (q[1] - p[1]) ** 2 >= 1e-6 for q in unique):
            unique.append(p)
    return unique[:2]


class LineHatchFilter(Filter):
    """Draws parallel segments where pixels are at or below the threshold."""

    name = "Line Hatch"

    def __init__(self) -> None:
        super().__init__({
            "step_px": FilterParameter("Step (px)", 1.0, 20.0, 8.0),
            "angle_deg": FilterParameter("Angle (deg)", -180.0, 180.0, 45.0),
            "threshold": FilterParameter("Threshold", 0.0, 255.0, 128.0),
        })

    def apply(self, image: Bitmap) -> PathSet:
        out = PathSet(color=WHITE)
        width, height = image.width_px, image.height_px
        if image.is_empty:
            out.compute_aabb()
            return out

        step = max(1.0, math.floor(self.value("step_px")))
        threshold = _clamp(lround(self.value("threshold")), 0, 255)
        angle = math.fmod(self.value("angle_deg"), 360.0)
        if angle < 0.0:
            angle += 360.0
        theta = math.radians(angle)
        nx = -math.sin(theta)
        ny = math.cos(theta)

        pixels = image.pixels
        scale = image.pixel_size_mm

        def is_dark(px: float, py: float) -> bool:
            xi = _clamp(math.floor(px), 0, width - 1)
            yi = _clamp(math.floor(py), 0, height - 1)
            return pixels[yi * width + xi] <= threshold

        def emit(p0: Point, p1: Point) -> None:
            out.paths.append(Path(
                [(p0[0] * scale, p0[1] * scale), (p1[0] * scale, p1[1] * scale)],
                closed=False,
            ))

        def emit_runs(a: Point, b: Point) -> None:
            ex, ey = b[0] - a[0], b[1] - a[1]
            if math.hypot(ex, ey) < 1.0:
                return
            samples = max(2, math.ceil(math.hypot(ex, ey)))
            last = samples - 1

            def at(i: int) -> Point:
                t = i / last
                return (a[0] + ex * t, a[1] + ey * t)

            run_start = None
            for i in range(samples):
                if is_dark(*at(i)):
                    if run_start is None:
                        run_start = i
                elif run_start is not None:
                    emit(at(run_start), at(i - 1))
                    run_start = None
            if run_start is not None:
                emit(at(run_start), b)

        corners = [(0.0, 0.0), (width, 0.0), (width, height), (0.0, height)]
        projections = [cx * nx + cy * ny for cx, cy in corners]
        s = float(math.floor(min(projections)))
        s_end = float(math.ceil(max(projections)))
        while s <= s_end:
            ends = _border_intersections(s, nx, ny, width, height)
            if len(ends) == 2:
                emit_runs(ends[0], ends[1])
            s += step

        out.compute_aabb()
        return out