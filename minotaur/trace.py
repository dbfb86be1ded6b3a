"""Row tracer: one polyline per row through pixels at or above a threshold."""

from __future__ import annotations

from .base import WHITE, Bitmap, Filter, FilterParameter, Path, PathSet


class TraceFilter(Filter):
    """Very simple threshold-based row tracer producing rough polylines."""

    name = "Trace"

    def __init__(self) -> None:
        super().__init__({
            "threshold": FilterParameter("Threshold", 0.0, 255.0, 128.0),
        })

    def apply(self, image: Bitmap) -> PathSet:
        out = PathSet(color=WHITE)
        if image.is_empty:
            out.compute_aabb()
            return out

        threshold = int(self.value("threshold")) & 0xFF
        size = image.pixel_size_mm
        for y, row in enumerate(image.rows()):
            points = [
                ((x + 0.5) * size, (y + 0.5) * size)
                for x, v in enumerate(row)
                if v >= threshold
            ]
            if len(points) >= 2:
                out.paths.append(Path(points, closed=False))

        out.compute_aabb()
        return out