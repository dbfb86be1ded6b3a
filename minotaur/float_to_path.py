"""Connect local maxima of a float field into short line segments."""

from __future__ import annotations

from .base import Filter, FilterParameter, FloatImage, Path, PathSet, lround


class FloatToPathFilter(Filter):
    """Finds positive local maxima and links nearby ones with segments."""

    name = "Float Maxima to Paths"

    def __init__(self) -> None:
        super().__init__({
            "maximaRadius": FilterParameter("maxima radius (px)", 1.0, 7.0, 1.0),
            "connectRadius": FilterParameter("connect radius (px)", 1.0, 7.0, 1.0),
        })

    def apply(self, image: FloatImage) -> PathSet:
        out = PathSet()
        if image.is_empty:
            return out

        w, h = image.width_px, image.height_px
        px = image.pixel_size_mm
        r_max = max(1, lround(self.value("maximaRadius")))
        r_conn = max(1, lround(self.value("connectRadius")))
        pixels = image.pixels

        def neighbours(x: int, y: int, radius: int):
            for dy in range(-radius, radius + 1):
                for dx in range(-radius, radius + 1):
                    if dx == 0 and dy == 0:
                        continue
                    xn, yn = x + dx, y + dy
                    if 0 <= xn < w and 0 <= yn < h:
                        yield dx, dy, xn, yn

        maxima = set()
        for y in range(h):
            for x in range(w):
                v = pixels[y * w + x]
                if not v > 0.0:
                    continue
                if all(pixels[yn * w + xn] <= v for _, _, xn, yn in neighbours(x, y, r_max)):
                    maxima.add((x, y))

        def centre(x: int, y: int) -> tuple[float, float]:
            return ((x + 0.5) * px, (y + 0.5) * px)

        for y in range(h):
            for x in range(w):
                if (x, y) not in maxima:
                    continue
                for dx, dy, xn, yn in neighbours(x, y, r_conn):
                    # Forward half-plane only, so each pair is linked once.
                    if not (dy > 0 or (dy == 0 and dx > 0)):
                        continue
                    if (xn, yn) in maxima:
                        out.paths.append(Path([centre(x, y), centre(xn, yn)], closed=False))

        out.compute_aabb()
        return out