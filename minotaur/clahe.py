"""Contrast Limited Adaptive Histogram Equalization for 8-bit bitmaps."""

from __future__ import annotations

from collections.abc import Sequence

from .base import Bitmap, Filter, FilterParameter, lround

_BINS = 256


def _clamp(v: int, lo: int, hi: int) -> int:
    return lo if v < lo else (hi if v > hi else v)


def build_clahe_lut(tile: Sequence[int], clip_limit: float) -> bytes:
    """Build a 256-entry equalisation table from the tile's pixel values.

    A positive clip_limit caps each histogram bin and spreads the excess
    evenly, remainder going to the lowest bins. An empty tile gives identity.
    """
    n_pix = len(tile)
    if n_pix <= 0:
        return bytes(range(_BINS))

    hist = [0] * _BINS
    for v in tile:
        hist[v] += 1

    if clip_limit > 0.0:
        clip_counts = max(1, int(clip_limit * n_pix / _BINS + 0.5))
        excess = sum(max(0, c - clip_counts) for c in hist)
        hist = [min(c, clip_counts) for c in hist]
        if excess > 0:
            base, rem = divmod(excess, _BINS)
            hist = [c + base + (1 if i < rem else 0) for i, c in enumerate(hist)]

    total = sum(hist) or 1
    lut = bytearray()
    cdf = 0
    for count in hist:
        cdf += count
        lut.append(_clamp((cdf * 255 + total // 2) // total, 0, 255))
    return bytes(lut)


def _tile_axis(length: int, tiles: int, coords: list[int]) -> list[tuple[int, int, float]]:
    """Per position: (tile index, next tile index, fraction within tile)."""
    result = []
    for p in range(length):
        t = _clamp((p * tiles) // length, 0, tiles - 1)
        t1 = min(t + 1, tiles - 1)
        span = max(1, coords[t + 1] - coords[t])
        result.append((t, t1, (p - coords[t]) / span))
    return result


class ClaheFilter(Filter):
    """Tile-wise histogram equalisation blended bilinearly between tiles."""

    name = "CLAHE"

    def __init__(self) -> None:
        super().__init__({
            "tilesX": FilterParameter("Tiles X", 1.0, 64.0, 8.0),
            "tilesY": FilterParameter("Tiles Y", 1.0, 64.0, 8.0),
            "clipLimit": FilterParameter("Clip Limit (0=off)", 0.0, 4.0, 2.0),
        })

    def apply(self, image: Bitmap) -> Bitmap:
        out = Bitmap(image.width_px, image.height_px, image.pixel_size_mm)
        if image.is_empty:
            return out

        w, h = image.width_px, image.height_px
        tiles_x = _clamp(lround(self.value("tilesX")), 1, 64)
        tiles_y = _clamp(lround(self.value("tilesY")), 1, 64)
        clip_limit = self.value("clipLimit")

        x_coords = [(i * w) // tiles_x for i in range(tiles_x + 1)]
        y_coords = [(j * h) // tiles_y for j in range(tiles_y + 1)]

        pixels = image.pixels
        luts: list[bytes] = []
        for ty in range(tiles_y):
            y0 = y_coords[ty]
            th = max(0, y_coords[ty + 1] - y0)
            for tx in range(tiles_x):
                x0 = x_coords[tx]
                tw = max(0, x_coords[tx + 1] - x0)
                # The tile is sampled as a contiguous run of tw * th pixels
                # starting at its top-left corner.
                start = y0 * w + x0
                luts.append(build_clahe_lut(pixels[start:start + tw * th], clip_limit))

        columns = _tile_axis(w, tiles_x, x_coords)
        result = bytearray()
        for y, (pty, pty1, fy) in enumerate(_tile_axis(h, tiles_y, y_coords)):
            row = pixels[y * w:(y + 1) * w]
            for v, (ptx, ptx1, fx) in zip(row, columns):
                v00 = luts[pty * tiles_x + ptx][v]
                v10 = luts[pty * tiles_x + ptx1][v]
                v01 = luts[pty1 * tiles_x + ptx][v]
                v11 = luts[pty1 * tiles_x + ptx1][v]
                top = v00 + (v10 - v00) * fx
                bottom = v01 + (v11 - v01) * fx
                result.append(_clamp(lround(top + (bottom - top) * fy), 0, 255))
        out.pixels = result
        return out