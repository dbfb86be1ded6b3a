"""Trace connected dark blobs into closed outline polylines."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from .base import WHITE, Bitmap, Filter, FilterParameter, Path, PathSet, Point, lround
from .simplify import rdp

Cell = tuple[int, int]

_N4 = ((1, 0), (-1, 0), (0, 1), (0, -1))
# Moore neighbourhood, clockwise in image coordinates starting east.
_N8 = ((1, 0), (1, 1), (0, 1), (-1, 1), (-1, 0), (-1, -1), (0, -1), (1, -1))
_N8_INDEX = {offset: k for k, offset in enumerate(_N8)}

_INT_MAX = 2**31 - 1
_BLACK_BELOW = 128


def _flood(mask: bytearray, w: int, h: int, start: int, visited: bytearray) -> list[int]:
    """Indices of the 4-connected region of *mask* containing *start*."""
    visited[start] = 1
    stack = [start]
    region = [start]
    while stack:
        p = stack.pop()
        px, py = p % w, p // w
        for dx, dy in _N4:
            nx, ny = px + dx, py + dy
            if nx < 0 or ny < 0 or nx >= w or ny >= h:
                continue
            ni = ny * w + nx
            if visited[ni] or not mask[ni]:
                continue
            visited[ni] = 1
            stack.append(ni)
            region.append(ni)
    return region


def _boundary_start(cells: Iterable[Cell], mask: bytearray, bw: int, bh: int) -> Optional[Cell]:
    """Top-most, then left-most cell having a 4-neighbour outside the mask."""
    best: Optional[Cell] = None
    for x, y in cells:
        on_boundary = any(
            not (0 <= x + dx < bw and 0 <= y + dy < bh) or not mask[(y + dy) * bw + x + dx]
            for dx, dy in _N4
        )
        if on_boundary and (best is None or (y, x) < (best[1], best[0])):
            best = (x, y)
    return best


def _moore_trace(
    mask: bytearray,
    bw: int,
    bh: int,
    start: Cell,
    region_size: int,
    origin: Cell,
    pixel_size: float,
) -> list[Point]:
    """Moore-neighbour boundary trace; returns pixel centres in mm, closed."""
    max_steps = min(_INT_MAX // 2, region_size * 8)
    cx, cy = start
    bx, by = cx - 1, cy
    ox, oy = origin
    path: list[Point] = []
    seen_edges: set[tuple[int, int, int, int]] = set()

    for _ in range(max_steps):
        k = _N8_INDEX.get((bx - cx, by - cy), 0)
        found: Optional[tuple[Cell, Cell]] = None
        for t in range(1, 9):
            j = (k + t) % 8
            dx, dy = _N8[j]
            qx, qy = cx + dx, cy + dy
            if qx < 0 or qy < 0 or qx >= bw or qy >= bh:
                continue
            if mask[qy * bw + qx]:
                pdx, pdy = _N8[(j + 7) % 8]
                found = ((qx, qy), (cx + pdx, cy + pdy))
                break
        if found is None:
            break
        (nx, ny), (nbx, nby) = found

        edge = (cx, cy, nx, ny)
        if edge in seen_edges:
            break
        seen_edges.add(edge)

        point = ((ox + cx + 0.5) * pixel_size, (oy + cy + 0.5) * pixel_size)
        if not path or path[-1] != point:
            path.append(point)

        if (nx, ny) == start:
            break
        cx, cy, bx, by = nx, ny, nbx, nby

    if len(path) > 1 and path[0] != path[-1]:
        path.append(path[0])
    return path


class TraceBlobsFilter(Filter):
    """Outlines 4-connected dark blobs (and optionally their holes) as closed paths."""

    name = "Blobs"

    def __init__(self) -> None:
        super().__init__({
            "tolerancePx": FilterParameter("Tolerance (px)", 0.0, 10.0, 1.0),
            "turdSizePx": FilterParameter("Min Area (px)", 0.0, 100.0, 8.0),
            "traceHoles": FilterParameter("Trace Holes (0/1)", 0.0, 1.0, 1.0),
        })

    def apply(self, image: Bitmap) -> PathSet:
        out = PathSet(color=WHITE)
        if image.is_empty:
            out.compute_aabb()
            return out

        w, h = image.width_px, image.height_px
        size = image.pixel_size_mm
        black = bytearray(1 if v < _BLACK_BELOW else 0 for v in image.pixels[:w * h])
        visited = bytearray(w * h)

        turd_size = lround(self.value("turdSizePx"))
        eps_mm = max(0.0, self.value("tolerancePx")) * size
        trace_holes = self.value("traceHoles") > 0.5

        def emit(path: list[Point]) -> None:
            if eps_mm > 0.0 and len(path) > 3:
                path = rdp(path, eps_mm)
            if len(path) >= 3:
                out.paths.append(Path(path, closed=True))

        for start in range(w * h):
            if visited[start] or not black[start]:
                continue
            comp = _flood(black, w, h, start, visited)
            if len(comp) < turd_size:
                continue

            min_x = min(p % w for p in comp)
            max_x = max(p % w for p in comp)
            min_y = min(p // w for p in comp)
            max_y = max(p // w for p in comp)
            bw = max_x - min_x + 1
            bh = max_y - min_y + 1

            in_comp = bytearray(bw * bh)
            cells = [(p % w - min_x, p // w - min_y) for p in comp]
            for lx, ly in cells:
                in_comp[ly * bw + lx] = 1

            origin = (min_x, min_y)
            begin = _boundary_start(cells, in_comp, bw, bh)
            if begin is None:
                continue
            emit(_moore_trace(in_comp, bw, bh, begin, len(comp), origin, size))

            if trace_holes:
                for hole in self._holes(in_comp, bw, bh):
                    if len(hole) < turd_size:
                        continue
                    in_hole = bytearray(bw * bh)
                    for p in hole:
                        in_hole[p] = 1
                    hole_cells = [(p % bw, p // bw) for p in hole]
                    hole_start = _boundary_start(hole_cells, in_hole, bw, bh)
                    if hole_start is None:
                        continue
                    emit(_moore_trace(in_hole, bw, bh, hole_start, len(hole), origin, size))

        out.compute_aabb()
        return out

    @staticmethod
    def _holes(in_comp: bytearray, bw: int, bh: int) -> list[list[int]]:
        """Background regions in the bounding box not connected to its border."""
        bg = bytearray(0 if v else 1 for v in in_comp)
        outside = bytearray(bw * bh)
        border = {(x, 0) for x in range(bw)} | {(x, bh - 1) for x in range(bw)}
        border |= {(0, y) for y in range(bh)} | {(bw - 1, y) for y in range(bh)}
        for x, y in border:
            i = y * bw + x
            if bg[i] and not outside[i]:
                _flood(bg, bw, bh, i, outside)

        interior = bytearray(1 if b and not o else 0 for b, o in zip(bg, outside))
        seen = bytearray(bw * bh)
        holes = []
        for i in range(bw * bh):
            if interior[i] and not seen[i]:
                holes.append(_flood(interior, bw, bh, i, seen))
        return holes