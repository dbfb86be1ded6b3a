"""Skeletonize dark pixels and trace the one-pixel skeleton into polylines."""

from __future__ import annotations

import math
from collections.abc import Iterator
from typing import Optional

from .base import WHITE, Bitmap, Filter, FilterParameter, Path, PathSet, Point, lround
from .simplify import rdp

Cell = tuple[int, int]

# 8-neighbourhood clockwise from north (p2..p9 in Zhang-Suen notation).
_N8 = ((0, -1), (1, -1), (1, 0), (1, 1), (0, 1), (-1, 1), (-1, 0), (-1, -1))
_N4 = ((1, 0), (-1, 0), (0, 1), (0, -1))


def _degree(img: bytearray, x: int, y: int, w: int, h: int) -> int:
    if not img[y * w + x]:
        return 0
    return sum(
        1
        for dx, dy in _N8
        if 0 <= x + dx < w and 0 <= y + dy < h and img[(y + dy) * w + x + dx]
    )


def _has_background_neighbour(img: bytearray, x: int, y: int, w: int, h: int) -> bool:
    for dx, dy in _N8:
        nx, ny = x + dx, y + dy
        if nx < 0 or ny < 0 or nx >= w or ny >= h:
            return True
        if not img[ny * w + nx]:
            return True
    return False


def _removable(img: bytearray, x: int, y: int, w: int, phase: int) -> bool:
    """Zhang-Suen deletion test for an interior foreground pixel."""
    p = [img[(y + dy) * w + x + dx] for dx, dy in _N8]
    b = sum(1 for v in p if v)
    if b < 2 or b > 6:
        return False
    a = sum(1 for k in range(8) if p[k] == 0 and p[(k + 1) % 8] == 1)
    if a != 1:
        return False
    north, east, south, west = p[0], p[2], p[4], p[6]
    if phase == 0:
        return north * east * south == 0 and east * south * west == 0
    return north * east * west == 0 and north * south * west == 0


def _thin(img: bytearray, w: int, h: int) -> None:
    """Active-set Zhang-Suen thinning of the interior of *img*, in place."""
    candidates = [
        y * w + x
        for y in range(1, h - 1)
        for x in range(1, w - 1)
        if img[y * w + x] and _has_background_neighbour(img, x, y, w, h)
    ]
    if not candidates:
        return

    for _ in range(8 * (w + h)):
        changed = False
        for phase in (0, 1):
            deleted = [
                i for i in candidates
                if img[i] and _removable(img, i % w, i // w, w, phase)
            ]
            if not deleted:
                continue
            changed = True
            following: list[int] = []
            seen: set[int] = set()
            for i in deleted:
                img[i] = 0
                x, y = i % w, i // w
                for dx, dy in _N8:
                    nx, ny = x + dx, y + dy
                    if not (0 < nx < w - 1 and 0 < ny < h - 1):
                        continue
                    ni = ny * w + nx
                    if img[ni] and ni not in seen and _has_background_neighbour(img, nx, ny, w, h):
                        following.append(ni)
                        seen.add(ni)
            candidates = following
        if not changed or not candidates:
            break


def _prune(img: bytearray, w: int, h: int, iterations: int) -> None:
    """Repeatedly remove interior endpoints (degree 1), in place."""
    for _ in range(iterations):
        ends = [
            y * w + x
            for y in range(1, h - 1)
            for x in range(1, w - 1)
            if img[y * w + x] and _degree(img, x, y, w, h) == 1
        ]
        if not ends:
            break
        for i in ends:
            img[i] = 0


def _next_neighbour(
    img: bytearray, w: int, h: int, cur: Cell, prev: Optional[Cell]
) -> Optional[Cell]:
    """Foreground neighbour that best continues the direction of travel."""
    x, y = cur
    best: Optional[Cell] = None
    best_score = -1e9
    in_dx = 0 if prev is None else x - prev[0]
    in_dy = 0 if prev is None else y - prev[1]
    for dx, dy in _N8:
        q = (x + dx, y + dy)
        if q == prev:
            continue
        qx, qy = q
        if qx < 0 or qy < 0 or qx >= w or qy >= h or not img[qy * w + qx]:
            continue
        if prev is None:
            return q
        score = dx * in_dx + dy * in_dy
        if score > best_score:
            best_score = score
            best = q
    return best


def _trace(img: bytearray, w: int, h: int, close_loops: bool) -> list[tuple[list[Cell], bool]]:
    """Pixel runs of the skeleton: endpoint walks first, then loops."""
    visited = bytearray(w * h)
    runs: list[tuple[list[Cell], bool]] = []

    for y in range(h):
        for x in range(w):
            i = y * w + x
            if not img[i] or visited[i] or _degree(img, x, y, w, h) != 1:
                continue
            cells: list[Cell] = []
            cur: Cell = (x, y)
            prev: Optional[Cell] = None
            while True:
                visited[cur[1] * w + cur[0]] = 1
                cells.append(cur)
                if _degree(img, cur[0], cur[1], w, h) != 2:
                    break
                nxt = _next_neighbour(img, w, h, cur, prev)
                if nxt is None:
                    break
                prev, cur = cur, nxt
                if visited[cur[1] * w + cur[0]]:
                    break
            runs.append((cells, False))

    for y in range(h):
        for x in range(w):
            i = y * w + x
            if not img[i] or visited[i] or _degree(img, x, y, w, h) != 2:
                continue
            start: Cell = (x, y)
            cells = []
            cur = start
            prev = None
            for _ in range(8 * (w + h)):
                visited[cur[1] * w + cur[0]] = 1
                cells.append(cur)
                nxt = _next_neighbour(img, w, h, cur, prev)
                if nxt is None:
                    break
                if visited[nxt[1] * w + nxt[0]] and nxt != start:
                    break
                prev, cur = cur, nxt
                if cur == start:
                    if close_loops:
                        cells.append(cur)
                    break
            runs.append((cells, True))

    return runs


def _components(fg: bytearray, w: int, h: int) -> Iterator[tuple[list[int], int, int, int, int]]:
    """4-connected foreground components with their bounding boxes."""
    visited = bytearray(w * h)
    for y in range(h):
        for x in range(w):
            start = y * w + x
            if visited[start] or not fg[start]:
                continue
            visited[start] = 1
            stack = [start]
            comp = [start]
            min_x = max_x = x
            min_y = max_y = y
            while stack:
                p = stack.pop()
                px, py = p % w, p // w
                for dx, dy in _N4:
                    nx, ny = px + dx, py + dy
                    if nx < 0 or ny < 0 or nx >= w or ny >= h:
                        continue
                    ni = ny * w + nx
                    if visited[ni] or not fg[ni]:
                        continue
                    visited[ni] = 1
                    stack.append(ni)
                    comp.append(ni)
                    min_x, max_x = min(min_x, nx), max(max_x, nx)
                    min_y, max_y = min(min_y, ny), max(max_y, ny)
            yield comp, min_x, min_y, max_x, max_y


class SkeletonizeFilter(Filter):
    """Thins dark regions to one-pixel skeletons and traces them as polylines."""

    name = "Skeletonize"

    def __init__(self) -> None:
        super().__init__({
            "threshold": FilterParameter("Black Threshold", 0.0, 255.0, 128.0),
            "pruneIters": FilterParameter("Prune Iterations", 0.0, 50.0, 5.0),
            "tolerancePx": FilterParameter("Simplify (px)", 0.0, 10.0, 1.0),
            "downsample": FilterParameter("Downsample", 1.0, 8.0, 1.0),
            "closeLoops": FilterParameter("Close Loops (0/1)", 0.0, 1.0, 0.0),
            "turdSizePx": FilterParameter("Ignore Components < px", 0.0, 1000.0, 16.0),
            "minSegmentLengthPx": FilterParameter("Drop Segments < px", 0.0, 1000.0, 4.0),
        })

    def _foreground(self, image: Bitmap, down: int, thresh: int) -> tuple[bytearray, int, int]:
        w0, h0 = image.width_px, image.height_px
        w = (w0 + down - 1) // down
        h = (h0 + down - 1) // down
        pixels = image.pixels
        fg = bytearray(w * h)
        for y in range(h):
            ys = range(y * down, min(y * down + down, h0))
            for x in range(w):
                xs = range(x * down, min(x * down + down, w0))
                if any(pixels[yy * w0 + xx] < thresh for yy in ys for xx in xs):
                    fg[y * w + x] = 1
        return fg, w, h

    def apply(self, image: Bitmap) -> PathSet:
        out = PathSet(color=WHITE)
        if image.is_empty:
            out.compute_aabb()
            return out

        thresh = lround(self.value("threshold")) & 0xFF
        prune_iters = lround(max(0.0, self.value("pruneIters")))
        tol_px = max(0.0, self.value("tolerancePx"))
        down = max(1, lround(self.value("downsample")))
        close_loops = self.value("closeLoops") > 0.5
        turd_px = lround(max(0.0, self.value("turdSizePx")))
        min_len_px = max(0.0, self.value("minSegmentLengthPx"))

        fg, w, h = self._foreground(image, down, thresh)
        pixel_mm = image.pixel_size_mm * down
        eps_mm = tol_px * pixel_mm / down
        turd_cells = max(0, math.ceil(turd_px / (down * down)))
        min_len_mm = min_len_px * image.pixel_size_mm

        for comp, min_x, min_y, max_x, max_y in _components(fg, w, h):
            rw = max_x - min_x + 1
            rh = max_y - min_y + 1
            if turd_cells > 0 and len(comp) < turd_cells:
                continue
            roi = bytearray(rw * rh)
            for p in comp:
                roi[(p // w - min_y) * rw + (p % w - min_x)] = 1

            _thin(roi, rw, rh)
            _prune(roi, rw, rh, prune_iters)

            for cells, is_loop in _trace(roi, rw, rh, close_loops):
                points = [
                    ((min_x + cx + 0.5) * pixel_mm, (min_y + cy + 0.5) * pixel_mm)
                    for cx, cy in cells
                ]
                path = self._make_path(points, is_loop and close_loops, eps_mm, min_len_mm)
                if path is not None:
                    out.paths.append(path)

        out.compute_aabb()
        return out

    @staticmethod
    def _make_path(
        points: list[Point], closed: bool, eps_mm: float, min_len_mm: float
    ) -> Optional[Path]:
        keep_dist_sq = max(1e-6, eps_mm * 0.5) ** 2
        kept: list[Point] = []
        for p in points:
            if not kept or (p[0] - kept[-1][0]) ** 2 + (p[1] - kept[-1][1]) ** 2 >= keep_dist_sq:
                kept.append(p)
        if eps_mm > 0.0 and len(kept) > 3:
            kept = rdp(kept, eps_mm)
        if len(kept) < 2:
            return None
        length = sum(math.dist(a, b) for a, b in zip(kept, kept[1:]))
        if length < min_len_mm:
            return None
        return Path(kept, closed=closed)