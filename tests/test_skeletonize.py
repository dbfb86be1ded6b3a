import math

import pytest

from minotaur.base import WHITE, Bitmap
from minotaur.skeletonize import SkeletonizeFilter


def _bitmap(width, height, black, size=1.0, value=0):
    pixels = bytearray([255]) * (width * height)
    for x, y in black:
        pixels[y * width + x] = value
    return Bitmap(width, height, size, pixels)


def _hline(x0, x1, y):
    return [(x, y) for x in range(x0, x1 + 1)]


def _square_outline(x0, y0, side):
    x1, y1 = x0 + side - 1, y0 + side - 1
    cells = set()
    for i in range(side):
        cells.update({(x0 + i, y0), (x0 + i, y1), (x0, y0 + i), (x1, y0 + i)})
    return cells


def test_default_parameters_match_source():
    f = SkeletonizeFilter()
    assert f.name == "Skeletonize"
    assert f.value("threshold") == 128.0
    assert f.value("pruneIters") == 5.0
    assert f.value("tolerancePx") == 1.0
    assert f.value("downsample") == 1.0
    assert f.value("closeLoops") == 0.0
    assert f.value("turdSizePx") == 16.0
    assert f.value("minSegmentLengthPx") == 4.0


def test_empty_bitmap_gives_no_paths():
    out = SkeletonizeFilter().apply(Bitmap())
    assert out.paths == []
    assert out.aabb_min is None


def test_white_image_gives_no_paths():
    out = SkeletonizeFilter().apply(_bitmap(20, 20, []))
    assert out.paths == []
    assert out.color == WHITE


def test_horizontal_line_traced_between_its_ends():
    out = SkeletonizeFilter().apply(_bitmap(40, 11, _hline(5, 34, 5)))
    assert len(out.paths) == 1
    path = out.paths[0]
    assert path.closed is False
    assert path.points == [(6.5, 5.5), (33.5, 5.5)]
    assert out.aabb_min == path.points[0]
    assert out.aabb_max == path.points[-1]


def test_small_component_is_ignored_by_default():
    image = _bitmap(30, 11, _hline(5, 14, 5))
    f = SkeletonizeFilter()
    assert f.apply(image).paths == []
    f.set_parameter("turdSizePx", 0)
    out = f.apply(image)
    assert len(out.paths) == 1
    assert all(y == 5.5 for _, y in out.paths[0].points)


def test_min_segment_length_drops_paths():
    f = SkeletonizeFilter()
    f.set_parameter("minSegmentLengthPx", 1000)
    assert f.apply(_bitmap(40, 11, _hline(5, 34, 5))).paths == []


def test_threshold_controls_foreground():
    image = _bitmap(40, 11, _hline(5, 34, 5), value=100)
    f = SkeletonizeFilter()
    assert len(f.apply(image).paths) == 1
    f.set_parameter("threshold", 50)
    assert f.apply(image).paths == []


def test_pixel_size_scales_output():
    black = _hline(5, 34, 5)
    f = SkeletonizeFilter()
    small = f.apply(_bitmap(40, 11, black, size=1.0))
    large = f.apply(_bitmap(40, 11, black, size=2.0))
    assert len(small.paths) == len(large.paths) == 1
    scaled = [(x * 2.0, y * 2.0) for x, y in small.paths[0].points]
    assert large.paths[0].points == scaled


def test_downsample_places_points_on_cell_centres():
    f = SkeletonizeFilter()
    f.set_parameter("downsample", 2)
    out = f.apply(_bitmap(40, 11, _hline(5, 34, 5)))
    assert len(out.paths) >= 1
    for path in out.paths:
        for x, y in path.points:
            assert (x / 2.0 - 0.5).is_integer()
            assert (y / 2.0 - 0.5).is_integer()


def test_square_outline_closed_loop():
    f = SkeletonizeFilter()
    f.set_parameter("closeLoops", 1)
    out = f.apply(_bitmap(14, 14, _square_outline(2, 2, 10)))
    assert len(out.paths) == 1
    path = out.paths[0]
    assert path.closed is True
    assert path.points == [
        (2.5, 2.5), (11.5, 2.5), (11.5, 11.5), (2.5, 11.5), (2.5, 2.5),
    ]


def test_square_outline_open_without_close_loops():
    out = SkeletonizeFilter().apply(_bitmap(14, 14, _square_outline(2, 2, 10)))
    assert len(out.paths) == 1
    path = out.paths[0]
    assert path.closed is False
    assert path.points[0] == (2.5, 2.5)
    assert path.points[-1] != path.points[0]
    assert {(11.5, 2.5), (11.5, 11.5), (2.5, 11.5)} <= set(path.points)


def test_thick_stroke_points_lie_on_foreground_and_respect_min_length():
    size = 24
    black = {(x, y) for y in range(size) for x in range(size) if abs(x - y) <= 1}
    image = _bitmap(size, size, black)
    out = SkeletonizeFilter().apply(image)
    for path in out.paths:
        for x, y in path.points:
            assert (math.floor(x), math.floor(y)) in black
        length = sum(math.dist(a, b) for a, b in zip(path.points, path.points[1:]))
        assert length >= 4.0


def test_input_is_not_modified():
    image = _bitmap(40, 11, _hline(5, 34, 5))
    before = bytes(image.pixels)
    SkeletonizeFilter().apply(image)
    assert bytes(image.pixels) == before


def test_unknown_parameter_raises():
    f = SkeletonizeFilter()
    with pytest.raises(KeyError):
        f.set_parameter("nope", 1.0)
    with pytest.raises(KeyError):
        f.value("nope")


def test_set_parameter_bumps_version():
    f = SkeletonizeFilter()
    start = f.version
    f.set_parameter("pruneIters", 3)
    assert f.version == start + 1
    assert f.value("pruneIters") == 3.0