from minotaur.base import FloatImage
from minotaur.float_to_path import FloatToPathFilter


def make(width, height, values, pixel_size=1.0):
    return FloatImage(width, height, pixel_size, values)


def test_empty_image_gives_no_paths():
    result = FloatToPathFilter().apply(FloatImage())
    assert result.paths == []
    assert result.aabb_min is None


def test_single_maximum_has_no_partner():
    result = FloatToPathFilter().apply(make(3, 1, [0.0, 1.0, 0.0]))
    assert result.paths == []


def test_two_adjacent_maxima_are_linked_once():
    result = FloatToPathFilter().apply(make(4, 1, [0.0, 1.0, 1.0, 0.0]))
    assert len(result.paths) == 1
    path = result.paths[0]
    assert path.closed is False
    assert path.points == [(1.5, 0.5), (2.5, 0.5)]


def test_pixel_size_scales_points():
    result = FloatToPathFilter().apply(make(4, 1, [0.0, 1.0, 1.0, 0.0], pixel_size=2.0))
    assert result.paths[0].points == [(3.0, 1.0), (5.0, 1.0)]


def test_non_positive_values_are_ignored():
    result = FloatToPathFilter().apply(make(2, 2, [-1.0, -1.0, 0.0, 0.0]))
    assert result.paths == []


def test_connect_radius_reaches_further():
    values = [1.0, 0.0, 1.0]
    f = FloatToPathFilter()
    assert f.apply(make(3, 1, values)).paths == []
    f.set_parameter("connectRadius", 2.0)
    result = f.apply(make(3, 1, values))
    assert len(result.paths) == 1
    assert result.paths[0].points == [(0.5, 0.5), (2.5, 0.5)]


def test_maxima_radius_suppresses_lower_peak():
    values = [1.0, 0.0, 2.0, 0.0, 0.0]
    f = FloatToPathFilter()
    f.set_parameter("connectRadius", 3.0)
    assert len(f.apply(make(5, 1, values)).paths) == 1
    f.set_parameter("maximaRadius", 2.0)
    assert f.apply(make(5, 1, values)).paths == []


def test_plateau_links_every_forward_pair_and_bbox():
    result = FloatToPathFilter().apply(make(2, 2, [1.0, 1.0, 1.0, 1.0]))
    # Four pixels, 8-connected: 6 distinct pairs.
    assert len(result.paths) == 6
    pairs = {tuple(p.points) for p in result.paths}
    assert len(pairs) == 6
    assert result.aabb_min == (0.5, 0.5)
    assert result.aabb_max == (1.5, 1.5)