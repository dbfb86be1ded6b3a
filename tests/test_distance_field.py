import pytest

from minotaur.base import Bitmap
from minotaur.distance_field import BitmapToFloatFilter, distance_transform_chamfer

BIG = 1e20


def test_chamfer_orthogonal_and_diagonal_steps():
    seeds = [BIG] * 9
    seeds[4] = 0.0
    d = distance_transform_chamfer(seeds, 3, 3, 1.0, 1.5)
    assert d[4] == 0.0
    assert [d[1], d[3], d[5], d[7]] == [1.0, 1.0, 1.0, 1.0]
    assert [d[0], d[2], d[6], d[8]] == [1.5, 1.5, 1.5, 1.5]


def test_chamfer_does_not_mutate_input():
    seeds = [0.0, BIG, BIG]
    distance_transform_chamfer(seeds, 3, 1, 2.0, 3.0)
    assert seeds == [0.0, BIG, BIG]


def test_chamfer_rejects_wrong_size():
    with pytest.raises(ValueError):
        distance_transform_chamfer([0.0, 1.0], 3, 1, 1.0, 1.0)


def test_signed_field_sign_and_adjacent_distances():
    img = Bitmap(4, 1, 0.5, [255, 255, 0, 0])
    out = BitmapToFloatFilter().apply(img)
    assert out.pixels[1] == pytest.approx(-0.5)
    assert out.pixels[2] == pytest.approx(0.5)
    assert out.pixels[0] < out.pixels[1] < 0 < out.pixels[2] < out.pixels[3]
    assert out.min_value == min(out.pixels)
    assert out.max_value == max(out.pixels)
    assert out.pixel_size_mm == 0.5


def test_uniform_images_give_zero_field():
    f = BitmapToFloatFilter()
    assert f.apply(Bitmap(3, 2, 1.0, [255] * 6)).pixels == [0.0] * 6
    assert f.apply(Bitmap(3, 2, 1.0, [0] * 6)).pixels == [0.0] * 6


def test_threshold_rounds_half_up():
    out = BitmapToFloatFilter().apply(Bitmap(2, 1, 1.0, [128, 127]))
    assert out.pixels[0] < 0
    assert out.pixels[1] > 0


def test_empty_input():
    out = BitmapToFloatFilter().apply(Bitmap(0, 5, 1.0, []))
    assert out.pixels == []
    assert (out.min_value, out.max_value) == (0.0, 0.0)