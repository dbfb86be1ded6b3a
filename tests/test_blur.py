from minotaur.base import Bitmap
from minotaur.blur import BlurFilter


def _impulse(size):
    pixels = [0] * (size * size)
    pixels[(size // 2) * size + size // 2] = 255
    return Bitmap(size, size, 1.0, pixels)


def test_zero_radius_is_identity():
    img = Bitmap(3, 2, 1.0, [1, 2, 3, 4, 5, 6])
    f = BlurFilter()
    f.set_parameter("radius", 0)
    assert f.apply(img).pixels == img.pixels


def test_uniform_image_is_unchanged():
    img = Bitmap(5, 4, 1.0, [77] * 20)
    assert BlurFilter().apply(img).pixels == img.pixels


def test_impulse_spreads_symmetrically():
    out = BlurFilter().apply(_impulse(7))
    grid = out.rows()
    for y in range(7):
        for x in range(7):
            assert grid[y][x] == grid[x][y]
            assert grid[y][x] == grid[6 - y][x]
            assert grid[y][x] == grid[y][6 - x]
    center = grid[3][3]
    assert 0 < center < 255
    assert center == max(out.pixels)


def test_output_within_input_range():
    img = Bitmap(4, 3, 0.2, [10, 200, 30, 90, 250, 5, 60, 70, 80, 100, 120, 140])
    out = BlurFilter().apply(img)
    assert (out.width_px, out.height_px, out.pixel_size_mm) == (4, 3, 0.2)
    assert len(out.pixels) == 12
    assert min(out.pixels) >= min(img.pixels)
    assert max(out.pixels) <= max(img.pixels)


def test_radius_larger_than_image():
    img = Bitmap(2, 2, 1.0, [0, 255, 255, 0])
    f = BlurFilter()
    f.set_parameter("radius", 9)
    out = f.apply(img)
    assert out.pixels[0] == out.pixels[3]
    assert out.pixels[1] == out.pixels[2]


def test_empty_input():
    out = BlurFilter().apply(Bitmap(0, 0, 1.0, []))
    assert out.pixels == bytearray()