# minotaur

A small library of image filters for preparing pictures for a pen plotter.
The filters work on 8-bit grayscale bitmaps and floating-point images. Several
of them turn images into polylines measured in millimetres.

The library is written in pure Python and has no dependencies.

## Data types

All of these live in `minotaur.base`:

- `Bitmap`: grayscale pixels from 0 to 255, stored row by row in a `bytearray`, with
  `width_px`, `height_px` and `pixel_size_mm`. `rows()` returns the pixels as a list of rows.
- `FloatImage`: floating-point pixels. `compute_range()` sets `min_value` and `max_value`.
- `Path` and `PathSet`: polylines in mm. `PathSet.compute_aabb()` sets `aabb_min` and
  `aabb_max`, or sets both to `None` when there are no points.
- `FilterParameter` and `Filter`: the common base for filters. Each filter has named
  parameters. `value(key)` reads a parameter. `set_parameter(key, value)` changes it,
  increments `version`, and raises `KeyError` for an unknown key. `apply(image)`
  returns a new result and leaves the input unchanged.

## Filters

Bitmap to bitmap:

- `minotaur.threshold.ThresholdFilter` (`min`, `max`): pixels inside `[min, max]` become 0
  and all other pixels become 255.
- `minotaur.levels.LevelsFilter` (`bias`, `gain`, `invert`): applies `(v + bias) * gain` to
  values normalised to 0..1, clamps the result, and inverts it when `invert` > 0.5.
- `minotaur.blur.BlurFilter` (`radius`): separable Gaussian blur with integer weights and
  clamped edges.
- `minotaur.canny.CannyFilter` (`blur_radius_px`, `low_threshold`, `high_threshold`): Canny
  edge detection. Edge pixels become 255 and all other pixels become 0.
- `minotaur.clahe.ClaheFilter` (`tilesX`, `tilesY`, `clipLimit`): contrast-limited adaptive
  histogram equalization, blended bilinearly between tiles. `build_clahe_lut(tile, clip_limit)`
  builds the lookup table for a single tile.

Bitmap to float image:

- `minotaur.distance_field.BitmapToFloatFilter` (`threshold`, 0..1): a signed chamfer distance
  field in mm. Values are negative inside the foreground, which is the pixels at or above the
  threshold. `distance_transform_chamfer(distances, width, height, w_orth, w_diag)` is the
  two-pass transform it uses.

Float image to float image:

- `minotaur.float_blur.FloatBlurFilter` (`radius`): Gaussian blur.

To paths:

- `minotaur.trace.TraceFilter` (`threshold`): for each row, one polyline through the pixels at
  or above the threshold. Rows with fewer than two such pixels produce no polyline.
- `minotaur.trace_blobs.TraceBlobsFilter` (`tolerancePx`, `turdSizePx`, `traceHoles`): traces
  4-connected dark blobs (values below 128) as closed outlines. It can also trace their holes.
- `minotaur.skeletonize.SkeletonizeFilter` (`threshold`, `pruneIters`, `tolerancePx`,
  `downsample`, `closeLoops`, `turdSizePx`, `minSegmentLengthPx`): Zhang-Suen thinning of
  dark pixels, then tracing of the skeleton as polylines.
- `minotaur.line_hatch.LineHatchFilter` (`step_px`, `angle_deg`, `threshold`): parallel hatch
  segments drawn wherever pixels are at or below the threshold.
- `minotaur.float_to_path.FloatToPathFilter` (`maximaRadius`, `connectRadius`): links nearby
  positive local maxima of a float image with two-point segments.

`minotaur.simplify.rdp(points, eps)` is the Ramer-Douglas-Peucker simplification used by the
tracers.

## Example

```python
from minotaur.base import Bitmap
from minotaur.threshold import ThresholdFilter
from minotaur.trace_blobs import TraceBlobsFilter

# A 6x6 white image with a 3x3 mid-grey square in it.
pixels = [255] * 36
for y in range(1, 4):
    for x in range(1, 4):
        pixels[y * 6 + x] = 100

image = Bitmap(width_px=6, height_px=6, pixel_size_mm=0.5, pixels=pixels)
binary = ThresholdFilter().apply(image)  # the square becomes black

blobs = TraceBlobsFilter()
blobs.set_parameter("tolerancePx", 0.0)
paths = blobs.apply(binary)
for path in paths.paths:
    print(path.closed, path.points)
```

## What it does not do

This is a library of filters only. It does not read or write image files, export paths to
any vector format, drive a plotter, or provide a command line or graphical interface. You
build `Bitmap` and `FloatImage` values from your own pixel data and use the `PathSet`
results yourself.

## Running the tests

```
pip install -e .[test]
pytest
```