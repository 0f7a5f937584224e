# linx

Tools for working with N-dimensional rasters held as NumPy arrays:
statistics on data distributions, axis-aligned regions and patches,
boundary extrapolation and sliding-window filters, discrete Fourier
transforms, random noise generators, a minimal FITS image reader and
writer, and a cosmic-ray masking pipeline built on top of them.

Positions are tuples of integers whose first axis is the fastest-varying
one in the data ordering.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Overview

| Module               | What it provides                                                            |
|----------------------|-----------------------------------------------------------------------------|
| `linx.distribution`  | `DataDistribution`: min, max, nth, median, quantiles, variance, stdev, MAD, histograms |
| `linx.ranges`        | Helpers over lists and arrays: `fill`, `range_fill`, `linspace_fill`, `generate`, `apply`, `minmax`, `mean`, `format_container`, ... |
| `linx.timer`         | `Timer` with split times, totals and statistics on the splits, in a `TimeUnit` |
| `linx.noise`         | `UniformNoise`, `GaussianNoise`, `PoissonNoise`, `StablePoissonNoise`, `ImpulseNoise` |
| `linx.exceptions`    | `LinxError`, `MissingFileError`, `PathExistsError`, `FileFormatError`, `ensure_file`, `ensure_absent` |
| `linx.regions`       | `Box`, `Grid` and `Line` regions, iterable position by position             |
| `linx.dft`           | `real_dft`, `inverse_real_dft`, `complex_dft`, `inverse_complex_dft`, `real_out_shape` |
| `linx.patch`         | `Patch` views of a raster over a region, `rows` and `tiles`                 |
| `linx.filters`       | `Extrapolation` with `Nearest`, `Constant` or `Periodic`; `SimpleFilter`, `FilterSeq` |
| `linx.fits`          | `Fits` image reader/writer, `read` and `write`                              |
| `linx.cosmics`       | `laplacian`, `quotient`, `match`, `dilate`, `blur`, `detect`, `segment` and the masking command |

## Examples

Robust statistics:

```python
from linx.distribution import DataDistribution

dist = DataDistribution([2, 1, 9, 4, 1, 2, 6])
dist.min()     # 1
dist.max()     # 9
dist.median()  # 2
dist.mad()     # 1
```

Differentiating a periodic signal in Fourier space:

```python
import numpy as np
from linx.dft import real_dft, inverse_real_dft

x = np.arange(360) * np.pi / 180
spectrum = real_dft(np.sin(x))
spectrum *= 1j * np.arange(len(spectrum))
derivative = inverse_real_dft(spectrum, (360,))  # close to cos(x)
```

Regions and patches:

```python
import numpy as np
from linx.regions import Box
from linx.patch import Patch

raster = np.arange(12.0).reshape(3, 4)
box = Box((1, 1), (2, 2))
patch = Patch(raster, box)
list(patch)  # values of the raster inside the box
```

Filtering with extrapolation at the borders:

```python
import numpy as np
from linx.filters import SimpleFilter, extrapolation
from linx.regions import Box

image = np.ones((4, 3), dtype=int)
erode = SimpleFilter(min, Box.from_center(1))
eroded = erode(extrapolation(image, 0))  # same shape as image, zeros on the borders
```

Reading and writing FITS images:

```python
from linx.fits import read, write

image = read("data.fits")
write(image, "copy.fits", "w")  # "x": create, "w": overwrite, "a": append an HDU
```

## Cosmic-ray masking

The `linx-mask-cosmics` command detects cosmic rays in an image and grows
the detected regions by contrast-based segmentation. The output FITS file
receives the input image followed by one mask HDU per step.

```
linx-mask-cosmics input.fits mask.fits --psf psf.fits
```

Options:

- `--psf` — the PSF file name (required)
- `--hdu`, `-i` — the 0-based input HDU index (default 0)
- `--pfa`, `-p` — the detection probability of false alarm (default 0.01)
- `--quotient`, `-q` — the star rejection quotient threshold (default 0.1)
- `--contrast`, `-c` — the region-growing contrast threshold (default 0.5)
- `--niter`, `-n` — the number of segmentation iterations (default 1)

The same steps are available from Python through `linx.cosmics.detect`
and `linx.cosmics.segment`.

## Limitations

- The FITS handler reads and writes image HDUs only: no tables, no
  compressed images, and no header keywords beyond those describing the
  image layout and integer offsets.
- Filters take rectangular windows (`Box`) only, and there is no
  sub-pixel interpolation or geometric transformation of rasters.