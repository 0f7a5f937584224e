[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "linx"
version = "0.1.0"
description = "N-dimensional raster regions, filters, DFTs, noise models, FITS images and cosmic-ray masking"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "image processing",
    "raster",
    "filtering",
    "dft",
    "fits",
    "cosmic rays",
    "astronomy",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Processing",
    "Topic :: Scientific/Engineering :: Astronomy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
linx-mask-cosmics = "linx.cosmics:main"

[tool.hatch.build.targets.wheel]
packages = ["linx"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
