"""N-dimensional raster regions, patches, filters, DFTs, noise, FITS I/O and cosmic-ray masking."""

__version__ = "0.1.0"