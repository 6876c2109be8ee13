"""Convert 360° panoramas between equirectangular and cubemap projections."""

__version__ = '0.1.0'
