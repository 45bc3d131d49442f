"""Lens optics for solarlens."""

from solarlens.optics.lens import PSF, LensOptics, gaussian_kernel

__all__ = [
    "LensOptics",
    "PSF",
    "gaussian_kernel",
]
