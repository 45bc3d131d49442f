"""Shared pytest fixtures for solarlens tests."""

import numpy as np
import pytest

from solarlens.core.spectrum import SpectralGrid
from solarlens.optics.lens import LensOptics
from solarlens.pipeline_config import PipelineConfig


@pytest.fixture
def wavelength_nm():
    """Standard test wavelength (V-band)."""
    return 550.0


@pytest.fixture
def lens():
    """Lens optics with a small PSF kernel."""
    return LensOptics(psf_size=32)


@pytest.fixture
def grid():
    """Reference spectral grid, 2048 bins over 400-2400 nm."""
    return SpectralGrid()


@pytest.fixture
def flat_spectrum(grid):
    """Unit continuum on the reference grid."""
    return np.ones(grid.n_bins, dtype=np.float32)


@pytest.fixture
def on_disk_config():
    """Small frame that lies entirely on the saturated solar disk."""
    return PipelineConfig(
        custom_config={
            "image_shape": (64, 64),
            "deconvolution_iterations": 10,
            "psf_size": 32,
        }
    )


@pytest.fixture
def far_field_config():
    """Small frame placed far from the Sun, where the corona is faint."""
    return PipelineConfig(
        custom_config={
            "image_shape": (65, 65),
            "pixels_per_solar_radius": 0.01,
            "deconvolution_iterations": 10,
            "psf_size": 32,
        }
    )


@pytest.fixture
def planet_frame():
    """65x65 frame with a 10 count sky and a 1000 count 5x5 source at (20, 44)."""
    frame = np.full((65, 65), 10, dtype=np.uint16)
    frame[18:23, 42:47] = 1000
    return frame
