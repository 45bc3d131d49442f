"""Exoplanet detection and characterization behind the solar gravitational lens."""

from importlib.metadata import version as _get_version

__version__ = _get_version("solarlens")

from solarlens import constants, conversions
from solarlens.logger import set_level
from solarlens.core import (
    Atmosphere,
    Detection,
    PlanetData,
    SpectralGrid,
)
from solarlens.optics import PSF, LensOptics
from solarlens.pipeline import DetectionPipeline
from solarlens.pipeline_config import PipelineConfig

__all__ = [
    "constants",
    "conversions",
    "Atmosphere",
    "Detection",
    "PlanetData",
    "SpectralGrid",
    "LensOptics",
    "PSF",
    "DetectionPipeline",
    "PipelineConfig",
    "set_level",
]
