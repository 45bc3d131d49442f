"""Core array functions of the detection pipeline, one module per stage."""

from solarlens.core.accumulation import accumulate_photons, photon_noise
from solarlens.core.atmosphere import (
    ABSORPTION_LINES,
    AbsorptionLine,
    absorption_depth,
    analyze_atmosphere,
    biosignature_score,
)
from solarlens.core.background import (
    corona_model,
    get_center,
    radial_distance,
    subtract_corona,
)
from solarlens.core.characterization import (
    estimate_albedo,
    estimate_orbital_radius,
    estimate_radius,
    estimate_temperature,
    in_habitable_zone,
)
from solarlens.core.deconvolution import box_kernel, convolve_clipped, richardson_lucy
from solarlens.core.photometry import (
    aperture_stats,
    chebyshev_offsets,
    detect_point_source,
    exceeds_threshold,
    find_peak,
)
from solarlens.core.results import Atmosphere, Detection, PlanetData
from solarlens.core.spectrum import SpectralGrid

__all__ = [
    "accumulate_photons",
    "photon_noise",
    "corona_model",
    "get_center",
    "radial_distance",
    "subtract_corona",
    "box_kernel",
    "convolve_clipped",
    "richardson_lucy",
    "aperture_stats",
    "chebyshev_offsets",
    "detect_point_source",
    "exceeds_threshold",
    "find_peak",
    "estimate_albedo",
    "estimate_orbital_radius",
    "estimate_radius",
    "estimate_temperature",
    "in_habitable_zone",
    "ABSORPTION_LINES",
    "AbsorptionLine",
    "absorption_depth",
    "analyze_atmosphere",
    "biosignature_score",
    "Atmosphere",
    "Detection",
    "PlanetData",
    "SpectralGrid",
]
