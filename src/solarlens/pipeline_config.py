"""Configuration for the exoplanet detection pipeline.

PipelineConfig has a set of default parameters describing the reference
mission (1024x1024 sensor, 2048-bin spectrum over 400-2400 nm, 50
deconvolution iterations, 5 sigma detection threshold). Any of them can be
overwritten, either by providing a TOML file or a dictionary of custom
values. The custom_config values will overwrite anything provided in the
TOML file.

TOML layout::

    [detector]
    shape = [1024, 1024]
    dark_current_rate = 0.01

    [background]
    pixels_per_solar_radius = 100.0
    corona_wavelength_nm = 550.0

    [deconvolution]
    iterations = 50
    kernel_size = 5

    [detection]
    margin = 10
    aperture_half_width = 2
    annulus_inner = 6
    annulus_outer = 10
    snr_threshold = 5.0

    [spectrum]
    bins = 2048
    min_nm = 400.0
    max_nm = 2400.0
    continuum_offset_bins = 10

    [characterization]
    reference_albedo = 0.3
    reference_distance_ly = 10.0
    target_luminosity = 1.0
    hz_inner_au = 0.95
    hz_outer_au = 1.37

    [optics]
    focal_distance_au = 650.0
    psf_size = 256
"""

import tomllib

from solarlens import constants as const

# TOML section -> {TOML key: attribute name}
_TOML_LAYOUT = {
    "detector": {
        "shape": "image_shape",
        "dark_current_rate": "dark_current_rate",
    },
    "background": {
        "pixels_per_solar_radius": "pixels_per_solar_radius",
        "corona_wavelength_nm": "corona_wavelength_nm",
    },
    "deconvolution": {
        "iterations": "deconvolution_iterations",
        "kernel_size": "kernel_size",
    },
    "detection": {
        "margin": "detection_margin",
        "aperture_half_width": "aperture_half_width",
        "annulus_inner": "annulus_inner",
        "annulus_outer": "annulus_outer",
        "snr_threshold": "snr_threshold",
    },
    "spectrum": {
        "bins": "spectrum_bins",
        "min_nm": "spectrum_min_nm",
        "max_nm": "spectrum_max_nm",
        "continuum_offset_bins": "continuum_offset_bins",
    },
    "characterization": {
        "reference_albedo": "reference_albedo",
        "reference_distance_ly": "reference_distance_ly",
        "target_luminosity": "target_luminosity",
        "hz_inner_au": "hz_inner_au",
        "hz_outer_au": "hz_outer_au",
    },
    "optics": {
        "focal_distance_au": "focal_distance_au",
        "psf_size": "psf_size",
    },
}


class PipelineConfig:
    """PipelineConfig holds the parameters of a DetectionPipeline.

    Attributes:
        image_shape (tuple[int, int]):
            Sensor shape (ny, nx).
        dark_current_rate (float):
            Dark current in electrons/pixel/s.
        pixels_per_solar_radius (float):
            Plate scale used to place the corona model.
        corona_wavelength_nm (float):
            Wavelength at which the corona model is evaluated.
        deconvolution_iterations (int):
            Number of Richardson-Lucy iterations.
        kernel_size (int):
            Side of the uniform deconvolution kernel, odd.
        detection_margin (int):
            Border excluded from the peak search.
        aperture_half_width (int):
            Chebyshev radius of the signal aperture.
        annulus_inner (int), annulus_outer (int):
            Chebyshev radii bounding the noise annulus.
        snr_threshold (float):
            Detection threshold, a source must be strictly above it.
        spectrum_bins (int), spectrum_min_nm (float), spectrum_max_nm (float):
            Spectral grid.
        continuum_offset_bins (int):
            Offset of the continuum bins around an absorption line.
        reference_albedo (float):
            Albedo assumed when inverting flux into radius.
        reference_distance_ly (float):
            Distance assumed when inverting flux into radius.
        target_luminosity (float):
            Host luminosity in solar units for the habitable zone. Not
            derived from the observed target.
        hz_inner_au (float), hz_outer_au (float):
            Habitable zone bounds for a one solar luminosity host.
        focal_distance_au (float):
            Observer distance used for the PSF.
        psf_size (int):
            Side of the PSF kernel.
    """

    def __init__(self, toml_file=None, custom_config=None):
        """Initializes the PipelineConfig object.

        Args:
            toml_file (str or pathlib.Path, optional):
                Path to a TOML file with the pipeline parameters.
            custom_config (dict, optional):
                Dictionary with custom pipeline parameters.

        Raises:
            AttributeError:
                If custom_config contains a key that is not a parameter.
            ValueError:
                If the resulting parameters are inconsistent.
        """
        # Reference mission values
        self.image_shape = (1024, 1024)
        self.dark_current_rate = 0.01
        self.pixels_per_solar_radius = 100.0
        self.corona_wavelength_nm = 550.0
        self.deconvolution_iterations = 50
        self.kernel_size = 5
        self.detection_margin = 10
        self.aperture_half_width = 2
        self.annulus_inner = 6
        self.annulus_outer = 10
        self.snr_threshold = 5.0
        self.spectrum_bins = 2048
        self.spectrum_min_nm = 400.0
        self.spectrum_max_nm = 2400.0
        self.continuum_offset_bins = 10
        self.reference_albedo = 0.3
        self.reference_distance_ly = 10.0
        self.target_luminosity = 1.0
        self.hz_inner_au = 0.95
        self.hz_outer_au = 1.37
        self.focal_distance_au = const.focal_optimal_AU
        self.psf_size = 256

        # Load the TOML file (if provided)
        if toml_file:
            self.load_toml(toml_file)

        # Update with the provided custom settings
        if custom_config is not None:
            for key, value in custom_config.items():
                if hasattr(self, key):
                    setattr(self, key, value)
                else:
                    raise AttributeError(f"{key} is not a valid pipeline setting.")

        self.image_shape = tuple(int(n) for n in self.image_shape)
        self.validate()

    def __repr__(self):
        """Returns a string representation of the pipeline parameters."""
        attrs = vars(self)
        parts = ["PipelineConfig:"]
        for key, value in attrs.items():
            value_str = repr(value)
            parts.append(f"  {key}: {value_str}")

        return "\n".join(parts)

    def load_toml(self, toml_file):
        """Loads a TOML file and overwrites default parameters with its contents."""
        with open(toml_file, "rb") as file:
            config = tomllib.load(file)

        for section, keys in _TOML_LAYOUT.items():
            if section not in config:
                continue
            for toml_key, value in config[section].items():
                if toml_key not in keys:
                    raise AttributeError(
                        f"{section}.{toml_key} is not a valid pipeline setting."
                    )
                setattr(self, keys[toml_key], value)

    def validate(self):
        """Check that the parameters describe a usable pipeline."""
        if len(self.image_shape) != 2 or min(self.image_shape) <= 0:
            raise ValueError(f"image_shape must be two positive sizes, got {self.image_shape}")
        if self.detection_margin < self.annulus_outer:
            raise ValueError(
                "detection_margin must be at least annulus_outer so the noise "
                "annulus stays inside the image."
            )
        if min(self.image_shape) <= 2 * self.detection_margin:
            raise ValueError(
                f"image_shape {self.image_shape} leaves no interior for a "
                f"detection margin of {self.detection_margin} pixels."
            )
        if not 0 <= self.aperture_half_width < self.annulus_inner <= self.annulus_outer:
            raise ValueError(
                "Expected 0 <= aperture_half_width < annulus_inner <= annulus_outer."
            )
        if self.kernel_size < 1 or self.kernel_size % 2 == 0:
            raise ValueError(f"kernel_size must be odd and positive, got {self.kernel_size}")
        if self.deconvolution_iterations < 0:
            raise ValueError("deconvolution_iterations cannot be negative.")
        if self.spectrum_max_nm <= self.spectrum_min_nm:
            raise ValueError("spectrum_max_nm must be greater than spectrum_min_nm.")
        if self.spectrum_bins <= 2 * self.continuum_offset_bins:
            raise ValueError(
                "spectrum_bins must exceed twice continuum_offset_bins."
            )
        if self.pixels_per_solar_radius <= 0:
            raise ValueError("pixels_per_solar_radius must be positive.")
        if self.dark_current_rate < 0:
            raise ValueError("dark_current_rate cannot be negative.")
        if self.psf_size <= 0:
            raise ValueError("psf_size must be positive.")
