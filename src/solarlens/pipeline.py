"""Exoplanet detection pipeline behind the solar gravitational lens.

The DetectionPipeline turns one raw sensor frame and its spectral channel
into a PlanetData record by running six stages in a fixed order:

1. Photon accumulation (signal plus closed-form noise magnitude)
2. Corona background subtraction
3. Richardson-Lucy deconvolution
4. Point-source detection (peak search, aperture SNR)
5. Physical parameter estimation
6. Atmospheric absorption analysis

Stages 5 and 6 only run when stage 4 declares a detection. The image and
spectrum buffers are allocated once per pipeline and overwritten on every
call, so a pipeline instance must not be shared between threads; use one
instance per concurrent detection. The LensOptics instance is immutable and
may be shared.
"""

import math

import equinox as eqx
import jax.numpy as jnp
import numpy as np

from solarlens.core.accumulation import accumulate_photons
from solarlens.core.atmosphere import analyze_atmosphere
from solarlens.core.background import subtract_corona
from solarlens.core.characterization import (
    estimate_albedo,
    estimate_orbital_radius,
    estimate_radius,
    estimate_temperature,
    in_habitable_zone,
)
from solarlens.core.deconvolution import box_kernel, richardson_lucy
from solarlens.core.photometry import detect_point_source
from solarlens.core.results import Atmosphere, Detection, PlanetData
from solarlens.core.spectrum import SpectralGrid
from solarlens.optics.lens import PSF, LensOptics
from solarlens.pipeline_config import PipelineConfig

from .logger import logger

_UINT16_MAX = np.iinfo(np.uint16).max


class DetectionPipeline:
    """Detect and characterize a planet in one lensed observation.

    Attributes:
        config (PipelineConfig):
            Pipeline parameters.
        lens (LensOptics):
            Lens physics used for the PSF and the corona model.
        grid (SpectralGrid):
            Wavelength grid of the spectral channel.
        kernel (jax.Array):
            Uniform deconvolution kernel.
        raw_image (numpy.ndarray):
            Accumulated photon image, float32, shape ``config.image_shape``.
        processed_image (numpy.ndarray):
            Background-subtracted, then deconvolved, image.
        spectrum (numpy.ndarray):
            Spectrum of the current detection, float32, ``spectrum_bins`` long.
        last_psf (PSF or None):
            PSF computed during the most recent invocation.
    """

    def __init__(self, config: PipelineConfig | None = None, lens: LensOptics | None = None):
        """Initialize the pipeline and allocate its buffers.

        Args:
            config:
                Pipeline parameters, the reference mission when omitted.
            lens:
                Lens optics to use. A new one is built from ``config.psf_size``
                when omitted.
        """
        self.config = config if config is not None else PipelineConfig()
        self.lens = lens if lens is not None else LensOptics(psf_size=self.config.psf_size)
        self.grid = SpectralGrid(
            self.config.spectrum_bins,
            self.config.spectrum_min_nm,
            self.config.spectrum_max_nm,
        )
        self.kernel = box_kernel(self.config.kernel_size)

        # Allocated once, overwritten in place on every call
        self.raw_image = np.zeros(self.config.image_shape, dtype=np.float32)
        self.processed_image = np.zeros(self.config.image_shape, dtype=np.float32)
        self.spectrum = np.zeros(self.config.spectrum_bins, dtype=np.float32)
        self.last_psf: PSF | None = None

        logger.info(
            f"Detection pipeline ready for {self.config.image_shape} frames "
            f"and {self.config.spectrum_bins} spectral bins"
        )

    def detect(
        self,
        sensor_frame,
        integration_time_s,
        target_distance_ly,
        wavelength_nm,
        spectrum=None,
        doppler_shift=0.0,
    ) -> PlanetData:
        """Run the full pipeline on one observation.

        Args:
            sensor_frame (array-like):
                Unsigned 16-bit photon counts, either shaped like
                ``config.image_shape`` or flattened in row-major order.
                Never modified.
            integration_time_s (int):
                Integration time in seconds, strictly positive.
            target_distance_ly (float):
                Distance to the target in light years. Not yet used by the
                corona model.
            wavelength_nm (float):
                Observation wavelength in nanometers, strictly positive.
            spectrum (array-like, optional):
                Intensity samples on the spectral grid. Zeros when omitted.
            doppler_shift (float):
                Doppler shift (v / c) measured for the target.

        Returns:
            PlanetData:
                A fresh record, all zero with ``detected=False`` when no
                source is found.

        Raises:
            ValueError:
                If any input is invalid. Raised before any buffer is written.
        """
        frame = self._validate_frame(sensor_frame)
        if not (math.isfinite(integration_time_s) and integration_time_s > 0):
            raise ValueError(
                f"integration_time_s must be positive, got {integration_time_s}"
            )
        if not (math.isfinite(wavelength_nm) and wavelength_nm > 0):
            raise ValueError(f"wavelength_nm must be positive, got {wavelength_nm}")
        if not math.isfinite(target_distance_ly):
            raise ValueError(
                f"target_distance_ly must be finite, got {target_distance_ly}"
            )
        if not math.isfinite(doppler_shift):
            raise ValueError(f"doppler_shift must be finite, got {doppler_shift}")
        spectrum = self._validate_spectrum(spectrum)

        logger.info(
            f"Detecting at {wavelength_nm} nm, {integration_time_s} s integration, "
            f"target at {target_distance_ly} ly"
        )

        self.accumulate_photons(frame, integration_time_s)
        self.subtract_background(target_distance_ly)

        focal_au = self.lens.focal_distance(wavelength_nm)
        if not bool(jnp.isfinite(focal_au)):
            logger.warning(f"The lens has no valid focus at {wavelength_nm} nm")
        self.last_psf = self.lens.psf(wavelength_nm, self.config.focal_distance_au)
        logger.debug(f"PSF FWHM {float(self.last_psf.fwhm_mas):.3e} mas")
        self.deconvolve(self.last_psf)

        np.copyto(self.spectrum, spectrum)
        detection = self.locate_point_source(doppler_shift)
        if not bool(detection.found):
            logger.info(f"No detection (SNR {float(detection.snr):.2f})")
            return PlanetData()

        planet = self.estimate_parameters(detection)
        planet.atmosphere = self.analyze_atmosphere(detection)
        logger.info(
            f"Planet detected with confidence {planet.confidence:.2f}, "
            f"radius {planet.radius_earth:.3g} R_earth, "
            f"biosignature score {planet.atmosphere.biosignature_score}"
        )
        return planet

    # Stages

    def accumulate_photons(self, frame, integration_time_s):
        """Stage 1: fill ``raw_image`` with signal plus noise magnitude."""
        raw = accumulate_photons(
            jnp.asarray(frame), integration_time_s, self.config.dark_current_rate
        )
        np.copyto(self.raw_image, raw)

    def subtract_background(self, target_distance_ly):
        """Stage 2: fill ``processed_image`` with the corona-subtracted image.

        The target distance is accepted for a distance-dependent corona
        model but does not affect the plate scale yet.
        """
        processed = subtract_corona(
            jnp.asarray(self.raw_image),
            self.lens,
            self.config.pixels_per_solar_radius,
            self.config.corona_wavelength_nm,
        )
        np.copyto(self.processed_image, processed)

    def deconvolve(self, psf: PSF):
        """Stage 3: replace ``processed_image`` by its deconvolved estimate.

        The restoration uses the fixed uniform kernel, the lens PSF only
        sets the diffraction scale reported in the logs.
        """
        restored = richardson_lucy(
            jnp.asarray(self.processed_image),
            self.kernel,
            self.config.deconvolution_iterations,
        )
        np.copyto(self.processed_image, restored)

    def locate_point_source(self, doppler_shift) -> Detection:
        """Stage 4: search ``processed_image`` for the brightest source.

        The Doppler shift on the returned record is the caller's value as a
        Python float, not the float32 copy that went through the jitted search.
        """
        detection = detect_point_source(
            jnp.asarray(self.processed_image),
            jnp.asarray(self.spectrum),
            doppler_shift,
            snr_threshold=self.config.snr_threshold,
            margin=self.config.detection_margin,
            aperture_half_width=self.config.aperture_half_width,
            annulus_inner=self.config.annulus_inner,
            annulus_outer=self.config.annulus_outer,
        )
        detection = eqx.tree_at(
            lambda d: d.doppler_shift, detection, float(doppler_shift)
        )
        logger.debug(
            f"Peak at (y={int(detection.peak_y)}, x={int(detection.peak_x)}), "
            f"flux {float(detection.flux):.4g}, SNR {float(detection.snr):.2f}"
        )
        return detection

    def estimate_parameters(self, detection: Detection) -> PlanetData:
        """Stage 5: physical parameters of a detected planet."""
        temperature = estimate_temperature(detection.spectrum, self.grid)
        orbital_radius = estimate_orbital_radius(detection.doppler_shift)
        return PlanetData(
            detected=True,
            confidence=float(detection.snr) / 10.0,
            radius_earth=float(
                estimate_radius(
                    detection.flux,
                    self.config.reference_albedo,
                    distance_ly=self.config.reference_distance_ly,
                )
            ),
            orbital_radius_au=float(orbital_radius),
            temperature_kelvin=float(temperature),
            albedo=float(estimate_albedo(temperature)),
            in_habitable_zone=bool(
                in_habitable_zone(
                    orbital_radius,
                    self.config.target_luminosity,
                    self.config.hz_inner_au,
                    self.config.hz_outer_au,
                )
            ),
        )

    def analyze_atmosphere(self, detection: Detection) -> Atmosphere:
        """Stage 6: absorption depths and biosignature score."""
        return analyze_atmosphere(
            detection.spectrum, self.grid, self.config.continuum_offset_bins
        )

    # Input validation

    def _validate_frame(self, sensor_frame) -> np.ndarray:
        """Return the frame as a (ny, nx) uint16 array or raise ValueError."""
        frame = np.asarray(sensor_frame)
        shape = self.config.image_shape
        if frame.ndim == 1 and frame.size == shape[0] * shape[1]:
            frame = frame.reshape(shape)
        if frame.shape != shape:
            raise ValueError(
                f"Sensor frame has shape {frame.shape}, expected {shape}"
            )
        if frame.dtype == np.uint16:
            return frame
        if frame.dtype.kind not in "ui":
            raise ValueError(
                f"Sensor frame must hold integer counts, got dtype {frame.dtype}"
            )
        if frame.size and (frame.min() < 0 or frame.max() > _UINT16_MAX):
            raise ValueError("Sensor frame counts must fit in 16 unsigned bits")
        return frame.astype(np.uint16)

    def _validate_spectrum(self, spectrum) -> np.ndarray:
        """Return the spectrum as a float32 array or raise ValueError."""
        n_bins = self.config.spectrum_bins
        if spectrum is None:
            return np.zeros(n_bins, dtype=np.float32)
        spectrum = np.asarray(spectrum, dtype=np.float32)
        if spectrum.shape != (n_bins,):
            raise ValueError(
                f"Spectrum has shape {spectrum.shape}, expected ({n_bins},)"
            )
        if not np.all(np.isfinite(spectrum)):
            raise ValueError("Spectrum contains non-finite samples")
        return spectrum
