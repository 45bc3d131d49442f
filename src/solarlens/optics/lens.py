"""Solar gravitational lens optics.

The Sun acts as a lens whose focal line starts roughly 550 AU away. This
module holds the small set of physical relations the detection pipeline
relies on: the focal distance at a given wavelength, the point-lens
magnification, the point-spread function, and the brightness of the solar
corona that sits behind every image.
"""

from typing import final

import equinox as eqx
import jax.numpy as jnp
from jaxtyping import Array

from solarlens import constants as const
from solarlens import conversions as conv


class PSF(eqx.Module):
    """Point-spread function produced by the lens.

    Attributes:
        kernel:
            Square kernel of weights, peak-normalized (not unit-sum).
        fwhm_mas:
            Diffraction-limited angular resolution in milliarcseconds.
    """

    kernel: Array
    fwhm_mas: float

    @property
    def size(self) -> int:
        """Side length of the kernel in pixels."""
        return self.kernel.shape[0]


def gaussian_kernel(size: int) -> Array:
    """Square Gaussian kernel with sigma = size / 6, centred at size / 2."""
    sigma = size / 6.0
    center = size / 2.0
    idx = jnp.arange(size) - center
    r2 = idx[:, None] ** 2 + idx[None, :] ** 2
    return jnp.exp(-r2 / (2.0 * sigma**2))


@final
class LensOptics(eqx.Module):
    """Physics oracle for the solar gravitational lens.

    Stateless after construction: the Schwarzschild radius of the Sun and
    the Einstein radius for an observer at 1 AU are precomputed, every
    method is a pure function of its arguments and those two constants.
    Instances can be shared freely between pipelines.
    """

    schwarzschild_radius_m: float
    einstein_radius_1au_m: float
    psf_size: int

    def __init__(self, psf_size: int = 256):
        """Initialize the lens optics.

        Args:
            psf_size:
                Side length in pixels of the kernel returned by ``psf``.
        """
        self.schwarzschild_radius_m = 2.0 * const.G * const.M_sun / const.c**2
        self.einstein_radius_1au_m = (
            4.0 * const.G * const.M_sun * const.AU2m / const.c**2
        ) ** 0.5
        self.psf_size = psf_size

    def focal_distance(self, wavelength_nm):
        """Chromatic focal distance in AU.

        The achromatic focal length R_sun^2 / (4 r_s) is scaled by the
        refractive correction of the coronal plasma,
        sqrt(1 - (f_p / f)^2). Wavelengths long enough that the plasma is
        opaque (negative dispersion factor) have no focus and return NaN.

        Args:
            wavelength_nm:
                Observation wavelength in nanometers.

        Returns:
            Focal distance in AU, or NaN when there is no valid focus.
        """
        f_base = const.R_sun**2 / (4.0 * self.schwarzschild_radius_m)

        plasma_freq = const.plasma_freq_coeff * jnp.sqrt(const.corona_n_e)
        light_freq = const.c / conv.nm_to_m(jnp.asarray(wavelength_nm))
        dispersion = 1.0 - (plasma_freq / light_freq) ** 2

        f_chromatic = f_base * jnp.sqrt(jnp.clip(dispersion, 0.0, None))
        return jnp.where(dispersion > 0.0, conv.m_to_au(f_chromatic), jnp.nan)

    def einstein_radius_rad(self, source_distance_ly, observer_distance_au):
        """Einstein ring angular radius in radians for the given geometry."""
        d_s = conv.ly_to_m(source_distance_ly)
        d_l = conv.au_to_m(observer_distance_au)
        # r_s * (d_s - d_l) / (d_l * d_s) without forming the product d_l * d_s
        return jnp.sqrt(
            2.0 * self.schwarzschild_radius_m * (1.0 / d_l - 1.0 / d_s)
        )

    def magnification(
        self, source_distance_ly, observer_distance_au, impact_parameter_km
    ):
        """Point-lens magnification attenuated by coronal scattering.

        Args:
            source_distance_ly:
                Distance to the source in light years.
            observer_distance_au:
                Distance of the observer behind the Sun in AU.
            impact_parameter_km:
                Offset of the observer from the optical axis in km.

        Returns:
            The magnification. Saturates at 1e12 for near-perfect alignment.
        """
        theta_e = self.einstein_radius_rad(source_distance_ly, observer_distance_au)
        r_e = theta_e * conv.au_to_m(observer_distance_au)
        u = conv.km_to_m(impact_parameter_km) / r_e

        aligned = u < 1e-6
        u_safe = jnp.where(aligned, 1.0, u)
        mu = (u_safe**2 + 2.0) / (u_safe * jnp.sqrt(u_safe**2 + 4.0))

        corona_factor = jnp.exp(-0.1 / 500.0)
        return jnp.where(aligned, 1e12, mu * corona_factor)

    def psf(self, wavelength_nm, observer_distance_au) -> PSF:
        """Gaussian PSF kernel and Rayleigh-like resolution.

        Args:
            wavelength_nm:
                Observation wavelength in nanometers.
            observer_distance_au:
                Baseline distance of the observer in AU.
        """
        theta = 1.22 * conv.nm_to_m(wavelength_nm) / conv.au_to_m(observer_distance_au)
        return PSF(
            kernel=gaussian_kernel(self.psf_size),
            fwhm_mas=conv.rad_to_mas(theta),
        )

    def corona_brightness(self, angular_distance_solar_radii, wavelength_nm):
        """Brightness of the solar corona at an angular distance.

        Inside one solar radius the disk saturates the sensor. Outside, the
        brightness is the sum of the Thomson-scattering K-corona and the
        dust F-corona power laws, scaled by (lambda / 550 nm)^-1.2.

        Args:
            angular_distance_solar_radii:
                Angular distance from the solar centre in solar radii.
            wavelength_nm:
                Wavelength in nanometers.
        """
        r = angular_distance_solar_radii
        on_disk = r < 1.0
        r_safe = jnp.maximum(r, 1.0)

        k_corona = 1e6 * r_safe**-2.5
        f_corona = 1e5 * r_safe**-2.2
        lambda_factor = (wavelength_nm / 550.0) ** -1.2

        return jnp.where(on_disk, 1e10, (k_corona + f_corona) * lambda_factor)
