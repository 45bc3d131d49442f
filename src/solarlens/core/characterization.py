"""Physical parameter estimation for a detected planet.

Each estimator inverts a textbook relation under the simplifying
assumptions of a sun-like host: reflected flux for the radius, Wien's law
for the temperature, radiative balance for the Bond albedo and circular
Keplerian motion for the orbit.
"""

import jax.numpy as jnp
from jaxtyping import Array

from solarlens import constants as const
from solarlens import conversions as conv
from solarlens.core.spectrum import SpectralGrid


def estimate_radius(
    flux,
    albedo: float = 0.3,
    luminosity_w: float = const.L_sun,
    distance_ly: float = 10.0,
):
    """Planet radius in Earth radii from the reflected flux.

    Inverts flux = (R / d)^2 * albedo * L / (4 pi). Non-positive flux gives
    a radius of zero.

    Args:
        flux: Measured flux of the point source.
        albedo: Assumed reflectivity of the planet.
        luminosity_w: Luminosity of the host star in watts.
        distance_ly: Distance to the system in light years.
    """
    flux = jnp.maximum(flux, 0.0)
    # d * sqrt(...) rather than sqrt(d^2 * ...) to stay within float32
    radius_m = conv.ly_to_m(distance_ly) * jnp.sqrt(
        flux * const.four_pi / (albedo * luminosity_w)
    )
    return conv.m_to_Rearth(radius_m)


def estimate_temperature(spectrum: Array, grid: SpectralGrid):
    """Blackbody temperature in K from the spectral peak (Wien's law).

    The peak is the first bin holding the maximum. A spectrum without any
    positive sample has no thermal peak and gives zero.
    """
    peak_bin = jnp.argmax(spectrum)
    wavelength_m = conv.nm_to_m(grid.wavelength_at(peak_bin))
    return jnp.where(spectrum[peak_bin] > 0.0, const.wien_b / wavelength_m, 0.0)


def estimate_albedo(temperature_k):
    """Bond albedo from radiative balance at 1 AU from a sun-like star.

    albedo = 1 - sigma T^4 / (L_sun / (4 pi AU^2)). Zero when the
    temperature is not positive.
    """
    emitted = const.sigma_SB * temperature_k**4
    incident = conv.luminosity_to_irradiance(const.L_sun, const.AU2m)
    return jnp.where(temperature_k > 0.0, 1.0 - emitted / incident, 0.0)


def estimate_orbital_radius(doppler_shift):
    """Orbital radius in AU of a circular, edge-on orbit around one solar mass.

    v = doppler_shift * c and r = G M / v^2. A zero shift gives zero.
    """
    velocity = conv.doppler_to_m_per_s(doppler_shift)
    v2 = velocity**2
    radius_m = const.G * const.M_sun / jnp.where(v2 > 0.0, v2, 1.0)
    return jnp.where(v2 > 0.0, conv.m_to_au(radius_m), 0.0)


def in_habitable_zone(
    orbital_radius_au,
    luminosity: float = 1.0,
    inner_au: float = 0.95,
    outer_au: float = 1.37,
):
    """Whether an orbit lies strictly between the habitable zone bounds.

    Both bounds scale with the square root of the stellar luminosity in
    solar units.
    """
    scale = jnp.sqrt(luminosity)
    return (orbital_radius_au > inner_au * scale) & (orbital_radius_au < outer_au * scale)
