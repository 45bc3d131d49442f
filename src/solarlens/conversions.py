"""Unit conversion functions using centralized constants.

Note: Functions are NOT JIT-compiled to allow JAX to fuse them into larger kernels.
JIT-compile the top-level functions that use these conversions.
"""

from solarlens import constants as const


# Length conversions
def nm_to_m(length_nm):
    """Convert length from nanometers to meters."""
    return length_nm * const.nm2m


def m_to_nm(length_m):
    """Convert length from meters to nanometers."""
    return length_m * const.m2nm


def km_to_m(length_km):
    """Convert length from kilometers to meters."""
    return length_km * const.km2m


def au_to_m(length_au):
    """Convert length from AU to meters."""
    return length_au * const.AU2m


def m_to_au(length_m):
    """Convert length from meters to AU."""
    return length_m * const.m2AU


def ly_to_m(length_ly):
    """Convert length from light years to meters."""
    return length_ly * const.ly2m


def m_to_Rearth(length_m):
    """Convert length from meters to Earth radii."""
    return length_m / const.Rearth2m


def Rearth_to_m(length_Rearth):
    """Convert length from Earth radii to meters."""
    return length_Rearth * const.Rearth2m


# Angular conversions
def rad_to_mas(angle_rad):
    """Convert angle from radians to milliarcseconds."""
    return angle_rad * const.rad2mas


def mas_to_rad(angle_mas):
    """Convert angle from milliarcseconds to radians."""
    return angle_mas / const.rad2mas


# Velocity conversions
def doppler_to_m_per_s(doppler_shift):
    """Convert a fractional Doppler shift (v/c) to a velocity in m/s."""
    return doppler_shift * const.c


# Flux conversions
def luminosity_to_irradiance(luminosity_w, distance_m):
    """Irradiance in W/m^2 at a distance from an isotropic source.

    Args:
        luminosity_w:
            The source luminosity in watts.
        distance_m:
            The distance from the source in meters.

    Returns:
            The irradiance in W/m^2.
    """
    return luminosity_w / (const.four_pi * distance_m**2)
