"""Solar corona background subtraction."""

import functools

import jax
import jax.numpy as jnp
from jaxtyping import Array

from solarlens.optics.lens import LensOptics


def get_center(shape: tuple[int, int]) -> tuple[float, float]:
    """Image center (y, x) used for radial distances, (n / 2) on each axis."""
    ny, nx = shape
    return ny / 2.0, nx / 2.0


def radial_distance(shape: tuple[int, int]) -> Array:
    """Distance in pixels of every pixel from the image center."""
    cy, cx = get_center(shape)
    yy, xx = jnp.indices(shape)
    return jnp.sqrt((xx - cx) ** 2 + (yy - cy) ** 2)


@functools.partial(jax.jit, static_argnames=["shape"])
def corona_model(
    shape: tuple[int, int],
    lens: LensOptics,
    pixels_per_solar_radius: float,
    wavelength_nm: float = 550.0,
) -> Array:
    """Corona brightness map over the image grid.

    Args:
        shape: Image shape (ny, nx).
        lens: Lens optics providing the corona model.
        pixels_per_solar_radius: Plate scale, pixels per solar radius.
        wavelength_nm: Wavelength at which the corona is evaluated.
    """
    r_solar_radii = radial_distance(shape) / pixels_per_solar_radius
    return lens.corona_brightness(r_solar_radii, wavelength_nm)


def subtract_corona(
    raw_image: Array,
    lens: LensOptics,
    pixels_per_solar_radius: float,
    wavelength_nm: float = 550.0,
) -> Array:
    """Remove the modelled corona from a raw image."""
    background = corona_model(
        raw_image.shape, lens, pixels_per_solar_radius, wavelength_nm
    )
    return raw_image - background
