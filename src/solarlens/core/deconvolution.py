"""Richardson-Lucy deconvolution."""

import functools

import jax
import jax.numpy as jnp
from jax.scipy.signal import convolve2d
from jaxtyping import Array

from solarlens import constants as const


def box_kernel(size: int) -> Array:
    """Uniform square kernel whose taps sum to one."""
    return jnp.full((size, size), 1.0 / size**2, dtype=jnp.float32)


def convolve_clipped(image: Array, kernel: Array) -> Array:
    """Convolve keeping the image shape, dropping taps that fall outside.

    Taps beyond the image contribute nothing and the remaining weights are
    not renormalized, so pixels within half a kernel of the border come out
    darker than in the interior.
    """
    return convolve2d(image, kernel, mode="same")


@functools.partial(jax.jit, static_argnames=["iterations"])
def richardson_lucy(observed: Array, kernel: Array, iterations: int) -> Array:
    """Iterative Richardson-Lucy restoration with a fixed kernel.

    Each iteration blurs the current estimate, takes the ratio of the
    observation to that blur, blurs the ratio with the mirrored kernel and
    multiplies it into the estimate. The estimate starts from the
    observation itself.

    Args:
        observed:
            The blurred image, shape (ny, nx).
        kernel:
            Blur kernel with an odd side length. Weights summing to one
            conserve flux away from the border.
        iterations:
            Number of iterations to run.

    Returns:
        The restored image, same shape as ``observed``.
    """
    kernel_mirror = kernel[::-1, ::-1]

    def update(_, estimate):
        blurred = convolve_clipped(estimate, kernel)
        ratio = observed / (blurred + const.eps)
        return estimate * convolve_clipped(ratio, kernel_mirror)

    return jax.lax.fori_loop(0, iterations, update, observed)
