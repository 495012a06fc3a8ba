"""Point spread function from the pupil function.

The PSF is the squared magnitude of the Fourier transform of the pupil
function. This is the downstream consumer of the pupil-function cache: it
never reads a stale pupil function, and recomputes it first when needed.
"""

import logging
from typing import List

import numpy as np

from .optics import Wavefront
from .pupil import _compute_pupil_function

__all__ = ["pupil_to_psf", "compute_psf", "psf_angular_sampling_arcmin"]

logger = logging.getLogger(__name__)

_ARCMIN_PER_RADIAN = 180.0 * 60.0 / np.pi


def pupil_to_psf(pupil: np.ndarray, normalize: bool = True) -> np.ndarray:
    """Compute the 2D intensity PSF from a complex pupil function.

    Args:
        pupil: Complex pupil function, shape (ny, nx), centered.
        normalize: If True, normalize PSF to sum to 1. Default True.

    Returns:
        Real intensity PSF, shape (ny, nx), peak (for an unaberrated pupil)
        at the array center.

    Physics:
        PSF(x, y) = |FFT{ P(u, v) }|²
    """
    amplitude = np.fft.fft2(np.fft.ifftshift(pupil))

    psf = np.fft.fftshift(np.abs(amplitude) ** 2)

    if normalize:
        total = psf.sum()
        if total > 0:
            psf = psf / total

    return psf


def compute_psf(wvf: Wavefront) -> List[np.ndarray]:
    """Compute (or fetch cached) PSFs for every wavelength.

    If the PSF or the pupil function is stale, the pupil function is
    brought up to date first and every PSF is recomputed from it.

    Args:
        wvf: Optical system configuration.

    Returns:
        List of normalized PSFs; element i corresponds to wvf.wavelengths_nm[i].
    """
    cache = wvf.cache
    if not (cache.is_psf_stale() or cache.is_pupil_function_stale()):
        logger.debug("PSF cache hit")
        return list(cache.psf)

    pupils = _compute_pupil_function(wvf, stacklevel=4)

    logger.info("Computing PSFs for %d wavelength(s)", len(pupils))
    psfs = [pupil_to_psf(pupil) for pupil in pupils]

    return list(cache.store_psf(psfs))


def psf_angular_sampling_arcmin(wvf: Wavefront, index: int = 0) -> float:
    """Angular size (arcmin) of one PSF sample at wavelength ``index``.

    The FFT maps a pupil plane of extent L (mm) to PSF samples spaced by
    lambda / L radians.
    """
    wavelength_mm = wvf.wavelengths_nm[index] * 1e-6
    return _ARCMIN_PER_RADIAN * wavelength_mm / wvf.pupil_plane_size_mm(index)
