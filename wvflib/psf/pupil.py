"""Pupil function synthesis.

The pupil function at wavelength lambda is

    P(x, y) = A(x, y) * exp(-i * 2 * pi * W(x, y) / lambda)

where A is the Stiles-Crawford amplitude and W the Zernike wavefront
aberration (microns), with the defocus term shifted by the chromatic and
explicit focus corrections. P is zero outside the calculation pupil.

The Zernike expansion stays normalized to the measured pupil even when the
calculation pupil is smaller; only the transmission is truncated.

Reference:
    Goodman, J.W. "Introduction to Fourier Optics", 3rd ed., p. 131.
"""

import logging
from typing import List

import numpy as np

from .aberrations.zernike import wavefront_aberration_um
from .apodization import check_sce_params, sce_amplitude
from .chromatic import explicit_defocus_microns, lca_diopters, lca_microns
from .optics import PupilGrid, Wavefront, make_pupil_grid

__all__ = [
    "make_pupil_function",
    "compute_pupil_function",
    "pupil_amplitude",
    "pupil_phase",
    "pupil_plane_samples_mm",
]

logger = logging.getLogger(__name__)


def _pupil_grid(wvf: Wavefront, index: int) -> PupilGrid:
    return make_pupil_grid(
        wvf.spatial_samples,
        wvf.pupil_plane_size_mm(index),
        wvf.measured_pupil_mm,
    )


def make_pupil_function(wvf: Wavefront, index: int) -> np.ndarray:
    """Compute the pupil function at a single calculation wavelength.

    Does not touch the cache and emits no SCE warnings. Use
    compute_pupil_function() for the cached, all-wavelength version.

    Args:
        wvf: Optical system configuration.
        index: Position in ``wvf.wavelengths_nm``.

    Returns:
        Complex array of shape (spatial_samples, spatial_samples).
    """
    wvf.check_pupil_sizes()

    wavelength_nm = wvf.wavelengths_nm[index]
    wavelength_um = wvf.wavelengths_um[index]
    grid = _pupil_grid(wvf, index)

    amplitude = sce_amplitude(grid.x_mm, grid.y_mm, wavelength_nm, wvf.sce_params)

    defocus_um = lca_microns(wvf, wavelength_nm) + explicit_defocus_microns(wvf)
    logger.debug(
        "Pupil function at %.1f nm: plane %.3f mm, defocus offset %.4f um",
        wavelength_nm,
        wvf.pupil_plane_size_mm(index),
        defocus_um,
    )

    aberration_um = wavefront_aberration_um(
        wvf.zernike_coefficients, grid.rho, grid.theta, defocus_offset_um=defocus_um
    )

    pupil = amplitude * np.exp(-1j * 2.0 * np.pi * aberration_um / wavelength_um)

    # Zero outside the calculation pupil
    pupil[grid.rho > wvf.calc_pupil_mm / wvf.measured_pupil_mm] = 0.0

    return pupil


def compute_pupil_function(wvf: Wavefront) -> List[np.ndarray]:
    """Compute (or fetch cached) pupil functions for every wavelength.

    When the cache is fresh the stored arrays are returned unchanged.
    Otherwise all wavelengths are computed in order and stored together,
    which marks the pupil function fresh and the PSF stale. If anything
    fails, the cache is left as it was.

    Args:
        wvf: Optical system configuration.

    Returns:
        List of complex arrays; element i corresponds to wvf.wavelengths_nm[i].

    Raises:
        ConfigurationError: If the calculation pupil exceeds the measured
            pupil, a wavelength hits the LCA model singularity, or a
            wavelength falls outside the SCE rho table.

    Warns:
        DomainWarning: Once per synthesis when the SCE is disabled, and for
            each wavelength with a negative SCE rho.

    Example:
        ```python
        wvf = Wavefront(measured_pupil_mm=6.0, calc_pupil_mm=3.0)
        pupils = compute_pupil_function(wvf)
        ```
    """
    return _compute_pupil_function(wvf, stacklevel=4)


def _compute_pupil_function(wvf: Wavefront, stacklevel: int) -> List[np.ndarray]:
    # stacklevel points SCE warnings at the code calling the public entry point
    cache = wvf.cache
    if not cache.is_pupil_function_stale():
        logger.debug("Pupil function cache hit")
        return list(cache.pupil_function)

    # Fail fast, before any array is allocated
    wvf.check_pupil_sizes()
    lca_diopters(wvf.measured_wavelength_nm, np.asarray(wvf.wavelengths_nm))
    lca_diopters(wvf.nominal_focus_wavelength_nm, wvf.measured_wavelength_nm)
    check_sce_params(wvf.sce_params, wvf.wavelengths_nm, stacklevel=stacklevel)

    logger.info(
        "Computing pupil functions: %d wavelength(s), %d x %d samples",
        wvf.n_wavelengths,
        wvf.spatial_samples,
        wvf.spatial_samples,
    )
    pupils = [make_pupil_function(wvf, i) for i in range(wvf.n_wavelengths)]

    return list(cache.store_pupil_function(pupils))


def pupil_amplitude(wvf: Wavefront, index: int = 0) -> np.ndarray:
    """Amplitude |P| of the pupil function at wavelength ``index``."""
    return np.abs(_compute_pupil_function(wvf, stacklevel=4)[index])


def pupil_phase(wvf: Wavefront, index: int = 0) -> np.ndarray:
    """Phase angle(P) (radians) of the pupil function at wavelength ``index``."""
    return np.angle(_compute_pupil_function(wvf, stacklevel=4)[index])


def pupil_plane_samples_mm(wvf: Wavefront, index: int = 0) -> np.ndarray:
    """1D pupil-plane sample positions (mm) at wavelength ``index``."""
    return _pupil_grid(wvf, index).x_mm[0].copy()
