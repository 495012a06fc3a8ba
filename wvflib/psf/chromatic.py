"""Longitudinal chromatic aberration and defocus corrections.

The human eye's focal power varies with wavelength. The LCA model used here
gives the change in power (diopters) between two wavelengths:

    k(wl1) = 1.8859 - 0.63346 / (0.001 * wl1 - 0.2141)
    LCA(wl1 -> wl2) = 1.8859 - k(wl1) - 0.63346 / (0.001 * wl2 - 0.2141)

The 1.8859 offsets cancel, so it is evaluated as the difference of the two
pole terms. That keeps LCA(wl, wl) exactly zero in floating point.

Diopters become wavefront defocus through the OSA defocus normalization:

    W20 [um] = D * pupil_mm**2 / (16 * sqrt(3))

The pupil diameter is always the measured one, because the Zernike
expansion is normalized to the measurement aperture.
"""

from typing import Union

import numpy as np

from ..errors import ConfigurationError

__all__ = [
    "lca_diopters",
    "diopters_to_microns",
    "explicit_defocus_microns",
    "nominal_focus_diopters",
    "lca_microns",
    "defocus_from_wavelength_difference",
]

_LCA_SCALE = 0.63346
_LCA_POLE = 0.2141

_SINGULAR_WAVELENGTH_NM = 214.1

ArrayLike = Union[float, np.ndarray]


def _pole_term(wl_nm: ArrayLike) -> ArrayLike:
    return _LCA_SCALE / (0.001 * np.asarray(wl_nm, dtype=np.float64) - _LCA_POLE)


def _check_wavelength(wl_nm: ArrayLike) -> None:
    if np.any(np.isclose(wl_nm, _SINGULAR_WAVELENGTH_NM, rtol=0.0, atol=1e-9)):
        raise ConfigurationError(
            f"Wavelength {wl_nm} nm coincides with the LCA model singularity "
            f"at {_SINGULAR_WAVELENGTH_NM} nm"
        )


def lca_diopters(wl1_nm: ArrayLike, wl2_nm: ArrayLike) -> ArrayLike:
    """Longitudinal chromatic aberration between two wavelengths.

    If the image is in focus at wl1_nm, add the result to bring it into
    focus at wl2_nm. Either argument may be an array; arrays broadcast.

    Args:
        wl1_nm: Wavelength in focus (nm).
        wl2_nm: Target wavelength (nm).

    Returns:
        Focus change in diopters. Exactly 0 when wl1_nm == wl2_nm.

    Raises:
        ConfigurationError: If either wavelength is 214.1 nm.
    """
    _check_wavelength(wl1_nm)
    _check_wavelength(wl2_nm)

    result = _pole_term(wl1_nm) - _pole_term(wl2_nm)

    if np.ndim(result) == 0:
        return float(result)
    return result


def diopters_to_microns(diopters: ArrayLike, pupil_mm: float) -> ArrayLike:
    """Convert defocus in diopters to Zernike defocus coefficient (um).

    Args:
        diopters: Defocus in diopters.
        pupil_mm: Pupil diameter the Zernike expansion is normalized to (mm).

    Returns:
        Equivalent OSA defocus (j=4) coefficient in microns.
    """
    return diopters * pupil_mm**2 / (16.0 * np.sqrt(3.0))


def explicit_defocus_microns(wvf) -> float:
    """Defocus from external lenses, measurement vs. calculation time.

    Models a corrective lens in front of the eye: it changes focus but not
    the accommodative state, and does not depend on wavelength.
    """
    diopters = wvf.calc_focus_correction_d - wvf.measured_focus_correction_d
    return diopters_to_microns(diopters, wvf.measured_pupil_mm)


def nominal_focus_diopters(wvf) -> float:
    """Focus shift when the eye is in focus at the nominal focus wavelength.

    Zero when the nominal focus wavelength equals the measured wavelength.
    """
    return lca_diopters(wvf.nominal_focus_wavelength_nm, wvf.measured_wavelength_nm)


def lca_microns(wvf, wavelength_nm: float) -> float:
    """Chromatic defocus (um) to add to the defocus coefficient at one wavelength."""
    diopters = lca_diopters(wvf.measured_wavelength_nm, wavelength_nm)
    diopters += nominal_focus_diopters(wvf)
    return diopters_to_microns(diopters, wvf.measured_pupil_mm)


def defocus_from_wavelength_difference(wvf) -> np.ndarray:
    """Defocus (um) at each calculation wavelength, relative to nominal focus.

    Combines the LCA from the nominal focus wavelength with the explicit
    focus correction. Useful for summarizing how much defocus each
    wavelength receives.

    Returns:
        Array of shape (n_wavelengths,) in microns.
    """
    wavelengths = np.asarray(wvf.wavelengths_nm, dtype=np.float64)
    diopters = lca_diopters(wvf.nominal_focus_wavelength_nm, wavelengths)
    diopters = diopters + (
        wvf.calc_focus_correction_d - wvf.measured_focus_correction_d
    )
    return diopters_to_microns(diopters, wvf.measured_pupil_mm)
