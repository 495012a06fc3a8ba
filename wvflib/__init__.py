"""wvflib - Wavefront optics of the human eye.

Models the eye's wavefront aberration with an OSA Zernike expansion (up to
radial order 10) and turns it into complex pupil functions, one per
wavelength, including longitudinal chromatic aberration, external focus
corrections and Stiles-Crawford apodization. PSFs are derived from the
pupil functions on demand, and both are cached until their inputs change.

The library is organized into two modules:

- **psf**: configuration, pupil-function synthesis, PSF computation
- **utils**: Zernike polynomial utilities

Example:
    >>> from wvflib import Wavefront, ZernikeMode
    >>> from wvflib import compute_pupil_function, compute_psf
    >>>
    >>> wvf = Wavefront(
    ...     measured_pupil_mm=6.0,     # coefficients fit over 6 mm
    ...     calc_pupil_mm=3.0,         # simulate a 3 mm pupil
    ...     wavelengths_nm=[450, 550, 650],
    ... )
    >>> wvf.set_zernike_coefficient(ZernikeMode.SPHERICAL, 0.05)
    >>> pupils = compute_pupil_function(wvf)   # one array per wavelength
    >>> psfs = compute_psf(wvf)                # reuses the cached pupils

Reference:
    Thibos et al. (2002), "Standards for Reporting the Optical
    Aberrations of Eyes", J. Refractive Surgery 18(5): S652-S660
"""

__version__ = "0.1.0"

# =============================================================================
# Errors
# =============================================================================
from .errors import ConfigurationError, DomainWarning

# =============================================================================
# PSF Module - Configuration, pupil functions and PSF computation
# =============================================================================
from .psf import (
    # Core data structures
    Wavefront,
    PupilGrid,
    make_pupil_grid,
    StalenessCache,
    # Chromatic defocus
    lca_diopters,
    diopters_to_microns,
    explicit_defocus_microns,
    defocus_from_wavelength_difference,
    # Stiles-Crawford apodization
    SceParams,
    check_sce_params,
    sce_amplitude,
    # Aberrations
    ZernikeMode,
    ZernikeCoefficients,
    wavefront_aberration_um,
    # Pupil functions
    make_pupil_function,
    compute_pupil_function,
    pupil_amplitude,
    pupil_phase,
    # PSF
    pupil_to_psf,
    compute_psf,
    psf_angular_sampling_arcmin,
)

# =============================================================================
# Utils Module - Mathematical utilities
# =============================================================================
from .utils import (
    osa_to_nm,
    nm_to_osa,
    noll_to_osa,
    zernike_polynomial,
    zernike_polynomials,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "ConfigurationError",
    "DomainWarning",
    # Core data structures (psf module)
    "Wavefront",
    "PupilGrid",
    "make_pupil_grid",
    "StalenessCache",
    # Chromatic defocus
    "lca_diopters",
    "diopters_to_microns",
    "explicit_defocus_microns",
    "defocus_from_wavelength_difference",
    # Stiles-Crawford apodization
    "SceParams",
    "check_sce_params",
    "sce_amplitude",
    # Aberrations
    "ZernikeMode",
    "ZernikeCoefficients",
    "wavefront_aberration_um",
    # Pupil functions
    "make_pupil_function",
    "compute_pupil_function",
    "pupil_amplitude",
    "pupil_phase",
    # PSF
    "pupil_to_psf",
    "compute_psf",
    "psf_angular_sampling_arcmin",
    # Math utilities (utils module)
    "osa_to_nm",
    "nm_to_osa",
    "noll_to_osa",
    "zernike_polynomial",
    "zernike_polynomials",
]
