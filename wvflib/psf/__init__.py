"""Pupil function and PSF computation for the eye.

Example:
    >>> from wvflib.psf import Wavefront, ZernikeMode
    >>> from wvflib.psf import compute_pupil_function, compute_psf
    >>>
    >>> wvf = Wavefront(measured_pupil_mm=6.0, calc_pupil_mm=3.0)
    >>> wvf.set_zernike_coefficient(ZernikeMode.DEFOCUS, 0.1)
    >>> wvf.wavelengths_nm = [450, 550, 650]
    >>> pupils = compute_pupil_function(wvf)
    >>> psfs = compute_psf(wvf)
"""

# Core data structures
from .optics import (
    Wavefront,
    PupilGrid,
    make_pupil_grid,
    SYNTHESIS_INPUTS,
)
from .staleness import StalenessCache

# Chromatic defocus
from .chromatic import (
    lca_diopters,
    diopters_to_microns,
    explicit_defocus_microns,
    nominal_focus_diopters,
    lca_microns,
    defocus_from_wavelength_difference,
)

# Stiles-Crawford apodization
from .apodization import SceParams, check_sce_params, sce_amplitude

# Aberrations
from .aberrations import (
    ZernikeMode,
    ZernikeCoefficients,
    wavefront_aberration_um,
)

# Pupil functions
from .pupil import (
    make_pupil_function,
    compute_pupil_function,
    pupil_amplitude,
    pupil_phase,
    pupil_plane_samples_mm,
)

# PSF
from .widefield import pupil_to_psf, compute_psf, psf_angular_sampling_arcmin

__all__ = [
    # Core data structures
    "Wavefront",
    "PupilGrid",
    "make_pupil_grid",
    "SYNTHESIS_INPUTS",
    "StalenessCache",
    # Chromatic defocus
    "lca_diopters",
    "diopters_to_microns",
    "explicit_defocus_microns",
    "nominal_focus_diopters",
    "lca_microns",
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
    "pupil_plane_samples_mm",
    # PSF
    "pupil_to_psf",
    "compute_psf",
    "psf_angular_sampling_arcmin",
]
