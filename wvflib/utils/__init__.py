"""Mathematical utilities shared across wvflib."""

from .zernike import (
    MAX_RADIAL_ORDER,
    N_COEFFICIENTS,
    osa_to_nm,
    nm_to_osa,
    noll_to_osa,
    zernike_norm,
    radial_polynomial,
    zernike_polynomial,
    zernike_polynomials,
)

__all__ = [
    # Zernike polynomials
    "MAX_RADIAL_ORDER",
    "N_COEFFICIENTS",
    "osa_to_nm",
    "nm_to_osa",
    "noll_to_osa",
    "zernike_norm",
    "radial_polynomial",
    "zernike_polynomial",
    "zernike_polynomials",
]
