"""Wavefront aberrations expressed as Zernike expansions."""

from .zernike import (
    ZernikeMode,
    ZernikeCoefficients,
    SURFACE_TERMS,
    wavefront_aberration_um,
)

__all__ = [
    "ZernikeMode",
    "ZernikeCoefficients",
    "SURFACE_TERMS",
    "wavefront_aberration_um",
]
