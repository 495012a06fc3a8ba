"""Zernike wavefront aberration surface.

Coefficients follow the OSA single-index convention and are in microns of
wavefront. Slots 1..65 cover radial orders 1 through 10; piston (j=0) is
never stored.
"""

from enum import IntEnum
from typing import Sequence, Union

import numpy as np

from ...errors import ConfigurationError
from ...utils.zernike import (
    N_COEFFICIENTS,
    osa_to_nm,
    zernike_norm,
    zernike_polynomial,
)

__all__ = [
    "ZernikeMode",
    "ZernikeCoefficients",
    "SURFACE_TERMS",
    "wavefront_aberration_um",
]


class ZernikeMode(IntEnum):
    """OSA/ANSI standard Zernike mode indices.

    Index j maps to radial order n and azimuthal frequency m via:
        j = (n * (n + 2) + m) / 2

    Reference:
        Thibos et al. (2002), "Standards for Reporting the Optical
        Aberrations of Eyes", J. Refractive Surgery 18(5): S652-S660
    """

    # n=1 (tilts)
    TILT_Y = 1  # Z(1,-1) - vertical tilt
    TILT_X = 2  # Z(1,+1) - horizontal tilt

    # n=2 (defocus and astigmatism)
    ASTIG_OBLIQUE = 3  # Z(2,-2) - oblique astigmatism (45°)
    DEFOCUS = 4  # Z(2,0)
    ASTIG_VERTICAL = 5  # Z(2,+2) - vertical astigmatism (0°/90°)

    # n=3 (coma and trefoil)
    TREFOIL_Y = 6  # Z(3,-3)
    COMA_Y = 7  # Z(3,-1) - vertical coma
    COMA_X = 8  # Z(3,+1) - horizontal coma
    TREFOIL_X = 9  # Z(3,+3)

    # n=4
    QUADRAFOIL_Y = 10  # Z(4,-4)
    ASTIG2_OBLIQUE = 11  # Z(4,-2) - secondary oblique astigmatism
    SPHERICAL = 12  # Z(4,0)  - primary spherical aberration
    ASTIG2_VERTICAL = 13  # Z(4,+2) - secondary vertical astigmatism
    QUADRAFOIL_X = 14  # Z(4,+4)

    # Higher-order rotationally symmetric terms
    SPHERICAL2 = 24  # Z(6,0) - secondary spherical
    SPHERICAL3 = 40  # Z(8,0)
    SPHERICAL4 = 60  # Z(10,0)


# First OSA index that contributes to the surface: piston and tip/tilt only
# translate the image and are left out.
_FIRST_SURFACE_INDEX = 3

# (j, n, m, N(n, m)) for every term in the surface sum
SURFACE_TERMS = tuple(
    (j, *osa_to_nm(j), zernike_norm(*osa_to_nm(j)))
    for j in range(_FIRST_SURFACE_INDEX, N_COEFFICIENTS + 1)
)


class ZernikeCoefficients:
    """Fixed 65-slot container of OSA Zernike coefficients (microns).

    Indexed by OSA index j = 1..65. Shorter inputs are zero-padded; longer
    inputs are rejected. Instances are immutable.

    Example:
        ```python
        coeffs = ZernikeCoefficients.from_sequence([0.0, 0.0, 0.1, 0.25])
        coeffs[ZernikeMode.DEFOCUS]  # -> 0.25
        coeffs = coeffs.with_coefficient(ZernikeMode.SPHERICAL, 0.05)
        ```
    """

    __slots__ = ("_values",)

    def __init__(self, values: np.ndarray = None):
        if values is None:
            values = np.zeros(N_COEFFICIENTS, dtype=np.float64)
        values = np.array(values, dtype=np.float64)
        if values.shape != (N_COEFFICIENTS,):
            raise ConfigurationError(
                f"Expected {N_COEFFICIENTS} coefficients, got shape {values.shape}"
            )
        if not np.all(np.isfinite(values)):
            raise ConfigurationError("Zernike coefficients must be finite")
        values.flags.writeable = False
        self._values = values

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "ZernikeCoefficients":
        """Zero-pad a variable-length sequence (OSA 1, 2, 3, ...) to 65 slots.

        Raises:
            ConfigurationError: If more than 65 values are given.
        """
        values = np.asarray(values, dtype=np.float64).ravel()
        if values.size > N_COEFFICIENTS:
            raise ConfigurationError(
                f"At most {N_COEFFICIENTS} Zernike coefficients are supported "
                f"(radial order 10), got {values.size}"
            )
        padded = np.zeros(N_COEFFICIENTS, dtype=np.float64)
        padded[: values.size] = values
        return cls(padded)

    @staticmethod
    def _slot(j: int) -> int:
        j = int(j)
        if not 1 <= j <= N_COEFFICIENTS:
            raise IndexError(f"OSA index must be in [1, {N_COEFFICIENTS}], got {j}")
        return j - 1

    def __getitem__(self, j: Union[ZernikeMode, int]) -> float:
        return float(self._values[self._slot(j)])

    def __len__(self) -> int:
        return N_COEFFICIENTS

    def __eq__(self, other) -> bool:
        if not isinstance(other, ZernikeCoefficients):
            return NotImplemented
        return np.array_equal(self._values, other._values)

    __hash__ = None

    def with_coefficient(
        self, j: Union[ZernikeMode, int], value: float
    ) -> "ZernikeCoefficients":
        """Return a copy with OSA coefficient j replaced."""
        values = self._values.copy()
        values[self._slot(j)] = value
        return ZernikeCoefficients(values)

    def as_array(self) -> np.ndarray:
        """Return a writable copy of the 65 coefficients (slot 0 is OSA 1)."""
        return self._values.copy()

    def __repr__(self) -> str:
        nonzero = np.flatnonzero(self._values)
        items = ", ".join(f"{j + 1}: {self._values[j]:.4g}" for j in nonzero)
        return f"ZernikeCoefficients({{{items}}})"


def wavefront_aberration_um(
    coeffs: ZernikeCoefficients,
    rho: np.ndarray,
    theta: np.ndarray,
    defocus_offset_um: float = 0.0,
) -> np.ndarray:
    """Evaluate the wavefront aberration surface in microns.

    Sums c_j * N(n, m) * R_n^|m|(rho) * {cos(m theta), sin(|m| theta)} over
    OSA indices 3..65. Piston and tip/tilt never contribute, whatever their
    stored value.

    Args:
        coeffs: Zernike coefficients (microns).
        rho: Radius normalized to the measured pupil (1 at its edge).
        theta: Azimuthal angle atan2(y, x) (radians).
        defocus_offset_um: Added to the defocus (j=4) coefficient. Carries
            the chromatic and explicit focus corrections.

    Returns:
        Wavefront aberration (microns), same shape as rho.
    """
    rho = np.asarray(rho, dtype=np.float64)
    wavefront = np.zeros_like(rho)

    for j, *_ in SURFACE_TERMS:
        coef = coeffs[j]
        if j == ZernikeMode.DEFOCUS:
            coef += defocus_offset_um
        if coef == 0:
            continue

        wavefront += coef * zernike_polynomial(j, rho, theta)

    return wavefront
