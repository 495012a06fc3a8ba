"""Stiles-Crawford effect (SCE) apodization of the pupil.

Photoreceptors are less sensitive to light entering near the edge of the
pupil. The effect is modeled as an amplitude apodization:

    A(x, y) = 10 ** (-rho * ((x - x0)**2 + (y - y0)**2))

with (x0, y0) the SCE peak position in the pupil plane (mm) and rho the
wavelength-dependent decay rate (mm^-2).

Reference:
    Stiles & Crawford (1933), Proc. R. Soc. Lond. B 112: 428-450
"""

import logging
import warnings
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from ..errors import ConfigurationError, DomainWarning

__all__ = ["SceParams", "check_sce_params", "sce_amplitude"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SceParams:
    """Stiles-Crawford model parameters.

    Attributes:
        x0_mm: Horizontal position of the SCE peak in the pupil plane (mm).
        y0_mm: Vertical position of the SCE peak in the pupil plane (mm).
        rho: Decay rate (mm^-2). Either a scalar used at every wavelength,
            or a sequence tabulated at ``wavelengths_nm``.
        wavelengths_nm: Wavelengths at which ``rho`` is tabulated. Required
            when ``rho`` is a sequence with more than one entry.

    Example:
        ```python
        sce = SceParams(rho=[0.062, 0.052], wavelengths_nm=[450, 650])
        sce.rho_at(550)  # -> 0.057
        ```
    """

    x0_mm: float = 0.0
    y0_mm: float = 0.0
    rho: Union[float, Tuple[float, ...]] = 0.0
    wavelengths_nm: Optional[Tuple[float, ...]] = None

    def __post_init__(self) -> None:
        """Normalize tables and validate shapes."""
        rho = np.atleast_1d(np.asarray(self.rho, dtype=np.float64))
        if rho.ndim != 1 or rho.size == 0:
            raise ConfigurationError(f"SCE rho must be a scalar or 1D sequence, got {self.rho}")
        if not np.all(np.isfinite(rho)):
            raise ConfigurationError(f"SCE rho must be finite, got {self.rho}")
        if not (np.isfinite(self.x0_mm) and np.isfinite(self.y0_mm)):
            raise ConfigurationError(
                f"SCE center must be finite, got ({self.x0_mm}, {self.y0_mm})"
            )
        object.__setattr__(self, "rho", tuple(float(r) for r in rho))

        if self.wavelengths_nm is not None:
            waves = np.atleast_1d(np.asarray(self.wavelengths_nm, dtype=np.float64))
            if waves.shape != rho.shape:
                raise ConfigurationError(
                    f"SCE wavelengths ({waves.size}) and rho ({rho.size}) "
                    "must have the same length"
                )
            if not np.all(np.isfinite(waves)) or np.any(np.diff(waves) <= 0):
                raise ConfigurationError(
                    f"SCE wavelengths must be finite and strictly increasing, got {tuple(waves)}"
                )
            object.__setattr__(self, "wavelengths_nm", tuple(float(w) for w in waves))
        elif rho.size > 1:
            raise ConfigurationError(
                f"SCE rho has {rho.size} entries but no wavelengths_nm were given"
            )

    @property
    def is_disabled(self) -> bool:
        """True iff every rho value is exactly zero."""
        return all(r == 0.0 for r in self.rho)

    def rho_at(self, wavelength_nm: float) -> float:
        """Decay rate at one wavelength (linear interpolation of the table)."""
        if len(self.rho) == 1:
            return self.rho[0]

        lo, hi = self.wavelengths_nm[0], self.wavelengths_nm[-1]
        if not lo <= wavelength_nm <= hi:
            raise ConfigurationError(
                f"Wavelength {wavelength_nm} nm is outside the SCE rho table "
                f"range [{lo}, {hi}] nm"
            )
        return float(np.interp(wavelength_nm, self.wavelengths_nm, self.rho))


def check_sce_params(
    sce_params: SceParams,
    wavelengths_nm: Sequence[float],
    stacklevel: int = 2,
) -> None:
    """Check SCE parameters against the calculation wavelengths.

    Warns once with DomainWarning when the SCE is disabled, and once per
    wavelength whose decay rate is negative.

    Raises:
        ConfigurationError: If a wavelength is outside the rho table range.
    """
    if sce_params.is_disabled:
        warnings.warn(
            "SCE rho is zero at every wavelength; using uniform pupil amplitude",
            DomainWarning,
            stacklevel=stacklevel,
        )
        return

    for wavelength_nm in wavelengths_nm:
        rho = sce_params.rho_at(wavelength_nm)
        if rho < 0:
            warnings.warn(
                f"SCE rho at {wavelength_nm} nm is negative ({rho}); amplitude "
                "will increase away from the SCE peak",
                DomainWarning,
                stacklevel=stacklevel,
            )


def sce_amplitude(
    x_mm: np.ndarray,
    y_mm: np.ndarray,
    wavelength_nm: float,
    sce_params: SceParams,
) -> np.ndarray:
    """Compute SCE amplitude attenuation over the pupil plane.

    Args:
        x_mm: 2D array of pupil-plane x positions (mm), x along columns.
        y_mm: 2D array of pupil-plane y positions (mm), y along rows.
        wavelength_nm: Wavelength selecting the decay rate (nm).
        sce_params: SCE model parameters.

    Returns:
        Real amplitude array, same shape as the grids. All ones when the
        SCE is disabled (every rho is zero). Emits no warnings; see
        check_sce_params().
    """
    if sce_params.is_disabled:
        return np.ones(np.shape(x_mm), dtype=np.float64)

    rho = sce_params.rho_at(wavelength_nm)
    logger.debug("SCE rho at %.1f nm: %.4f", wavelength_nm, rho)

    r2 = (x_mm - sce_params.x0_mm) ** 2 + (y_mm - sce_params.y0_mm) ** 2
    return 10.0 ** (-rho * r2)
