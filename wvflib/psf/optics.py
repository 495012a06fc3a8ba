"""Optical system configuration data structures."""

import logging
from dataclasses import dataclass, field
from typing import Sequence, Tuple, Union

import numpy as np

from ..errors import ConfigurationError
from .aberrations.zernike import ZernikeCoefficients, ZernikeMode
from .apodization import SceParams
from .staleness import StalenessCache

__all__ = ["Wavefront", "PupilGrid", "make_pupil_grid", "SYNTHESIS_INPUTS"]

logger = logging.getLogger(__name__)

# Attributes the pupil function depends on. Assigning any of them marks the
# cached pupil function stale.
SYNTHESIS_INPUTS = frozenset(
    {
        "zernike_coefficients",
        "measured_pupil_mm",
        "calc_pupil_mm",
        "wavelengths_nm",
        "measured_wavelength_nm",
        "nominal_focus_wavelength_nm",
        "calc_focus_correction_d",
        "measured_focus_correction_d",
        "sce_params",
        "spatial_samples",
        "ref_pupil_plane_mm",
    }
)

_POSITIVE_SCALARS = (
    "measured_pupil_mm",
    "calc_pupil_mm",
    "measured_wavelength_nm",
    "nominal_focus_wavelength_nm",
    "ref_pupil_plane_mm",
)


@dataclass(eq=False)
class Wavefront:
    """Mutable optical system description for an eye.

    Zernike coefficients are in microns, fit over the measured pupil at the
    measured wavelength. Pupil sizes are diameters in mm, wavelengths in nm,
    focus corrections in diopters.

    Assigning any attribute listed in SYNTHESIS_INPUTS marks the cached
    pupil function stale. The calc_pupil_mm <= measured_pupil_mm
    constraint is checked when the pupil function is computed, so the two
    sizes may be set in either order.

    Attributes:
        zernike_coefficients: OSA coefficients j = 1..65 (microns). Any
            sequence of at most 65 values is accepted and zero-padded.
        measured_pupil_mm: Pupil diameter the coefficients were fit over.
        calc_pupil_mm: Pupil diameter used for the calculation.
        wavelengths_nm: Calculation wavelengths, in output order.
        measured_wavelength_nm: Wavelength of the aberration measurement.
        nominal_focus_wavelength_nm: Wavelength the eye is focused at.
        calc_focus_correction_d: External lens correction at calculation time.
        measured_focus_correction_d: External lens correction at measurement.
        sce_params: Stiles-Crawford apodization parameters.
        spatial_samples: Pupil-plane samples per side.
        ref_pupil_plane_mm: Pupil-plane extent at the measured wavelength.
        cache: Pupil function / PSF cache with staleness flags.

    Example:
        ```python
        wvf = Wavefront(measured_pupil_mm=6.0, calc_pupil_mm=3.0)
        wvf.set_zernike_coefficient(ZernikeMode.DEFOCUS, 0.2)
        wvf.wavelengths_nm = [450, 550, 650]
        ```
    """

    zernike_coefficients: Union[ZernikeCoefficients, Sequence[float]] = field(
        default_factory=ZernikeCoefficients
    )
    measured_pupil_mm: float = 8.0
    calc_pupil_mm: float = 3.0
    wavelengths_nm: Sequence[float] = (550.0,)
    measured_wavelength_nm: float = 550.0
    nominal_focus_wavelength_nm: float = 550.0
    calc_focus_correction_d: float = 0.0
    measured_focus_correction_d: float = 0.0
    sce_params: SceParams = field(default_factory=SceParams)
    spatial_samples: int = 201
    ref_pupil_plane_mm: float = 16.212
    cache: StalenessCache = field(
        default_factory=StalenessCache, init=False, repr=False
    )

    def __setattr__(self, name, value):
        if name in SYNTHESIS_INPUTS:
            value = _coerce(name, value)
        super().__setattr__(name, value)
        if name in SYNTHESIS_INPUTS:
            cache = self.__dict__.get("cache")
            if cache is not None:
                logger.debug("Wavefront.%s changed", name)
                cache.invalidate_pupil_function()

    @property
    def wavelengths_um(self) -> Tuple[float, ...]:
        """Calculation wavelengths in microns."""
        return tuple(w / 1000.0 for w in self.wavelengths_nm)

    @property
    def n_wavelengths(self) -> int:
        return len(self.wavelengths_nm)

    def set_zernike_coefficient(self, j: Union[ZernikeMode, int], value: float) -> None:
        """Set one OSA coefficient (microns)."""
        self.zernike_coefficients = self.zernike_coefficients.with_coefficient(j, value)

    def pupil_plane_size_mm(self, index: int) -> float:
        """Physical extent of the pupil-plane grid at wavelength ``index``.

        Scales with wavelength so the PSF angular sampling is the same at
        every wavelength.
        """
        wavelength_nm = self.wavelengths_nm[index]
        return self.ref_pupil_plane_mm * wavelength_nm / self.measured_wavelength_nm

    def check_pupil_sizes(self) -> None:
        """Raise ConfigurationError if the calculation pupil exceeds the measured one."""
        if self.calc_pupil_mm > self.measured_pupil_mm:
            raise ConfigurationError(
                f"Calculation pupil ({self.calc_pupil_mm:.2f} mm) must not exceed "
                f"measurement pupil ({self.measured_pupil_mm:.2f} mm)"
            )


def _coerce(name: str, value):
    """Validate and normalize one synthesis input."""
    if name == "zernike_coefficients":
        if isinstance(value, ZernikeCoefficients):
            return value
        return ZernikeCoefficients.from_sequence(value)

    if name == "wavelengths_nm":
        waves = np.atleast_1d(np.asarray(value, dtype=np.float64))
        if waves.ndim != 1 or waves.size == 0:
            raise ConfigurationError(f"Wavelengths must be a non-empty 1D sequence, got {value}")
        if not np.all(np.isfinite(waves)) or np.any(waves <= 0):
            raise ConfigurationError(f"Wavelengths must be finite and positive, got {tuple(waves)}")
        return tuple(float(w) for w in waves)

    if name == "spatial_samples":
        if not np.isfinite(value) or int(value) != value or value <= 0:
            raise ConfigurationError(f"Spatial samples must be a positive integer, got {value}")
        return int(value)

    if name == "sce_params":
        if value is None:
            return SceParams()
        if not isinstance(value, SceParams):
            raise ConfigurationError(f"sce_params must be SceParams, got {type(value).__name__}")
        return value

    value = float(value)
    if not np.isfinite(value):
        raise ConfigurationError(f"{name} must be finite, got {value}")
    if name in _POSITIVE_SCALARS and value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class PupilGrid:
    """Pupil-plane sampling grid for one wavelength.

    Attributes:
        x_mm: 2D array of x positions (mm), varying along columns.
        y_mm: 2D array of y positions (mm), varying along rows.
        rho: 2D array of radius normalized to the measured pupil.
        theta: 2D array of azimuthal angle atan2(y, x) (radians).
    """

    x_mm: np.ndarray
    y_mm: np.ndarray
    rho: np.ndarray
    theta: np.ndarray

    @property
    def shape(self) -> Tuple[int, int]:
        """Return (ny, nx) shape."""
        return self.rho.shape

    @property
    def spacing_mm(self) -> float:
        """Sample spacing (mm)."""
        return float(self.x_mm[0, 1] - self.x_mm[0, 0]) if self.shape[1] > 1 else 0.0


def make_pupil_grid(
    n_samples: int,
    size_mm: float,
    measured_pupil_mm: float,
) -> PupilGrid:
    """Build the square pupil-plane grid.

    Positions are ``arange(n) * (size / n) - size / 2``, spanning
    [-size/2, size/2). For even n the origin falls on sample n // 2.

    Args:
        n_samples: Samples per side.
        size_mm: Physical extent of the pupil plane (mm).
        measured_pupil_mm: Diameter that normalizes rho to 1 at its edge.

    Returns:
        PupilGrid with positions, normalized radius and angle.
    """
    if size_mm <= 0:
        raise ConfigurationError(f"Pupil plane size must be positive, got {size_mm}")

    positions = np.arange(n_samples) * (size_mm / n_samples) - size_mm / 2.0
    x_mm, y_mm = np.meshgrid(positions, positions, indexing="xy")

    rho = np.sqrt(x_mm**2 + y_mm**2) / (measured_pupil_mm / 2.0)
    theta = np.arctan2(y_mm, x_mm)

    return PupilGrid(x_mm=x_mm, y_mm=y_mm, rho=rho, theta=theta)
