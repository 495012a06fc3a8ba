"""Recomputation cache for pupil functions and PSFs.

Two independent flags track whether the cached pupil functions and the PSFs
derived from them can be trusted:

* changing a synthesis input marks the pupil function stale and leaves the
  PSF flag alone;
* storing new pupil functions marks them fresh and always marks the PSF
  stale, even if the new arrays are numerically identical;
* storing new PSFs marks the PSF fresh.

Reading a stale entry raises ConfigurationError. A PSF also counts as
unreadable while the pupil function is stale.
"""

import logging
from typing import Sequence, Tuple

import numpy as np

from ..errors import ConfigurationError

__all__ = ["StalenessCache"]

logger = logging.getLogger(__name__)


class StalenessCache:
    """Per-configuration cache of pupil functions and PSFs.

    Each store replaces the whole per-wavelength tuple; entries are never
    updated one wavelength at a time. Stored arrays are made read-only, so
    a cache hit always returns what was stored.

    Attributes:
        pupil_function_computations: Number of pupil-function stores.
        psf_computations: Number of PSF stores.
    """

    def __init__(self):
        self._pupil_function: Tuple[np.ndarray, ...] = None
        self._psf: Tuple[np.ndarray, ...] = None
        self._pupil_function_stale = True
        self._psf_stale = True
        self.pupil_function_computations = 0
        self.psf_computations = 0

    # Pupil function

    def invalidate_pupil_function(self) -> None:
        if not self._pupil_function_stale:
            logger.debug("Pupil function invalidated")
        self._pupil_function_stale = True

    def is_pupil_function_stale(self) -> bool:
        return self._pupil_function_stale or self._pupil_function is None

    def store_pupil_function(self, arrays: Sequence[np.ndarray]) -> Tuple[np.ndarray, ...]:
        """Replace all pupil functions; marks them fresh and the PSF stale."""
        self._pupil_function = _freeze(arrays)
        self._pupil_function_stale = False
        self.pupil_function_computations += 1
        self.invalidate_psf()
        return self._pupil_function

    @property
    def pupil_function(self) -> Tuple[np.ndarray, ...]:
        """Cached pupil functions, one per wavelength."""
        if self.is_pupil_function_stale():
            raise ConfigurationError(
                "Pupil function is stale; call compute_pupil_function() first"
            )
        return self._pupil_function

    # PSF

    def invalidate_psf(self) -> None:
        self._psf_stale = True

    def is_psf_stale(self) -> bool:
        return self._psf_stale or self._psf is None

    def store_psf(self, arrays: Sequence[np.ndarray]) -> Tuple[np.ndarray, ...]:
        """Replace all PSFs and mark them fresh."""
        if self.is_pupil_function_stale():
            raise ConfigurationError("Cannot store a PSF derived from a stale pupil function")
        self._psf = _freeze(arrays)
        self._psf_stale = False
        self.psf_computations += 1
        return self._psf

    @property
    def psf(self) -> Tuple[np.ndarray, ...]:
        """Cached PSFs, one per wavelength.

        Unreadable while either the PSF or the pupil function it was
        derived from is stale.
        """
        if self.is_psf_stale() or self.is_pupil_function_stale():
            raise ConfigurationError("PSF is stale; call compute_psf() first")
        return self._psf

    def __repr__(self) -> str:
        return (
            f"StalenessCache(pupil_function_stale={self.is_pupil_function_stale()}, "
            f"psf_stale={self.is_psf_stale()})"
        )


def _freeze(arrays: Sequence[np.ndarray]) -> Tuple[np.ndarray, ...]:
    frozen = tuple(np.asarray(arr) for arr in arrays)
    for arr in frozen:
        arr.flags.writeable = False
    return frozen
