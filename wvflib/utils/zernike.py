"""Zernike polynomial computation.

Uses OSA/ANSI standard single indexing:
    j = (n * (n + 2) + m) / 2

where n is radial order and m is azimuthal frequency. Polynomials are
orthonormal over the unit disk:

    Z_j(rho, theta) = N(n, m) * R_n^|m|(rho) * cos(m * theta)     m >= 0
    Z_j(rho, theta) = N(n, m) * R_n^|m|(rho) * sin(|m| * theta)   m < 0

    N(n, m) = sqrt(2 * (n + 1))   m != 0
    N(n, m) = sqrt(n + 1)         m == 0

Reference:
    Thibos et al. (2002), "Standards for Reporting the Optical
    Aberrations of Eyes", J. Refractive Surgery 18(5): S652-S660
"""

from functools import lru_cache
from math import factorial, sqrt

import numpy as np

__all__ = [
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

MAX_RADIAL_ORDER = 10

# OSA indices 1..65 cover radial orders 1 through 10 (piston, j=0, is not stored)
N_COEFFICIENTS = (MAX_RADIAL_ORDER + 1) * (MAX_RADIAL_ORDER + 2) // 2 - 1


def osa_to_nm(j: int) -> tuple[int, int]:
    """Convert OSA single index j to (n, m) radial/azimuthal orders.

    Args:
        j: OSA/ANSI single index (0-based, 0 is piston).

    Returns:
        Tuple (n, m) where n is radial order, m is azimuthal frequency.

    Example:
        >>> osa_to_nm(4)  # Defocus
        (2, 0)
        >>> osa_to_nm(12)  # Spherical
        (4, 0)
    """
    if j < 0:
        raise ValueError(f"OSA index must be >= 0, got {j}")

    # Find n such that n*(n+1)/2 <= j < (n+1)*(n+2)/2
    n = int(np.ceil((-3 + np.sqrt(9 + 8 * j)) / 2))

    # m from j = (n*(n+2) + m) / 2
    m = 2 * j - n * (n + 2)

    return n, m


def nm_to_osa(n: int, m: int) -> int:
    """Convert (n, m) to the OSA single index."""
    if abs(m) > n or (n - abs(m)) % 2:
        raise ValueError(f"Invalid Zernike orders (n={n}, m={m})")
    return (n * (n + 2) + m) // 2


def noll_to_osa(noll_index: int) -> int:
    """Convert Noll index (1-based) to OSA index (0-based).

    Noll orders terms within a radial order by increasing |m|, with even
    indices carrying the cosine (m > 0) term and odd indices the sine term.
    """
    if noll_index < 1:
        raise ValueError(f"Noll index must be >= 1, got {noll_index}")

    n = int((-1 + np.sqrt(8 * (noll_index - 1) + 1)) / 2)
    position = noll_index - n * (n + 1) // 2
    parity = n % 2
    m_abs = 2 * ((position + parity) // 2) - parity
    m = m_abs if noll_index % 2 == 0 else -m_abs

    return nm_to_osa(n, m)


def zernike_norm(n: int, m: int) -> float:
    """Orthonormal scaling factor N(n, m)."""
    return sqrt(2.0 * (n + 1) / (1.0 + float(m == 0)))


@lru_cache(maxsize=256)
def _radial_coefficients(n: int, m: int) -> tuple:
    """Compute (coefficient, power) pairs for radial polynomial R_n^m.

    Cached for efficiency when evaluating many polynomials.
    """
    coeffs = []
    num_terms = (n - m) // 2 + 1

    for k in range(num_terms):
        sign = (-1) ** k
        numerator = factorial(n - k)
        denominator = (
            factorial(k)
            * factorial((n + m) // 2 - k)
            * factorial((n - m) // 2 - k)
        )
        power = n - 2 * k
        coeffs.append((sign * numerator // denominator, power))

    return tuple(coeffs)


def radial_polynomial(n: int, m: int, rho: np.ndarray) -> np.ndarray:
    """Compute radial Zernike polynomial R_n^|m|(rho).

    Args:
        n: Radial order.
        m: Azimuthal frequency (sign is ignored).
        rho: Radial coordinate array (0 to 1 inside the unit disk).

    Returns:
        R_n^|m| evaluated at each point.
    """
    rho = np.asarray(rho, dtype=np.float64)
    result = np.zeros_like(rho)

    for coeff, power in _radial_coefficients(n, abs(m)):
        result += coeff * np.power(rho, power)

    return result


def zernike_polynomial(j: int, rho: np.ndarray, theta: np.ndarray) -> np.ndarray:
    """Evaluate single orthonormal Zernike polynomial Z_j.

    Args:
        j: OSA/ANSI single index.
        rho: Normalized radial coordinate (0 to 1 within pupil).
        theta: Azimuthal angle (radians), atan2(y, x).

    Returns:
        Z_j evaluated at each (rho, theta) point.

    Example:
        >>> # Evaluate defocus (j=4)
        >>> Z4 = zernike_polynomial(4, rho, theta)
    """
    n, m = osa_to_nm(j)

    R = radial_polynomial(n, m, rho)

    if m >= 0:
        return zernike_norm(n, m) * R * np.cos(m * theta)
    return zernike_norm(n, m) * R * np.sin(abs(m) * theta)


def zernike_polynomials(
    rho: np.ndarray,
    theta: np.ndarray,
    max_order: int = MAX_RADIAL_ORDER,
) -> np.ndarray:
    """Compute all Zernike polynomials up to given radial order.

    Args:
        rho: 2D array of radial coordinates (0 to 1 within pupil).
        theta: 2D array of azimuthal angles (radians).
        max_order: Maximum radial order n to compute.

    Returns:
        3D array of shape (num_polynomials, ny, nx) containing
        Zernike polynomials Z_j for j = 0 to num_polynomials-1.

    Example:
        >>> Z = zernike_polynomials(rho, theta, max_order=4)
        >>> Z[4]  # Defocus term (n=2, m=0)
    """
    rho = np.asarray(rho, dtype=np.float64)
    num_terms = _triangular_number(max_order + 1)
    result = np.zeros((num_terms,) + rho.shape, dtype=np.float64)

    for j in range(num_terms):
        result[j] = zernike_polynomial(j, rho, theta)

    return result


def _triangular_number(n: int) -> int:
    """Return the n-th triangular number: n*(n+1)/2."""
    return n * (n + 1) // 2
