# kernels.py
from __future__ import annotations

import math

import numpy as np
import numpy.typing as npt
import numba as nb

# ---- JIT'd probability density kernels (batched over (n, 3) points) ----
# All lengths in Bohr radii, densities in a0^-3. Polynomial factors are
# paired with half of the exponential before squaring, so a huge coordinate
# meets an underflowed exponential as (big * 0)^2 and never as inf * 0.

# Past these the exponential factor is exactly 0.0 in double precision
RHO_CUTOFF = 1500.0
GAUSSIAN_SIGMA_CUTOFF = 40.0


@nb.njit(cache=True, fastmath=True)
def _radius(x: float, y: float, z: float) -> float:
    # hypot does not overflow for coordinates near the float limit
    return math.hypot(math.hypot(x, y), z)


@nb.njit(cache=True, fastmath=True)
def density_1s_batch(points: npt.NDArray[np.float64], a: float) -> npt.NDArray[np.float64]:
    """
    Hydrogenic 1s density e^(-2r/a) / (pi a^3).

    Args:
        points: Cartesian positions, shape (n, 3).
        a:      Effective Bohr radius a0 / Z.

    Returns:
        Density per point, shape (n,).
    """
    n = points.shape[0]
    out = np.empty(n, np.float64)
    norm = 1.0 / (math.pi * a * a * a)
    for i in range(n):
        rho = _radius(points[i, 0], points[i, 1], points[i, 2]) / a
        if rho > RHO_CUTOFF:
            out[i] = 0.0
        else:
            out[i] = norm * math.exp(-2.0 * rho)
    return out


@nb.njit(cache=True, fastmath=True)
def density_2s_batch(points: npt.NDArray[np.float64], a: float) -> npt.NDArray[np.float64]:
    """Hydrogenic 2s density (2 - r/a)^2 e^(-r/a) / (32 pi a^3)."""
    n = points.shape[0]
    out = np.empty(n, np.float64)
    norm = 1.0 / (32.0 * math.pi * a * a * a)
    for i in range(n):
        rho = _radius(points[i, 0], points[i, 1], points[i, 2]) / a
        if rho > RHO_CUTOFF:
            out[i] = 0.0
        else:
            t = (2.0 - rho) * math.exp(-0.5 * rho)
            out[i] = norm * t * t
    return out


@nb.njit(cache=True, fastmath=True)
def density_2p_batch(
    points: npt.NDArray[np.float64],
    a: float,
    axis: int,
) -> npt.NDArray[np.float64]:
    """
    Real hydrogenic 2p density c^2 e^(-r/a) / (32 pi a^5).

    Written with the Cartesian coordinate c along the lobe axis instead of
    r cos(theta), so the nodal plane c = 0 evaluates to exactly zero and there
    is no division by r. Evaluated as ((c/a) e^(-r/2a))^2 / (32 pi a^3).

    Args:
        points: Cartesian positions, shape (n, 3).
        a:      Effective Bohr radius a0 / Z.
        axis:   Lobe axis index (0 = x, 1 = y, 2 = z).
    """
    n = points.shape[0]
    out = np.empty(n, np.float64)
    norm = 1.0 / (32.0 * math.pi * a * a * a)
    for i in range(n):
        rho = _radius(points[i, 0], points[i, 1], points[i, 2]) / a
        if rho > RHO_CUTOFF:
            out[i] = 0.0
        else:
            t = points[i, axis] / a * math.exp(-0.5 * rho)
            out[i] = norm * t * t
    return out


@nb.njit(cache=True, fastmath=True)
def density_gaussian_shell_batch(
    points: npt.NDArray[np.float64],
    center: float,
    sigma: float,
    norm: float,
) -> npt.NDArray[np.float64]:
    """
    Isotropic radial Gaussian N exp(-(r - center)^2 / (2 sigma^2)).

    Args:
        points: Cartesian positions, shape (n, 3).
        center: Radius of the density maximum.
        sigma:  Radial width.
        norm:   Precomputed normalization N.
    """
    n = points.shape[0]
    out = np.empty(n, np.float64)
    for i in range(n):
        q = (_radius(points[i, 0], points[i, 1], points[i, 2]) - center) / sigma
        if abs(q) > GAUSSIAN_SIGMA_CUTOFF:
            out[i] = 0.0
        else:
            out[i] = norm * math.exp(-0.5 * q * q)
    return out
