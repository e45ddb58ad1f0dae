"""
Sample Diagnostics
==================
Statistics and plots for judging whether a point cloud matches its density.

Why is this file needed?
------------------------
1. Verification: Radial moments of a sample can be compared against the
   hydrogenic expectation value, which is how the samplers are validated.
2. Inspection: Histogram of sampled radii overlaid with the analytic radial
   probability, for eyeballing shape errors.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
from scipy import integrate

if TYPE_CHECKING:
    import numpy.typing as npt

    from orbitalcloud.model.elements import Element
    from orbitalcloud.model.orbital import Orbital
    from orbitalcloud.model.request import SampleResult
    from orbitalcloud.physics.density import OrbitalDensity

logger = logging.getLogger(__name__)


def _physical_positions(result: SampleResult, include_fallback: bool) -> npt.NDArray[np.float64]:
    if include_fallback:
        return result.positions
    return result.positions[:result.accepted]


def radial_distances(
    result: SampleResult,
    origin: npt.ArrayLike | None = None,
    include_fallback: bool = False,
) -> npt.NDArray[np.float64]:
    """
    Distance of every vertex from the nucleus.

    Args:
        result: Sampled cloud.
        origin: Nucleus position if the cloud was translated.
        include_fallback: Also return distances of zero-weight vertices.

    Returns:
        Radii in Bohr radii.
    """
    positions = _physical_positions(result, include_fallback)
    if origin is not None:
        positions = positions - np.asarray(origin, dtype=np.float64).reshape(3)
    return np.linalg.norm(positions, axis=1)


def mean_radius(result: SampleResult, include_fallback: bool = False) -> float:
    radii = radial_distances(result, include_fallback=include_fallback)
    if radii.size == 0:
        return float("nan")
    return float(np.mean(radii))


def expected_mean_radius(orbital: Orbital, element: Element) -> float:
    """Hydrogenic <r> = (a0 / 2Z) (3n² - l(l + 1))."""
    a = element.effective_bohr_radius
    return 0.5 * a * (3 * orbital.n ** 2 - orbital.l * (orbital.l + 1))


def axis_spread(result: SampleResult) -> npt.NDArray[np.float64]:
    """Mean |x|, |y|, |z| of the physical vertices; shows which axis a lobe lies on."""
    positions = _physical_positions(result, include_fallback=False)
    if positions.shape[0] == 0:
        return np.zeros(3, dtype=np.float64)
    return np.mean(np.abs(positions), axis=0)


def verify_normalization(model: OrbitalDensity) -> float:
    """
    Integrate the model's radial probability over [0, inf).

    Returns:
        The integral; 1 for a correctly normalised density.
    """
    value, error = integrate.quad(model.radial_probability, 0.0, np.inf, limit=200)
    logger.debug(f"Normalization of {model!r}: {value:.6f} (+/- {error:.1e})")
    return float(value)


def plot_radial_distribution(result: SampleResult, model: OrbitalDensity, bins: int = 60) -> None:
    """
    Histogram of sampled radii against the analytic radial probability.
    """
    import matplotlib.pyplot as plt

    radii = radial_distances(result)
    r_max = max(float(np.max(radii)) if radii.size else 0.0, 4.0 * model.characteristic_radius)
    r = np.linspace(0.0, r_max, 500)

    plt.rcParams["figure.constrained_layout.use"] = True
    plt.figure(figsize=(7, 5))
    plt.hist(radii, bins=bins, range=(0.0, r_max), density=True, color='lightsteelblue',
             edgecolor='gray', label=f"samples (n={radii.size})")
    plt.plot(r, model.radial_probability(r), 'b', lw=2, label="P(r)")

    plt.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)
    plt.minorticks_on()
    plt.grid(visible=True, which='minor', axis='both', linestyle=':', color='gray', lw=0.5)

    plt.title(f"{model.element.symbol} {model.orbital.label} ({model.NAME})")
    plt.xlabel("r (a₀)")
    plt.ylabel("probability density")
    plt.legend()
    plt.show()
