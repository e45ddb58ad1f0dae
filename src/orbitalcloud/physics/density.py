"""
Probability Density Models
==========================
Evaluates |psi|^2 for a given orbital and element.

Why is this file needed?
------------------------
1. Physics: It holds the density formula of every supported orbital family.
2. Dispatch: A single (n, l) -> variant mapping decides which formula (and
   which sampling path) a request gets. Adding an exact shape means adding
   one variant class and one DENSITY_VARIANTS entry; the samplers do not change.
3. Safety: Every batch evaluation is checked at the variant boundary, so a
   NaN or negative density from a defective formula raises instead of
   reaching a renderer.

Families:
    ClosedForm1s, ClosedForm2s: exact, sampled by inverse CDF.
    ExactHydrogenic2p: exact real 2p orbitals with correct nodal planes.
    GaussianFallback: isotropic radial approximation for every other (n, l).

Lengths are in Bohr radii, densities in a0^-3.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
import logging
import math
from typing import TYPE_CHECKING, Optional

import numpy as np
from scipy import special

from orbitalcloud.errors import DensityAnomalyError
from orbitalcloud.physics import kernels
from orbitalcloud.physics.closed_form import inverse_radial_cdf_1s, inverse_radial_cdf_2s

if TYPE_CHECKING:
    import numpy.typing as npt

    from orbitalcloud.model.elements import Element
    from orbitalcloud.model.orbital import Orbital

logger = logging.getLogger(__name__)

# Width of the fallback radial Gaussian relative to its centre radius
GAUSSIAN_WIDTH_FRACTION = 0.5


class DensityFamily(StrEnum):
    CLOSED_FORM_1S = "closed_form_1s"
    CLOSED_FORM_2S = "closed_form_2s"
    EXACT_HYDROGENIC_2P = "exact_hydrogenic_2p"
    GAUSSIAN_FALLBACK = "gaussian_fallback"


def as_points(points: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Coerce input to a contiguous (n, 3) float64 array."""
    array = np.ascontiguousarray(points, dtype=np.float64)
    if array.ndim == 1:
        array = array.reshape(1, -1)
    if array.ndim != 2 or array.shape[1] != 3:
        raise ValueError(f"Points must have shape (n, 3), got {np.shape(points)}")
    return array


# ==========================================
# ABSTRACT DENSITY MODELS
# ==========================================
class DensityModel(ABC):
    """
    Anything the rejection sampler can draw from: a non-negative density over
    3D space with a length scale and, optionally, a known maximum.
    """
    NAME: str = "Density"

    @property
    @abstractmethod
    def characteristic_radius(self) -> float:
        """Length scale around which most of the mass sits."""
        pass

    @abstractmethod
    def _evaluate(self, points: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """Raw density for a contiguous (n, 3) float64 array."""
        pass

    def peak_density(self) -> Optional[float]:
        """Analytic upper bound of the density, or None if unknown."""
        return None

    def evaluate(self, points: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """
        Density at each point.

        Args:
            points: Array-like of shape (n, 3) or (3,).

        Raises:
            DensityAnomalyError: If any value is NaN, infinite or negative.

        Returns:
            Densities, shape (n,).
        """
        values = self._evaluate(as_points(points))
        if not np.all(np.isfinite(values)) or np.any(values < 0.0):
            bad = int(np.count_nonzero(~np.isfinite(values) | (values < 0.0)))
            raise DensityAnomalyError(
                f"{self.NAME} produced {bad} invalid density value(s) (NaN, inf or negative)."
            )
        return values

    def __call__(self, point: npt.ArrayLike) -> float:
        """Density at a single point."""
        return float(self.evaluate(point)[0])


class OrbitalDensity(DensityModel):
    """
    Density of a specific orbital around a specific element.
    """
    FAMILY: DensityFamily

    def __init__(self, orbital: Orbital, element: Element) -> None:
        """
        Args:
            orbital: Quantum state.
            element: Provides the nuclear charge scaling a = a0 / Z.
        """
        self.orbital = orbital
        self.element = element
        self.a = element.effective_bohr_radius

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(orbital={self.orbital.label}, Z={self.element.atomic_number})"

    @property
    def family(self) -> DensityFamily:
        return self.FAMILY

    @property
    def is_exact(self) -> bool:
        return self.FAMILY != DensityFamily.GAUSSIAN_FALLBACK

    @property
    def characteristic_radius(self) -> float:
        return self.orbital.characteristic_radius(self.element)

    @abstractmethod
    def radial_probability(
        self,
        r: float | npt.NDArray[np.float64],
    ) -> float | npt.NDArray[np.float64]:
        """
        Radial probability P(r) = 4 pi r^2 <rho(r)>, the angular average of the
        density times the shell area. Integrates to 1 over [0, inf).
        """
        pass

    def plot(self) -> None:
        """
        Plot the radial probability distribution.
        """
        import matplotlib.pyplot as plt

        r = np.linspace(0.0, 4.0 * self.characteristic_radius, 500)

        plt.rcParams["figure.constrained_layout.use"] = True
        plt.figure(figsize=(7, 5))
        plt.plot(r, self.radial_probability(r), 'b', lw=2)

        plt.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)
        plt.minorticks_on()
        plt.grid(visible=True, which='minor', axis='both', linestyle=':', color='gray', lw=0.5)

        plt.title(f"{self.element.symbol} {self.orbital.label} ({self.NAME})")
        plt.xlabel("r (a₀)")
        plt.ylabel("P(r)")
        plt.show()


class ClosedFormDensity(OrbitalDensity):
    """
    Density whose radial law has an invertible CDF; sampled without rejection.
    """

    @abstractmethod
    def inverse_radial_cdf(self, u: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """Map uniform values in [0, 1) to radii following the exact radial law."""
        pass


# ==========================================
# CLOSED-FORM FAMILIES
# ==========================================
class ClosedForm1s(ClosedFormDensity):
    """
    Hydrogenic 1s: rho = e^(-2r/a) / (pi a^3).
    """
    NAME = "1s (closed form)"
    FAMILY = DensityFamily.CLOSED_FORM_1S

    def _evaluate(self, points: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return kernels.density_1s_batch(points, self.a)

    def peak_density(self) -> float:
        return 1.0 / (math.pi * self.a ** 3)

    def radial_probability(self, r):
        a = self.a
        return 4.0 * r ** 2 * np.exp(-2.0 * r / a) / a ** 3

    def inverse_radial_cdf(self, u):
        return inverse_radial_cdf_1s(u, self.a)


class ClosedForm2s(ClosedFormDensity):
    """
    Hydrogenic 2s: rho = (2 - r/a)^2 e^(-r/a) / (32 pi a^3), radial node at r = 2a.
    """
    NAME = "2s (closed form)"
    FAMILY = DensityFamily.CLOSED_FORM_2S

    def _evaluate(self, points: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return kernels.density_2s_batch(points, self.a)

    def peak_density(self) -> float:
        # Global maximum is at the nucleus, (2 - 0)^2 / (32 pi a^3)
        return 1.0 / (8.0 * math.pi * self.a ** 3)

    def radial_probability(self, r):
        a = self.a
        return r ** 2 * (2.0 - r / a) ** 2 * np.exp(-r / a) / (8.0 * a ** 3)

    def inverse_radial_cdf(self, u):
        return inverse_radial_cdf_2s(u, self.a)


# ==========================================
# EXACT HYDROGENIC FAMILIES
# ==========================================
class ExactHydrogenic2p(OrbitalDensity):
    """
    Real 2p orbitals: rho = c^2 e^(-r/a) / (32 pi a^5) with c the coordinate
    along the lobe axis (m=0 -> z, m=+1 -> x, m=-1 -> y). The plane c = 0 is
    the nodal plane.
    """
    NAME = "2p (exact hydrogenic)"
    FAMILY = DensityFamily.EXACT_HYDROGENIC_2P
    AXIS_BY_M = {1: 0, -1: 1, 0: 2}

    def __init__(self, orbital: Orbital, element: Element) -> None:
        super().__init__(orbital, element)
        self.axis = self.AXIS_BY_M[orbital.m]

    def _evaluate(self, points: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return kernels.density_2p_batch(points, self.a, self.axis)

    def peak_density(self) -> float:
        # c^2 e^(-r/a) <= r^2 e^(-r/a), maximal at r = 2a on the axis
        return math.exp(-2.0) / (8.0 * math.pi * self.a ** 3)

    def radial_probability(self, r):
        # Angular average of cos^2 is 1/3
        a = self.a
        return r ** 4 * np.exp(-r / a) / (24.0 * a ** 5)


# ==========================================
# APPROXIMATE FALLBACK
# ==========================================
class GaussianFallback(OrbitalDensity):
    """
    Documented approximation for every (n, l) without an exact variant: an
    isotropic Gaussian shell centred on the characteristic radius n² a0 / Z.
    It has no angular structure and no radial nodes.
    """
    NAME = "Gaussian radial approximation"
    FAMILY = DensityFamily.GAUSSIAN_FALLBACK

    def __init__(self, orbital: Orbital, element: Element) -> None:
        super().__init__(orbital, element)
        self.center = self.characteristic_radius
        self.sigma = GAUSSIAN_WIDTH_FRACTION * self.center
        self.norm = 1.0 / (4.0 * math.pi * self._shell_integral(self.center, self.sigma))

    @staticmethod
    def _shell_integral(c: float, s: float) -> float:
        """Closed form of integral_0^inf r^2 exp(-(r - c)^2 / (2 s^2)) dr."""
        g = s * math.sqrt(math.pi / 2.0) * (1.0 + float(special.erf(c / (s * math.sqrt(2.0)))))
        e = math.exp(-c * c / (2.0 * s * s))
        return (s * s + c * c) * g + s * s * c * e

    def _evaluate(self, points: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return kernels.density_gaussian_shell_batch(points, self.center, self.sigma, self.norm)

    def peak_density(self) -> float:
        return self.norm

    def radial_probability(self, r):
        d = r - self.center
        return 4.0 * math.pi * r ** 2 * self.norm * np.exp(-d * d / (2.0 * self.sigma ** 2))


# ==========================================
# DISPATCH
# ==========================================
DENSITY_VARIANTS: dict[tuple[int, int], type[OrbitalDensity]] = {
    (1, 0): ClosedForm1s,
    (2, 0): ClosedForm2s,
    (2, 1): ExactHydrogenic2p,
}


def variant_for(orbital: Orbital) -> type[OrbitalDensity]:
    """Pure mapping from (n, l) to the density variant class."""
    return DENSITY_VARIANTS.get((orbital.n, orbital.l), GaussianFallback)


def density_model_for(orbital: Orbital, element: Element) -> OrbitalDensity:
    """Instantiate the density variant for an orbital around an element."""
    model = variant_for(orbital)(orbital, element)
    logger.debug(f"Selected {model!r} ({model.family}).")
    return model


def density(orbital: Orbital, element: Element, point: npt.ArrayLike) -> float:
    """
    Probability density |psi|^2 at a single point (Bohr radii).

    Returns:
        Non-negative density in a0^-3.
    """
    return density_model_for(orbital, element)(point)
