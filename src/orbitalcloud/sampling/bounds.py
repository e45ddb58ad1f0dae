from __future__ import annotations

from dataclasses import dataclass
import sys
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

    from orbitalcloud.physics.density import DensityModel

# Ceiling floor; keeps thresholds strictly positive when the grid sees only zeros
MIN_CEILING = sys.float_info.min


@dataclass(frozen=True)
class BoundingBox:
    """
    Axis-aligned cube centred at the origin.
    """
    half_width: float

    @classmethod
    def cube(cls, radius: float) -> BoundingBox:
        return cls(half_width=abs(float(radius)))

    @property
    def side(self) -> float:
        return 2.0 * self.half_width

    @property
    def volume(self) -> float:
        return self.side ** 3

    def scaled(self, factor: float) -> BoundingBox:
        return BoundingBox(half_width=self.half_width * factor)

    def random_points(self, rng: np.random.Generator, count: int) -> npt.NDArray[np.float64]:
        """Uniform points inside the box, shape (count, 3)."""
        return rng.uniform(-self.half_width, self.half_width, size=(count, 3))

    def grid(self, resolution: int) -> npt.NDArray[np.float64]:
        """Regular grid of resolution^3 points spanning the box, shape (n, 3)."""
        lin = np.linspace(-self.half_width, self.half_width, resolution)
        x, y, z = np.meshgrid(lin, lin, lin, indexing='ij')
        return np.column_stack((x.ravel(), y.ravel(), z.ravel()))


def estimate_ceiling(
    model: DensityModel,
    box: BoundingBox,
    resolution: int,
    safety_factor: float,
) -> float:
    """
    Rejection envelope M for `model` over `box`.

    Uses the model's analytic peak when it has one; otherwise the maximum over
    a coarse grid, inflated by `safety_factor`. Never returns less than
    MIN_CEILING.

    Args:
        model: Density to bound.
        box: Region the candidates are drawn from.
        resolution: Grid points per axis for the numerical estimate.
        safety_factor: Multiplier applied to the grid maximum.

    Returns:
        A strictly positive ceiling.
    """
    peak = model.peak_density()
    if peak is not None:
        return max(float(peak), MIN_CEILING)

    grid_max = float(np.max(model.evaluate(box.grid(resolution))))
    return max(grid_max * safety_factor, MIN_CEILING)
