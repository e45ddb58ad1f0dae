"""
Nucleus Layout
==============
Places the protons and neutrons of an element on concentric Fibonacci spheres.

The layout is purely presentational (a stylised nucleus sitting at the centre
of the cloud); the density model only uses the nuclear radius.
"""
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

    from orbitalcloud.model.elements import Element

PROTON_MASS_AMU = 1.007_276
NEUTRON_MASS_AMU = 1.008_665

# Protons sit on an inner shell, neutrons on the outer one
PROTON_SHELL_FRACTION = 0.6


def fibonacci_sphere(count: int, radius: float) -> npt.NDArray[np.float64]:
    """
    Spread `count` points nearly uniformly over a sphere.

    Args:
        count: Number of points.
        radius: Sphere radius.

    Returns:
        Array of shape (count, 3). A single point sits at the origin.
    """
    if count <= 0:
        return np.empty((0, 3), dtype=np.float64)
    if count == 1:
        return np.zeros((1, 3), dtype=np.float64)

    golden_angle = math.pi * (3.0 - math.sqrt(5.0))
    i = np.arange(count, dtype=np.float64)
    y = 1.0 - 2.0 * (i + 0.5) / count
    radius_xy = np.sqrt(np.maximum(1.0 - y * y, 0.0))
    theta = golden_angle * i
    points = np.column_stack((radius_xy * np.cos(theta), y, radius_xy * np.sin(theta)))
    return points * radius


@dataclass(frozen=True, eq=False)
class Nucleus:
    """Proton and neutron positions (Bohr radii) for one element."""
    protons: npt.NDArray[np.float64]
    neutrons: npt.NDArray[np.float64]
    radius: float

    @property
    def proton_count(self) -> int:
        return int(self.protons.shape[0])

    @property
    def neutron_count(self) -> int:
        return int(self.neutrons.shape[0])

    @property
    def total_mass(self) -> float:
        """Sum of nucleon masses in atomic mass units."""
        return self.proton_count * PROTON_MASS_AMU + self.neutron_count * NEUTRON_MASS_AMU


def build_nucleus(element: Element) -> Nucleus:
    """Lay out the nucleons of `element` around the origin."""
    radius = element.nuclear_radius
    protons = fibonacci_sphere(element.atomic_number, radius * PROTON_SHELL_FRACTION)
    neutrons = fibonacci_sphere(element.default_neutrons, radius)
    protons.setflags(write=False)
    neutrons.setflags(write=False)
    return Nucleus(protons=protons, neutrons=neutrons, radius=radius)
