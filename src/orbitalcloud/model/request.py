"""
Request & Result Records
========================
Value types exchanged across the core's boundary.

Classes:
    SampleRequest: Validated (element, orbital, sample count, seed) input.
    Vertex: One weighted point.
    SampleResult: Fixed-length weighted point set plus diagnostics.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Iterator, Sequence

import numpy as np

from orbitalcloud.errors import OrbitalValidationError
from orbitalcloud.model.elements import Element, element_for, validate_atomic_number
from orbitalcloud.model.orbital import Orbital, validate_quantum_numbers
from orbitalcloud.utils import is_strict_int

if TYPE_CHECKING:
    import numpy.typing as npt
    import pyvista as pv


class SamplingMethod(StrEnum):
    CLOSED_FORM = "closed_form"
    REJECTION = "rejection"


@dataclass(frozen=True)
class SampleRequest:
    """
    One resample trigger. All fields are validated on construction.

    Raises:
        OrbitalValidationError: For Z outside 1..MAX_ATOMIC_NUMBER,
            sample_count < 1, non-integer fields, or quantum numbers outside
            their physical range.
    """
    atomic_number: int
    n: int
    l: int
    m: int
    sample_count: int
    seed: int = 0

    def __post_init__(self) -> None:
        validate_atomic_number(self.atomic_number)
        if not is_strict_int(self.sample_count) or self.sample_count < 1:
            raise OrbitalValidationError(
                f"Sample count must be a positive integer, got {self.sample_count!r}"
            )
        if not is_strict_int(self.seed):
            raise OrbitalValidationError(f"Seed must be an integer, got {self.seed!r}")
        validate_quantum_numbers(self.n, self.l, self.m)

    @classmethod
    def for_orbital(
        cls,
        element: Element,
        orbital: Orbital,
        sample_count: int,
        seed: int = 0,
    ) -> SampleRequest:
        return cls(element.atomic_number, orbital.n, orbital.l, orbital.m, sample_count, seed)

    @property
    def orbital(self) -> Orbital:
        return Orbital(self.n, self.l, self.m)

    @property
    def element(self) -> Element:
        return element_for(self.atomic_number)


@dataclass(frozen=True)
class Vertex:
    """A point in Bohr radii and its opacity hint. weight == 0 marks a fallback."""
    position: tuple[float, float, float]
    weight: float

    @property
    def is_fallback(self) -> bool:
        return self.weight == 0.0


@dataclass(frozen=True, eq=False)
class SampleResult:
    """
    Ordered weighted point set.

    Vertices appear in acceptance order; fallback vertices (weight 0) are
    appended at the end. Arrays are read-only.

    Attributes:
        positions: (N, 3) float64 positions in Bohr radii.
        weights: (N,) float64 weights in [0, 1].
        box_exhausted: True when adaptive expansion ran out and fallback
            vertices were appended.
        method: Which sampling path produced the points.
        accepted: Number of physically sampled (non-fallback) vertices.
        expansions: Bounding-box expansions performed (rejection path).
        draws: Candidate draws performed (rejection path).
        ceiling: Density envelope used for weighting.
    """
    positions: npt.NDArray[np.float64]
    weights: npt.NDArray[np.float64]
    box_exhausted: bool
    method: SamplingMethod
    accepted: int
    expansions: int = 0
    draws: int = 0
    ceiling: float = 0.0

    def __len__(self) -> int:
        return int(self.positions.shape[0])

    def __iter__(self) -> Iterator[Vertex]:
        for position, weight in zip(self.positions, self.weights):
            yield Vertex(position=(float(position[0]), float(position[1]), float(position[2])),
                         weight=float(weight))

    def __getitem__(self, index: int) -> Vertex:
        position = self.positions[index]
        return Vertex(position=(float(position[0]), float(position[1]), float(position[2])),
                      weight=float(self.weights[index]))

    @property
    def vertices(self) -> list[Vertex]:
        return list(self)

    @property
    def fallback_count(self) -> int:
        return len(self) - self.accepted

    def same_as(self, other: SampleResult) -> bool:
        """Exact (bitwise) equality of points, weights and the exhaustion flag."""
        return (
            self.box_exhausted == other.box_exhausted
            and np.array_equal(self.positions, other.positions)
            and np.array_equal(self.weights, other.weights)
        )

    def translated(self, offset: Sequence[float]) -> SampleResult:
        """Return a copy with every position shifted by `offset`."""
        shift = np.asarray(offset, dtype=np.float64).reshape(3)
        positions = self.positions + shift
        positions.setflags(write=False)
        return dataclasses.replace(self, positions=positions)

    def as_interleaved(self) -> npt.NDArray[np.float32]:
        """(N, 4) float32 buffer laid out as [x, y, z, weight] per vertex."""
        buffer = np.empty((len(self), 4), dtype=np.float32)
        buffer[:, :3] = self.positions
        buffer[:, 3] = self.weights
        return buffer

    def to_polydata(self) -> pv.PolyData:
        """Point cloud for pyvista consumers, with weights as point data."""
        import pyvista as pv

        cloud = pv.PolyData(np.array(self.positions, dtype=np.float64))
        cloud.point_data["weight"] = np.array(self.weights, dtype=np.float64)
        return cloud
