"""
Vertex Assembly
===============
Turns the raw arrays from either sampling path into the final SampleResult.

Responsibilities:
    - enforce the fixed-length contract (exactly sample_count vertices),
    - clamp weights into [0, 1],
    - move the cloud so the nucleus sits at the renderer's scene coordinate,
    - freeze the arrays so results can be shared between threads.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np

from orbitalcloud.model.request import SampleResult, SamplingMethod

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


def assemble_result(
    positions: npt.NDArray[np.float64],
    weights: npt.NDArray[np.float64],
    *,
    sample_count: int,
    accepted: int,
    method: SamplingMethod,
    box_exhausted: bool = False,
    expansions: int = 0,
    draws: int = 0,
    ceiling: float = 0.0,
    origin: Optional[Sequence[float]] = None,
) -> SampleResult:
    """
    Build a SampleResult from sampler output.

    Args:
        positions: (N, 3) positions in Bohr radii, nucleus at the origin.
        weights: (N,) raw weights.
        sample_count: Requested vertex count; N must match.
        accepted: Number of physically sampled vertices (the leading ones).
        method: Which path produced the samples.
        box_exhausted: Whether fallback vertices were appended.
        expansions: Box expansions performed.
        draws: Candidate draws performed.
        ceiling: Density envelope used for weighting.
        origin: Scene coordinate of the nucleus; positions are shifted by it.

    Raises:
        ValueError: If shapes or counts break the output contract.

    Returns:
        Frozen SampleResult.
    """
    positions = np.array(positions, dtype=np.float64)
    weights = np.array(weights, dtype=np.float64)

    if positions.ndim != 2 or positions.shape[1] != 3:
        raise ValueError(f"Positions must have shape (n, 3), got {positions.shape}")
    if weights.shape != (positions.shape[0],):
        raise ValueError(f"Weights shape {weights.shape} does not match {positions.shape[0]} positions")
    if positions.shape[0] != sample_count:
        raise ValueError(f"Expected {sample_count} vertices, sampler produced {positions.shape[0]}")
    if not 0 <= accepted <= sample_count:
        raise ValueError(f"Accepted count {accepted} outside [0, {sample_count}]")

    np.clip(weights, 0.0, 1.0, out=weights)

    if origin is not None:
        positions += np.asarray(origin, dtype=np.float64).reshape(3)

    positions.setflags(write=False)
    weights.setflags(write=False)

    return SampleResult(
        positions=positions,
        weights=weights,
        box_exhausted=box_exhausted,
        method=method,
        accepted=accepted,
        expansions=expansions,
        draws=draws,
        ceiling=ceiling,
    )
