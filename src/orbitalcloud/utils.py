from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


BOHR_RADIUS_ANGSTROM = 0.529_177_210_903
FEMTOMETER_IN_BOHR = 1.0e-5 / BOHR_RADIUS_ANGSTROM

# Mask used to fold arbitrary Python ints into a 64-bit seed
SEED_MASK = 0xFFFF_FFFF_FFFF_FFFF


def bohr_to_angstrom(value: float | npt.NDArray[np.float64]) -> float | npt.NDArray[np.float64]:
    """Convert Bohr radii to Ångström."""
    return value * BOHR_RADIUS_ANGSTROM


def femtometer_to_bohr(value: float | npt.NDArray[np.float64]) -> float | npt.NDArray[np.float64]:
    """Convert femtometers to Bohr radii."""
    return value * FEMTOMETER_IN_BOHR


def fold_seed(seed: int) -> int:
    """
    Map any integer seed onto the unsigned 64-bit range.

    Negative seeds wrap around (two's complement), so -1 and 2**64 - 1 select
    the same stream.
    """
    return int(seed) & SEED_MASK


def is_strict_int(value: object) -> bool:
    """True for Python/NumPy integers, False for bools and everything else."""
    return isinstance(value, (int, np.integer)) and not isinstance(value, (bool, np.bool_))
