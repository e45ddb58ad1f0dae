"""
Orbital Descriptor
==================
Identifies a hydrogen-like quantum state (n, l, m).

Classes:
    Orbital: Validated immutable (n, l, m) tuple.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from orbitalcloud.errors import OrbitalValidationError
from orbitalcloud.utils import is_strict_int

if TYPE_CHECKING:
    from orbitalcloud.model.elements import Element

SUBSHELL_LETTERS = "spdfghiklmnoqrtuvwxyz"

# Real p orbitals: m=0 -> z, m=+1 -> x, m=-1 -> y
P_AXIS_LABELS = {0: "z", 1: "x", -1: "y"}
D_AXIS_LABELS = {0: "z²", 1: "xz", -1: "yz", 2: "x²-y²", -2: "xy"}


def validate_quantum_numbers(n: int, l: int, m: int) -> None:
    """
    Validate hydrogen-like quantum numbers.

    Raises:
        OrbitalValidationError: If n < 1, l is outside [0, n-1], |m| > l, or
            any value is not an integer.
    """
    for label, value in (("n", n), ("l", l), ("m", m)):
        if not is_strict_int(value):
            raise OrbitalValidationError(
                f"Quantum number {label} must be an integer, got {value!r}"
            )
    if n < 1:
        raise OrbitalValidationError(f"Principal quantum number n must be >= 1, got n={n}")
    if l < 0 or l >= n:
        raise OrbitalValidationError(
            f"Azimuthal quantum number must satisfy 0 <= l < n, got l={l}, n={n}"
        )
    if abs(m) > l:
        raise OrbitalValidationError(
            f"Magnetic quantum number must satisfy |m| <= l, got m={m}, l={l}"
        )


@dataclass(frozen=True)
class Orbital:
    """A quantum state (n, l, m). Constructing an invalid one raises."""
    n: int
    l: int
    m: int = 0

    def __post_init__(self) -> None:
        validate_quantum_numbers(self.n, self.l, self.m)

    @classmethod
    def ground_state(cls) -> Orbital:
        return cls(1, 0, 0)

    @property
    def subshell_letter(self) -> str:
        if self.l < len(SUBSHELL_LETTERS):
            return SUBSHELL_LETTERS[self.l]
        return f"[l={self.l}]"

    @property
    def label(self) -> str:
        """Human-readable name, e.g. '1s', '2px', '3dxy', '4f(m=-3)'."""
        base = f"{self.n}{self.subshell_letter}"
        if self.l == 0:
            return base
        if self.l == 1:
            return base + P_AXIS_LABELS[self.m]
        if self.l == 2:
            return base + D_AXIS_LABELS[self.m]
        return f"{base}(m={self.m})"

    def characteristic_radius(self, element: Element) -> float:
        """Hydrogenic length scale n² a0 / Z, in Bohr radii."""
        return self.n ** 2 * element.effective_bohr_radius

    def __str__(self) -> str:
        return self.label
