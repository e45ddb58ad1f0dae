"""
Element Table
=============
Static per-atomic-number constants used to scale the density domain.

The table is built once at import time and exposed through a read-only
mapping, so any number of sampling threads can read it without locking.
Atomic numbers beyond the table still resolve to a synthesized record: every
Z from 1 to MAX_ATOMIC_NUMBER is a valid request.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from types import MappingProxyType
from typing import Mapping, Optional

from orbitalcloud.errors import OrbitalValidationError
from orbitalcloud.utils import femtometer_to_bohr, is_strict_int

logger = logging.getLogger(__name__)

# Empirical nuclear radius r = r0 * A^(1/3)
NUCLEAR_RADIUS_R0_FM = 1.2

# Mass number estimate for elements outside the table
SYNTHETIC_MASS_PER_PROTON = 2.5

# Largest accepted Z; keeps a0 / Z and the density prefactors well inside float range
MAX_ATOMIC_NUMBER = 1000


def validate_atomic_number(atomic_number: int) -> None:
    """Raise OrbitalValidationError unless 1 <= Z <= MAX_ATOMIC_NUMBER."""
    if not is_strict_int(atomic_number) or atomic_number < 1:
        raise OrbitalValidationError(
            f"Atomic number must be a positive integer, got {atomic_number!r}"
        )
    if atomic_number > MAX_ATOMIC_NUMBER:
        raise OrbitalValidationError(
            f"Atomic number must not exceed {MAX_ATOMIC_NUMBER}, got {atomic_number}"
        )


@dataclass(frozen=True)
class Element:
    """
    Immutable record for one chemical element.

    Lengths are in Bohr radii.
    """
    atomic_number: int
    symbol: str
    name: str
    standard_atomic_weight: Optional[float] = None

    def __post_init__(self) -> None:
        validate_atomic_number(self.atomic_number)

    @property
    def mass_number(self) -> int:
        """Nucleon count of the most common isotope (approximated)."""
        if self.standard_atomic_weight is None:
            return max(self.atomic_number, round(SYNTHETIC_MASS_PER_PROTON * self.atomic_number))
        return max(self.atomic_number, round(self.standard_atomic_weight))

    @property
    def default_neutrons(self) -> int:
        return self.mass_number - self.atomic_number

    @property
    def effective_bohr_radius(self) -> float:
        """Hydrogen-like length scale a0 / Z."""
        return 1.0 / self.atomic_number

    @property
    def nuclear_radius(self) -> float:
        """Approximate nuclear radius in Bohr radii."""
        return femtometer_to_bohr(NUCLEAR_RADIUS_R0_FM * self.mass_number ** (1.0 / 3.0))

    def __str__(self) -> str:
        return f"{self.name} ({self.symbol}, Z={self.atomic_number})"


# (symbol, name, standard atomic weight); index + 1 is the atomic number
_ELEMENT_DATA: tuple[tuple[str, str, float], ...] = (
    ("H", "Hydrogen", 1.008), ("He", "Helium", 4.0026),
    ("Li", "Lithium", 6.94), ("Be", "Beryllium", 9.0122),
    ("B", "Boron", 10.81), ("C", "Carbon", 12.011),
    ("N", "Nitrogen", 14.007), ("O", "Oxygen", 15.999),
    ("F", "Fluorine", 18.998), ("Ne", "Neon", 20.180),
    ("Na", "Sodium", 22.990), ("Mg", "Magnesium", 24.305),
    ("Al", "Aluminium", 26.982), ("Si", "Silicon", 28.085),
    ("P", "Phosphorus", 30.974), ("S", "Sulfur", 32.06),
    ("Cl", "Chlorine", 35.45), ("Ar", "Argon", 39.948),
    ("K", "Potassium", 39.098), ("Ca", "Calcium", 40.078),
    ("Sc", "Scandium", 44.956), ("Ti", "Titanium", 47.867),
    ("V", "Vanadium", 50.942), ("Cr", "Chromium", 51.996),
    ("Mn", "Manganese", 54.938), ("Fe", "Iron", 55.845),
    ("Co", "Cobalt", 58.933), ("Ni", "Nickel", 58.693),
    ("Cu", "Copper", 63.546), ("Zn", "Zinc", 65.38),
    ("Ga", "Gallium", 69.723), ("Ge", "Germanium", 72.630),
    ("As", "Arsenic", 74.922), ("Se", "Selenium", 78.971),
    ("Br", "Bromine", 79.904), ("Kr", "Krypton", 83.798),
    ("Rb", "Rubidium", 85.468), ("Sr", "Strontium", 87.62),
    ("Y", "Yttrium", 88.906), ("Zr", "Zirconium", 91.224),
    ("Nb", "Niobium", 92.906), ("Mo", "Molybdenum", 95.95),
    ("Tc", "Technetium", 98.0), ("Ru", "Ruthenium", 101.07),
    ("Rh", "Rhodium", 102.91), ("Pd", "Palladium", 106.42),
    ("Ag", "Silver", 107.87), ("Cd", "Cadmium", 112.41),
    ("In", "Indium", 114.82), ("Sn", "Tin", 118.71),
    ("Sb", "Antimony", 121.76), ("Te", "Tellurium", 127.60),
    ("I", "Iodine", 126.90), ("Xe", "Xenon", 131.29),
    ("Cs", "Caesium", 132.91), ("Ba", "Barium", 137.33),
    ("La", "Lanthanum", 138.91), ("Ce", "Cerium", 140.12),
    ("Pr", "Praseodymium", 140.91), ("Nd", "Neodymium", 144.24),
    ("Pm", "Promethium", 145.0), ("Sm", "Samarium", 150.36),
    ("Eu", "Europium", 151.96), ("Gd", "Gadolinium", 157.25),
    ("Tb", "Terbium", 158.93), ("Dy", "Dysprosium", 162.50),
    ("Ho", "Holmium", 164.93), ("Er", "Erbium", 167.26),
    ("Tm", "Thulium", 168.93), ("Yb", "Ytterbium", 173.05),
    ("Lu", "Lutetium", 174.97), ("Hf", "Hafnium", 178.49),
    ("Ta", "Tantalum", 180.95), ("W", "Tungsten", 183.84),
    ("Re", "Rhenium", 186.21), ("Os", "Osmium", 190.23),
    ("Ir", "Iridium", 192.22), ("Pt", "Platinum", 195.08),
    ("Au", "Gold", 196.97), ("Hg", "Mercury", 200.59),
    ("Tl", "Thallium", 204.38), ("Pb", "Lead", 207.2),
    ("Bi", "Bismuth", 208.98), ("Po", "Polonium", 209.0),
    ("At", "Astatine", 210.0), ("Rn", "Radon", 222.0),
    ("Fr", "Francium", 223.0), ("Ra", "Radium", 226.0),
    ("Ac", "Actinium", 227.0), ("Th", "Thorium", 232.04),
    ("Pa", "Protactinium", 231.04), ("U", "Uranium", 238.03),
    ("Np", "Neptunium", 237.0), ("Pu", "Plutonium", 244.0),
    ("Am", "Americium", 243.0), ("Cm", "Curium", 247.0),
    ("Bk", "Berkelium", 247.0), ("Cf", "Californium", 251.0),
    ("Es", "Einsteinium", 252.0), ("Fm", "Fermium", 257.0),
    ("Md", "Mendelevium", 258.0), ("No", "Nobelium", 259.0),
    ("Lr", "Lawrencium", 266.0), ("Rf", "Rutherfordium", 267.0),
    ("Db", "Dubnium", 268.0), ("Sg", "Seaborgium", 269.0),
    ("Bh", "Bohrium", 270.0), ("Hs", "Hassium", 277.0),
    ("Mt", "Meitnerium", 278.0), ("Ds", "Darmstadtium", 281.0),
    ("Rg", "Roentgenium", 282.0), ("Cn", "Copernicium", 285.0),
    ("Nh", "Nihonium", 286.0), ("Fl", "Flerovium", 289.0),
    ("Mc", "Moscovium", 290.0), ("Lv", "Livermorium", 293.0),
    ("Ts", "Tennessine", 294.0), ("Og", "Oganesson", 294.0),
)

ELEMENTS: Mapping[int, Element] = MappingProxyType({
    z: Element(atomic_number=z, symbol=symbol, name=name, standard_atomic_weight=weight)
    for z, (symbol, name, weight) in enumerate(_ELEMENT_DATA, start=1)
})

_BY_SYMBOL: Mapping[str, Element] = MappingProxyType({
    element.symbol.lower(): element for element in ELEMENTS.values()
})


def element_for(atomic_number: int) -> Element:
    """
    Look up an element by atomic number.

    Args:
        atomic_number: 1 <= Z <= MAX_ATOMIC_NUMBER.

    Raises:
        OrbitalValidationError: If Z is not an integer in that range.

    Returns:
        The tabulated element, or a synthesized one for Z past the table.
    """
    validate_atomic_number(atomic_number)
    z = int(atomic_number)
    element = ELEMENTS.get(z)
    if element is None:
        logger.debug(f"Z={z} is outside the element table, synthesizing a record.")
        element = Element(atomic_number=z, symbol=f"Z{z}", name=f"Element {z}")
    return element


def element_by_symbol(symbol: str) -> Element:
    """Look up a tabulated element by its chemical symbol (case-insensitive)."""
    try:
        return _BY_SYMBOL[symbol.strip().lower()]
    except KeyError:
        raise OrbitalValidationError(f"Unknown element symbol: {symbol!r}") from None


def hydrogen() -> Element:
    return ELEMENTS[1]
