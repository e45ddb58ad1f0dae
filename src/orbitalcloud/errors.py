"""Exception types raised by the sampling core."""


class OrbitalValidationError(ValueError):
    """
    A request, orbital or element was built from out-of-range values.

    Raised at construction time; no partial result is ever produced.
    """


class DensityAnomalyError(ArithmeticError):
    """
    A density branch produced NaN, infinity or a negative value.

    This is a defect in a density formula, never a property of the input,
    so it is propagated instead of being filtered.
    """
