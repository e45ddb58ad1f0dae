import pytest

from orbitalcloud.errors import OrbitalValidationError
from orbitalcloud.model.elements import element_for
from orbitalcloud.model.orbital import Orbital, validate_quantum_numbers


@pytest.mark.parametrize("n, l, m", [(1, 0, 0), (2, 1, -1), (3, 2, 2), (7, 6, -6)])
def test_valid_quantum_numbers(n, l, m):
    orbital = Orbital(n, l, m)
    assert (orbital.n, orbital.l, orbital.m) == (n, l, m)


@pytest.mark.parametrize("n, l, m", [
    (0, 0, 0),
    (-1, 0, 0),
    (2, 2, 0),
    (1, -1, 0),
    (2, 1, 2),
    (3, 1, -2),
])
def test_invalid_quantum_numbers_raise(n, l, m):
    with pytest.raises(OrbitalValidationError):
        Orbital(n, l, m)


@pytest.mark.parametrize("bad", [True, 1.0, "1", None])
def test_non_integer_quantum_numbers_raise(bad):
    with pytest.raises(OrbitalValidationError):
        validate_quantum_numbers(bad, 0, 0)


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        Orbital(2, 2, 0)


@pytest.mark.parametrize("orbital, label", [
    (Orbital(1, 0), "1s"),
    (Orbital(2, 0), "2s"),
    (Orbital(2, 1, 0), "2pz"),
    (Orbital(2, 1, 1), "2px"),
    (Orbital(2, 1, -1), "2py"),
    (Orbital(3, 2, -2), "3dxy"),
    (Orbital(4, 3, -3), "4f(m=-3)"),
])
def test_labels(orbital, label):
    assert orbital.label == label
    assert str(orbital) == label


def test_ground_state():
    assert Orbital.ground_state() == Orbital(1, 0, 0)


def test_characteristic_radius_scales_with_n_squared_over_z():
    carbon = element_for(6)
    assert Orbital(2, 1, 1).characteristic_radius(carbon) == pytest.approx(4.0 / 6.0)
    assert Orbital(1, 0).characteristic_radius(element_for(1)) == pytest.approx(1.0)
