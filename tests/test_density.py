import math

import numpy as np
import pytest

from orbitalcloud.diagnostics import verify_normalization
from orbitalcloud.errors import DensityAnomalyError
from orbitalcloud.model.elements import element_for
from orbitalcloud.model.orbital import Orbital
from orbitalcloud.physics.density import (
    ClosedForm1s,
    ClosedForm2s,
    DensityFamily,
    DensityModel,
    ExactHydrogenic2p,
    GaussianFallback,
    density,
    density_model_for,
    variant_for,
)

HYDROGEN = element_for(1)
CARBON = element_for(6)


@pytest.mark.parametrize("orbital, variant", [
    (Orbital(1, 0), ClosedForm1s),
    (Orbital(2, 0), ClosedForm2s),
    (Orbital(2, 1, 0), ExactHydrogenic2p),
    (Orbital(2, 1, -1), ExactHydrogenic2p),
    (Orbital(3, 0), GaussianFallback),
    (Orbital(3, 2, 1), GaussianFallback),
    (Orbital(5, 4, -4), GaussianFallback),
])
def test_variant_dispatch(orbital, variant):
    assert variant_for(orbital) is variant


def test_family_tags():
    assert density_model_for(Orbital(1, 0), HYDROGEN).family == DensityFamily.CLOSED_FORM_1S
    assert density_model_for(Orbital(2, 1, 1), CARBON).family == DensityFamily.EXACT_HYDROGENIC_2P
    fallback = density_model_for(Orbital(3, 2, 0), CARBON)
    assert fallback.family == DensityFamily.GAUSSIAN_FALLBACK
    assert not fallback.is_exact


def test_1s_value_at_origin_and_bohr_radius():
    peak = 1.0 / math.pi
    assert density(Orbital(1, 0), HYDROGEN, (0.0, 0.0, 0.0)) == pytest.approx(peak)
    assert density(Orbital(1, 0), HYDROGEN, (1.0, 0.0, 0.0)) == pytest.approx(peak * math.exp(-2.0))


def test_1s_scales_with_nuclear_charge():
    # a = 1/Z, so the peak grows as Z^3
    assert density(Orbital(1, 0), CARBON, (0.0, 0.0, 0.0)) == pytest.approx(216.0 / math.pi)


def test_2s_has_a_radial_node():
    assert density(Orbital(2, 0), HYDROGEN, (2.0, 0.0, 0.0)) == pytest.approx(0.0, abs=1e-15)
    assert density(Orbital(2, 0), HYDROGEN, (4.0, 0.0, 0.0)) > 0.0


@pytest.mark.parametrize("m, axis", [(1, 0), (-1, 1), (0, 2)])
@pytest.mark.parametrize("multiple", [1.0, 2.0, 3.0])
def test_2p_nodal_plane(m, axis, multiple):
    """Zero density on the plane perpendicular to the lobe axis, positive along it."""
    model = density_model_for(Orbital(2, 1, m), CARBON)
    r = multiple * model.characteristic_radius

    in_plane = np.zeros(3)
    in_plane[(axis + 1) % 3] = r
    on_axis = np.zeros(3)
    on_axis[axis] = r
    diagonal = np.zeros(3)
    diagonal[axis] = r / math.sqrt(2.0)
    diagonal[(axis + 2) % 3] = r / math.sqrt(2.0)

    assert model(in_plane) == 0.0
    assert model(on_axis) > 0.0
    assert model(on_axis) > model(diagonal) > 0.0
    assert model(-on_axis) == pytest.approx(model(on_axis))


def test_2p_peak_is_an_upper_bound():
    model = density_model_for(Orbital(2, 1, 0), HYDROGEN)
    z = np.linspace(-20.0, 20.0, 4001)
    points = np.column_stack((np.zeros_like(z), np.zeros_like(z), z))
    values = model.evaluate(points)
    assert values.max() <= model.peak_density() * (1.0 + 1e-12)
    assert values.max() == pytest.approx(model.peak_density(), rel=1e-4)


@pytest.mark.parametrize("orbital", [
    Orbital(1, 0), Orbital(2, 0), Orbital(2, 1, 1), Orbital(3, 1, 0), Orbital(4, 3, 2),
])
@pytest.mark.parametrize("z", [1, 6, 92])
def test_densities_are_finite_and_non_negative(orbital, z):
    model = density_model_for(orbital, element_for(z))
    rng = np.random.default_rng(0)
    scale = model.characteristic_radius
    points = np.vstack((np.zeros((1, 3)), rng.normal(scale=3.0 * scale, size=(2000, 3))))
    values = model.evaluate(points)
    assert values.shape == (2001,)
    assert np.all(np.isfinite(values))
    assert np.all(values >= 0.0)


@pytest.mark.parametrize("orbital", [
    Orbital(1, 0), Orbital(2, 0), Orbital(2, 1, -1), Orbital(3, 0), Orbital(3, 2, 1),
])
@pytest.mark.parametrize("z", [1, 6])
def test_radial_probability_is_normalized(orbital, z):
    model = density_model_for(orbital, element_for(z))
    assert verify_normalization(model) == pytest.approx(1.0, rel=1e-5)


@pytest.mark.parametrize("orbital, point", [
    (Orbital(1, 0), (1e160, 0.0, 0.0)),
    (Orbital(2, 0), (1e160, 0.0, 0.0)),
    (Orbital(2, 1, 0), (0.0, 0.0, 1e160)),
    (Orbital(2, 1, 1), (1e200, -1e200, 1e200)),
    (Orbital(3, 2, 1), (0.0, 1e160, 0.0)),
])
@pytest.mark.parametrize("z", [1, 92])
def test_far_points_have_zero_density(orbital, point, z):
    assert density(orbital, element_for(z), point) == 0.0


def test_2p_tail_is_finite_just_before_underflow():
    model = density_model_for(Orbital(2, 1, 0), HYDROGEN)
    value = model((0.0, 0.0, 700.0))
    assert 0.0 < value < model.peak_density()


def test_gaussian_fallback_peaks_at_characteristic_radius():
    model = density_model_for(Orbital(3, 2, 0), HYDROGEN)
    assert model.center == pytest.approx(9.0)
    assert model.sigma == pytest.approx(4.5)
    assert model((9.0, 0.0, 0.0)) == pytest.approx(model.peak_density())
    assert model((0.0, 9.0, 0.0)) == pytest.approx(model((0.0, 0.0, -9.0)))


def test_single_point_and_batch_shapes():
    model = density_model_for(Orbital(1, 0), HYDROGEN)
    assert model.evaluate((0.5, 0.0, 0.0)).shape == (1,)
    assert model.evaluate(np.zeros((4, 3))).shape == (4,)
    with pytest.raises(ValueError):
        model.evaluate(np.zeros((4, 2)))


class BrokenDensity(DensityModel):
    NAME = "broken"

    @property
    def characteristic_radius(self):
        return 1.0

    def _evaluate(self, points):
        values = np.ones(points.shape[0])
        values[0] = np.nan
        return values


def test_anomalous_density_raises():
    with pytest.raises(DensityAnomalyError, match="broken"):
        BrokenDensity().evaluate(np.zeros((3, 3)))
