import numpy as np
import pytest

from orbitalcloud.diagnostics import (
    axis_spread,
    mean_radius,
    plot_radial_distribution,
    radial_distances,
)
from orbitalcloud.model.elements import element_for
from orbitalcloud.model.orbital import Orbital
from orbitalcloud.model.request import SampleRequest, SamplingMethod
from orbitalcloud.physics.density import density_model_for
from orbitalcloud.sampling.assembly import assemble_result
from orbitalcloud.sampling.sampler import sample_orbital


def _result_with_fallbacks():
    positions = np.array([[1.0, 0.0, 0.0], [0.0, 2.0, 0.0], [0.0, 0.0, 10.0]])
    weights = np.array([0.5, 0.5, 0.0])
    return assemble_result(positions, weights, sample_count=3, accepted=2,
                           method=SamplingMethod.REJECTION, box_exhausted=True)


def test_fallback_vertices_are_excluded_by_default():
    result = _result_with_fallbacks()
    np.testing.assert_allclose(radial_distances(result), [1.0, 2.0])
    assert mean_radius(result) == pytest.approx(1.5)
    assert mean_radius(result, include_fallback=True) == pytest.approx(13.0 / 3.0)


def test_radial_distances_relative_to_origin():
    request = SampleRequest(1, 1, 0, 0, 100, seed=8)
    base = sample_orbital(request)
    moved = sample_orbital(request, origin=(3.0, 3.0, 3.0))
    np.testing.assert_allclose(radial_distances(moved, origin=(3.0, 3.0, 3.0)), radial_distances(base))


def test_axis_spread():
    result = _result_with_fallbacks()
    np.testing.assert_allclose(axis_spread(result), [0.5, 1.0, 0.0])


def test_plots_render():
    model = density_model_for(Orbital(2, 1, 0), element_for(1))
    result = sample_orbital(SampleRequest(1, 2, 1, 0, 500, seed=2))
    model.plot()
    plot_radial_distribution(result, model)
