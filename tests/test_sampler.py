import logging

import numpy as np
import pytest

from orbitalcloud.config import DEFAULT_SETTINGS
from orbitalcloud.diagnostics import axis_spread, mean_radius
from orbitalcloud.errors import OrbitalValidationError
from orbitalcloud.model.elements import element_for
from orbitalcloud.model.orbital import Orbital
from orbitalcloud.model.request import SampleRequest, SamplingMethod, Vertex
from orbitalcloud.physics.density import DensityModel, density_model_for
from orbitalcloud.sampling.sampler import OrbitalSampler, make_rng, sample_orbital


def test_hydrogen_ground_state():
    """H 1s, 1000 samples, seed 42."""
    request = SampleRequest(atomic_number=1, n=1, l=0, m=0, sample_count=1000, seed=42)
    result = sample_orbital(request)

    assert len(result) == 1000
    assert result.method == SamplingMethod.CLOSED_FORM
    assert not result.box_exhausted
    assert np.all((result.weights >= 0.0) & (result.weights <= 1.0))
    assert mean_radius(result) == pytest.approx(1.5, rel=0.1)
    assert result.same_as(sample_orbital(request))


def test_carbon_2px_lobes():
    """C 2p m=+1, 5000 samples, seed 7: lobes along x, almost nothing near x = 0."""
    request = SampleRequest(atomic_number=6, n=2, l=1, m=1, sample_count=5000, seed=7)
    result = sample_orbital(request)

    assert len(result) == 5000
    assert result.method == SamplingMethod.REJECTION
    assert not result.box_exhausted
    assert result.fallback_count == 0

    spread = axis_spread(result)
    assert spread[0] > spread[1]
    assert spread[0] > spread[2]

    a = element_for(6).effective_bohr_radius
    near_plane = np.abs(result.positions[:, 0]) < 0.25 * a
    near_other_plane = np.abs(result.positions[:, 1]) < 0.25 * a
    assert near_plane.mean() < 0.01
    assert near_plane.sum() < near_other_plane.sum()


def test_invalid_subshell_is_rejected():
    with pytest.raises(OrbitalValidationError):
        SampleRequest(atomic_number=1, n=2, l=2, m=0, sample_count=100, seed=1)


@pytest.mark.parametrize("kwargs", [
    dict(atomic_number=0, n=1, l=0, m=0, sample_count=10),
    dict(atomic_number=10 ** 400, n=1, l=0, m=0, sample_count=10),
    dict(atomic_number=10 ** 70, n=2, l=1, m=0, sample_count=10),
    dict(atomic_number=1, n=1, l=0, m=0, sample_count=0),
    dict(atomic_number=1, n=1, l=0, m=0, sample_count=10, seed=1.5),
    dict(atomic_number=1, n=2, l=1, m=2, sample_count=10),
])
def test_invalid_requests_are_rejected(kwargs):
    with pytest.raises(OrbitalValidationError):
        SampleRequest(**kwargs)


@pytest.mark.parametrize("n, l, m", [(1, 0, 0), (2, 1, -1), (3, 1, 1)])
def test_same_request_gives_identical_results(n, l, m, fast_settings):
    request = SampleRequest(atomic_number=8, n=n, l=l, m=m, sample_count=300, seed=123)
    sampler = OrbitalSampler(fast_settings)
    assert sampler.sample(request).same_as(sampler.sample(request))


def test_different_seeds_differ():
    first = sample_orbital(SampleRequest(1, 1, 0, 0, 200, seed=1))
    second = sample_orbital(SampleRequest(1, 1, 0, 0, 200, seed=2))
    assert not first.same_as(second)


def test_negative_seed_wraps_to_64_bits():
    first = sample_orbital(SampleRequest(1, 1, 0, 0, 100, seed=-1))
    second = sample_orbital(SampleRequest(1, 1, 0, 0, 100, seed=2 ** 64 - 1))
    assert first.same_as(second)
    assert make_rng(-1).random() == make_rng(2 ** 64 - 1).random()


@pytest.mark.parametrize("count", [1, 7, 1024])
def test_fallback_orbital_has_exact_count(count, fast_settings):
    result = OrbitalSampler(fast_settings).sample(SampleRequest(2, 3, 2, 1, count, seed=0))
    assert len(result) == count
    assert result.method == SamplingMethod.REJECTION
    assert np.all((result.weights >= 0.0) & (result.weights <= 1.0))


def test_origin_translates_the_cloud():
    request = SampleRequest(1, 2, 0, 0, 50, seed=3)
    base = sample_orbital(request)
    moved = sample_orbital(request, origin=(1.0, -2.0, 3.0))
    np.testing.assert_allclose(moved.positions, base.positions + np.array([1.0, -2.0, 3.0]))
    np.testing.assert_array_equal(moved.weights, base.weights)


def test_result_is_read_only():
    result = sample_orbital(SampleRequest(1, 1, 0, 0, 10, seed=0))
    with pytest.raises(ValueError):
        result.positions[0, 0] = 1.0
    with pytest.raises(ValueError):
        result.weights[0] = 0.5


def test_result_views():
    result = sample_orbital(SampleRequest(1, 1, 0, 0, 20, seed=0))
    vertices = result.vertices
    assert len(vertices) == 20
    assert isinstance(vertices[0], Vertex)
    assert vertices[0] == result[0]
    assert not vertices[0].is_fallback

    buffer = result.as_interleaved()
    assert buffer.shape == (20, 4)
    assert buffer.dtype == np.float32
    np.testing.assert_allclose(buffer[:, 3], result.weights, rtol=1e-6)


def test_request_helpers():
    request = SampleRequest.for_orbital(element_for(6), Orbital(2, 1, -1), sample_count=10, seed=4)
    assert request.orbital == Orbital(2, 1, -1)
    assert request.element.symbol == "C"
    assert request.seed == 4


def test_translated_copy():
    result = sample_orbital(SampleRequest(1, 1, 0, 0, 10, seed=0))
    moved = result.translated((0.0, 0.0, 5.0))
    np.testing.assert_allclose(moved.positions[:, 2], result.positions[:, 2] + 5.0)
    assert moved.accepted == result.accepted
    assert not moved.positions.flags.writeable


class PinholeDensity(DensityModel):
    """Unit density in a ball far too small for any draw to land in."""
    NAME = "pinhole"

    @property
    def characteristic_radius(self) -> float:
        return 1.0

    def _evaluate(self, points):
        inside = np.linalg.norm(points - 0.5, axis=1) <= 1e-3
        return inside.astype(np.float64)

    def peak_density(self) -> float:
        return 1.0


def test_unreachable_density_exhausts_all_expansions(caplog):
    with caplog.at_level(logging.WARNING, logger="orbitalcloud"):
        result = OrbitalSampler().sample_model(PinholeDensity(), 100, seed=11)

    assert len(result) == 100
    assert result.method == SamplingMethod.REJECTION
    assert result.box_exhausted
    assert result.expansions == DEFAULT_SETTINGS.max_expansions == 4
    assert result.weights[-1] == 0.0
    assert result.fallback_count == 100 - result.accepted
    assert "filling remainder" in caplog.text


def test_sample_model_matches_request_path():
    request = SampleRequest(1, 2, 0, 0, 50, seed=3)
    model = density_model_for(request.orbital, request.element)
    assert OrbitalSampler().sample_model(model, 50, seed=3).same_as(sample_orbital(request))
