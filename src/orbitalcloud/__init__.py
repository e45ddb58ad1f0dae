"""
orbitalcloud
============
Probability-density model of atomic orbitals and a deterministic sampler that
turns it into weighted point clouds for rendering.

Typical use:
    >>> from orbitalcloud import SampleRequest, sample_orbital
    >>> result = sample_orbital(SampleRequest(atomic_number=6, n=2, l=1, m=1, sample_count=5000, seed=7))
    >>> len(result)
    5000
"""
__version__ = "0.1.0"

from orbitalcloud.config import DEFAULT_SETTINGS, SamplerSettings
from orbitalcloud.errors import DensityAnomalyError, OrbitalValidationError
from orbitalcloud.model.elements import Element, element_for
from orbitalcloud.model.nucleus import Nucleus, build_nucleus
from orbitalcloud.model.orbital import Orbital
from orbitalcloud.model.request import SampleRequest, SampleResult, SamplingMethod, Vertex
from orbitalcloud.physics.density import DensityFamily, density, density_model_for
from orbitalcloud.sampling.sampler import OrbitalSampler, sample_orbital
from orbitalcloud.sampling.workers import ResampleWorker, sample_many

__all__ = [
    "DEFAULT_SETTINGS",
    "DensityAnomalyError",
    "DensityFamily",
    "Element",
    "Nucleus",
    "Orbital",
    "OrbitalSampler",
    "OrbitalValidationError",
    "ResampleWorker",
    "SampleRequest",
    "SampleResult",
    "SamplerSettings",
    "SamplingMethod",
    "Vertex",
    "build_nucleus",
    "density",
    "density_model_for",
    "element_for",
    "sample_many",
    "sample_orbital",
]
