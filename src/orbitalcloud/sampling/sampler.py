"""
Sampling Engine
===============
Entry point of the core: SampleRequest in, SampleResult out.

Why is this file needed?
------------------------
1. Dispatch: It picks the closed-form path for states with an invertible
   radial law and the adaptive rejection path for everything else.
2. Randomness: It creates one generator per request from the request's seed
   and hands it down explicitly; nothing random survives the call, so equal
   requests give bit-identical results.
3. Assembly: It routes either path's arrays through vertex assembly.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from orbitalcloud.config import DEFAULT_SETTINGS, SamplerSettings
from orbitalcloud.model.request import SampleRequest, SampleResult, SamplingMethod
from orbitalcloud.physics.closed_form import sample_closed_form
from orbitalcloud.physics.density import ClosedFormDensity, DensityModel, density_model_for
from orbitalcloud.sampling.assembly import assemble_result
from orbitalcloud.sampling.rejection import RejectionSampler
from orbitalcloud.utils import fold_seed

logger = logging.getLogger(__name__)


def make_rng(seed: int) -> np.random.Generator:
    """Fresh request-local generator; negative seeds wrap to 64 bits."""
    return np.random.default_rng(fold_seed(seed))


class OrbitalSampler:
    """
    Stateless sampler; the instance only holds its settings, so one sampler
    may serve any number of threads.
    """

    def __init__(self, settings: Optional[SamplerSettings] = None) -> None:
        self.settings = settings or DEFAULT_SETTINGS
        self._rejection = RejectionSampler(self.settings)

    def sample(
        self,
        request: SampleRequest,
        origin: Optional[Sequence[float]] = None,
    ) -> SampleResult:
        """
        Sample the orbital described by `request`.

        Args:
            request: Validated request.
            origin: Scene coordinate of the nucleus (defaults to the origin).

        Returns:
            Exactly request.sample_count weighted vertices.
        """
        element = request.element
        orbital = request.orbital
        model = density_model_for(orbital, element)

        logger.info(
            f"Sampling {request.sample_count} points for {element.symbol} {orbital.label} "
            f"(seed={request.seed}, {model.family})"
        )
        return self.sample_model(model, request.sample_count, request.seed, origin=origin)

    def sample_model(
        self,
        model: DensityModel,
        sample_count: int,
        seed: int,
        origin: Optional[Sequence[float]] = None,
    ) -> SampleResult:
        """
        Sample any density model; closed-form models skip rejection.

        Inputs are not validated here, SampleRequest does that for orbitals.
        """
        rng = make_rng(seed)

        if isinstance(model, ClosedFormDensity):
            positions, weights, peak = sample_closed_form(
                model, sample_count, rng, self.settings.weight_exponent
            )
            return assemble_result(
                positions, weights,
                sample_count=sample_count,
                accepted=sample_count,
                method=SamplingMethod.CLOSED_FORM,
                ceiling=peak,
                origin=origin,
            )

        outcome = self._rejection.sample(model, sample_count, rng)
        return assemble_result(
            outcome.positions, outcome.weights,
            sample_count=sample_count,
            accepted=outcome.accepted,
            method=SamplingMethod.REJECTION,
            box_exhausted=outcome.exhausted,
            expansions=outcome.expansions,
            draws=outcome.draws,
            ceiling=outcome.ceiling,
            origin=origin,
        )


def sample_orbital(
    request: SampleRequest,
    settings: Optional[SamplerSettings] = None,
    origin: Optional[Sequence[float]] = None,
) -> SampleResult:
    """Convenience wrapper around OrbitalSampler(settings).sample(request)."""
    return OrbitalSampler(settings).sample(request, origin=origin)
