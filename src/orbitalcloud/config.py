"""
Sampler Configuration
=====================
This module is the central registry for the tunable constants of the sampling
engine.

Why is this file needed?
------------------------
1. Abstraction: The box-sizing and ceiling heuristics are tunable, not
   load-bearing for correctness. Keeping them in one frozen record stops magic
   numbers from spreading through the samplers.
2. Deployment: Values can be overridden from the environment
   (ORBITALCLOUD_<FIELD>=value) without touching code.

Exports:
    SamplerSettings: Frozen record of all tunables.
    DEFAULT_SETTINGS: The settings used when a caller passes none.
"""
from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping

logger = logging.getLogger(__name__)

ENV_PREFIX = "ORBITALCLOUD_"


@dataclass(frozen=True)
class SamplerSettings:
    """
    Tunables for the rejection sampler and vertex weighting.

    Attributes:
        initial_box_scale: Half-width of the first bounding cube, in multiples
            of the orbital's characteristic radius.
        expansion_factor: Linear growth of the cube per expansion.
        max_expansions: Number of expansions before the fallback fill.
        draw_budget_factor: Candidate draws per requested sample in one stage.
        min_stage_draws: Lower bound for the per-stage draw budget.
        mass_check_fraction: Share of a stage budget drawn before the captured
            mass is judged and the box possibly expanded early.
        min_captured_mass: Estimated share of the total density mass the box
            must hold. A box below it is expanded and its points discarded.
        batch_size: Candidates evaluated per vectorized batch.
        ceiling_grid_resolution: Points per axis of the grid used to estimate
            the density ceiling when no analytic bound exists.
        ceiling_safety_factor: Multiplier applied to a grid-estimated ceiling.
        weight_exponent: Vertex weight is (density / ceiling) ** exponent.
    """
    initial_box_scale: float = 2.0
    expansion_factor: float = 1.5
    max_expansions: int = 4
    draw_budget_factor: int = 50
    min_stage_draws: int = 10_000
    mass_check_fraction: float = 0.25
    min_captured_mass: float = 0.9
    batch_size: int = 65_536
    ceiling_grid_resolution: int = 33
    ceiling_safety_factor: float = 1.1
    weight_exponent: float = 0.5

    def __post_init__(self) -> None:
        if self.initial_box_scale <= 0.0:
            raise ValueError(f"initial_box_scale must be positive, got {self.initial_box_scale}")
        if self.expansion_factor <= 1.0:
            raise ValueError(f"expansion_factor must be greater than 1, got {self.expansion_factor}")
        if self.max_expansions < 0:
            raise ValueError(f"max_expansions must be non-negative, got {self.max_expansions}")
        if self.draw_budget_factor < 1:
            raise ValueError(f"draw_budget_factor must be at least 1, got {self.draw_budget_factor}")
        if self.min_stage_draws < 1:
            raise ValueError(f"min_stage_draws must be at least 1, got {self.min_stage_draws}")
        if not 0.0 < self.mass_check_fraction <= 1.0:
            raise ValueError(f"mass_check_fraction must lie in (0, 1], got {self.mass_check_fraction}")
        if not 0.0 < self.min_captured_mass <= 1.0:
            raise ValueError(f"min_captured_mass must lie in (0, 1], got {self.min_captured_mass}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")
        if self.ceiling_grid_resolution < 2:
            raise ValueError(f"ceiling_grid_resolution must be at least 2, got {self.ceiling_grid_resolution}")
        if self.ceiling_safety_factor < 1.0:
            raise ValueError(f"ceiling_safety_factor must be at least 1, got {self.ceiling_safety_factor}")
        if self.weight_exponent <= 0.0:
            raise ValueError(f"weight_exponent must be positive, got {self.weight_exponent}")

    def replace(self, **changes: Any) -> SamplerSettings:
        """Return a validated copy with the given fields changed."""
        return dataclasses.replace(self, **changes)

    def stage_budget(self, sample_count: int) -> int:
        """Candidate draws allowed in one expansion stage."""
        return max(self.draw_budget_factor * sample_count, self.min_stage_draws)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SamplerSettings:
        """
        Build settings from ORBITALCLOUD_<FIELD> environment variables.

        Unset fields keep their defaults. Values that cannot be parsed raise
        ValueError naming the offending variable.
        """
        environ = os.environ if environ is None else environ
        overrides: dict[str, Any] = {}
        for f in dataclasses.fields(cls):
            key = ENV_PREFIX + f.name.upper()
            if key not in environ:
                continue
            raw = environ[key]
            caster = int if isinstance(f.default, int) else float
            try:
                overrides[f.name] = caster(raw)
            except ValueError as e:
                raise ValueError(f"Invalid value for {key}: {raw!r}") from e
            logger.debug(f"Setting override from environment: {f.name}={overrides[f.name]}")
        return cls(**overrides)


DEFAULT_SETTINGS = SamplerSettings()
