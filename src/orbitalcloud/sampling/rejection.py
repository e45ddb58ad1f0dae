"""
Adaptive Rejection Sampler
==========================
The general-purpose sampling engine for densities without a closed form.

Why is this file needed?
------------------------
1. Coverage: Hydrogenic densities are either sharply peaked or have large
   near-zero regions. A fixed box wastes draws or clips tails, so the box
   grows in stages when the hit rate shows it is missing mass.
2. Termination: Every stage has a draw budget proportional to the sample
   count. When the last stage is spent, the remaining slots are filled with
   zero-weight fallback vertices and the result is flagged as exhausted, so
   the call always returns exactly the requested number of points.
3. Determinism: All randomness comes from the generator passed in; batch
   sizes depend only on the settings and the running counts.

Mass check:
    With u uniform on [0, M], a candidate is accepted with probability
    (mass inside the box) / (M * V). The hit rate times M * V is therefore
    an estimate of the captured mass. It is compared against
    `min_captured_mass` once `mass_check_fraction` of a stage budget has been
    drawn, and again when a stage runs out of draws.

Note: This module is pure NumPy and knows nothing about rendering.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import TYPE_CHECKING, Optional

import numpy as np

from orbitalcloud.config import DEFAULT_SETTINGS, SamplerSettings
from orbitalcloud.sampling.bounds import BoundingBox, estimate_ceiling

if TYPE_CHECKING:
    import numpy.typing as npt

    from orbitalcloud.physics.density import DensityModel

logger = logging.getLogger(__name__)

# Standard deviations added to the hit count before an early expansion
MASS_CONFIDENCE_Z = 3.0


def captured_mass(hits: int, draws: int, ceiling: float, box: BoundingBox) -> float:
    """
    Estimate the share of the density mass that lies inside `box`.

    A grid-estimated ceiling overstates M and with it the estimate.
    """
    if draws == 0:
        return 0.0
    return hits / draws * ceiling * box.volume


def captured_mass_upper(hits: int, draws: int, ceiling: float, box: BoundingBox) -> float:
    """Upper confidence bound of `captured_mass` for a binomial hit count."""
    z = MASS_CONFIDENCE_Z
    return captured_mass(hits + z * math.sqrt(hits) + z, draws, ceiling, box)


@dataclass(frozen=True, eq=False)
class RejectionOutcome:
    """Raw output of one rejection run, before vertex assembly."""
    positions: npt.NDArray[np.float64]
    weights: npt.NDArray[np.float64]
    accepted: int
    expansions: int
    draws: int
    ceiling: float
    final_box: BoundingBox

    @property
    def exhausted(self) -> bool:
        return self.accepted < self.positions.shape[0]


@dataclass
class _Stage:
    """Accepted points and counters of one draw-and-test stage."""
    positions: list = field(default_factory=list)
    weights: list = field(default_factory=list)
    accepted: int = 0
    draws: int = 0
    hits: int = 0
    missed_mass: bool = False


class RejectionSampler:
    """
    Draws weighted points from a density by uniform-box rejection with
    adaptive box expansion and a fallback fill.
    """

    def __init__(self, settings: Optional[SamplerSettings] = None) -> None:
        """
        Args:
            settings: Tunables; DEFAULT_SETTINGS if omitted.
        """
        self.settings = settings or DEFAULT_SETTINGS

    def initial_box(self, model: DensityModel) -> BoundingBox:
        return BoundingBox.cube(self.settings.initial_box_scale * model.characteristic_radius)

    def _ceiling(self, model: DensityModel, box: BoundingBox) -> float:
        return estimate_ceiling(
            model, box,
            resolution=self.settings.ceiling_grid_resolution,
            safety_factor=self.settings.ceiling_safety_factor,
        )

    def sample(
        self,
        model: DensityModel,
        count: int,
        rng: np.random.Generator,
    ) -> RejectionOutcome:
        """
        Draw exactly `count` weighted points from `model`.

        A stage that spends its budget in a box holding enough mass is
        repeated in the same box; a box that misses mass is scaled by
        `expansion_factor` and the points it accepted are dropped, as they
        over-represent the core.

        Args:
            model: Density to sample.
            count: Number of points to return (>= 1).
            rng: Request-local generator, consumed in a fixed order.

        Returns:
            RejectionOutcome with accepted points first, fallbacks appended.
        """
        settings = self.settings
        box = self.initial_box(model)
        ceiling = self._ceiling(model, box)
        budget = settings.stage_budget(count)

        position_parts: list[npt.NDArray[np.float64]] = []
        weight_parts: list[npt.NDArray[np.float64]] = []
        accepted = 0
        total_draws = 0
        expansions = 0

        for stage_index in range(settings.max_expansions + 1):
            final_stage = stage_index == settings.max_expansions
            stage = self._run_stage(
                model=model,
                box=box,
                ceiling=ceiling,
                needed=count - accepted,
                budget=budget,
                rng=rng,
                judge_mass=not final_stage,
            )
            total_draws += stage.draws
            mass = captured_mass(stage.hits, stage.draws, ceiling, box)

            filled = accepted + stage.accepted >= count
            short_of_mass = stage.missed_mass or (not filled and mass < settings.min_captured_mass)
            if short_of_mass and not final_stage:
                box = box.scaled(settings.expansion_factor)
                ceiling = self._ceiling(model, box)
                expansions += 1
                logger.debug(
                    f"Box holds about {mass:.1%} of the mass; expanding to half-width "
                    f"{box.half_width:.4g} ({expansions}/{settings.max_expansions}), "
                    f"dropping {stage.accepted} points."
                )
                continue

            position_parts.extend(stage.positions)
            weight_parts.extend(stage.weights)
            accepted += stage.accepted
            if filled:
                break
            if not final_stage:
                logger.debug(
                    f"Stage budget spent with {accepted}/{count} accepted; box holds about "
                    f"{mass:.1%} of the mass, drawing another stage in the same box."
                )

        if accepted < count:
            remaining = count - accepted
            logger.warning(
                f"Rejection sampling accepted {accepted} / {count} points for {model!r} "
                f"after {expansions} expansions; filling remainder with zero-weight samples."
            )
            position_parts.append(box.random_points(rng, remaining))
            weight_parts.append(np.zeros(remaining, dtype=np.float64))

        positions = np.concatenate(position_parts, axis=0)
        weights = np.concatenate(weight_parts)

        logger.debug(
            f"Rejection sampling of {model!r} done: {accepted}/{count} accepted, "
            f"{total_draws} draws, {expansions} expansions, ceiling={ceiling:.4e}"
        )
        return RejectionOutcome(
            positions=positions,
            weights=weights,
            accepted=accepted,
            expansions=expansions,
            draws=total_draws,
            ceiling=ceiling,
            final_box=box,
        )

    def _run_stage(
        self,
        model: DensityModel,
        box: BoundingBox,
        ceiling: float,
        needed: int,
        budget: int,
        rng: np.random.Generator,
        judge_mass: bool,
    ) -> _Stage:
        """
        Draw-and-test loop for one box size.

        With `judge_mass` set, at least `mass_check_fraction` of the budget is
        drawn even when the request fills sooner, and the stage stops early
        with `missed_mass` when the box clearly holds too little mass.
        """
        settings = self.settings
        checkpoint = math.ceil(settings.mass_check_fraction * budget)
        stage = _Stage()
        judged = not judge_mass

        while stage.draws < budget and (stage.accepted < needed or not judged):
            # Batches stop at the checkpoint so the mass check sees exactly that many draws
            limit = budget if judged else checkpoint
            batch = min(settings.batch_size, limit - stage.draws)
            candidates = box.random_points(rng, batch)
            thresholds = rng.uniform(0.0, ceiling, size=batch)
            densities = model.evaluate(candidates)
            stage.draws += batch

            # Zero-density points are never physical, even when u happens to be 0
            hits = np.flatnonzero((densities >= thresholds) & (densities > 0.0))
            stage.hits += int(hits.size)
            hits = hits[:needed - stage.accepted]
            if hits.size:
                stage.positions.append(candidates[hits])
                stage.weights.append(
                    np.clip(densities[hits] / ceiling, 0.0, 1.0) ** settings.weight_exponent
                )
                stage.accepted += int(hits.size)

            if not judged and stage.draws >= checkpoint:
                judged = True
                upper = captured_mass_upper(stage.hits, stage.draws, ceiling, box)
                if upper < settings.min_captured_mass:
                    logger.debug(
                        f"{stage.hits} hits in {stage.draws} draws: box holds at most "
                        f"{upper:.1%} of the mass; expanding early."
                    )
                    stage.missed_mass = True
                    break

        return stage
