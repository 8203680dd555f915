"""Per-day aggregation of compound concentrations and scores."""

from __future__ import annotations

import sys
from typing import Iterable, Optional, Tuple

from ..config import SolverConfig
from ..kinetics import anabolic_effect, concentration, toxicity
from .types import Compound, DataPoint


def aggregate_compounds(
    compounds: Iterable[Optional[Compound]] | None,
    t: float,
    config: SolverConfig,
) -> Tuple[float, float]:
    """Return ``(total_concentration, total_toxicity)`` at elapsed time ``t``.

    Toxicity is additive per compound: each compound's score is derived from
    its own concentration, not from the combined serum level.
    """

    total_concentration = 0.0
    total_toxicity = 0.0
    for compound in compounds or ():
        if compound is None:
            continue
        level = concentration(compound.dosage_mg, compound.absorption_k, compound.elimination_k, t)
        total_concentration += level
        total_toxicity += toxicity(level, config.toxicity_vmax, config.toxicity_km)
    # Individually finite levels can still overflow when summed.
    return min(total_concentration, sys.float_info.max), total_toxicity


def compute_day(
    compounds: Iterable[Optional[Compound]] | None,
    day: int,
    config: SolverConfig,
) -> DataPoint:
    """Evaluate a single simulated day.

    The anabolic score is computed once from the combined concentration.
    """

    t = day * config.time_step_days
    total_concentration, total_toxicity = aggregate_compounds(compounds, t, config)
    anabolic = anabolic_effect(
        total_concentration,
        config.anabolic_ec50,
        config.anabolic_hill,
        config.anabolic_max_effect,
    )
    return DataPoint(
        day=day,
        serum_concentration=total_concentration,
        anabolic_score=anabolic,
        toxicity_score=total_toxicity,
    )


__all__ = ["aggregate_compounds", "compute_day"]
