"""Value types exchanged with the solver."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence


class EsterType(str, Enum):
    """Ester attached to an injectable compound; descriptive only."""

    UNSPECIFIED = "unspecified"
    ENANTHATE = "enanthate"
    PROPIONATE = "propionate"
    CYPIONATE = "cypionate"
    DECANOATE = "decanoate"
    UNDECANOATE = "undecanoate"


@dataclass(frozen=True)
class Compound:
    """Dosing parameters for one administered compound.

    ``absorption_k`` and ``elimination_k`` are first-order rate constants per
    day.  A compound with a non-positive dose or rate constant is accepted but
    contributes nothing to the simulation.
    """

    id: str
    name: str
    dosage_mg: float
    absorption_k: float
    elimination_k: float
    ester: EsterType = EsterType.UNSPECIFIED


@dataclass(frozen=True)
class SimulationRequest:
    """Duration in whole days plus the compounds administered at day 0."""

    duration_days: int
    compounds: Sequence[Optional[Compound]] = field(default_factory=tuple)


@dataclass(frozen=True)
class DataPoint:
    day: int
    serum_concentration: float
    anabolic_score: float
    toxicity_score: float


@dataclass(frozen=True)
class SimulationResponse:
    """Ordered per-day data points; ``data_points[i].day == i``."""

    data_points: tuple[DataPoint, ...] = ()

    def __len__(self) -> int:
        return len(self.data_points)


__all__ = ["Compound", "DataPoint", "EsterType", "SimulationRequest", "SimulationResponse"]
