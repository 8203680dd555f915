"""Pydantic schemas used by the public API surface."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ..engine.types import Compound as DomainCompound
from ..engine.types import DataPoint as DomainDataPoint
from ..engine.types import EsterType
from ..engine.types import SimulationRequest as DomainSimulationRequest
from ..engine.types import SimulationResponse as DomainSimulationResponse


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


class ErrorPayload(BaseModel):
    """Standard error envelope returned by API endpoints."""

    code: str = Field(..., description="Machine readable error identifier")
    message: str = Field(..., description="Human readable explanation")
    context: Dict[str, Any] = Field(default_factory=dict, description="Additional context")


class _CamelModel(BaseModel):
    # NaN/Infinity literals are rejected with a 422 rather than simulated.
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)


# ---------------------------------------------------------------------------
# Simulation schemas
# ---------------------------------------------------------------------------


class Compound(_CamelModel):
    id: str = ""
    name: str = ""
    dosage_mg: float = Field(default=0.0, alias="dosageMg", description="Administered dose in mg")
    absorption_k: float = Field(
        default=0.0,
        alias="absorptionRateConstant",
        description="First-order absorption rate constant (1/day)",
    )
    elimination_k: float = Field(
        default=0.0,
        alias="eliminationRateConstant",
        description="First-order elimination rate constant (1/day)",
    )
    ester: EsterType = EsterType.UNSPECIFIED

    def to_domain(self) -> DomainCompound:
        return DomainCompound(
            id=self.id,
            name=self.name,
            dosage_mg=self.dosage_mg,
            absorption_k=self.absorption_k,
            elimination_k=self.elimination_k,
            ester=self.ester,
        )

    @classmethod
    def from_domain(cls, compound: DomainCompound) -> "Compound":
        return cls(
            id=compound.id,
            name=compound.name,
            dosage_mg=compound.dosage_mg,
            absorption_k=compound.absorption_k,
            elimination_k=compound.elimination_k,
            ester=compound.ester,
        )


class SimulationRequest(_CamelModel):
    duration_days: int = Field(default=0, alias="durationDays")
    # ``null`` entries are tolerated and skipped by the solver.
    compounds: List[Optional[Compound]] = Field(default_factory=list)

    def to_domain(self) -> DomainSimulationRequest:
        return DomainSimulationRequest(
            duration_days=self.duration_days,
            compounds=tuple(item.to_domain() if item is not None else None for item in self.compounds),
        )


class DataPoint(_CamelModel):
    day: int
    serum_concentration: float = Field(alias="serumConcentration")
    anabolic_score: float = Field(alias="anabolicScore")
    toxicity_score: float = Field(alias="toxicityScore")

    @classmethod
    def from_domain(cls, point: DomainDataPoint) -> "DataPoint":
        return cls(
            day=point.day,
            serum_concentration=point.serum_concentration,
            anabolic_score=point.anabolic_score,
            toxicity_score=point.toxicity_score,
        )


class SimulationSummary(_CamelModel):
    peak_concentration: float = Field(alias="peakConcentration")
    peak_day: Optional[int] = Field(default=None, alias="peakDay")
    peak_toxicity: float = Field(alias="peakToxicity")
    peak_anabolic: float = Field(alias="peakAnabolic")
    mean_concentration: float = Field(alias="meanConcentration")
    final_concentration: float = Field(alias="finalConcentration")


class SimulationResponse(_CamelModel):
    data_points: Sequence[DataPoint] = Field(default_factory=list, alias="dataPoints")
    summary: Optional[SimulationSummary] = None

    @classmethod
    def from_domain(
        cls,
        response: DomainSimulationResponse,
        *,
        summary: Dict[str, Any] | None = None,
    ) -> "SimulationResponse":
        return cls(
            data_points=[DataPoint.from_domain(point) for point in response.data_points],
            summary=SimulationSummary(**summary) if summary is not None else None,
        )


class BatchSimulationRequest(_CamelModel):
    requests: List[SimulationRequest] = Field(default_factory=list)


class BatchSimulationResponse(_CamelModel):
    responses: Sequence[SimulationResponse] = Field(default_factory=list)


class CompoundPresetEntry(_CamelModel):
    compound: Compound
    description: str


class CompoundPresetsResponse(_CamelModel):
    items: Sequence[CompoundPresetEntry]
