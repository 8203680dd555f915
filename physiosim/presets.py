"""Named compounds shipped with the service and the quickstart CLI."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Mapping

from .engine.types import Compound, EsterType


@dataclass(frozen=True)
class CompoundPreset:
    """A ready-made compound plus a short human readable description."""

    compound: Compound
    description: str


_PRESETS: Dict[str, CompoundPreset] = {
    "t-prop": CompoundPreset(
        compound=Compound(
            id="t-prop",
            name="Testosterone Propionate",
            dosage_mg=75.0,
            absorption_k=1.35,
            elimination_k=0.42,
            ester=EsterType.PROPIONATE,
        ),
        description="Short ester; fast absorption with a sharp, early peak.",
    ),
    "npp": CompoundPreset(
        compound=Compound(
            id="npp",
            name="Nandrolone Phenylpropionate",
            dosage_mg=100.0,
            absorption_k=0.92,
            elimination_k=0.31,
            ester=EsterType.PROPIONATE,
        ),
        description="Phenylpropionate ester; intermediate release profile.",
    ),
    "mast-e": CompoundPreset(
        compound=Compound(
            id="mast-e",
            name="Drostanolone Enanthate",
            dosage_mg=80.0,
            absorption_k=0.74,
            elimination_k=0.24,
            ester=EsterType.ENANTHATE,
        ),
        description="Long ester; slow absorption and an extended tail.",
    ),
}


def available_presets() -> Mapping[str, CompoundPreset]:
    """Return the preset library keyed by compound id."""

    return dict(_PRESETS)


def get_preset(compound_id: str, *, dosage_mg: float | None = None) -> Compound:
    """Look up a preset compound, optionally overriding its dose.

    Raises ``KeyError`` for unknown ids.
    """

    preset = _PRESETS[compound_id.strip().lower()]
    if dosage_mg is None:
        return preset.compound
    return replace(preset.compound, dosage_mg=float(dosage_mg))


__all__ = ["CompoundPreset", "available_presets", "get_preset"]
