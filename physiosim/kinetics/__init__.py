"""
physiosim.kinetics
==================

Closed-form pharmacokinetic and pharmacodynamic curves evaluated by the
solver.  Every function here is pure and absorbs degenerate input
(non-positive doses or rate constants, negative time, zero saturation
constants) by returning zero or substituting a safe floor, so callers never
need to guard the numeric edge cases themselves.

``bateman``
    Serum concentration of a single compound after one administration.

``toxicity``
    Michaelis–Menten saturation of a toxicity score against concentration.

``anabolic``
    Hill-equation saturation of the anabolic response against the combined
    serum concentration.
"""

from .anabolic import (
    DEFAULT_ANABOLIC_EC50,
    DEFAULT_ANABOLIC_HILL_COEFF,
    DEFAULT_ANABOLIC_MAX_EFFECT,
    anabolic_effect,
)
from .bateman import RATE_EQUALITY_TOLERANCE, concentration
from .toxicity import DEFAULT_TOXICITY_KM, DEFAULT_TOXICITY_VMAX, toxicity

__all__ = [
    "DEFAULT_ANABOLIC_EC50",
    "DEFAULT_ANABOLIC_HILL_COEFF",
    "DEFAULT_ANABOLIC_MAX_EFFECT",
    "DEFAULT_TOXICITY_KM",
    "DEFAULT_TOXICITY_VMAX",
    "RATE_EQUALITY_TOLERANCE",
    "anabolic_effect",
    "concentration",
    "toxicity",
]
