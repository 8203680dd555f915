"""Hill-equation anabolic response."""

from __future__ import annotations

import math

DEFAULT_ANABOLIC_MAX_EFFECT = 100.0
DEFAULT_ANABOLIC_EC50 = 200.0
DEFAULT_ANABOLIC_HILL_COEFF = 2.0

_EC50_FLOOR = 1e-9
# math.exp overflows a little above 709.
_MAX_LOG_RATIO = 700.0


def anabolic_effect(concentration: float, ec50: float, hill: float, max_effect: float) -> float:
    """Return ``max_effect * c**h / (ec50**h + c**h)``.

    A non-positive or non-finite Hill coefficient degenerates to the hyperbolic curve
    (``h = 1``).  The ratio is evaluated as ``max_effect / (1 + (ec50/c)**h)``
    in log space so that extreme concentrations saturate to ``max_effect`` or
    zero instead of overflowing.
    """

    if not (concentration > 0 and max_effect > 0) or not math.isfinite(max_effect):
        return 0.0
    if not (hill > 0) or not math.isfinite(hill):
        hill = 1.0
    ec50 = ec50 if ec50 > _EC50_FLOOR else _EC50_FLOOR

    log_ratio = hill * (math.log(ec50) - math.log(concentration))
    if log_ratio > _MAX_LOG_RATIO:
        return 0.0
    return max_effect / (1.0 + math.exp(log_ratio))


__all__ = [
    "DEFAULT_ANABOLIC_EC50",
    "DEFAULT_ANABOLIC_HILL_COEFF",
    "DEFAULT_ANABOLIC_MAX_EFFECT",
    "anabolic_effect",
]
