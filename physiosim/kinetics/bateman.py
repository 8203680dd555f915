"""Bateman absorption/elimination curve for a single administration."""

from __future__ import annotations

import math

RATE_EQUALITY_TOLERANCE = 1e-9


def concentration(dose: float, ka: float, ke: float, t: float) -> float:
    """Return the serum concentration ``t`` days after a single dose.

    ``dose`` is the administered mass in mg, ``ka`` the first-order absorption
    rate constant and ``ke`` the elimination rate constant (both per day).
    Non-positive, NaN or infinite parameters and negative times contribute
    nothing.  When the two rate constants coincide the general expression
    divides by zero, so the limiting closed form is used instead.
    """

    # ``not x > 0`` also rejects NaN.
    if not (dose > 0 and ka > 0 and ke > 0 and t >= 0):
        return 0.0
    if not all(math.isfinite(value) for value in (dose, ka, ke, t)):
        return 0.0

    if abs(ka - ke) < RATE_EQUALITY_TOLERANCE:
        value = dose * ka**2 * t * math.exp(-ke * t)
    else:
        # The shape factor is bounded by 1, so scaling by ``dose`` last keeps
        # large finite doses from overflowing at t = 0.
        shape = ka / (ka - ke) * (math.exp(-ke * t) - math.exp(-ka * t))
        value = dose * shape

    if not math.isfinite(value):
        return 0.0
    # Cancellation between the two exponentials can leave -0.0 or a few ulps below zero.
    return max(value, 0.0)


__all__ = ["RATE_EQUALITY_TOLERANCE", "concentration"]
