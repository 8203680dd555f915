"""Michaelis–Menten toxicity saturation."""

from __future__ import annotations

import math

# Theoretical ceiling of the toxicity score contributed by one compound.
DEFAULT_TOXICITY_VMAX = 100.0
# Concentration at which toxicity reaches half of ``vmax``.
DEFAULT_TOXICITY_KM = 250.0

_KM_FLOOR = 1e-9


def toxicity(concentration: float, vmax: float, km: float) -> float:
    """Return ``vmax * c / (km + c)`` for an instantaneous concentration ``c``.

    The curve rises monotonically from zero towards ``vmax`` and passes through
    ``vmax / 2`` exactly at ``c == km``.
    """

    if not (concentration > 0 and vmax > 0) or not math.isfinite(vmax):
        return 0.0
    if math.isinf(concentration):
        return vmax
    km = km if km > _KM_FLOOR else _KM_FLOOR
    return vmax * (concentration / (km + concentration))


__all__ = ["DEFAULT_TOXICITY_KM", "DEFAULT_TOXICITY_VMAX", "toxicity"]
