"""Scalar summaries of a simulated time course."""

from __future__ import annotations

from typing import Dict, Optional

import numpy as np

from .types import SimulationResponse


def summarise_response(response: SimulationResponse) -> Dict[str, Optional[float]]:
    """Reduce a response to peak, mean and terminal values.

    ``peak_day`` is ``None`` for an empty response; every other entry is zero.
    """

    if not response.data_points:
        return {
            "peak_concentration": 0.0,
            "peak_day": None,
            "peak_toxicity": 0.0,
            "peak_anabolic": 0.0,
            "mean_concentration": 0.0,
            "final_concentration": 0.0,
        }

    concentration = np.fromiter((p.serum_concentration for p in response.data_points), dtype=float)
    toxicity = np.fromiter((p.toxicity_score for p in response.data_points), dtype=float)
    anabolic = np.fromiter((p.anabolic_score for p in response.data_points), dtype=float)
    peak_index = int(np.argmax(concentration))

    return {
        "peak_concentration": float(concentration[peak_index]),
        "peak_day": response.data_points[peak_index].day,
        "peak_toxicity": float(np.max(toxicity)),
        "peak_anabolic": float(np.max(anabolic)),
        "mean_concentration": float(np.mean(concentration)),
        "final_concentration": float(concentration[-1]),
    }


__all__ = ["summarise_response"]
