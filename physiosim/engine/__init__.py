"""
physiosim.engine
================

Request/response orchestration on top of :mod:`physiosim.kinetics`.

:class:`Solver` turns a :class:`SimulationRequest` into one
:class:`DataPoint` per simulated day.  Days are independent, so each call
fans them out over its own bounded thread pool and writes every result into
a pre-reserved slot; the response is assembled in day order once all
workers have joined.  :meth:`Solver.run_batch` applies the same strategy one
level up, running whole requests concurrently and preserving input order.

The only failure a caller can observe is :class:`SimulationCancelled`, raised
when the supplied :class:`RunContext` is already cancelled or past its
deadline before any work is scheduled.
"""

from .aggregate import aggregate_compounds, compute_day
from .solver import RunContext, SimulationCancelled, SimulationError, Solver
from .summary import summarise_response
from .types import Compound, DataPoint, EsterType, SimulationRequest, SimulationResponse

__all__ = [
    "Compound",
    "DataPoint",
    "EsterType",
    "RunContext",
    "SimulationCancelled",
    "SimulationError",
    "SimulationRequest",
    "SimulationResponse",
    "Solver",
    "aggregate_compounds",
    "compute_day",
    "summarise_response",
]
