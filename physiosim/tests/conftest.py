import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from physiosim.config import SolverConfig
from physiosim.engine import Compound, SimulationRequest, Solver


@pytest.fixture()
def testosterone() -> Compound:
    return Compound(
        id="testosterone",
        name="Testosterone Propionate",
        dosage_mg=100.0,
        absorption_k=1.2,
        elimination_k=0.4,
    )


@pytest.fixture()
def solver() -> Solver:
    return Solver(SolverConfig(time_step_days=1.0, max_concurrency=2))


@pytest.fixture()
def three_day_request(testosterone: Compound) -> SimulationRequest:
    return SimulationRequest(duration_days=3, compounds=(testosterone,))
