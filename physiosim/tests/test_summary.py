import numpy as np
import pytest

from physiosim.engine import DataPoint, SimulationRequest, SimulationResponse, summarise_response


def test_summary_of_empty_response():
    summary = summarise_response(SimulationResponse())
    assert summary["peak_day"] is None
    assert summary["peak_concentration"] == 0.0
    assert summary["mean_concentration"] == 0.0


def test_summary_reports_peaks(solver, testosterone):
    response = solver.run(SimulationRequest(duration_days=21, compounds=(testosterone,)))
    summary = summarise_response(response)

    concentrations = [point.serum_concentration for point in response.data_points]
    assert summary["peak_concentration"] == max(concentrations)
    assert response.data_points[summary["peak_day"]].serum_concentration == max(concentrations)
    assert summary["peak_toxicity"] == max(point.toxicity_score for point in response.data_points)
    assert summary["peak_anabolic"] == max(point.anabolic_score for point in response.data_points)
    assert summary["mean_concentration"] == pytest.approx(np.mean(concentrations))
    assert summary["final_concentration"] == concentrations[-1]


def test_summary_picks_first_peak_on_ties():
    response = SimulationResponse(
        data_points=(
            DataPoint(day=0, serum_concentration=1.0, anabolic_score=0.1, toxicity_score=0.2),
            DataPoint(day=1, serum_concentration=3.0, anabolic_score=0.3, toxicity_score=0.5),
            DataPoint(day=2, serum_concentration=3.0, anabolic_score=0.3, toxicity_score=0.5),
        )
    )
    assert summarise_response(response)["peak_day"] == 1
