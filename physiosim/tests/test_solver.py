import math
import threading

import pytest

from physiosim.config import SolverConfig
from physiosim.engine import (
    Compound,
    RunContext,
    SimulationCancelled,
    SimulationError,
    SimulationRequest,
    Solver,
    aggregate_compounds,
    compute_day,
)
from physiosim.engine import solver as solver_module
from physiosim.kinetics import anabolic_effect, concentration, toxicity


def test_solver_run_produces_data_points(solver, three_day_request):
    response = solver.run(three_day_request)

    assert len(response.data_points) == three_day_request.duration_days
    assert [point.day for point in response.data_points] == [0, 1, 2]
    assert response.data_points[0].serum_concentration == 0.0
    assert response.data_points[1].serum_concentration > 0.0
    assert response.data_points[2].serum_concentration > 0.0
    for point in response.data_points:
        assert point.toxicity_score >= 0.0
        assert point.anabolic_score >= 0.0


@pytest.mark.parametrize("duration", [0, -3])
def test_solver_handles_empty_duration(duration):
    response = Solver(SolverConfig()).run(SimulationRequest(duration_days=duration))
    assert response.data_points == ()


def test_solver_handles_absent_request():
    assert len(Solver().run(None)) == 0


def test_solver_output_is_ordered_and_finite_for_long_runs(testosterone):
    config = SolverConfig(max_concurrency=8)
    request = SimulationRequest(
        duration_days=400,
        compounds=(
            testosterone,
            Compound(id="npp", name="Nandrolone Phenylpropionate", dosage_mg=100, absorption_k=0.92, elimination_k=0.31),
        ),
    )

    response = Solver(config).run(request)

    assert len(response) == 400
    for index, point in enumerate(response.data_points):
        assert point.day == index
        for value in (point.serum_concentration, point.toxicity_score, point.anabolic_score):
            assert math.isfinite(value)
            assert value >= 0.0
        assert point.toxicity_score <= config.toxicity_vmax * 2
        assert point.anabolic_score <= config.anabolic_max_effect


def test_solver_matches_serial_evaluation(testosterone):
    config = SolverConfig(time_step_days=0.5, max_concurrency=3)
    request = SimulationRequest(duration_days=30, compounds=(testosterone,))

    response = Solver(config).run(request)

    expected = [compute_day(request.compounds, day, config) for day in range(30)]
    assert list(response.data_points) == expected


def test_solver_skips_missing_compounds(testosterone):
    with_gap = SimulationRequest(duration_days=5, compounds=(None, testosterone, None))
    without_gap = SimulationRequest(duration_days=5, compounds=(testosterone,))

    solver = Solver()
    assert solver.run(with_gap) == solver.run(without_gap)


def test_solver_compound_order_does_not_matter(testosterone):
    other = Compound(id="mast-e", name="Drostanolone Enanthate", dosage_mg=80, absorption_k=0.74, elimination_k=0.24)
    solver = Solver()
    forward = solver.run(SimulationRequest(duration_days=10, compounds=(testosterone, other)))
    backward = solver.run(SimulationRequest(duration_days=10, compounds=(other, testosterone)))
    for a, b in zip(forward.data_points, backward.data_points):
        assert a.serum_concentration == pytest.approx(b.serum_concentration)
        assert a.toxicity_score == pytest.approx(b.toxicity_score)
        assert a.anabolic_score == pytest.approx(b.anabolic_score)


def test_toxicity_is_summed_per_compound():
    config = SolverConfig()
    first = Compound(id="a", name="A", dosage_mg=400, absorption_k=1.1, elimination_k=0.3)
    second = Compound(id="b", name="B", dosage_mg=300, absorption_k=0.8, elimination_k=0.2)

    total_conc, total_tox = aggregate_compounds((first, second), 2.0, config)

    c1 = concentration(400, 1.1, 0.3, 2.0)
    c2 = concentration(300, 0.8, 0.2, 2.0)
    assert total_conc == pytest.approx(c1 + c2)
    per_compound = toxicity(c1, config.toxicity_vmax, config.toxicity_km) + toxicity(
        c2, config.toxicity_vmax, config.toxicity_km
    )
    assert total_tox == pytest.approx(per_compound)
    assert total_tox != pytest.approx(toxicity(c1 + c2, config.toxicity_vmax, config.toxicity_km))


def test_anabolic_score_uses_combined_concentration():
    config = SolverConfig()
    first = Compound(id="a", name="A", dosage_mg=400, absorption_k=1.1, elimination_k=0.3)
    second = Compound(id="b", name="B", dosage_mg=300, absorption_k=0.8, elimination_k=0.2)

    point = compute_day((first, second), 2, config)

    expected = anabolic_effect(
        point.serum_concentration,
        config.anabolic_ec50,
        config.anabolic_hill,
        config.anabolic_max_effect,
    )
    assert point.day == 2
    assert point.anabolic_score == pytest.approx(expected)


def test_time_step_scales_elapsed_time(testosterone):
    config = SolverConfig(time_step_days=0.25)
    point = compute_day((testosterone,), 4, config)
    assert point.serum_concentration == pytest.approx(concentration(100, 1.2, 0.4, 1.0))


def test_degenerate_compounds_yield_zero_series():
    request = SimulationRequest(
        duration_days=4,
        compounds=(Compound(id="x", name="Inert", dosage_mg=0.0, absorption_k=1.0, elimination_k=0.5),),
    )
    response = Solver().run(request)
    assert len(response) == 4
    assert all(point.serum_concentration == 0.0 for point in response.data_points)
    assert all(point.toxicity_score == 0.0 for point in response.data_points)
    assert all(point.anabolic_score == 0.0 for point in response.data_points)


def test_non_finite_and_huge_doses_yield_finite_series():
    config = SolverConfig()
    huge = Compound(id="big", name="Huge", dosage_mg=1e308, absorption_k=2.0, elimination_k=1.0)
    request = SimulationRequest(
        duration_days=3,
        compounds=(
            Compound(id="nan", name="NaN dose", dosage_mg=math.nan, absorption_k=1.0, elimination_k=0.5),
            Compound(id="inf", name="Inf rate", dosage_mg=100.0, absorption_k=math.inf, elimination_k=0.5),
            huge,
            huge,
            huge,
            huge,
        ),
    )

    response = Solver(config).run(request)

    assert len(response) == 3
    for point in response.data_points:
        for value in (point.serum_concentration, point.toxicity_score, point.anabolic_score):
            assert math.isfinite(value)
            assert value >= 0.0
    # Four saturated compounds each contribute at most vmax.
    assert response.data_points[1].toxicity_score == pytest.approx(4 * config.toxicity_vmax)
    assert response.data_points[1].anabolic_score == pytest.approx(config.anabolic_max_effect)


def test_solver_run_batch_preserves_order():
    solver = Solver(SolverConfig(max_concurrency=3))
    requests = [
        SimulationRequest(duration_days=1),
        SimulationRequest(duration_days=2),
        SimulationRequest(duration_days=0),
    ]

    results = solver.run_batch(requests)

    assert [len(result.data_points) for result in results] == [1, 2, 0]


def test_run_batch_matches_serial_runs(testosterone):
    solver = Solver(SolverConfig(max_concurrency=2))
    requests = [
        SimulationRequest(duration_days=days, compounds=(testosterone,)) for days in (5, 0, 12, 1, 7)
    ]
    requests.insert(2, None)

    assert solver.run_batch(requests) == [solver.run(request) for request in requests]


@pytest.mark.parametrize("requests", [[], None])
def test_run_batch_with_no_requests(requests):
    assert Solver().run_batch(requests) == []


def test_worker_pool_is_bounded_by_days(monkeypatch, testosterone):
    sizes = []
    original = solver_module.ThreadPoolExecutor

    class RecordingExecutor(original):
        def __init__(self, max_workers=None, **kwargs):
            sizes.append(max_workers)
            super().__init__(max_workers=max_workers, **kwargs)

    monkeypatch.setattr(solver_module, "ThreadPoolExecutor", RecordingExecutor)

    Solver(SolverConfig(max_concurrency=8)).run(SimulationRequest(duration_days=3, compounds=(testosterone,)))
    Solver(SolverConfig(max_concurrency=2)).run(SimulationRequest(duration_days=30, compounds=(testosterone,)))

    assert sizes == [3, 2]


def test_each_day_is_computed_exactly_once(monkeypatch, testosterone):
    seen = []
    lock = threading.Lock()
    original = solver_module.compute_day

    def recording(compounds, day, config):
        with lock:
            seen.append(day)
        return original(compounds, day, config)

    monkeypatch.setattr(solver_module, "compute_day", recording)

    Solver(SolverConfig(max_concurrency=4)).run(SimulationRequest(duration_days=50, compounds=(testosterone,)))

    assert sorted(seen) == list(range(50))


def test_cancelled_context_aborts_before_work(monkeypatch, three_day_request):
    calls = []
    monkeypatch.setattr(solver_module, "compute_day", lambda *args: calls.append(args))

    context = RunContext()
    context.cancel()

    with pytest.raises(SimulationCancelled) as excinfo:
        Solver().run(three_day_request, context)

    assert excinfo.value.reason == "cancelled"
    assert isinstance(excinfo.value, SimulationError)
    assert calls == []


def test_expired_deadline_aborts_batch(three_day_request):
    context = RunContext.with_timeout(0.0)

    with pytest.raises(SimulationCancelled) as excinfo:
        Solver().run_batch([three_day_request], context)

    assert excinfo.value.reason == "deadline_exceeded"


def test_live_context_allows_run(solver, three_day_request):
    context = RunContext.with_timeout(60.0)
    assert context.error() is None
    assert len(solver.run(three_day_request, context)) == 3
    assert len(solver.run(three_day_request, RunContext.with_timeout(None))) == 3
