"""FastAPI router exposing the solver."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status

from ..config import DEFAULT_SERVER_CONFIG, DEFAULT_SOLVER_CONFIG, DEFAULT_TELEMETRY_CONFIG, ServerConfig
from ..engine import RunContext, SimulationCancelled, Solver, summarise_response
from ..presets import available_presets
from ..telemetry import TelemetryManager
from . import schemas

LOGGER = logging.getLogger(__name__)


@dataclass
class ServiceRegistry:
    """Container bundling service layer dependencies for the API."""

    solver: Solver = field(default_factory=lambda: Solver(DEFAULT_SOLVER_CONFIG))
    server_config: ServerConfig = field(default_factory=lambda: DEFAULT_SERVER_CONFIG)
    telemetry: TelemetryManager = field(default_factory=lambda: TelemetryManager(config=DEFAULT_TELEMETRY_CONFIG))

    def configure(
        self,
        *,
        solver: Solver | None = None,
        server_config: ServerConfig | None = None,
        telemetry: TelemetryManager | None = None,
    ) -> None:
        if solver is not None:
            self.solver = solver
        if server_config is not None:
            self.server_config = server_config
        if telemetry is not None:
            self.telemetry = telemetry


services = ServiceRegistry()


def configure_services(
    *,
    solver: Solver | None = None,
    server_config: ServerConfig | None = None,
    telemetry: TelemetryManager | None = None,
) -> None:
    """Configure the shared service registry used by API routes."""

    services.configure(solver=solver, server_config=server_config, telemetry=telemetry)


def get_services() -> ServiceRegistry:
    return services


def _http_error(status_code: int, code: str, message: str, *, context: Dict[str, object] | None = None) -> HTTPException:
    payload = schemas.ErrorPayload(code=code, message=message, context=context or {})
    return HTTPException(status_code=status_code, detail=payload.model_dump())


def _run_context(timeout_header: float | None, svc: ServiceRegistry) -> RunContext:
    timeout = timeout_header if timeout_header is not None else svc.server_config.request_timeout_s
    return RunContext.with_timeout(timeout)


def _cancelled_error(exc: SimulationCancelled) -> HTTPException:
    LOGGER.info("Simulation rejected before start (%s)", exc.reason)
    return _http_error(
        status.HTTP_504_GATEWAY_TIMEOUT,
        exc.reason,
        "The request deadline expired before the simulation started.",
        context={"reason": exc.reason},
    )


router = APIRouter()


@router.post("/simulate", response_model=schemas.SimulationResponse)
def run_simulation(
    request: schemas.SimulationRequest,
    summary: bool = Query(default=False, description="Attach peak/mean summary statistics"),
    x_request_timeout: float | None = Header(default=None, description="Deadline in seconds"),
    svc: ServiceRegistry = Depends(get_services),
) -> schemas.SimulationResponse:
    context = _run_context(x_request_timeout, svc)
    with svc.telemetry.span("physiosim.run", duration_days=request.duration_days):
        try:
            result = svc.solver.run(request.to_domain(), context)
        except SimulationCancelled as exc:
            raise _cancelled_error(exc) from exc
    return schemas.SimulationResponse.from_domain(
        result,
        summary=summarise_response(result) if summary else None,
    )


@router.post("/simulate/batch", response_model=schemas.BatchSimulationResponse)
def run_simulation_batch(
    request: schemas.BatchSimulationRequest,
    summary: bool = Query(default=False, description="Attach peak/mean summary statistics"),
    x_request_timeout: float | None = Header(default=None, description="Deadline in seconds"),
    svc: ServiceRegistry = Depends(get_services),
) -> schemas.BatchSimulationResponse:
    context = _run_context(x_request_timeout, svc)
    with svc.telemetry.span("physiosim.run_batch", batch_size=len(request.requests)):
        try:
            results = svc.solver.run_batch([item.to_domain() for item in request.requests], context)
        except SimulationCancelled as exc:
            raise _cancelled_error(exc) from exc
    responses: List[schemas.SimulationResponse] = [
        schemas.SimulationResponse.from_domain(
            result,
            summary=summarise_response(result) if summary else None,
        )
        for result in results
    ]
    return schemas.BatchSimulationResponse(responses=responses)


@router.get("/compounds", response_model=schemas.CompoundPresetsResponse)
def list_compounds() -> schemas.CompoundPresetsResponse:
    items = [
        schemas.CompoundPresetEntry(
            compound=schemas.Compound.from_domain(preset.compound),
            description=preset.description,
        )
        for _, preset in sorted(available_presets().items())
    ]
    return schemas.CompoundPresetsResponse(items=items)


__all__ = ["ServiceRegistry", "configure_services", "get_services", "router"]
