"""FastAPI application entrypoint for the physiosim engine."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import configure_services, router as api_router
from .config import DEFAULT_SERVER_CONFIG, DEFAULT_SOLVER_CONFIG, DEFAULT_TELEMETRY_CONFIG
from .engine import Solver
from .telemetry import configure_telemetry

LOGGER = logging.getLogger(__name__)


API_DESCRIPTION = """
The physiosim engine computes a day-by-day serum concentration, toxicity and
anabolic-response time course for a stack of administered compounds.  The
service exposes endpoints to:

* run a single simulation (`/simulate`)
* run many simulations at once, preserving order (`/simulate/batch`)
* list the bundled compound presets (`/compounds`)

Send `X-Request-Timeout` (seconds) to bound how long a request may wait before
the simulation starts.  Use the OpenAPI schema for complete request/response
examples.
"""


telemetry = configure_telemetry(DEFAULT_TELEMETRY_CONFIG)
solver = Solver(DEFAULT_SOLVER_CONFIG)

configure_services(solver=solver, server_config=DEFAULT_SERVER_CONFIG, telemetry=telemetry)


@asynccontextmanager
async def lifespan(_: FastAPI):
    LOGGER.info(
        "physiosim engine ready (max_concurrency=%d, time_step_days=%.3g)",
        solver.config.max_concurrency,
        solver.config.time_step_days,
    )
    yield
    LOGGER.info("Shutting down physiosim engine")
    telemetry.shutdown()


app = FastAPI(title="physiosim engine", description=API_DESCRIPTION, lifespan=lifespan)
telemetry.instrument_app(app)


origins = list(DEFAULT_SERVER_CONFIG.cors_origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    # Browsers reject credentialed requests against a wildcard origin.
    allow_credentials="*" not in origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


app.include_router(api_router)


@app.get("/")
def read_root() -> dict[str, str]:
    """Basic health check used by the frontend shell."""

    return {"status": "ok", "version": DEFAULT_SERVER_CONFIG.version}


@app.get("/healthz")
def health() -> dict[str, str]:
    """Alias of :func:`read_root` for uptime monitors and load balancers."""

    return {"status": "ok", "version": DEFAULT_SERVER_CONFIG.version}


__all__ = ["app"]
