"""Configuration helpers for the solver and the HTTP service."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Tuple

import math
import os

from .kinetics import (
    DEFAULT_ANABOLIC_EC50,
    DEFAULT_ANABOLIC_HILL_COEFF,
    DEFAULT_ANABOLIC_MAX_EFFECT,
    DEFAULT_TOXICITY_KM,
    DEFAULT_TOXICITY_VMAX,
)

DEFAULT_TIME_STEP_DAYS = 1.0
DEFAULT_MAX_CONCURRENCY = 4

_FALSY = {"0", "false", "no"}


def _parse_float(raw: Any, default: float) -> float:
    if raw is None:
        return default
    try:
        return float(raw)
    except (TypeError, ValueError):
        return default


def _parse_int(raw: Any, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def _positive_or(value: Any, default: float) -> float:
    # ``not value > 0`` also rejects NaN.
    value = _parse_float(value, default)
    if not value > 0 or math.isinf(value):
        return default
    return value


@dataclass(frozen=True)
class SolverConfig:
    """Immutable model constants and pool sizing for one :class:`Solver`.

    Every field is defaulted independently when the supplied value is
    non-positive, NaN or infinite, so constructing a ``SolverConfig`` never fails and
    ``SolverConfig()`` yields the documented defaults.  The instance is frozen
    after ``__post_init__`` and is shared read-only by all solver workers.
    """

    time_step_days: float = DEFAULT_TIME_STEP_DAYS
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    toxicity_vmax: float = DEFAULT_TOXICITY_VMAX
    toxicity_km: float = DEFAULT_TOXICITY_KM
    anabolic_max_effect: float = DEFAULT_ANABOLIC_MAX_EFFECT
    anabolic_ec50: float = DEFAULT_ANABOLIC_EC50
    anabolic_hill: float = DEFAULT_ANABOLIC_HILL_COEFF

    def __post_init__(self) -> None:
        concurrency = _parse_int(self.max_concurrency, DEFAULT_MAX_CONCURRENCY)
        if concurrency <= 0:
            concurrency = DEFAULT_MAX_CONCURRENCY
        normalised = {
            "time_step_days": _positive_or(self.time_step_days, DEFAULT_TIME_STEP_DAYS),
            "max_concurrency": concurrency,
            "toxicity_vmax": _positive_or(self.toxicity_vmax, DEFAULT_TOXICITY_VMAX),
            "toxicity_km": _positive_or(self.toxicity_km, DEFAULT_TOXICITY_KM),
            "anabolic_max_effect": _positive_or(self.anabolic_max_effect, DEFAULT_ANABOLIC_MAX_EFFECT),
            "anabolic_ec50": _positive_or(self.anabolic_ec50, DEFAULT_ANABOLIC_EC50),
            "anabolic_hill": _positive_or(self.anabolic_hill, DEFAULT_ANABOLIC_HILL_COEFF),
        }
        for name, value in normalised.items():
            object.__setattr__(self, name, value)

    # camelCase option names used by external callers.
    OPTION_NAMES = {
        "timeStepDays": "time_step_days",
        "maxConcurrency": "max_concurrency",
        "toxicityVMax": "toxicity_vmax",
        "toxicityKm": "toxicity_km",
        "anabolicMaxEffect": "anabolic_max_effect",
        "anabolicEC50": "anabolic_ec50",
        "anabolicHillCoefficient": "anabolic_hill",
    }

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> "SolverConfig":
        """Build a configuration from a mapping of recognised option names.

        Both the camelCase names (``timeStepDays``) and the attribute names
        (``time_step_days``) are accepted; unknown keys are ignored.
        """

        options = options or {}
        attribute_names = {item.name for item in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            name = cls.OPTION_NAMES.get(key, key)
            if name in attribute_names and value is not None:
                kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        prefix: str = "PHYSIOSIM_SOLVER_",
    ) -> "SolverConfig":
        """Create a solver configuration from environment variables.

        ``<prefix>TIME_STEP_DAYS``, ``<prefix>MAX_CONCURRENCY``,
        ``<prefix>TOXICITY_VMAX``, ``<prefix>TOXICITY_KM``,
        ``<prefix>ANABOLIC_MAX_EFFECT``, ``<prefix>ANABOLIC_EC50`` and
        ``<prefix>ANABOLIC_HILL`` are recognised.  Missing or unparsable values
        fall back to the defaults.
        """

        env = env if env is not None else os.environ
        return cls(
            time_step_days=_parse_float(env.get(f"{prefix}TIME_STEP_DAYS"), DEFAULT_TIME_STEP_DAYS),
            max_concurrency=_parse_int(env.get(f"{prefix}MAX_CONCURRENCY"), DEFAULT_MAX_CONCURRENCY),
            toxicity_vmax=_parse_float(env.get(f"{prefix}TOXICITY_VMAX"), DEFAULT_TOXICITY_VMAX),
            toxicity_km=_parse_float(env.get(f"{prefix}TOXICITY_KM"), DEFAULT_TOXICITY_KM),
            anabolic_max_effect=_parse_float(env.get(f"{prefix}ANABOLIC_MAX_EFFECT"), DEFAULT_ANABOLIC_MAX_EFFECT),
            anabolic_ec50=_parse_float(env.get(f"{prefix}ANABOLIC_EC50"), DEFAULT_ANABOLIC_EC50),
            anabolic_hill=_parse_float(env.get(f"{prefix}ANABOLIC_HILL"), DEFAULT_ANABOLIC_HILL_COEFF),
        )


@dataclass(slots=True)
class ServerConfig:
    """Runtime settings for the HTTP surface wrapping the solver."""

    cors_origins: Tuple[str, ...] = ("*",)
    request_timeout_s: Optional[float] = None
    version: str = "2025.11.0"

    def __post_init__(self) -> None:
        if self.request_timeout_s is not None and self.request_timeout_s <= 0:
            self.request_timeout_s = None

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        prefix: str = "PHYSIOSIM_",
    ) -> "ServerConfig":
        """Parse CORS origins, the default request deadline and the version tag."""

        env = env if env is not None else os.environ
        raw_origins = env.get(f"{prefix}CORS_ORIGINS", "*")
        origins = tuple(origin.strip() for origin in raw_origins.split(",") if origin.strip()) or ("*",)
        timeout = _parse_float(env.get(f"{prefix}REQUEST_TIMEOUT_S"), 0.0)
        return cls(
            cors_origins=origins,
            request_timeout_s=timeout if timeout > 0 else None,
            version=env.get(f"{prefix}VERSION") or "2025.11.0",
        )


@dataclass(slots=True)
class TelemetryConfig:
    """Runtime configuration for the OpenTelemetry trace exporter."""

    enabled: bool = False
    service_name: str = "physiosim-engine"
    environment: str = "development"
    exporter_endpoint: Optional[str] = None
    sampling_ratio: float = 0.1

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        prefix: str = "OTEL_",
    ) -> "TelemetryConfig":
        """Construct a telemetry configuration from environment variables."""

        env = env if env is not None else os.environ
        enabled_raw = env.get(f"{prefix}ENABLED") or env.get("ENABLE_TELEMETRY")
        enabled = False
        if enabled_raw is not None:
            enabled = str(enabled_raw).strip().lower() not in _FALSY
        endpoint = env.get(f"{prefix}EXPORTER_OTLP_ENDPOINT")
        service_name = env.get(f"{prefix}SERVICE_NAME") or env.get("SERVICE_NAME") or "physiosim-engine"
        environment_name = env.get(f"{prefix}ENVIRONMENT") or env.get("DEPLOYMENT_ENV", "development")

        ratio = _parse_float(env.get(f"{prefix}SAMPLING_RATIO") or env.get("OTEL_TRACES_SAMPLER_ARG"), 0.1)
        sampling_ratio = min(max(ratio, 0.0), 1.0) if not math.isnan(ratio) else 0.1

        return cls(
            enabled=enabled or bool(endpoint),
            service_name=service_name,
            environment=environment_name,
            exporter_endpoint=endpoint,
            sampling_ratio=sampling_ratio,
        )


DEFAULT_SOLVER_CONFIG = SolverConfig.from_env()
DEFAULT_SERVER_CONFIG = ServerConfig.from_env()
DEFAULT_TELEMETRY_CONFIG = TelemetryConfig.from_env()
