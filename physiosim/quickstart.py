"""Command-line helper for exploring the physiosim engine locally."""

from __future__ import annotations

import argparse
import json
from typing import Dict, Iterable, Mapping, Sequence

from .config import SolverConfig
from .engine import SimulationRequest, Solver, summarise_response
from .presets import available_presets, get_preset

_DEFAULT_PRESETS: tuple[str, ...] = ("t-prop",)


class QuickstartError(Exception):
    """Raised when the quickstart helper receives invalid input."""


def _parse_dose_overrides(values: Iterable[str]) -> Dict[str, float]:
    overrides: Dict[str, float] = {}
    for value in values:
        try:
            name_part, dose_part = value.split("=", 1)
            dose = float(dose_part)
        except ValueError as exc:
            raise QuickstartError("Dose overrides must use the format ID=MG (for example npp=150)") from exc
        overrides[name_part.strip().lower()] = dose
    return overrides


def run_quickstart(
    presets: Sequence[str] | None = None,
    *,
    doses: Mapping[str, float] | None = None,
    days: int = 21,
    time_step: float = 1.0,
    max_concurrency: int = 4,
) -> Dict[str, object]:
    """Execute a simulation locally and return a JSON-friendly payload."""

    if days < 0:
        raise QuickstartError("Duration must be zero or a positive number of days")

    doses = doses or {}
    selected = list(presets or _DEFAULT_PRESETS)
    compounds = []
    for compound_id in selected:
        try:
            compounds.append(get_preset(compound_id, dosage_mg=doses.get(compound_id.lower())))
        except KeyError as exc:
            raise QuickstartError(
                f"Unknown compound preset {compound_id!r}; choose from {sorted(available_presets())}"
            ) from exc

    solver = Solver(SolverConfig(time_step_days=time_step, max_concurrency=max_concurrency))
    response = solver.run(SimulationRequest(duration_days=days, compounds=tuple(compounds)))

    return {
        "compounds": [
            {
                "id": compound.id,
                "name": compound.name,
                "dosage_mg": compound.dosage_mg,
                "ester": compound.ester.value,
            }
            for compound in compounds
        ],
        "data_points": [
            {
                "day": point.day,
                "serum_concentration": point.serum_concentration,
                "anabolic_score": point.anabolic_score,
                "toxicity_score": point.toxicity_score,
            }
            for point in response.data_points
        ],
        "summary": summarise_response(response),
    }


def summarise_quickstart(payload: Mapping[str, object], *, rows: int = 7) -> str:
    """Create a human-readable summary of a quickstart simulation."""

    compounds = payload.get("compounds", [])
    points = payload.get("data_points", [])
    summary = payload.get("summary", {})

    lines = ["Compounds:"]
    for compound in compounds:
        lines.append(f"  • {compound['name']} ({compound['dosage_mg']:.0f} mg, {compound['ester']})")

    if not points:
        lines.append("\nNo days simulated.")
        return "\n".join(lines)

    lines.append(
        "\nPeak serum concentration: {:.2f} on day {}".format(
            summary.get("peak_concentration", 0.0), summary.get("peak_day")
        )
    )
    lines.append(f"Peak toxicity score:      {summary.get('peak_toxicity', 0.0):.2f}")
    lines.append(f"Peak anabolic score:      {summary.get('peak_anabolic', 0.0):.2f}")

    lines.append("\n  day   serum    anabolic  toxicity")
    for point in points[: max(1, rows)]:
        lines.append(
            f"  {point['day']:>3}  {point['serum_concentration']:8.2f}  "
            f"{point['anabolic_score']:8.2f}  {point['toxicity_score']:8.2f}"
        )
    if len(points) > rows:
        lines.append(f"  … {len(points) - rows} more days")
    return "\n".join(lines)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the physiosim engine with friendly defaults.")
    parser.add_argument(
        "--preset",
        action="append",
        default=[],
        metavar="ID",
        help="Compound preset to include (repeatable; defaults to t-prop)",
    )
    parser.add_argument(
        "--dose",
        action="append",
        default=[],
        metavar="ID=MG",
        help="Override the dose of a selected preset (repeatable)",
    )
    parser.add_argument("--days", type=int, default=21, help="Number of days to simulate")
    parser.add_argument("--time-step", type=float, default=1.0, help="Length of one simulated day")
    parser.add_argument("--max-concurrency", type=int, default=4, help="Worker pool size ceiling")
    parser.add_argument("--rows", type=int, default=7, help="How many daily rows to display in the text summary")
    parser.add_argument("--json", action="store_true", help="Print the raw JSON payload instead of a summary")
    parser.add_argument("--list-presets", action="store_true", help="List built-in compound presets and exit")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.list_presets:
        lines = ["Available presets:"]
        for compound_id, preset in sorted(available_presets().items()):
            lines.append(f"  • {compound_id}: {preset.compound.name} - {preset.description}")
        print("\n".join(lines))
        return 0

    try:
        payload = run_quickstart(
            args.preset or None,
            doses=_parse_dose_overrides(args.dose),
            days=args.days,
            time_step=args.time_step,
            max_concurrency=args.max_concurrency,
        )
    except QuickstartError as exc:
        parser.error(str(exc))
        return 2

    if args.json:
        print(json.dumps(payload, indent=2, sort_keys=True))
    else:
        print(summarise_quickstart(payload, rows=args.rows))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
