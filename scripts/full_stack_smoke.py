"""End-to-end smoke test that exercises the public API routes."""

from __future__ import annotations

from pathlib import Path
import sys

from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from physiosim.main import app


def _simulate_payload(days: int) -> dict[str, object]:
    return {
        "durationDays": days,
        "compounds": [
            {
                "id": "t-prop",
                "name": "Testosterone Propionate",
                "dosageMg": 75,
                "absorptionRateConstant": 1.35,
                "eliminationRateConstant": 0.42,
                "ester": "propionate",
            },
            {
                "id": "npp",
                "name": "Nandrolone Phenylpropionate",
                "dosageMg": 100,
                "absorptionRateConstant": 0.92,
                "eliminationRateConstant": 0.31,
                "ester": "propionate",
            },
        ],
    }


def main() -> None:
    with TestClient(app) as client:
        health = client.get("/healthz")
        health.raise_for_status()
        assert health.json()["status"] == "ok", "Health check failed"

        presets = client.get("/compounds")
        presets.raise_for_status()
        assert presets.json()["items"], "Compound preset library is empty"

        simulation = client.post("/simulate", params={"summary": "true"}, json=_simulate_payload(21))
        simulation.raise_for_status()
        data = simulation.json()
        assert len(data["dataPoints"]) == 21, "Simulation returned the wrong number of days"
        assert [point["day"] for point in data["dataPoints"]] == list(range(21)), "Days out of order"
        assert data["summary"]["peakConcentration"] > 0.0, "Summary missing peak concentration"

        batch = client.post(
            "/simulate/batch",
            json={"requests": [_simulate_payload(days) for days in (1, 2, 0)]},
        )
        batch.raise_for_status()
        lengths = [len(item["dataPoints"]) for item in batch.json()["responses"]]
        assert lengths == [1, 2, 0], f"Batch order not preserved: {lengths}"


if __name__ == "__main__":
    main()
