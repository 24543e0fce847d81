from __future__ import annotations

import sys

import pytest

SERIES_A = {
    "name": "Acme Analytics",
    "stage": "seriesA",
    "arr": 2,
    "monthly_growth": 15,
    "tam": 10,
    "gross_margin": 75,
    "net_retention": 110,
    "burn_multiple": 1,
    "team_strength": 4,
    "differentiation": 4,
}


def test_healthcheck(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_stages_lists_five_profiles(client):
    stages = client.get("/stages").json()

    assert [stage["key"] for stage in stages] == ["concept", "seed", "seriesA", "seriesB", "seriesC"]


def test_compute_returns_snapshot_and_insights(client):
    response = client.post("/valuations/compute", json=SERIES_A)

    assert response.status_code == 200
    body = response.json()
    assert body["snapshot"]["revenue_multiple"] == pytest.approx(29.975)
    assert body["snapshot"]["method"] == "revenue_multiple"
    assert len(body["insights"]) == 3


def test_compute_rejects_unknown_stage(client):
    response = client.post("/valuations/compute", json={**SERIES_A, "stage": "seriesD"})

    assert response.status_code == 422


def test_saved_valuation_lifecycle(client):
    created = client.post("/valuations", json={"owner_id": "founder", "inputs": SERIES_A}).json()
    valuation_id = created["id"]

    assert client.get(f"/valuations/{valuation_id}").json()["snapshot"] == created["snapshot"]
    assert client.get("/valuations", params={"owner_id": "founder"}).json()["valuations"][0]["id"] == valuation_id
    assert client.get(f"/valuations/{valuation_id}/verify").json()["consistent"] is True

    updated = client.put(
        f"/valuations/{valuation_id}", json={"inputs": {**SERIES_A, "burn_multiple": 0}}
    ).json()
    assert updated["snapshot"]["lifts"]["burn"] == 0
    assert updated["updated_at"] is not None

    shared = client.get(f"/shared/{valuation_id}").json()
    assert "owner_id" not in shared
    assert shared["snapshot"] == updated["snapshot"]

    assert client.delete(f"/valuations/{valuation_id}").json() == {"deleted": True}
    assert client.get(f"/valuations/{valuation_id}").status_code == 404
    assert client.delete(f"/valuations/{valuation_id}").status_code == 404
    assert client.get(f"/shared/{valuation_id}").status_code == 404


def test_export_then_import(client):
    client.post("/valuations", json={"owner_id": "founder", "inputs": SERIES_A})
    exported = client.get("/valuations/export", params={"owner_id": "founder"}).text

    assert client.post("/valuations/import", json={"payload": exported}).json() == {"imported": 0}
    assert client.post("/valuations/import", json={"payload": "{}"}).status_code == 400


def test_benchmarks_for_stage(client):
    body = client.get("/benchmarks/seriesA").json()

    assert body["benchmarks"]["arr"]["typical"] == [1, 5]
    assert body["hints"]["arr"] == "Typical Series A: $1M-$5M ARR"


def test_benchmark_status_for_metric(client):
    body = client.get("/benchmarks/seriesA/burn_multiple", params={"value": 0.8}).json()

    assert body["status"] == "good"
    assert client.get("/benchmarks/seriesA/runway", params={"value": 1}).status_code == 404


def test_methodology(client):
    assert client.get("/methodology").json()["berkus"]["name"] == "Berkus Method"


def test_compute_handles_overflowing_arr(client):
    response = client.post("/valuations/compute", json={"stage": "seriesB", "arr": 1e304, "monthly_growth": 5})

    assert response.status_code == 200
    body = response.json()
    assert body["snapshot"]["forward_arr"] == sys.float_info.max
    assert "$1.8e+296T ARR in 12 months" in body["insights"][1]
