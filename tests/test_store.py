from __future__ import annotations

import json

import pytest

from valuation_navigator.models.inputs import ValuationInput
from valuation_navigator.models.stage import StageKey
from valuation_navigator.sample_data import build_sample_concept, build_sample_series_a
from valuation_navigator.services.calculator import compute_valuation
from valuation_navigator.services.store import InvalidImportError, ValuationNotFoundError, ValuationStore


@pytest.fixture
def store() -> ValuationStore:
    return ValuationStore()


def test_create_computes_snapshot_and_insights(store):
    record = store.create("owner-1", build_sample_series_a())

    assert record.id.startswith("val_")
    assert record.company_name == "Acme Analytics"
    assert record.stage == StageKey.SERIES_A
    assert record.snapshot == compute_valuation(build_sample_series_a())
    assert len(record.insights) == 3
    assert store.get(record.id) == record


def test_update_recomputes_and_stamps(store):
    record = store.create("owner-1", build_sample_series_a())
    updated = store.update(record.id, build_sample_concept())

    assert updated.id == record.id
    assert updated.created_at == record.created_at
    assert updated.updated_at is not None
    assert updated.stage == StageKey.CONCEPT
    assert updated.snapshot.base == pytest.approx(1_540_000)


def test_delete_and_missing_records(store):
    record = store.create("owner-1", build_sample_series_a())

    assert store.delete(record.id) is True
    assert store.delete(record.id) is False
    with pytest.raises(ValuationNotFoundError):
        store.get(record.id)
    with pytest.raises(ValuationNotFoundError):
        store.update(record.id, build_sample_concept())


def test_list_by_owner_is_most_recent_first(store):
    first = store.create("owner-1", build_sample_series_a())
    store.create("owner-2", build_sample_concept())
    second = store.create("owner-1", build_sample_concept())

    assert [record.id for record in store.list_by_owner("owner-1")] == [second.id, first.id]
    assert store.list_by_owner("nobody") == []


def test_verify_detects_tampered_snapshot(store):
    record = store.create("owner-1", build_sample_series_a())
    tampered = record.model_copy(update={"snapshot": record.snapshot.model_copy(update={"base": 1.0})})

    assert store.verify(record) is True
    assert store.verify(tampered) is False


def test_export_import_round_trip_preserves_outputs(store):
    store.create("owner-1", build_sample_series_a())
    store.create("owner-1", build_sample_concept())
    payload = store.export_json("owner-1")

    restored = ValuationStore()
    assert restored.import_json(payload) == 2
    assert restored.import_json(payload) == 0
    for record in restored.list_by_owner("owner-1"):
        assert restored.verify(record)


@pytest.mark.parametrize("payload", ["{}", "not json", json.dumps([{"id": "val_x"}])])
def test_import_rejects_malformed_payloads(store, payload):
    with pytest.raises(InvalidImportError):
        store.import_json(payload)


def test_share_hides_owner(store):
    record = store.create("owner-1", build_sample_series_a())
    view = store.share(record.id)

    assert view.id == record.id
    assert view.snapshot == record.snapshot
    assert "owner_id" not in view.model_dump()


def test_overflowing_arr_survives_export_import(store):
    store.create("owner-1", ValuationInput(stage=StageKey.SERIES_B, arr=1e304, monthly_growth=5))
    restored = ValuationStore()

    assert restored.import_json(store.export_json("owner-1")) == 1
    assert restored.verify(restored.list_by_owner("owner-1")[0])
