from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from ..models.inputs import ValuationInput
from ..models.saved import SavedValuation, SharedValuationView
from .calculator import compute_valuation
from .insights import compute_insights

logger = logging.getLogger(__name__)

_RECORDS_ADAPTER = TypeAdapter(List[SavedValuation])


class ValuationNotFoundError(KeyError):
    pass


class InvalidImportError(ValueError):
    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _generate_id() -> str:
    return f"val_{uuid.uuid4().hex}"


class ValuationStore:
    """Process-local saved valuations keyed by id. Contents are lost on restart."""

    def __init__(self) -> None:
        self._records: Dict[str, SavedValuation] = {}

    def create(self, owner_id: str, inputs: ValuationInput) -> SavedValuation:
        snapshot = compute_valuation(inputs)
        record = SavedValuation(
            id=_generate_id(),
            owner_id=owner_id,
            company_name=inputs.name,
            stage=inputs.stage,
            created_at=_now(),
            inputs=inputs,
            snapshot=snapshot,
            insights=compute_insights(inputs, snapshot),
        )
        self._records[record.id] = record
        logger.info("Saved valuation %s for owner %s", record.id, owner_id)
        return record

    def get(self, valuation_id: str) -> SavedValuation:
        record = self._records.get(valuation_id)
        if record is None:
            raise ValuationNotFoundError(valuation_id)
        return record

    def update(self, valuation_id: str, inputs: ValuationInput) -> SavedValuation:
        existing = self.get(valuation_id)
        snapshot = compute_valuation(inputs)
        updated = existing.model_copy(
            update={
                "company_name": inputs.name,
                "stage": inputs.stage,
                "updated_at": _now(),
                "inputs": inputs,
                "snapshot": snapshot,
                "insights": compute_insights(inputs, snapshot),
            }
        )
        self._records[valuation_id] = updated
        logger.info("Updated valuation %s", valuation_id)
        return updated

    def delete(self, valuation_id: str) -> bool:
        if self._records.pop(valuation_id, None) is None:
            return False
        logger.info("Deleted valuation %s", valuation_id)
        return True

    def list_by_owner(self, owner_id: str) -> List[SavedValuation]:
        owned = [record for record in reversed(list(self._records.values())) if record.owner_id == owner_id]
        return sorted(owned, key=lambda record: record.created_at, reverse=True)

    def clear(self) -> None:
        self._records.clear()

    def share(self, valuation_id: str) -> SharedValuationView:
        record = self.get(valuation_id)
        return SharedValuationView(
            id=record.id,
            company_name=record.company_name,
            stage=record.stage,
            created_at=record.created_at,
            inputs=record.inputs,
            snapshot=record.snapshot,
            insights=record.insights,
        )

    def verify(self, record: SavedValuation) -> bool:
        return compute_valuation(record.inputs) == record.snapshot

    def export_json(self, owner_id: Optional[str] = None) -> str:
        if owner_id is None:
            records = list(self._records.values())
        else:
            records = self.list_by_owner(owner_id)
        return _RECORDS_ADAPTER.dump_json(records, indent=2).decode()

    def import_json(self, payload: str) -> int:
        try:
            imported = _RECORDS_ADAPTER.validate_json(payload)
        except ValidationError as exc:
            raise InvalidImportError("Invalid format: expected a list of saved valuations") from exc
        added = 0
        for record in imported:
            if record.id in self._records:
                continue
            self._records[record.id] = record
            added += 1
        logger.info("Imported %d of %d valuations", added, len(imported))
        return added
