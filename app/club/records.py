"""
Record validation at the storage boundary

Raw rows from the document store are checked against the pydantic
models before they reach the ledger or the aggregator. Rows that fail
validation are skipped and logged, never passed on half-typed.
"""
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from .ledger import check_invariants
from .models import ClubEvent, Coach, Payment, Player

T = TypeVar("T", bound=BaseModel)

# table name -> model
COLLECTION_MODELS: Dict[str, Type[BaseModel]] = {
    "players": Player,
    "coaches": Coach,
    "payments": Payment,
    "events": ClubEvent,
}

# storage-only columns
_STORAGE_FIELDS = {"team_id", "created_at", "updated_at"}


def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
        for e in error.errors()
    )


def parse_record(model: Type[T], row: Dict[str, Any]) -> Optional[T]:
    """One row -> model, None when the row is invalid"""
    data = {k: v for k, v in (row or {}).items() if k not in _STORAGE_FIELDS}
    try:
        record = model.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Invalid {model.__name__} record {data.get('id')}: {_describe(e)}")
        return None

    if isinstance(record, Payment):
        problems = check_invariants(record)
        if problems:
            logger.warning(f"Inconsistent payment {record.id}: {', '.join(problems)}")

    return record


def parse_records(model: Type[T], rows: Iterable[Dict[str, Any]]) -> List[T]:
    """Valid rows only"""
    records = []
    for row in rows or []:
        record = parse_record(model, row)
        if record is not None:
            records.append(record)
    return records


def parse_collection(collection: str, rows: Iterable[Dict[str, Any]]) -> List[BaseModel]:
    try:
        model = COLLECTION_MODELS[collection]
    except KeyError:
        raise ValueError(f"Unknown collection: {collection}")
    return parse_records(model, rows)


def to_row(record: BaseModel, team_id: str) -> Dict[str, Any]:
    """Model -> JSON-safe row scoped to a team (id left to the store)"""
    row = record.model_dump(mode="json", exclude={"id"})
    row["team_id"] = team_id
    return row
