"""
Result normalization.

Every backend hands its native result to ``normalize``; this is the only place
that decides what a result looks like. Backends must produce one of three
shapes:

* plain text (e.g. kubectl's table output),
* a list of key-value objects (rows),
* a single composite object (dumped as pretty JSON).
"""
from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence

from querydesk.common.contracts import MessageResult, ResultEnvelope, TabularResult
from querydesk.common.logger import get_logger

logger = get_logger("normalizer")

NO_RESULTS_MESSAGE = "No results found"


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray, memoryview)):
        # BINARY columns; raw bytes have no JSON form.
        return bytes(value).hex()
    return value


def _unique_columns(columns: Sequence[Any]) -> List[str]:
    unique: List[str] = []
    taken = set()
    for column in columns:
        name = candidate = str(column)
        suffix = 1
        while candidate in taken:
            suffix += 1
            candidate = f"{name}_{suffix}"
        taken.add(candidate)
        unique.append(candidate)
    return unique


def normalize_text(text: str) -> ResultEnvelope:
    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) <= 1:
        return MessageResult(message=text or "", row_count=0)

    # Rows are neither padded nor truncated to the header width.
    headers = lines[0].split()
    rows = [line.split() for line in lines[1:]]
    return TabularResult.from_rows(headers, rows)


def normalize_objects(items: Sequence[Any]) -> ResultEnvelope:
    if not items:
        return MessageResult(message=NO_RESULTS_MESSAGE, row_count=0)

    records = [item if isinstance(item, Mapping) else {"value": item} for item in items]

    # The first record defines the columns; later records are projected onto them.
    columns: List[str] = [str(key) for key in records[0].keys()]
    known = set(records[0].keys())
    dropped = set()
    for record in records[1:]:
        dropped.update(key for key in record.keys() if key not in known)
    if dropped:
        logger.warning(
            "Dropping keys absent from the first result row",
            extra={"dropped_keys": sorted(str(k) for k in dropped)},
        )

    rows = [[_cell(record.get(col)) for col in records[0].keys()] for record in records]
    return TabularResult.from_rows(columns, rows)


def normalize_rows(columns: Sequence[Any], rows: Sequence[Sequence[Any]]) -> ResultEnvelope:
    """Positional rows (warehouse cursors). Repeated column names get a numeric suffix."""
    if not rows:
        return MessageResult(message=NO_RESULTS_MESSAGE, row_count=0)
    return TabularResult.from_rows(
        _unique_columns(columns),
        [[_cell(value) for value in row] for row in rows],
    )


def normalize_object(obj: Any) -> ResultEnvelope:
    return MessageResult(message=json.dumps(obj, indent=2, default=str), row_count=1)


def normalize(native: Any, rows_affected: Optional[int] = None) -> ResultEnvelope:
    """Maps a backend-native result onto the canonical result envelope.

    Args:
        native: Plain text, a list of objects, or a single object.
        rows_affected: Attached to message results (e.g. warehouse DML counts).

    Returns:
        ResultEnvelope: A TabularResult or a MessageResult.
    """
    if isinstance(native, str):
        envelope = normalize_text(native)
    elif isinstance(native, (list, tuple)):
        envelope = normalize_objects(native)
    else:
        envelope = normalize_object(native)

    if rows_affected is not None and isinstance(envelope, MessageResult):
        envelope = envelope.model_copy(update={"rows_affected": rows_affected})
    return envelope
