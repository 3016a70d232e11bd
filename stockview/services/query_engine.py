from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import replace

from stockview.models.record import Record, RecordField
from stockview.services.view_state import SortKey, ViewState
from stockview.utils.logging import get_logger, log_debug_event

LOGGER = get_logger(__name__)


def matches_filters(record: Record, filters: Sequence[tuple[RecordField, str]]) -> bool:
    """Case-insensitive substring match, ANDed across every active filter."""
    for name, needle in filters:
        if needle.upper() not in record.text_of(name).upper():
            return False
    return True


def _sort_value(record: Record, key: SortKey) -> object:
    # Unknown columns order by the pre-reindex position.
    return record.value_of(key.target or RecordField.ID)


def run_query(records: Sequence[Record], view: ViewState) -> list[Record]:
    """Derive a view from ``records``: filter, sort, apply direction, reindex.

    The input sequence is never mutated. Direction is applied as a reversal of
    the ascending order, so the descending result of any column (the unknown
    column fallback included) is exactly the ascending result reversed.
    """
    start = time.perf_counter()
    active = view.active_filters()
    filtered = [record for record in records if matches_filters(record, active)]
    filter_ms = (time.perf_counter() - start) * 1000.0

    start = time.perf_counter()
    key = view.sort.key
    ordered = sorted(filtered, key=lambda record: _sort_value(record, key))
    if not view.sort.direction.is_ascending:
        ordered.reverse()
    sort_ms = (time.perf_counter() - start) * 1000.0

    result = [replace(record, id=index) for index, record in enumerate(ordered)]
    log_debug_event(
        LOGGER,
        "inventory.query",
        total=len(records),
        matched=len(result),
        sort_column=key.column,
        direction=view.sort.direction.value,
        filter_ms=filter_ms,
        sort_ms=sort_ms,
    )
    return result
