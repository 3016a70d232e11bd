from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass

from stockview.db.store import InventoryStore
from stockview.models.record import Record, RecordField
from stockview.services.column_widths import (
    TextMeasurer,
    build_default_measurer,
    estimate_column_widths,
)
from stockview.services.errors import EmptyResultError
from stockview.services.importer import ImportSource, read_records
from stockview.services.query_engine import run_query
from stockview.services.view_state import SortDirection, ViewState
from stockview.utils.config import DEFAULT_FONT_SIZE, ImportConfig, load_import_config
from stockview.utils.logging import get_logger, log_event, log_timing

LOGGER = get_logger(__name__)

EXPORT_MESSAGE = "Database exported successfully!"


@dataclass(frozen=True)
class QueryResult:
    items: list[Record]

    @property
    def count(self) -> int:
        return len(self.items)


class InventorySession:
    """Single owner of the dataset, the active view and the cached width hints.

    Each of the three is guarded by its own lock, taken only for the duration
    of a read or a swap. Import and restore swap the dataset, then the width
    hints, then query, as separate steps: a concurrent ``set_view`` may observe
    new data with old width hints (or the reverse). Callers needing a consistent
    snapshot across import and query must serialize those calls themselves.
    """

    def __init__(
        self,
        *,
        store: InventoryStore | None = None,
        measurer: TextMeasurer | None = None,
        font_size: float | None = None,
        import_config: ImportConfig | None = None,
    ) -> None:
        if measurer is None:
            measurer, default_size = build_default_measurer()
            font_size = font_size if font_size is not None else default_size
        self.store = store or InventoryStore()
        self.measurer = measurer
        self.font_size = font_size if font_size is not None else DEFAULT_FONT_SIZE
        self.import_config = import_config or load_import_config()

        self._records: list[Record] = []
        self._view = ViewState.default()
        self._width_hints = Record.empty()
        self._records_lock = threading.Lock()
        self._view_lock = threading.Lock()
        self._widths_lock = threading.Lock()

    # ---- snapshots ----
    def _snapshot_records(self) -> list[Record]:
        with self._records_lock:
            return list(self._records)

    def view_state(self) -> ViewState:
        with self._view_lock:
            return self._view

    def _query(self) -> QueryResult:
        records = self._snapshot_records()
        return QueryResult(items=run_query(records, self.view_state()))

    def _replace_dataset(self, records: list[Record]) -> QueryResult:
        # Width hints are computed before anything is swapped so a font failure
        # leaves the previous dataset in place.
        hints = estimate_column_widths(records, self.measurer, size=self.font_size)
        with self._records_lock:
            self._records = records
        with self._widths_lock:
            self._width_hints = hints
        return self._query()

    # ---- operations ----
    def import_file(self, source: ImportSource) -> QueryResult:
        """Load a headerless 8-column delimited file, replacing the dataset."""
        with log_timing(LOGGER, "inventory.import"):
            records = read_records(source, self.import_config)
            result = self._replace_dataset(records)
        log_event(LOGGER, "inventory.import.rows", rows=len(records), visible=result.count)
        return result

    def restore(self) -> QueryResult:
        """Replace the dataset with the contents of the exported database."""
        with log_timing(LOGGER, "inventory.restore", path=str(self.store.db_path)):
            records = self.store.read_all()
            if not records:
                raise EmptyResultError(f"No stock items found in {self.store.db_path}.")
            result = self._replace_dataset(records)
        log_event(LOGGER, "inventory.restore.rows", rows=len(records), visible=result.count)
        return result

    def persist(self) -> str:
        """Write the whole dataset to the exported database, replacing it.

        The dataset is copied under its lock and written without holding it,
        so a concurrent import may complete while the export is in progress.
        """
        records = self._snapshot_records()
        with log_timing(LOGGER, "inventory.export", path=str(self.store.db_path), rows=len(records)):
            self.store.replace_all(records)
        return EXPORT_MESSAGE

    def set_view(
        self,
        column: str | RecordField | None = RecordField.ID,
        direction: str | SortDirection | None = SortDirection.ASCENDING,
        filters: Mapping[str | RecordField, str | None] | None = None,
        *,
        view: ViewState | None = None,
    ) -> QueryResult:
        """Replace sort and filters together and return the refreshed view."""
        new_view = view or ViewState.build(column=column, direction=direction, filters=filters)
        with self._view_lock:
            self._view = new_view
        log_event(
            LOGGER,
            "inventory.view.set",
            column=new_view.sort.key.column,
            direction=new_view.sort.direction.value,
            filters={name.value: value for name, value in new_view.active_filters()},
        )
        return self._query()

    def width_hints(self) -> Record:
        with self._widths_lock:
            return self._width_hints

    def count(self) -> int:
        with self._records_lock:
            return len(self._records)
