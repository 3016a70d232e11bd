from __future__ import annotations

import threading
from pathlib import Path

import pytest

from stockview.models.record import Record
from stockview.services.errors import (
    EmptyResultError,
    FontResolutionError,
    FormatError,
    IoError,
    NotFoundError,
)
from stockview.services.session import InventorySession
from stockview.services.view_state import ViewState


class FailingMeasurer:
    def measure(self, text: str, size: float) -> float:
        raise FontResolutionError("Arial is not installed")


def _codes(records: list[Record]) -> list[str]:
    return [record.code for record in records]


def test_new_session_is_empty(session: InventorySession) -> None:
    assert session.count() == 0
    assert session.width_hints() == Record.empty()
    assert session.view_state().sort == ViewState.default().sort
    assert session.view_state().active_filters() == []
    assert session.set_view("price", "asc").items == []


def test_import_returns_default_view(session: InventorySession, example_csv_path: Path) -> None:
    result = session.import_file(example_csv_path)

    assert [(record.code, record.id) for record in result.items] == [("A1", 0), ("B2", 1)]
    assert result.count == 2
    assert session.count() == 2


def test_example_view_sequence(session: InventorySession, example_csv_path: Path) -> None:
    session.import_file(example_csv_path)

    ascending = session.set_view("price", "asc", {})
    descending = session.set_view("price", "desc", {})
    filtered = session.set_view("price", "desc", {"brand": "dx"})

    assert [(record.code, record.id) for record in ascending.items] == [("B2", 0), ("A1", 1)]
    assert [(record.code, record.id) for record in descending.items] == [("A1", 0), ("B2", 1)]
    assert [(record.code, record.id) for record in filtered.items] == [("A1", 0)]


def test_import_keeps_the_current_view(
    session: InventorySession, example_csv_path: Path, catalog_csv_path: Path
) -> None:
    session.import_file(example_csv_path)
    session.set_view("price", "desc", {"category": "suv"})

    result = session.import_file(catalog_csv_path)

    assert _codes(result.items) == ["BP-220", "WB-005"]
    assert [record.id for record in result.items] == [0, 1]
    assert session.count() == 6


def test_set_view_is_idempotent(session: InventorySession, catalog_csv_path: Path) -> None:
    session.import_file(catalog_csv_path)

    first = session.set_view("name", "desc", {"brand": "o"})
    second = session.set_view("name", "desc", {"brand": "o"})

    assert first.items == second.items


def test_set_view_accepts_prepared_view(session: InventorySession, catalog_csv_path: Path) -> None:
    session.import_file(catalog_csv_path)
    view = ViewState.build(column="quantity", direction="asc")

    result = session.set_view(view=view)

    assert session.view_state() is view
    assert [record.quantity for record in result.items] == [8, 12, 40, 75, 250, 1040]


def test_query_results_do_not_renumber_the_dataset(
    session: InventorySession, catalog_csv_path: Path
) -> None:
    session.import_file(catalog_csv_path)
    session.set_view("price", "desc", {})

    result = session.set_view("unknown", "asc", {})

    assert _codes(result.items) == ["OF-100", "BP-220", "SP-010", "AF-330", "WB-005", "TB-777"]


def test_width_hints_follow_import_not_view(
    session: InventorySession, catalog_csv_path: Path
) -> None:
    session.import_file(catalog_csv_path)
    hints = session.width_hints()

    session.set_view("code", "asc", {"brand": "ngk"})

    assert session.width_hints() is hints
    assert hints.name == "WIPER BLADE"
    assert hints.quantity == 1040


def test_failed_import_leaves_previous_state(
    session: InventorySession, example_csv_path: Path, csv_builder
) -> None:
    session.import_file(example_csv_path)
    hints = session.width_hints()
    broken = csv_builder(rows=[("A1", "Filter")], filename="broken.csv")

    with pytest.raises(FormatError):
        session.import_file(broken)
    with pytest.raises(IoError):
        session.import_file(broken.parent / "missing.csv")

    assert session.count() == 2
    assert session.width_hints() is hints


def test_font_failure_leaves_previous_dataset(
    inventory_store, example_csv_path: Path, catalog_csv_path: Path
) -> None:
    session = InventorySession(store=inventory_store, measurer=FailingMeasurer(), font_size=16.0)

    with pytest.raises(FontResolutionError):
        session.import_file(catalog_csv_path)

    assert session.count() == 0


def test_restore_without_export_raises_not_found(session: InventorySession) -> None:
    with pytest.raises(NotFoundError):
        session.restore()


def test_restore_of_empty_export_raises_empty_result(session: InventorySession) -> None:
    assert session.persist() == "Database exported successfully!"

    with pytest.raises(EmptyResultError):
        session.restore()


def test_concurrent_set_view_calls_return_complete_views(
    session: InventorySession, catalog_csv_path: Path
) -> None:
    session.import_file(catalog_csv_path)
    errors: list[BaseException] = []

    def worker(direction: str) -> None:
        try:
            for _ in range(50):
                result = session.set_view("price", direction, {})
                assert [record.id for record in result.items] == list(range(6))
        except BaseException as error:  # pragma: no cover - surfaced below
            errors.append(error)

    threads = [threading.Thread(target=worker, args=(direction,)) for direction in ("asc", "desc") * 4]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert session.count() == 6
