from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

import pytest

from stockview.db.store import InventoryStore
from stockview.models.record import Record
from stockview.services.importer import read_records
from stockview.services.session import InventorySession
from stockview.utils.config import load_store_config
from tests.fixtures.inventory.factory import (
    CATALOG_ROWS,
    EXAMPLE_ROWS,
    GlyphTableMeasurer,
    build_csv,
)


@pytest.fixture
def temp_data_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    data_root = tmp_path / "data"
    data_root.mkdir()
    monkeypatch.setenv("DATA_ROOT", str(data_root))
    monkeypatch.delenv("STOCKVIEW_DB_PATH", raising=False)
    return data_root


@pytest.fixture
def db_path(temp_data_root: Path) -> Path:
    return temp_data_root / "database.sqlite"


@pytest.fixture
def inventory_store(temp_data_root: Path) -> InventoryStore:
    return InventoryStore(load_store_config(temp_data_root))


@pytest.fixture
def measurer() -> GlyphTableMeasurer:
    return GlyphTableMeasurer()


@pytest.fixture
def session(inventory_store: InventoryStore, measurer: GlyphTableMeasurer) -> InventorySession:
    return InventorySession(store=inventory_store, measurer=measurer, font_size=16.0)


@pytest.fixture
def csv_fixture_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "imports"
    directory.mkdir(parents=True, exist_ok=True)
    return directory


@pytest.fixture
def csv_builder(csv_fixture_dir: Path):
    def _builder(
        *,
        rows: Iterable[Sequence[object]] | None = None,
        filename: str = "stock.csv",
        delimiter: str = ",",
    ) -> Path:
        return build_csv(
            csv_fixture_dir / filename,
            rows=EXAMPLE_ROWS if rows is None else rows,
            delimiter=delimiter,
        )

    return _builder


@pytest.fixture
def example_csv_path(csv_builder) -> Path:
    return csv_builder()


@pytest.fixture
def catalog_csv_path(csv_builder) -> Path:
    return csv_builder(rows=CATALOG_ROWS, filename="catalog.csv")


@pytest.fixture
def catalog_records(catalog_csv_path: Path) -> list[Record]:
    return read_records(catalog_csv_path)
