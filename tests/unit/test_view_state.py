from __future__ import annotations

import pytest

from stockview.models.record import RecordField, SOURCE_FIELDS
from stockview.services.view_state import SortDirection, SortKey, ViewState, normalize_filters


def test_default_view_sorts_by_id_ascending_without_filters() -> None:
    view = ViewState.default()

    assert view.sort.key.target is RecordField.ID
    assert view.sort.direction is SortDirection.ASCENDING
    assert set(view.filters) == set(SOURCE_FIELDS)
    assert all(value == "" for value in view.filters.values())
    assert view.active_filters() == []


@pytest.mark.parametrize(
    ("column", "expected"),
    [
        ("price", RecordField.PRICE),
        ("priceCode", RecordField.PRICE_CODE),
        ("price_code", RecordField.PRICE_CODE),
        ("car_type", RecordField.CATEGORY),
        ("category", RecordField.CATEGORY),
        (RecordField.DATE, RecordField.DATE),
    ],
)
def test_sort_key_resolves_names_and_aliases(column, expected: RecordField) -> None:
    assert SortKey.parse(column).target is expected


@pytest.mark.parametrize("column", ["", None, "Price", "colour"])
def test_unknown_sort_columns_are_kept_as_fallback(column: str | None) -> None:
    key = SortKey.parse(column)

    assert key.is_fallback
    assert key.column == (column or "")


def test_direction_is_a_binary_switch() -> None:
    assert SortDirection.parse("asc") is SortDirection.ASCENDING
    assert SortDirection.parse("desc") is SortDirection.DESCENDING
    assert SortDirection.parse("up") is SortDirection.DESCENDING
    assert SortDirection.parse(SortDirection.ASCENDING) is SortDirection.ASCENDING


def test_normalize_filters_completes_and_drops_unknown_names() -> None:
    filters = normalize_filters({"brand": "bosch", "priceCode": "r1", "id": "3", "colour": "red", "name": None})

    assert filters[RecordField.BRAND] == "bosch"
    assert filters[RecordField.PRICE_CODE] == "r1"
    assert filters[RecordField.NAME] == ""
    assert RecordField.ID not in filters
    assert len(filters) == len(SOURCE_FIELDS)


def test_view_state_is_immutable() -> None:
    view = ViewState.build(filters={"brand": "bosch"})

    with pytest.raises(TypeError):
        view.filters[RecordField.BRAND] = "other"  # type: ignore[index]
    assert view.active_filters() == [(RecordField.BRAND, "bosch")]
