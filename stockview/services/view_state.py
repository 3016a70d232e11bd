from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from stockview.models.record import RecordField, SOURCE_FIELDS

ASCENDING_TOKEN = "asc"
DESCENDING_TOKEN = "desc"


class SortDirection(str, Enum):
    """Binary direction switch: the ascending token is the only positive case."""

    ASCENDING = ASCENDING_TOKEN
    DESCENDING = DESCENDING_TOKEN

    @classmethod
    def parse(cls, value: str | SortDirection | None) -> SortDirection:
        if isinstance(value, SortDirection):
            return value
        return cls.ASCENDING if value == ASCENDING_TOKEN else cls.DESCENDING

    @property
    def is_ascending(self) -> bool:
        return self is SortDirection.ASCENDING


@dataclass(frozen=True, slots=True)
class SortKey:
    """Sort column as requested by the caller.

    ``target`` is ``None`` when the requested column is not a known field; the
    query engine then falls back to the pre-reindex ``id`` order.
    """

    column: str
    target: RecordField | None

    @classmethod
    def parse(cls, column: str | RecordField | None) -> SortKey:
        name = column.value if isinstance(column, RecordField) else (column or "")
        return cls(column=name, target=RecordField.parse(column))

    @property
    def is_fallback(self) -> bool:
        return self.target is None


@dataclass(frozen=True, slots=True)
class SortSpec:
    key: SortKey
    direction: SortDirection

    @classmethod
    def parse(
        cls,
        column: str | RecordField | None,
        direction: str | SortDirection | None,
    ) -> SortSpec:
        return cls(key=SortKey.parse(column), direction=SortDirection.parse(direction))


def _empty_filters() -> Mapping[RecordField, str]:
    return MappingProxyType({name: "" for name in SOURCE_FIELDS})


@dataclass(frozen=True, slots=True)
class ViewState:
    sort: SortSpec = field(
        default_factory=lambda: SortSpec(
            key=SortKey.parse(RecordField.ID), direction=SortDirection.ASCENDING
        )
    )
    filters: Mapping[RecordField, str] = field(default_factory=_empty_filters)

    @classmethod
    def default(cls) -> ViewState:
        return cls()

    @classmethod
    def build(
        cls,
        *,
        column: str | RecordField | None = RecordField.ID,
        direction: str | SortDirection | None = SortDirection.ASCENDING,
        filters: Mapping[str | RecordField, str | None] | None = None,
    ) -> ViewState:
        return cls(sort=SortSpec.parse(column, direction), filters=normalize_filters(filters))

    def active_filters(self) -> list[tuple[RecordField, str]]:
        return [(name, value) for name, value in self.filters.items() if value]


def normalize_filters(
    filters: Mapping[str | RecordField, str | None] | None,
) -> Mapping[RecordField, str]:
    """Complete a partial filter mapping so every business field has an entry.

    Unknown names and the derived ``id`` field are ignored; ``None`` counts as
    an empty (unconstrained) filter.
    """
    normalized = {name: "" for name in SOURCE_FIELDS}
    for raw_name, value in (filters or {}).items():
        name = RecordField.parse(raw_name)
        if name is None or name not in normalized:
            continue
        normalized[name] = value or ""
    return MappingProxyType(normalized)
