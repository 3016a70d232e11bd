from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any


class RecordField(str, Enum):
    ID = "id"
    CODE = "code"
    NAME = "name"
    BRAND = "brand"
    CATEGORY = "category"
    PRICE = "price"
    PRICE_CODE = "price_code"
    DATE = "date"
    QUANTITY = "quantity"

    @property
    def is_numeric(self) -> bool:
        return self in NUMERIC_FIELDS

    @property
    def column_name(self) -> str:
        """Column name used by the persisted ``stock_items`` table."""
        return _COLUMN_NAMES.get(self, self.value)

    @property
    def alias(self) -> str:
        head, *rest = self.value.split("_")
        return head + "".join(part.capitalize() for part in rest)

    @classmethod
    def parse(cls, value: str | RecordField | None) -> RecordField | None:
        """Resolve a field from its name, camelCase alias or persisted column name."""
        if isinstance(value, RecordField):
            return value
        if not value:
            return None
        return _LOOKUP.get(value.strip())


NUMERIC_FIELDS = frozenset({RecordField.ID, RecordField.PRICE, RecordField.QUANTITY})
_COLUMN_NAMES = {RecordField.CATEGORY: "car_type"}

# Business fields in source column order; ``id`` is derived and never imported.
SOURCE_FIELDS: tuple[RecordField, ...] = (
    RecordField.CODE,
    RecordField.NAME,
    RecordField.BRAND,
    RecordField.CATEGORY,
    RecordField.PRICE,
    RecordField.PRICE_CODE,
    RecordField.DATE,
    RecordField.QUANTITY,
)
DISPLAY_FIELDS: tuple[RecordField, ...] = (RecordField.ID, *SOURCE_FIELDS)

_LOOKUP: dict[str, RecordField] = {}
for _field in RecordField:
    _LOOKUP[_field.value] = _field
    _LOOKUP[_field.alias] = _field
    _LOOKUP[_field.column_name] = _field


@dataclass(frozen=True, slots=True)
class Record:
    """One inventory row.

    ``id`` is a display ordinal: the record's 0-based position in the sequence
    it was produced for (import order for the dataset, view order for query
    results). It is not an identity and is reassigned on every query.
    """

    id: int
    code: str
    name: str
    brand: str
    category: str
    price: int
    price_code: str
    date: str
    quantity: int

    @classmethod
    def empty(cls) -> Record:
        return cls(
            id=0,
            code="",
            name="",
            brand="",
            category="",
            price=0,
            price_code="",
            date="",
            quantity=0,
        )

    def value_of(self, field: RecordField) -> Any:
        return getattr(self, field.value)

    def text_of(self, field: RecordField) -> str:
        value = self.value_of(field)
        return str(value) if field.is_numeric else value

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)

    def as_row(self) -> dict[str, Any]:
        """Mapping keyed by persisted column names."""
        return {field.column_name: self.value_of(field) for field in DISPLAY_FIELDS}
