from __future__ import annotations

import csv
import re
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TextIO, Union

from stockview.models.record import SOURCE_FIELDS, Record
from stockview.services.errors import FormatError, IoError, ParseError
from stockview.utils.config import ImportConfig, load_import_config

ImportSource = Union[str, Path, TextIO]

THOUSANDS_SEPARATOR = ","
INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
INTEGER_MIN = -(2**63)
INTEGER_MAX = 2**63 - 1
COLUMN_COUNT = len(SOURCE_FIELDS)


def parse_integer(text: str, *, column: str, line_number: int) -> int:
    """Parse a signed 64-bit integer cell after stripping thousands separators.

    Only ASCII digits with an optional sign are accepted; surrounding
    whitespace, underscores and other digit scripts are rejected.
    """
    cleaned = text.replace(THOUSANDS_SEPARATOR, "")
    if INTEGER_PATTERN.fullmatch(cleaned) is None:
        raise ParseError(f"Line {line_number}: {column} value {text!r} is not a whole number.")
    value = int(cleaned)
    if not INTEGER_MIN <= value <= INTEGER_MAX:
        raise ParseError(f"Line {line_number}: {column} value {text!r} is out of range.")
    return value


def parse_row(row: Sequence[str], *, index: int, line_number: int) -> Record:
    if len(row) < COLUMN_COUNT:
        raise FormatError(
            f"Line {line_number}: expected {COLUMN_COUNT} fields, found {len(row)}."
        )
    code, name, brand, category, price, price_code, date, quantity = row[:COLUMN_COUNT]
    return Record(
        id=index,
        code=code,
        name=name,
        brand=brand,
        category=category,
        price=parse_integer(price, column="price", line_number=line_number),
        price_code=price_code,
        date=date,
        quantity=parse_integer(quantity, column="quantity", line_number=line_number),
    )


def parse_rows(rows: Iterable[Sequence[str]]) -> list[Record]:
    """Turn headerless 8-column rows into Records numbered in source order."""
    records: list[Record] = []
    for line_number, row in enumerate(rows, start=1):
        if not row or all(not cell.strip() for cell in row):
            continue
        records.append(parse_row(row, index=len(records), line_number=line_number))
    return records


def read_records(source: ImportSource, config: ImportConfig | None = None) -> list[Record]:
    """Read every record from a path or an open text stream.

    Raises ``IoError`` when the source cannot be opened or decoded and
    ``FormatError``/``ParseError`` when a row is malformed.
    """
    resolved = config or load_import_config()
    if isinstance(source, (str, Path)):
        path = Path(source).expanduser()
        try:
            with path.open("r", encoding=resolved.encoding, newline="") as handle:
                return _read_stream(handle, resolved.delimiter)
        except (OSError, UnicodeDecodeError) as error:
            raise IoError(f"Could not read {path}: {error}") from error
    try:
        return _read_stream(source, resolved.delimiter)
    except (OSError, UnicodeDecodeError) as error:
        raise IoError(f"Could not read import stream: {error}") from error


def _read_stream(handle: TextIO, delimiter: str) -> list[Record]:
    reader = csv.reader(handle, delimiter=delimiter)
    try:
        return parse_rows(reader)
    except csv.Error as error:
        raise FormatError(f"Line {reader.line_num}: {error}") from error
