from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_DATA_ROOT = Path("./data")
DEFAULT_DB_FILENAME = "database.sqlite"
DB_PATH_ENV = "STOCKVIEW_DB_PATH"
DELIMITER_ENV = "STOCKVIEW_DELIMITER"
ENCODING_ENV = "STOCKVIEW_ENCODING"
FONT_ENV = "STOCKVIEW_FONT"
FONT_SIZE_ENV = "STOCKVIEW_FONT_SIZE"

DEFAULT_FONT_FAMILY = "Arial"
DEFAULT_FONT_SIZE = 16.0


@dataclass(frozen=True)
class StoreConfig:
    db_path: Path

    @property
    def directory(self) -> Path:
        return self.db_path.parent

    @property
    def url(self) -> str:
        return f"sqlite:///{self.db_path}"


@dataclass(frozen=True)
class ImportConfig:
    delimiter: str
    encoding: str


@dataclass(frozen=True)
class WidthConfig:
    font_family: str
    font_size: float


def get_data_root() -> Path:
    return Path(os.getenv("DATA_ROOT", DEFAULT_DATA_ROOT)).expanduser()


def get_db_path(data_root: Path | None = None) -> Path:
    explicit = os.getenv(DB_PATH_ENV)
    if explicit:
        return Path(explicit).expanduser()
    root = data_root if data_root is not None else get_data_root()
    return (root / DEFAULT_DB_FILENAME).expanduser()


def load_store_config(data_root: Path | None = None) -> StoreConfig:
    return StoreConfig(db_path=get_db_path(data_root))


def load_import_config() -> ImportConfig:
    delimiter = os.getenv(DELIMITER_ENV) or ","
    if delimiter == "\\t":
        delimiter = "\t"
    return ImportConfig(
        delimiter=delimiter,
        encoding=os.getenv(ENCODING_ENV) or "utf-8-sig",
    )


def load_width_config() -> WidthConfig:
    return WidthConfig(
        font_family=os.getenv(FONT_ENV) or DEFAULT_FONT_FAMILY,
        font_size=float(os.getenv(FONT_SIZE_ENV, DEFAULT_FONT_SIZE)),
    )
