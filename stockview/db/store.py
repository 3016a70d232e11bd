from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from stockview.db.schema import Base, StockItem
from stockview.models.record import Record
from stockview.services.errors import IoError, NotFoundError, StorageError
from stockview.utils.config import StoreConfig, load_store_config
from stockview.utils.logging import get_logger

LOGGER = get_logger(__name__)

# sqlite3 raises these directly for values it cannot bind, bypassing SQLAlchemy.
STORAGE_FAILURES = (SQLAlchemyError, OverflowError, ValueError, TypeError)


def build_engine(db_path: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_path}",
        future=True,
        connect_args={"check_same_thread": False},
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False, future=True)


@contextmanager
def session_scope(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def _engine_for(db_path: Path) -> Iterator[Engine]:
    engine = build_engine(db_path)
    try:
        yield engine
    finally:
        engine.dispose()


class InventoryStore:
    """SQLite file holding the exported ``stock_items`` table.

    One store lives at one well-known path. Writing replaces the whole file:
    the previous database is removed before the new one is created, so a
    failure part-way through leaves no exported data behind.
    """

    def __init__(self, config: StoreConfig | None = None) -> None:
        self.config = config or load_store_config()

    @property
    def db_path(self) -> Path:
        return self.config.db_path

    def exists(self) -> bool:
        return self.db_path.is_file()

    def read_all(self) -> list[Record]:
        if not self.exists():
            raise NotFoundError(f"Database file not found at {self.db_path}.")
        try:
            with _engine_for(self.db_path) as engine:
                with session_scope(create_session_factory(engine)) as session:
                    items = session.execute(select(StockItem).order_by(StockItem.id)).scalars().all()
                    return [item.to_record() for item in items]
        except STORAGE_FAILURES as error:
            raise StorageError(f"Could not read {self.db_path}: {error}") from error

    def replace_all(self, records: Sequence[Record]) -> int:
        self._reset_file()
        try:
            with _engine_for(self.db_path) as engine:
                Base.metadata.create_all(engine)
                with session_scope(create_session_factory(engine)) as session:
                    session.add_all(StockItem.from_record(record) for record in records)
        except STORAGE_FAILURES as error:
            raise StorageError(f"Could not write {self.db_path}: {error}") from error
        LOGGER.info("Wrote %s stock items to %s", len(records), self.db_path)
        return len(records)

    def _reset_file(self) -> None:
        try:
            self.config.directory.mkdir(parents=True, exist_ok=True)
            if self.db_path.exists():
                self.db_path.unlink()
        except OSError as error:
            raise IoError(f"Could not prepare {self.db_path}: {error}") from error
