from __future__ import annotations

from sqlalchemy import Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from stockview.models.record import Record

STOCK_ITEMS_TABLE = "stock_items"


class Base(DeclarativeBase):
    """Declarative base for the exported inventory database."""


class StockItem(Base):
    __tablename__ = STOCK_ITEMS_TABLE

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    code: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    brand: Mapped[str] = mapped_column(Text, nullable=False)
    car_type: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    price_code: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    @classmethod
    def from_record(cls, record: Record) -> StockItem:
        return cls(**record.as_row())

    def to_record(self) -> Record:
        return Record(
            id=self.id,
            code=self.code,
            name=self.name,
            brand=self.brand,
            category=self.car_type,
            price=self.price,
            price_code=self.price_code,
            date=self.date,
            quantity=self.quantity,
        )
