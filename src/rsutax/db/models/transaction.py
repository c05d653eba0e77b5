"""Imported broker activity: sales, dividends, withholdings, releases."""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from rsutax.db.session import Base, TimestampMixin


class TransactionRecord(TimestampMixin, Base):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entry_date: Mapped[date] = mapped_column(Date, index=True)
    activity_type: Mapped[str] = mapped_column(String(64), index=True)
    ticker: Mapped[str] = mapped_column(String(20))
    lot_number: Mapped[Optional[int]] = mapped_column(Integer, default=None)
    num_shares: Mapped[Optional[Decimal]] = mapped_column(Numeric(20, 6), default=None)
    share_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(20, 6), default=None)
    cash_value: Mapped[Optional[Decimal]] = mapped_column(Numeric(20, 4), default=None)  # USD, signed
    import_source: Mapped[str] = mapped_column(String(50), default="morgan-stanley-pdf")
