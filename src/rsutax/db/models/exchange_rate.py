"""Cache of historical USD/DKK rates. One immutable row per date."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from rsutax.db.session import Base, TimestampMixin
from rsutax.domain.enums.rate_source import RateSource


class ExchangeRateCache(TimestampMixin, Base):
    __tablename__ = "exchange_rates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    rate_date: Mapped[date] = mapped_column("date", Date, unique=True)
    usd_to_dkk: Mapped[Decimal] = mapped_column(Numeric(12, 6))
    source: Mapped[str] = mapped_column(String(20), default=RateSource.API.value)  # API / MANUAL
