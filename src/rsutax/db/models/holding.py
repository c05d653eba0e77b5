"""Current holdings: one row per acquisition lot still (partly) held."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from rsutax.db.session import Base, TimestampMixin
from rsutax.domain.enums.tax import CostBasisMethod


class HoldingRecord(TimestampMixin, Base):
    __tablename__ = "holdings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ticker: Mapped[str] = mapped_column(String(20), index=True)
    lot_number: Mapped[int] = mapped_column(Integer)
    acquisition_date: Mapped[date] = mapped_column(Date)
    capital_gain_impact: Mapped[Optional[str]] = mapped_column(String(20), default=None)  # SHORT_TERM / LONG_TERM
    total_shares: Mapped[Decimal] = mapped_column(Numeric(20, 6))
    adjusted_cost_basis_per_share: Mapped[Decimal] = mapped_column(Numeric(20, 6))
    cost_basis_method: Mapped[str] = mapped_column(String(20), default=CostBasisMethod.LOT_BASED.value)
    weighted_average_cost_per_share: Mapped[Optional[Decimal]] = mapped_column(Numeric(20, 6), default=None)
    weighted_average_updated_at: Mapped[Optional[datetime]] = mapped_column(default=None)
