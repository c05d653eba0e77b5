"""Typed transaction records consumed by the aggregators."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field

from rsutax.domain.enums.tax import IncomeCategory


class DisposalTransaction(BaseModel):
    """A sale of shares."""

    id: int | None = None
    ticker: str
    date: date
    shares_sold: Decimal = Field(ge=0)
    proceeds_amount: Decimal  # USD, absolute
    requested_lot_id: int | None = None  # Overrides FIFO when set


class IncomeTransaction(BaseModel):
    """A dividend payment or a tax withholding on one."""

    id: int | None = None
    ticker: str
    date: date
    amount: Decimal  # USD, signed as imported
    category: IncomeCategory
