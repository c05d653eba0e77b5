from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from rsutax.domain.enums.rate_source import RateSource


class ExchangeRate(BaseModel):
    """A resolved USD/DKK rate: DKK per 1 USD on `date`."""

    date: date
    rate: Decimal
    source: RateSource


class Conversion(BaseModel):
    amount_usd: Decimal
    amount_dkk: Decimal
    rate: Decimal
    source: RateSource
