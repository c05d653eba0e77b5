"""Pydantic schemas for exchange rate API."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field


class PrefetchRequest(BaseModel):
    start_date: date
    end_date: date


class PrefetchResponse(BaseModel):
    start_date: date
    end_date: date
    resolved: int  # Business days with a cached, fetched or manual rate


class ManualRateRequest(BaseModel):
    date: date
    manual_rate: Decimal = Field(gt=0)
