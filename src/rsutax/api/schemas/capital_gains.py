"""Pydantic schemas for capital gains API."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from rsutax.domain.enums.tax import CostBasisMethod, HoldingPeriod
from rsutax.domain.models.ledger import Position


class LotResponse(BaseModel):
    lot_id: int
    acquisition_date: date
    shares: Decimal
    cost_per_share: Decimal
    holding_period_class: HoldingPeriod | None = None


class PositionResponse(BaseModel):
    ticker: str
    cost_basis_method: CostBasisMethod
    weighted_average_cost_per_share: Decimal | None = None
    total_shares: Decimal
    lots: list[LotResponse]

    @classmethod
    def from_position(cls, position: Position) -> "PositionResponse":
        return cls(
            ticker=position.ticker,
            cost_basis_method=position.cost_basis_method,
            weighted_average_cost_per_share=position.weighted_average_cost_per_share,
            total_shares=position.total_shares,
            lots=[LotResponse(**lot.model_dump()) for lot in position.lots],
        )


class MethodSwitchRequest(BaseModel):
    ticker: str
    method: CostBasisMethod
