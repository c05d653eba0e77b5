"""Domain types for the lot ledger and cost-basis allocation."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, computed_field, field_validator

from rsutax.domain.enums.tax import CostBasisMethod, HoldingPeriod

LONG_TERM_MIN_DAYS = 365  # Held strictly longer than this = long term


class AcquisitionLot(BaseModel):
    """One batch of shares acquired on one date (vest, purchase or reinvested dividend)."""

    model_config = {"frozen": True}

    lot_id: int
    acquisition_date: date
    shares: Decimal = Field(gt=0)
    cost_per_share: Decimal = Field(ge=0)  # USD
    holding_period_class: HoldingPeriod | None = None  # None = derive from elapsed time

    def holding_period(self, as_of: date) -> HoldingPeriod:
        if self.holding_period_class is not None:
            return self.holding_period_class
        held_days = (as_of - self.acquisition_date).days
        return HoldingPeriod.LONG_TERM if held_days > LONG_TERM_MIN_DAYS else HoldingPeriod.SHORT_TERM

    @property
    def total_cost(self) -> Decimal:
        return self.shares * self.cost_per_share


class Position(BaseModel):
    """All lots held for one ticker. Lot order is the FIFO consumption order."""

    ticker: str
    cost_basis_method: CostBasisMethod = CostBasisMethod.LOT_BASED
    weighted_average_cost_per_share: Decimal | None = None  # Only meaningful under AVERAGE_COST
    lots: list[AcquisitionLot] = []

    @field_validator("lots")
    @classmethod
    def _oldest_first(cls, lots: list[AcquisitionLot]) -> list[AcquisitionLot]:
        return sorted(lots, key=lambda lot: lot.acquisition_date)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_shares(self) -> Decimal:
        return sum((lot.shares for lot in self.lots), Decimal(0))

    def find_lot(self, lot_id: int) -> AcquisitionLot | None:
        return next((lot for lot in self.lots if lot.lot_id == lot_id), None)


class LotConsumption(BaseModel):
    """Shares taken from one lot to cover a disposal."""

    lot_id: int
    shares: Decimal
    cost: Decimal  # shares * lot.cost_per_share, USD
    acquisition_date: date


class AllocationResult(BaseModel):
    """Cost basis consumed by a disposal."""

    method: CostBasisMethod
    shares_requested: Decimal
    shares_allocated: Decimal = Decimal(0)
    cost_basis: Decimal = Decimal(0)  # USD
    lots_consumed: list[LotConsumption] = []
    holding_period_class: HoldingPeriod | None = None  # None for AVERAGE_COST and empty allocations

    @property
    def fully_allocated(self) -> bool:
        return self.shares_allocated >= self.shares_requested
