from collections import defaultdict
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rsutax.accounting.ledger import next_lot_id, record_acquisition, switch_cost_basis_method
from rsutax.db.models.holding import HoldingRecord
from rsutax.domain.enums.tax import CostBasisMethod, HoldingPeriod
from rsutax.domain.models.ledger import AcquisitionLot, Position


class HoldingRepo:
    """Reads holdings as Positions and persists ledger changes."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_positions(self) -> list[Position]:
        """One Position per ticker with shares still held, lots oldest first."""
        result = await self._session.execute(
            select(HoldingRecord)
            .where(HoldingRecord.total_shares > 0)
            .order_by(HoldingRecord.ticker, HoldingRecord.acquisition_date.asc())
        )
        by_ticker: dict[str, list[HoldingRecord]] = defaultdict(list)
        for row in result.scalars().all():
            by_ticker[row.ticker].append(row)
        return [self._to_position(ticker, rows) for ticker, rows in by_ticker.items()]

    async def get_position(self, ticker: str) -> Optional[Position]:
        rows = await self._load_rows(ticker)
        if not rows:
            return None
        return self._to_position(ticker, rows)

    async def add_lot(
        self,
        ticker: str,
        acquisition_date: date,
        shares: Decimal,
        cost_per_share: Decimal,
        holding_period_class: HoldingPeriod | None = None,
    ) -> Position:
        """Record a vest, purchase or reinvested dividend as a new lot."""
        position = await self.get_position(ticker) or Position(ticker=ticker)
        lot = AcquisitionLot(
            lot_id=next_lot_id(position),
            acquisition_date=acquisition_date,
            shares=shares,
            cost_per_share=cost_per_share,
            holding_period_class=holding_period_class,
        )
        position = record_acquisition(position, lot)

        self._session.add(HoldingRecord(
            ticker=ticker,
            lot_number=lot.lot_id,
            acquisition_date=lot.acquisition_date,
            capital_gain_impact=holding_period_class.value if holding_period_class else None,
            total_shares=lot.shares,
            adjusted_cost_basis_per_share=lot.cost_per_share,
            cost_basis_method=position.cost_basis_method.value,
        ))
        await self._session.flush()
        if position.cost_basis_method == CostBasisMethod.AVERAGE_COST:
            await self._write_method(ticker, position)
        return position

    async def update_cost_basis_method(self, ticker: str, method: CostBasisMethod) -> Optional[Position]:
        """Elect a cost-basis method for a ticker. None if the ticker has no holdings.

        Raises MethodSwitchError when reverting from AVERAGE_COST.
        """
        position = await self.get_position(ticker)
        if position is None:
            return None
        if switch_cost_basis_method(position, method):
            await self._write_method(ticker, position)
        return position

    async def apply_settlement(self, settled: Position) -> None:
        """Write remaining lot quantities after a disposal has been settled."""
        remaining = {lot.lot_id: lot.shares for lot in settled.lots}
        for row in await self._load_rows(settled.ticker):
            row.total_shares = remaining.get(row.lot_number, Decimal(0))
        await self._session.flush()

    async def _load_rows(self, ticker: str) -> list[HoldingRecord]:
        result = await self._session.execute(
            select(HoldingRecord)
            .where(HoldingRecord.ticker == ticker, HoldingRecord.total_shares > 0)
            .order_by(HoldingRecord.acquisition_date.asc())
        )
        return list(result.scalars().all())

    async def _write_method(self, ticker: str, position: Position) -> None:
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        for row in await self._load_rows(ticker):
            row.cost_basis_method = position.cost_basis_method.value
            row.weighted_average_cost_per_share = position.weighted_average_cost_per_share
            row.weighted_average_updated_at = now
        await self._session.flush()

    @staticmethod
    def _to_position(ticker: str, rows: list[HoldingRecord]) -> Position:
        # Method and average are stored redundantly on every lot row
        first = rows[0]
        method = CostBasisMethod(first.cost_basis_method or CostBasisMethod.LOT_BASED.value)
        return Position(
            ticker=ticker,
            cost_basis_method=method,
            weighted_average_cost_per_share=(
                first.weighted_average_cost_per_share if method == CostBasisMethod.AVERAGE_COST else None
            ),
            lots=[
                AcquisitionLot(
                    lot_id=row.lot_number,
                    acquisition_date=row.acquisition_date,
                    shares=row.total_shares,
                    cost_per_share=row.adjusted_cost_basis_per_share,
                    holding_period_class=HoldingPeriod.parse(row.capital_gain_impact),
                )
                for row in rows
            ],
        )
