from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rsutax.db.models.transaction import TransactionRecord
from rsutax.domain.enums import DISPOSAL_ACTIVITIES, DIVIDEND_ACTIVITIES, WITHHOLDING_ACTIVITIES
from rsutax.domain.enums.activity import ActivityType
from rsutax.domain.enums.tax import IncomeCategory
from rsutax.domain.models.transactions import DisposalTransaction, IncomeTransaction

_INCOME_ACTIVITIES = {
    IncomeCategory.DIVIDEND: DIVIDEND_ACTIVITIES,
    IncomeCategory.WITHHOLDING: WITHHOLDING_ACTIVITIES,
}


class TransactionRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_by_activity(
        self,
        activity_types: Iterable[ActivityType],
        start: date,
        end: date,
    ) -> list[TransactionRecord]:
        """Transactions of the given activity types dated within [start, end], oldest first."""
        result = await self._session.execute(
            select(TransactionRecord)
            .where(
                TransactionRecord.activity_type.in_([a.value for a in activity_types]),
                TransactionRecord.entry_date >= start,
                TransactionRecord.entry_date <= end,
            )
            .order_by(TransactionRecord.entry_date.asc(), TransactionRecord.id.asc())
        )
        return list(result.scalars().all())

    async def list_disposals(self, start: date, end: date) -> list[DisposalTransaction]:
        rows = await self.list_by_activity(DISPOSAL_ACTIVITIES, start, end)
        return [
            DisposalTransaction(
                id=row.id,
                ticker=row.ticker,
                date=row.entry_date,
                shares_sold=abs(row.num_shares or Decimal(0)),
                proceeds_amount=abs(row.cash_value or Decimal(0)),
                requested_lot_id=row.lot_number,
            )
            for row in rows
        ]

    async def list_income(self, category: IncomeCategory, start: date, end: date) -> list[IncomeTransaction]:
        rows = await self.list_by_activity(_INCOME_ACTIVITIES[category], start, end)
        return [
            IncomeTransaction(
                id=row.id,
                ticker=row.ticker,
                date=row.entry_date,
                amount=row.cash_value or Decimal(0),
                category=category,
            )
            for row in rows
        ]
