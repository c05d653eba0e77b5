import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rsutax.db.models.exchange_rate import ExchangeRateCache
from rsutax.domain.enums.rate_source import RateSource

logger = logging.getLogger(__name__)


class ExchangeRateRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, day: date) -> Optional[ExchangeRateCache]:
        result = await self._session.execute(
            select(ExchangeRateCache).where(ExchangeRateCache.rate_date == day)
        )
        return result.scalar_one_or_none()

    async def store(self, day: date, rate: Decimal, source: RateSource) -> bool:
        """Insert a rate unless the date is already cached. Returns True if inserted.

        Cached rates are immutable: an existing row, including one written
        concurrently by another session, is left untouched.
        """
        if await self.get(day) is not None:
            return False
        try:
            async with self._session.begin_nested():
                self._session.add(ExchangeRateCache(rate_date=day, usd_to_dkk=rate, source=source.value))
        except IntegrityError:
            # Lost the race on the unique date; the savepoint keeps the outer transaction intact
            logger.debug("Rate for %s already cached by a concurrent writer", day)
            return False
        return True

    async def list_recent(self, limit: int = 100) -> list[ExchangeRateCache]:
        result = await self._session.execute(
            select(ExchangeRateCache).order_by(ExchangeRateCache.rate_date.desc()).limit(limit)
        )
        return list(result.scalars().all())
