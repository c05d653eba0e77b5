"""ExchangeRateService: cache lookup, Nationalbanken fetch, manual rate, default."""

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from rsutax.accounting.periods import business_days, parse_date
from rsutax.config import settings
from rsutax.db.repos.exchange_rate_repo import ExchangeRateRepo
from rsutax.domain.enums.rate_source import RateSource
from rsutax.domain.models.fx import Conversion, ExchangeRate
from rsutax.exceptions import InvalidPeriodError, InvalidRateError
from rsutax.infra.fx.nationalbank import NationalbankProvider

logger = logging.getLogger(__name__)


class ExchangeRateService:
    """Resolve USD/DKK for a date. First success wins:

    1. cached row for the date (CACHED)
    2. Nationalbanken lookup, cached with provenance API (API)
    3. caller-supplied manual rate, cached (MANUAL)
    4. configured default, never cached (DEFAULT)

    Provider failures never reach the caller; they degrade down the chain.
    """

    def __init__(
        self,
        session: AsyncSession,
        provider: NationalbankProvider | None = None,
        default_rate: Decimal | None = None,
    ) -> None:
        self._repo = ExchangeRateRepo(session)
        self._provider = provider
        self._default_rate = (
            default_rate if default_rate is not None else Decimal(str(settings.default_usd_dkk_rate))
        )

    @property
    def default_rate(self) -> Decimal:
        return self._default_rate

    async def resolve(self, day: date | str, manual_rate: Decimal | None = None) -> ExchangeRate:
        day = parse_date(day)
        if manual_rate is not None and manual_rate <= 0:
            raise InvalidRateError(f"Manual rate must be positive, got {manual_rate}")

        cached = await self._repo.get(day)
        if cached is not None:
            return ExchangeRate(date=day, rate=cached.usd_to_dkk, source=RateSource.CACHED)

        fetched = await self._fetch(day)
        if fetched is not None:
            await self._repo.store(day, fetched, RateSource.API)
            return ExchangeRate(date=day, rate=fetched, source=RateSource.API)

        if manual_rate is not None:
            await self._repo.store(day, manual_rate, RateSource.MANUAL)
            logger.info("Using manual USD/DKK rate %s for %s", manual_rate, day)
            return ExchangeRate(date=day, rate=manual_rate, source=RateSource.MANUAL)

        logger.warning("No USD/DKK rate for %s, falling back to default %s", day, self._default_rate)
        return ExchangeRate(date=day, rate=self._default_rate, source=RateSource.DEFAULT)

    async def convert_usd_to_dkk(
        self, amount_usd: Decimal, day: date | str, manual_rate: Decimal | None = None,
    ) -> Conversion:
        resolved = await self.resolve(day, manual_rate)
        return Conversion(
            amount_usd=amount_usd,
            amount_dkk=amount_usd * resolved.rate,
            rate=resolved.rate,
            source=resolved.source,
        )

    async def prefetch_range(self, start: date | str, end: date | str) -> int:
        """Warm the cache for every business day in [start, end]. Returns days with a real rate."""
        start, end = parse_date(start), parse_date(end)
        if end < start:
            raise InvalidPeriodError(f"End date {end} is before start date {start}")

        resolved = 0
        for day in business_days(start, end):
            rate = await self.resolve(day)
            if rate.source != RateSource.DEFAULT:
                resolved += 1
        logger.info("Prefetched USD/DKK rates %s..%s: %d resolved", start, end, resolved)
        return resolved

    async def list_cached(self, limit: int = 100) -> list[ExchangeRate]:
        rows = await self._repo.list_recent(limit)
        return [
            ExchangeRate(date=row.rate_date, rate=row.usd_to_dkk, source=RateSource(row.source))
            for row in rows
        ]

    async def current_rate(self) -> ExchangeRate:
        return await self.resolve(date.today())

    async def _fetch(self, day: date) -> Decimal | None:
        if self._provider is None:
            return None
        try:
            return await self._provider.get_rate(day)
        except Exception:
            logger.exception("USD/DKK lookup failed for %s", day)
            return None
