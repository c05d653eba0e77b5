"""DividendEngine: foreign dividends and the creditable US withholding tax."""

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from rsutax.accounting.periods import year_range
from rsutax.db.repos.transaction_repo import TransactionRepo
from rsutax.domain.enums.tax import IncomeCategory
from rsutax.domain.models.reports import DividendReport, IncomeDetail, TickerDividendSummary
from rsutax.domain.models.transactions import IncomeTransaction
from rsutax.infra.fx.service import ExchangeRateService

logger = logging.getLogger(__name__)

# US/DK double-taxation treaty: creditable withholding is capped at 15% of gross
TREATY_CAP_RATE = Decimal("0.15")


class DividendEngine:
    def __init__(self, session: AsyncSession, fx: ExchangeRateService) -> None:
        self._transactions = TransactionRepo(session)
        self._fx = fx

    async def compute_year_report(
        self,
        year: int,
        is_us_person: bool = False,
        actual_foreign_tax_paid: Decimal | None = None,
    ) -> DividendReport:
        """Gross dividends and the foreign tax credit for `year`.

        A US person may supply the tax actually paid to the IRS; the credit is
        then the lesser of that and the treaty cap. Everyone else is credited
        the treaty cap on gross dividends.
        """
        period = year_range(year)

        # 1. Load and convert each payment at its own date
        dividends = [
            await self._convert(tx)
            for tx in await self._transactions.list_income(IncomeCategory.DIVIDEND, period.start, period.end)
        ]
        withholdings = [
            await self._convert(tx)
            for tx in await self._transactions.list_income(IncomeCategory.WITHHOLDING, period.start, period.end)
        ]

        report = DividendReport(year=year, dividends=dividends, withholdings=withholdings)

        # 2. Totals and per-ticker breakdown
        by_ticker: dict[str, TickerDividendSummary] = {}
        for d in dividends:
            report.gross_dividends_usd += d.amount_usd
            report.gross_dividends_dkk += d.amount_dkk
            summary = by_ticker.setdefault(d.ticker, TickerDividendSummary())
            summary.gross_dividends_usd += d.amount_usd
            summary.gross_dividends_dkk += d.amount_dkk
            summary.transaction_count += 1
        for w in withholdings:
            report.actual_withheld_usd += w.amount_usd
            report.actual_withheld_dkk += w.amount_dkk
            summary = by_ticker.setdefault(w.ticker, TickerDividendSummary())
            summary.withheld_usd += w.amount_usd
            summary.withheld_dkk += w.amount_dkk
        report.by_ticker = by_ticker

        # 3. Foreign tax credit
        report.foreign_tax_credit_usd, report.foreign_tax_credit_dkk = foreign_tax_credit(
            report.gross_dividends_usd,
            report.gross_dividends_dkk,
            is_us_person=is_us_person,
            actual_foreign_tax_paid=actual_foreign_tax_paid,
        )

        logger.info(
            "Dividends %d: %d payments, gross %s DKK, credit %s DKK",
            year, len(dividends), report.gross_dividends_dkk, report.foreign_tax_credit_dkk,
        )
        return report

    async def _convert(self, tx: IncomeTransaction) -> IncomeDetail:
        rate = await self._fx.resolve(tx.date)
        amount_usd = abs(tx.amount)
        return IncomeDetail(
            transaction_id=tx.id,
            ticker=tx.ticker,
            date=tx.date,
            category=tx.category,
            amount_usd=amount_usd,
            amount_dkk=amount_usd * rate.rate,
            exchange_rate=rate.rate,
            rate_source=rate.source,
        )


def foreign_tax_credit(
    gross_usd: Decimal,
    gross_dkk: Decimal,
    is_us_person: bool = False,
    actual_foreign_tax_paid: Decimal | None = None,
) -> tuple[Decimal, Decimal]:
    """(credit_usd, credit_dkk) under the treaty cap."""
    if is_us_person and actual_foreign_tax_paid is not None:
        credit_usd = min(actual_foreign_tax_paid, gross_usd * TREATY_CAP_RATE)
        # Blended rate of the year's dividends
        credit_dkk = credit_usd * (gross_dkk / gross_usd) if gross_usd else Decimal(0)
        return credit_usd, credit_dkk
    return gross_usd * TREATY_CAP_RATE, gross_dkk * TREATY_CAP_RATE
