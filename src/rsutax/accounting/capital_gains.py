"""CapitalGainsEngine: realized gains per period from disposals against current holdings."""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from rsutax.accounting.cost_basis import allocate
from rsutax.accounting.periods import DateRange, year_range
from rsutax.db.repos.holding_repo import HoldingRepo
from rsutax.db.repos.transaction_repo import TransactionRepo
from rsutax.domain.enums.tax import HoldingPeriod
from rsutax.domain.models.reports import (
    CapitalGainsReport,
    DisposalDetail,
    SkippedTransaction,
    TickerGainSummary,
)
from rsutax.domain.models.transactions import DisposalTransaction
from rsutax.exceptions import InvalidPeriodError, LotSelectionError
from rsutax.infra.fx.service import ExchangeRateService

logger = logging.getLogger(__name__)


class CapitalGainsEngine:
    """Compute realized gains and losses in USD and DKK.

    Each disposal is allocated against the holdings as currently recorded;
    the ledger itself is never modified here.
    """

    def __init__(self, session: AsyncSession, fx: ExchangeRateService) -> None:
        self._holdings = HoldingRepo(session)
        self._transactions = TransactionRepo(session)
        self._fx = fx

    async def compute_year_report(self, year: int) -> CapitalGainsReport:
        period = year_range(year)
        report = await self.compute_period_report(period.start, period.end, label=str(year))
        report.year = year
        return report

    async def compute_period_report(
        self, start: date, end: date, label: str | None = None,
    ) -> CapitalGainsReport:
        if end < start:
            raise InvalidPeriodError(f"End date {end} is before start date {start}")
        period = DateRange(start, end)

        # 1. Load current positions and the period's disposals
        positions = {p.ticker: p for p in await self._holdings.get_positions()}
        disposals = await self._transactions.list_disposals(period.start, period.end)

        report = CapitalGainsReport(period_start=period.start, period_end=period.end, label=label)

        # 2. Allocate and convert each disposal
        for tx in disposals:
            position = positions.get(tx.ticker)
            if position is None:
                logger.warning("No holdings for %s, skipping disposal %s on %s", tx.ticker, tx.id, tx.date)
                report.skipped.append(self._skip(tx, f"No holdings found for {tx.ticker}"))
                continue

            try:
                allocation = allocate(
                    position, tx.shares_sold, tx.requested_lot_id, as_of=tx.date, strict=False,
                )
            except LotSelectionError as e:
                logger.warning("Skipping disposal %s: %s", tx.id, e)
                report.skipped.append(self._skip(tx, str(e)))
                continue

            rate = await self._fx.resolve(tx.date)
            proceeds_dkk = tx.proceeds_amount * rate.rate
            cost_basis_dkk = allocation.cost_basis * rate.rate

            warning = None
            if not allocation.fully_allocated:
                warning = (
                    f"Only {allocation.shares_allocated} of {tx.shares_sold} shares could be matched "
                    f"to holdings; cost basis is understated"
                )
                logger.warning("%s disposal %s: %s", tx.ticker, tx.id, warning)

            report.disposals.append(DisposalDetail(
                transaction_id=tx.id,
                ticker=tx.ticker,
                date=tx.date,
                shares_sold=tx.shares_sold,
                shares_allocated=allocation.shares_allocated,
                proceeds_usd=tx.proceeds_amount,
                proceeds_dkk=proceeds_dkk,
                cost_basis_usd=allocation.cost_basis,
                cost_basis_dkk=cost_basis_dkk,
                gain_loss_usd=tx.proceeds_amount - allocation.cost_basis,
                gain_loss_dkk=proceeds_dkk - cost_basis_dkk,
                exchange_rate=rate.rate,
                rate_source=rate.source,
                cost_basis_method=allocation.method,
                holding_period_class=allocation.holding_period_class,
                lots_consumed=allocation.lots_consumed,
                warning=warning,
            ))

        # 3. Aggregate
        self._aggregate(report)
        logger.info(
            "Capital gains %s..%s: %d disposals, %d skipped, net %s DKK",
            period.start, period.end, len(report.disposals), len(report.skipped), report.net_gain_loss_dkk,
        )
        return report

    @staticmethod
    def _aggregate(report: CapitalGainsReport) -> None:
        by_ticker: dict[str, TickerGainSummary] = {}
        totals: dict[HoldingPeriod | None, list[Decimal]] = defaultdict(lambda: [Decimal(0), Decimal(0)])

        for d in report.disposals:
            term = totals[d.holding_period_class]
            term[0] += d.gain_loss_usd
            term[1] += d.gain_loss_dkk

            summary = by_ticker.setdefault(d.ticker, TickerGainSummary(cost_basis_method=d.cost_basis_method))
            summary.net_gain_loss_usd += d.gain_loss_usd
            summary.net_gain_loss_dkk += d.gain_loss_dkk
            summary.shares_sold += d.shares_sold
            summary.transaction_count += 1

        report.short_term_gain_loss_usd, report.short_term_gain_loss_dkk = totals[HoldingPeriod.SHORT_TERM]
        report.long_term_gain_loss_usd, report.long_term_gain_loss_dkk = totals[HoldingPeriod.LONG_TERM]
        report.unclassified_gain_loss_usd, report.unclassified_gain_loss_dkk = totals[None]
        report.net_gain_loss_usd = sum((d.gain_loss_usd for d in report.disposals), Decimal(0))
        report.net_gain_loss_dkk = sum((d.gain_loss_dkk for d in report.disposals), Decimal(0))
        report.by_ticker = by_ticker

    @staticmethod
    def _skip(tx: DisposalTransaction, reason: str) -> SkippedTransaction:
        return SkippedTransaction(transaction_id=tx.id, ticker=tx.ticker, date=tx.date, reason=reason)
