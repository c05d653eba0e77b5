"""TaxReportCollector: flattens the year's gains and dividends into sheet rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from rsutax.accounting.capital_gains import CapitalGainsEngine
from rsutax.accounting.dividends import DividendEngine
from rsutax.domain.enums.rate_source import RateSource
from rsutax.domain.models.reports import CapitalGainsReport, DividendReport
from rsutax.infra.fx.service import ExchangeRateService


@dataclass
class TaxReportData:
    """Everything the annual workbook needs. Each sheet is a list of row tuples."""

    year: int
    capital_gains_report: CapitalGainsReport | None = None
    dividend_report: DividendReport | None = None

    summary: list[tuple] = field(default_factory=list)
    capital_gains: list[tuple] = field(default_factory=list)
    gains_by_ticker: list[tuple] = field(default_factory=list)
    dividends: list[tuple] = field(default_factory=list)
    dividends_by_ticker: list[tuple] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class TaxReportCollector:
    def __init__(self, session: AsyncSession, fx: ExchangeRateService) -> None:
        self._gains = CapitalGainsEngine(session, fx)
        self._dividends = DividendEngine(session, fx)

    async def collect(
        self,
        year: int,
        is_us_person: bool = False,
        actual_foreign_tax_paid: Decimal | None = None,
    ) -> TaxReportData:
        gains = await self._gains.compute_year_report(year)
        dividends = await self._dividends.compute_year_report(year, is_us_person, actual_foreign_tax_paid)

        data = TaxReportData(year=year, capital_gains_report=gains, dividend_report=dividends)
        data.summary = self._build_summary(gains, dividends)
        data.capital_gains = self._build_capital_gains(gains)
        data.gains_by_ticker = [
            (ticker, s.cost_basis_method.value, float(s.shares_sold), s.transaction_count,
             float(s.net_gain_loss_usd), float(s.net_gain_loss_dkk))
            for ticker, s in sorted(gains.by_ticker.items())
        ]
        data.dividends = self._build_dividends(dividends)
        data.dividends_by_ticker = [
            (ticker, s.transaction_count, float(s.gross_dividends_usd), float(s.gross_dividends_dkk),
             float(s.withheld_usd), float(s.withheld_dkk))
            for ticker, s in sorted(dividends.by_ticker.items())
        ]
        data.warnings = self._build_warnings(gains, dividends)
        return data

    # ── Sheet Builders ──────────────────────────────────────────

    def _build_summary(self, gains: CapitalGainsReport, dividends: DividendReport) -> list[tuple]:
        return [
            ("Tax Year", gains.year),
            ("Net Gain/Loss (USD)", float(gains.net_gain_loss_usd)),
            ("Net Gain/Loss (DKK)", float(gains.net_gain_loss_dkk)),
            ("Short Term Gain/Loss (DKK)", float(gains.short_term_gain_loss_dkk)),
            ("Long Term Gain/Loss (DKK)", float(gains.long_term_gain_loss_dkk)),
            ("Average Cost Gain/Loss (DKK)", float(gains.unclassified_gain_loss_dkk)),
            ("Disposals", len(gains.disposals)),
            ("Gross Dividends (USD)", float(dividends.gross_dividends_usd)),
            ("Gross Dividends (DKK)", float(dividends.gross_dividends_dkk)),
            ("Foreign Tax Credit (USD)", float(dividends.foreign_tax_credit_usd)),
            ("Foreign Tax Credit (DKK)", float(dividends.foreign_tax_credit_dkk)),
            ("Actual Withheld (DKK)", float(dividends.actual_withheld_dkk)),
        ]

    def _build_capital_gains(self, gains: CapitalGainsReport) -> list[tuple]:
        return [
            (
                d.date.isoformat(),
                d.ticker,
                float(d.shares_sold),
                float(d.proceeds_usd),
                float(d.cost_basis_usd),
                float(d.gain_loss_usd),
                float(d.exchange_rate),
                d.rate_source.value,
                float(d.gain_loss_dkk),
                d.cost_basis_method.value,
                d.holding_period_class.value if d.holding_period_class else "",
                ", ".join(str(lot.lot_id) for lot in d.lots_consumed),
            )
            for d in gains.disposals
        ]

    def _build_dividends(self, dividends: DividendReport) -> list[tuple]:
        rows = [
            (
                d.date.isoformat(),
                d.ticker,
                d.category.value,
                float(d.amount_usd),
                float(d.exchange_rate),
                d.rate_source.value,
                float(d.amount_dkk),
            )
            for d in [*dividends.dividends, *dividends.withholdings]
        ]
        rows.sort(key=lambda r: (r[0], r[1]))
        return rows

    def _build_warnings(self, gains: CapitalGainsReport, dividends: DividendReport) -> list[str]:
        warnings = [f"{s.date.isoformat()} {s.ticker}: skipped ({s.reason})" for s in gains.skipped]
        warnings.extend(
            f"{d.date.isoformat()} {d.ticker}: {d.warning}" for d in gains.disposals if d.warning
        )

        # Rows priced with the fallback rate should be re-run once a real rate is cached
        default_dates: set[date] = {d.date for d in gains.disposals if d.rate_source == RateSource.DEFAULT}
        default_dates |= {
            d.date for d in [*dividends.dividends, *dividends.withholdings] if d.rate_source == RateSource.DEFAULT
        }
        warnings.extend(
            f"{day.isoformat()}: no USD/DKK rate available, default rate used" for day in sorted(default_dates)
        )
        return warnings
