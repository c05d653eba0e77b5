"""Tests for CapitalGainsEngine over an in-memory ledger and a mocked rate source."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from rsutax.accounting.capital_gains import CapitalGainsEngine
from rsutax.db.models.holding import HoldingRecord
from rsutax.db.models.transaction import TransactionRecord
from rsutax.db.repos.holding_repo import HoldingRepo
from rsutax.domain.enums.rate_source import RateSource
from rsutax.domain.enums.tax import CostBasisMethod, HoldingPeriod
from rsutax.exceptions import InvalidPeriodError
from rsutax.infra.fx.service import ExchangeRateService


def _holding(ticker: str, lot: int, acquired: date, shares: str, cost: str) -> HoldingRecord:
    return HoldingRecord(
        ticker=ticker,
        lot_number=lot,
        acquisition_date=acquired,
        total_shares=Decimal(shares),
        adjusted_cost_basis_per_share=Decimal(cost),
    )


def _sale(ticker: str, day: date, shares: str, proceeds: str, lot: int | None = None) -> TransactionRecord:
    return TransactionRecord(
        entry_date=day,
        activity_type="Sale",
        ticker=ticker,
        lot_number=lot,
        num_shares=Decimal(shares),
        cash_value=Decimal(proceeds),
    )


@pytest.fixture()
async def ledger(session):
    session.add_all([
        _holding("ACME", 1, date(2022, 1, 10), "50", "200"),
        _holding("ACME", 2, date(2024, 1, 10), "50", "300"),
        _holding("BETA", 1, date(2023, 5, 1), "20", "10"),
    ])
    await session.flush()


@pytest.fixture()
def engine_factory(session, rate_provider):
    def _make() -> CapitalGainsEngine:
        return CapitalGainsEngine(session, ExchangeRateService(session, rate_provider))
    return _make


class TestYearReport:
    async def test_fifo_gains_in_usd_and_dkk(self, session, ledger, engine_factory):
        session.add(_sale("ACME", date(2024, 6, 3), "60", "18000"))
        await session.flush()

        report = await engine_factory().compute_year_report(2024)

        assert report.year == 2024
        assert report.period_start == date(2024, 1, 1)
        assert len(report.disposals) == 1
        detail = report.disposals[0]
        # 50 @ 200 + 10 @ 300
        assert detail.cost_basis_usd == Decimal("13000")
        assert detail.gain_loss_usd == Decimal("5000")
        assert detail.gain_loss_dkk == Decimal("35000")
        assert detail.exchange_rate == Decimal("7.00")
        assert detail.rate_source == RateSource.API
        assert detail.holding_period_class == HoldingPeriod.LONG_TERM
        assert [c.lot_id for c in detail.lots_consumed] == [1, 2]
        assert report.long_term_gain_loss_usd == Decimal("5000")
        assert report.net_gain_loss_dkk == Decimal("35000")

    async def test_each_disposal_uses_current_holdings(self, session, ledger, engine_factory):
        session.add_all([
            _sale("ACME", date(2024, 3, 1), "50", "15000"),
            _sale("ACME", date(2024, 4, 1), "50", "16000"),
        ])
        await session.flush()

        report = await engine_factory().compute_year_report(2024)

        # Both sales are matched against lot 1 because the ledger is a snapshot
        assert [d.cost_basis_usd for d in report.disposals] == [Decimal("10000"), Decimal("10000")]
        positions = await HoldingRepo(session).get_positions()
        assert {p.ticker: p.total_shares for p in positions}["ACME"] == Decimal("100")

    async def test_term_buckets_and_tickers(self, session, ledger, engine_factory):
        session.add_all([
            _sale("ACME", date(2024, 6, 3), "10", "2500", lot=2),   # short term, +-500
            _sale("BETA", date(2024, 7, 1), "20", "100"),           # long term, -100
        ])
        await session.flush()

        report = await engine_factory().compute_year_report(2024)

        assert report.short_term_gain_loss_usd == Decimal("-500")
        assert report.long_term_gain_loss_usd == Decimal("-100")
        assert report.net_gain_loss_usd == Decimal("-600")
        assert report.by_ticker["ACME"].transaction_count == 1
        assert report.by_ticker["BETA"].net_gain_loss_dkk == Decimal("-700")
        assert report.by_ticker["BETA"].shares_sold == Decimal("20")

    async def test_average_cost_is_unclassified(self, session, ledger, engine_factory):
        await HoldingRepo(session).update_cost_basis_method("ACME", CostBasisMethod.AVERAGE_COST)
        session.add(_sale("ACME", date(2024, 6, 3), "50", "15000", lot=1))
        await session.flush()

        report = await engine_factory().compute_year_report(2024)

        detail = report.disposals[0]
        assert detail.cost_basis_method == CostBasisMethod.AVERAGE_COST
        assert detail.cost_basis_usd == Decimal("12500")
        assert detail.holding_period_class is None
        assert report.unclassified_gain_loss_usd == Decimal("2500")
        assert report.short_term_gain_loss_usd == report.long_term_gain_loss_usd == Decimal("0")
        assert report.by_ticker["ACME"].cost_basis_method == CostBasisMethod.AVERAGE_COST

    async def test_outside_year_ignored(self, session, ledger, engine_factory):
        session.add_all([
            _sale("ACME", date(2023, 12, 31), "1", "250"),
            _sale("ACME", date(2025, 1, 1), "1", "250"),
        ])
        await session.flush()

        report = await engine_factory().compute_year_report(2024)
        assert report.disposals == []
        assert report.net_gain_loss_usd == Decimal("0")


class TestPartialFailures:
    async def test_missing_position_skipped(self, session, ledger, engine_factory):
        session.add_all([
            _sale("GHOST", date(2024, 2, 1), "5", "100"),
            _sale("BETA", date(2024, 2, 2), "5", "100"),
        ])
        await session.flush()

        report = await engine_factory().compute_year_report(2024)

        assert [d.ticker for d in report.disposals] == ["BETA"]
        assert len(report.skipped) == 1
        assert report.skipped[0].ticker == "GHOST"
        assert "No holdings" in report.skipped[0].reason

    async def test_bad_lot_selection_skipped(self, session, ledger, engine_factory):
        session.add_all([
            _sale("ACME", date(2024, 2, 1), "5", "1500", lot=9),
            _sale("ACME", date(2024, 2, 2), "5", "1500"),
        ])
        await session.flush()

        report = await engine_factory().compute_year_report(2024)

        assert len(report.disposals) == 1
        assert report.skipped[0].reason.endswith("lot 9 not found")

    async def test_oversell_reported_as_warning(self, session, ledger, engine_factory):
        session.add(_sale("BETA", date(2024, 2, 1), "25", "500"))
        await session.flush()

        report = await engine_factory().compute_year_report(2024)

        detail = report.disposals[0]
        assert detail.shares_allocated == Decimal("20")
        assert detail.cost_basis_usd == Decimal("200")
        assert "Only 20" in detail.warning

    async def test_average_cost_oversell_reported_as_warning(self, session, ledger, engine_factory):
        await HoldingRepo(session).update_cost_basis_method("BETA", CostBasisMethod.AVERAGE_COST)
        session.add(_sale("BETA", date(2024, 2, 1), "25", "500"))
        await session.flush()

        report = await engine_factory().compute_year_report(2024)

        detail = report.disposals[0]
        assert detail.cost_basis_method == CostBasisMethod.AVERAGE_COST
        assert detail.shares_allocated == Decimal("20")
        assert detail.cost_basis_usd == Decimal("200")
        assert detail.gain_loss_usd == Decimal("300")
        assert "Only 20 of 25" in detail.warning


class TestRates:
    async def test_each_disposal_converted_at_its_own_date(self, session, ledger):
        provider = MagicMock()
        provider.get_rate = AsyncMock(side_effect=[Decimal("6.5"), Decimal("7.5")])
        engine = CapitalGainsEngine(session, ExchangeRateService(session, provider))
        session.add_all([
            _sale("BETA", date(2024, 2, 1), "10", "200"),
            _sale("BETA", date(2024, 8, 1), "10", "300"),
        ])
        await session.flush()

        report = await engine.compute_year_report(2024)

        assert [d.exchange_rate for d in report.disposals] == [Decimal("6.5"), Decimal("7.5")]
        # (200 - 100) * 6.5 + (300 - 100) * 7.5
        assert report.net_gain_loss_dkk == Decimal("2150")

    async def test_failing_rate_source_falls_back_to_default(self, session, ledger):
        provider = MagicMock()
        provider.get_rate = AsyncMock(side_effect=RuntimeError("down"))
        engine = CapitalGainsEngine(session, ExchangeRateService(session, provider, default_rate=Decimal("6.9")))
        session.add(_sale("BETA", date(2024, 2, 1), "10", "200"))
        await session.flush()

        report = await engine.compute_year_report(2024)

        assert report.disposals[0].rate_source == RateSource.DEFAULT
        assert report.disposals[0].gain_loss_dkk == Decimal("690.0")


class TestPeriodReport:
    async def test_quarter(self, session, ledger, engine_factory):
        session.add_all([
            _sale("BETA", date(2024, 3, 31), "1", "20"),
            _sale("BETA", date(2024, 4, 1), "1", "20"),
        ])
        await session.flush()

        report = await engine_factory().compute_period_report(date(2024, 1, 1), date(2024, 3, 31), label="2024-Q1")

        assert report.label == "2024-Q1"
        assert report.year is None
        assert len(report.disposals) == 1

    async def test_reversed_period_rejected(self, engine_factory):
        with pytest.raises(InvalidPeriodError):
            await engine_factory().compute_period_report(date(2024, 3, 31), date(2024, 1, 1))
