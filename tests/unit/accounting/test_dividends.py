"""Tests for DividendEngine and the treaty-capped foreign tax credit."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from rsutax.accounting.dividends import TREATY_CAP_RATE, DividendEngine, foreign_tax_credit
from rsutax.db.models.transaction import TransactionRecord
from rsutax.domain.enums.tax import IncomeCategory
from rsutax.infra.fx.service import ExchangeRateService


def _income(activity: str, day: date, cash: str, ticker: str = "ACME") -> TransactionRecord:
    return TransactionRecord(entry_date=day, activity_type=activity, ticker=ticker, cash_value=Decimal(cash))


@pytest.fixture()
async def income(session):
    session.add_all([
        _income("Dividend (Cash)", date(2024, 3, 14), "100.00"),
        _income("Withholding", date(2024, 3, 14), "-15.00"),
        _income("Dividend", date(2024, 6, 14), "200.00", ticker="BETA"),
        _income("IRS Nonresident Alien Withholding", date(2024, 6, 14), "-60.00", ticker="BETA"),
        _income("Dividend", date(2023, 12, 14), "999.00"),
        _income("Sale", date(2024, 6, 14), "5000.00"),
    ])
    await session.flush()


@pytest.fixture()
def engine(session, rate_provider) -> DividendEngine:
    return DividendEngine(session, ExchangeRateService(session, rate_provider))


class TestTotals:
    async def test_gross_and_withheld(self, income, engine):
        report = await engine.compute_year_report(2024)

        assert report.gross_dividends_usd == Decimal("300")
        assert report.gross_dividends_dkk == Decimal("2100")
        assert report.actual_withheld_usd == Decimal("75")
        assert report.actual_withheld_dkk == Decimal("525")
        assert len(report.dividends) == 2
        assert len(report.withholdings) == 2
        assert all(w.amount_usd > 0 for w in report.withholdings)
        assert report.withholdings[0].category == IncomeCategory.WITHHOLDING

    async def test_by_ticker(self, income, engine):
        report = await engine.compute_year_report(2024)

        beta = report.by_ticker["BETA"]
        assert beta.gross_dividends_usd == Decimal("200")
        assert beta.withheld_usd == Decimal("60")
        assert beta.transaction_count == 1
        assert report.by_ticker["ACME"].gross_dividends_dkk == Decimal("700")

    async def test_empty_year(self, engine):
        report = await engine.compute_year_report(2024)

        assert report.gross_dividends_usd == Decimal("0")
        assert report.foreign_tax_credit_dkk == Decimal("0")
        assert report.by_ticker == {}


class TestForeignTaxCredit:
    async def test_treaty_cap_by_default(self, income, engine):
        report = await engine.compute_year_report(2024)

        assert report.foreign_tax_credit_usd == Decimal("45")
        assert report.foreign_tax_credit_dkk == Decimal("315")

    async def test_us_person_actual_below_cap(self, income, engine):
        report = await engine.compute_year_report(2024, is_us_person=True, actual_foreign_tax_paid=Decimal("30"))

        assert report.foreign_tax_credit_usd == Decimal("30")
        assert report.foreign_tax_credit_dkk == Decimal("210")

    async def test_us_person_actual_above_cap(self, income, engine):
        report = await engine.compute_year_report(2024, is_us_person=True, actual_foreign_tax_paid=Decimal("80"))
        assert report.foreign_tax_credit_usd == Decimal("45")

    async def test_us_person_without_actual_uses_cap(self, income, engine):
        report = await engine.compute_year_report(2024, is_us_person=True)
        assert report.foreign_tax_credit_usd == Decimal("45")

    async def test_blended_rate_across_dates(self, session, income):
        provider = MagicMock()
        provider.get_rate = AsyncMock(side_effect=[Decimal("6.0"), Decimal("7.5"), Decimal("6.0"), Decimal("7.5")])
        engine = DividendEngine(session, ExchangeRateService(session, provider))

        report = await engine.compute_year_report(2024, is_us_person=True, actual_foreign_tax_paid=Decimal("30"))

        # gross 100 @ 6.0 + 200 @ 7.5 = 2100 DKK on 300 USD -> blended 7.0
        assert report.gross_dividends_dkk == Decimal("2100")
        assert report.foreign_tax_credit_dkk == Decimal("210")


class TestCreditFunction:
    def test_cap_rate(self):
        assert TREATY_CAP_RATE == Decimal("0.15")

    def test_zero_gross_us_person(self):
        assert foreign_tax_credit(Decimal(0), Decimal(0), True, Decimal("10")) == (Decimal(0), Decimal(0))
