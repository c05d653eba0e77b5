"""Tests for TransactionRepo mapping broker activity to typed transactions."""

from datetime import date
from decimal import Decimal

import pytest

from rsutax.db.models.transaction import TransactionRecord
from rsutax.db.repos.transaction_repo import TransactionRepo
from rsutax.domain.enums.tax import IncomeCategory


def _tx(activity: str, day: date, shares: str | None = None, cash: str | None = None, lot: int | None = None):
    return TransactionRecord(
        entry_date=day,
        activity_type=activity,
        ticker="ACME",
        lot_number=lot,
        num_shares=Decimal(shares) if shares is not None else None,
        cash_value=Decimal(cash) if cash is not None else None,
    )


@pytest.fixture()
async def repo(session) -> TransactionRepo:
    session.add_all([
        _tx("Sold", date(2024, 5, 2), shares="-5", cash="1500"),
        _tx("Sale", date(2024, 3, 1), shares="10", cash="-2800", lot=2),
        _tx("Sale", date(2023, 12, 29), shares="1", cash="100"),
        _tx("Release", date(2024, 3, 1), shares="20"),
        _tx("Dividend (Cash)", date(2024, 6, 14), cash="12.50"),
        _tx("Dividend", date(2024, 3, 14), cash="10.00"),
        _tx("IRS Nonresident Alien Withholding", date(2024, 3, 14), cash="-1.50"),
        _tx("Tax Withholding", date(2024, 6, 14), cash="-1.88"),
    ])
    await session.flush()
    return TransactionRepo(session)


class TestDisposals:
    async def test_filters_ordered_and_absolute(self, repo):
        disposals = await repo.list_disposals(date(2024, 1, 1), date(2024, 12, 31))

        assert [d.date for d in disposals] == [date(2024, 3, 1), date(2024, 5, 2)]
        assert disposals[0].shares_sold == Decimal("10")
        assert disposals[0].proceeds_amount == Decimal("2800")
        assert disposals[0].requested_lot_id == 2
        assert disposals[1].shares_sold == Decimal("5")
        assert disposals[1].requested_lot_id is None

    async def test_inclusive_bounds(self, repo):
        disposals = await repo.list_disposals(date(2024, 3, 1), date(2024, 5, 2))
        assert len(disposals) == 2


class TestIncome:
    async def test_dividends(self, repo):
        dividends = await repo.list_income(IncomeCategory.DIVIDEND, date(2024, 1, 1), date(2024, 12, 31))

        assert [d.amount for d in dividends] == [Decimal("10.00"), Decimal("12.50")]
        assert all(d.category == IncomeCategory.DIVIDEND for d in dividends)

    async def test_withholdings_keep_sign(self, repo):
        withholdings = await repo.list_income(IncomeCategory.WITHHOLDING, date(2024, 1, 1), date(2024, 12, 31))

        assert [w.amount for w in withholdings] == [Decimal("-1.50"), Decimal("-1.88")]
