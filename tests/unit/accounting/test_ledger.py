"""Tests for lot ledger operations: acquisitions, method elections, settlement."""

from datetime import date
from decimal import Decimal

import pytest

from rsutax.accounting.cost_basis import allocate
from rsutax.accounting.ledger import (
    next_lot_id,
    record_acquisition,
    settle_disposal,
    switch_cost_basis_method,
    weighted_average_cost,
)
from rsutax.domain.enums.tax import CostBasisMethod
from rsutax.domain.models.ledger import AcquisitionLot, Position
from rsutax.exceptions import DuplicateLotError, MethodSwitchError, UsageError


def _lot(lot_id: int, acquired: date, shares: str, cost: str) -> AcquisitionLot:
    return AcquisitionLot(
        lot_id=lot_id, acquisition_date=acquired, shares=Decimal(shares), cost_per_share=Decimal(cost),
    )


@pytest.fixture()
def position() -> Position:
    return Position(ticker="ACME", lots=[
        _lot(1, date(2023, 1, 10), "50", "200"),
        _lot(2, date(2023, 7, 10), "50", "300"),
    ])


class TestWeightedAverage:
    def test_weighted_by_shares(self):
        lots = [_lot(1, date(2023, 1, 1), "30", "100"), _lot(2, date(2023, 2, 1), "10", "300")]
        assert weighted_average_cost(lots) == Decimal("150")

    def test_no_lots_is_zero(self):
        assert weighted_average_cost([]) == Decimal("0")


class TestRecordAcquisition:
    def test_adds_lot_in_date_order(self, position):
        updated = record_acquisition(position, _lot(3, date(2022, 12, 1), "10", "150"))

        assert [lot.lot_id for lot in updated.lots] == [3, 1, 2]
        assert updated.total_shares == Decimal("110")
        assert position.total_shares == Decimal("100")

    def test_duplicate_lot_id_rejected(self, position):
        with pytest.raises(DuplicateLotError, match="lot 1 already exists"):
            record_acquisition(position, _lot(1, date(2024, 1, 1), "1", "1"))
        assert issubclass(DuplicateLotError, UsageError)

    def test_average_cost_recomputed(self, position):
        switch_cost_basis_method(position, CostBasisMethod.AVERAGE_COST)
        updated = record_acquisition(position, _lot(3, date(2024, 1, 1), "100", "150"))

        # (10000 + 15000 + 15000) / 200
        assert updated.weighted_average_cost_per_share == Decimal("200")

    def test_lot_based_has_no_average(self, position):
        updated = record_acquisition(position, _lot(3, date(2024, 1, 1), "10", "150"))
        assert updated.weighted_average_cost_per_share is None

    def test_next_lot_id(self, position):
        assert next_lot_id(position) == 3
        assert next_lot_id(Position(ticker="NEW")) == 1


class TestMethodSwitch:
    def test_switch_to_average_cost(self, position):
        changed = switch_cost_basis_method(position, CostBasisMethod.AVERAGE_COST)

        assert changed
        assert position.cost_basis_method == CostBasisMethod.AVERAGE_COST
        assert position.weighted_average_cost_per_share == Decimal("250")

    def test_same_method_is_noop(self, position):
        assert not switch_cost_basis_method(position, CostBasisMethod.LOT_BASED)
        assert position.cost_basis_method == CostBasisMethod.LOT_BASED

    def test_average_cost_is_irreversible(self, position):
        switch_cost_basis_method(position, CostBasisMethod.AVERAGE_COST)

        with pytest.raises(MethodSwitchError):
            switch_cost_basis_method(position, CostBasisMethod.LOT_BASED)
        assert position.cost_basis_method == CostBasisMethod.AVERAGE_COST

    def test_reelecting_average_cost_keeps_average(self, position):
        switch_cost_basis_method(position, CostBasisMethod.AVERAGE_COST)
        assert not switch_cost_basis_method(position, CostBasisMethod.AVERAGE_COST)
        assert position.weighted_average_cost_per_share == Decimal("250")


class TestSettleDisposal:
    def test_fifo_settlement_reduces_consumed_lots(self, position):
        allocation = allocate(position, Decimal("70"), as_of=date(2024, 1, 1))
        settled = settle_disposal(position, allocation)

        assert [lot.lot_id for lot in settled.lots] == [2]
        assert settled.lots[0].shares == Decimal("30")
        assert settled.total_shares == Decimal("30")

    def test_specific_lot_settlement(self, position):
        allocation = allocate(position, Decimal("20"), requested_lot_id=2, as_of=date(2024, 1, 1))
        settled = settle_disposal(position, allocation)

        assert {lot.lot_id: lot.shares for lot in settled.lots} == {1: Decimal("50"), 2: Decimal("30")}

    def test_average_cost_settlement_removes_oldest_first(self, position):
        switch_cost_basis_method(position, CostBasisMethod.AVERAGE_COST)
        allocation = allocate(position, Decimal("60"))
        settled = settle_disposal(position, allocation)

        assert settled.total_shares == Decimal("40")
        assert settled.lots[0].lot_id == 2
        assert settled.weighted_average_cost_per_share == Decimal("250")

    def test_original_snapshot_untouched(self, position):
        allocation = allocate(position, Decimal("100"), as_of=date(2024, 1, 1))
        settled = settle_disposal(position, allocation)

        assert settled.lots == []
        assert position.total_shares == Decimal("100")
