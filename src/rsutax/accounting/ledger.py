"""Lot ledger operations over Position snapshots."""

import logging
from collections import deque
from decimal import Decimal

from rsutax.domain.enums.tax import CostBasisMethod
from rsutax.domain.models.ledger import AcquisitionLot, AllocationResult, Position
from rsutax.exceptions import DuplicateLotError, MethodSwitchError

logger = logging.getLogger(__name__)


def weighted_average_cost(lots: list[AcquisitionLot]) -> Decimal:
    """Σ(shares * cost) / Σ shares, or zero when no shares are held."""
    total_shares = sum((lot.shares for lot in lots), Decimal(0))
    if total_shares <= 0:
        return Decimal(0)
    total_cost = sum((lot.total_cost for lot in lots), Decimal(0))
    return total_cost / total_shares


def next_lot_id(position: Position) -> int:
    return max((lot.lot_id for lot in position.lots), default=0) + 1


def record_acquisition(position: Position, lot: AcquisitionLot) -> Position:
    """Add a newly acquired lot. Under average cost the blended cost is recomputed."""
    if position.find_lot(lot.lot_id) is not None:
        raise DuplicateLotError(f"{position.ticker}: lot {lot.lot_id} already exists")

    updated = position.model_copy(update={"lots": sorted(
        [*position.lots, lot], key=lambda item: item.acquisition_date,
    )})
    if updated.cost_basis_method == CostBasisMethod.AVERAGE_COST:
        updated.weighted_average_cost_per_share = weighted_average_cost(updated.lots)
    return updated


def switch_cost_basis_method(position: Position, method: CostBasisMethod) -> bool:
    """Apply a cost-basis election in place. Returns True if anything changed.

    Raises MethodSwitchError when trying to leave AVERAGE_COST.
    """
    if method == position.cost_basis_method:
        return False

    if position.cost_basis_method == CostBasisMethod.AVERAGE_COST:
        raise MethodSwitchError(
            f"{position.ticker} has elected average cost; switching back to {method.value} is not allowed"
        )

    position.cost_basis_method = CostBasisMethod.AVERAGE_COST
    position.weighted_average_cost_per_share = weighted_average_cost(position.lots)
    logger.info(
        "%s switched to average cost at %s per share",
        position.ticker, position.weighted_average_cost_per_share,
    )
    return True


def settle_disposal(position: Position, allocation: AllocationResult) -> Position:
    """Return the position left after a reported disposal has been settled.

    Lot-based allocations reduce exactly the consumed lots. Average-cost
    allocations carry no lot detail, so the allocated quantity is removed
    oldest-first; the average per share is unchanged by a sale.
    """
    taken: dict[int, Decimal] = {}
    if allocation.lots_consumed:
        for consumption in allocation.lots_consumed:
            taken[consumption.lot_id] = taken.get(consumption.lot_id, Decimal(0)) + consumption.shares
    else:
        remaining = allocation.shares_allocated
        queue = deque(position.lots)
        while remaining > 0 and queue:
            lot = queue.popleft()
            take = min(remaining, lot.shares)
            taken[lot.lot_id] = take
            remaining -= take

    lots: list[AcquisitionLot] = []
    for lot in position.lots:
        left = lot.shares - taken.get(lot.lot_id, Decimal(0))
        if left > 0:
            lots.append(lot.model_copy(update={"shares": left}))

    return position.model_copy(update={"lots": lots})
