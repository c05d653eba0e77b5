"""Cost-basis allocation. Pure functions, no DB dependency.

Supports the two Danish regimes: lot-based (FIFO, or an explicitly chosen lot)
and gennemsnitsmetoden (weighted average cost per share).
"""

import logging
from datetime import date
from decimal import Decimal

from rsutax.accounting.ledger import weighted_average_cost
from rsutax.domain.enums.tax import CostBasisMethod
from rsutax.domain.models.ledger import AllocationResult, LotConsumption, Position
from rsutax.exceptions import LotSelectionError, NegativeSharesError, OversellError

logger = logging.getLogger(__name__)


def allocate(
    position: Position,
    shares_to_sell: Decimal,
    requested_lot_id: int | None = None,
    *,
    as_of: date | None = None,
    strict: bool = True,
) -> AllocationResult:
    """Compute the cost basis consumed by selling `shares_to_sell` from `position`.

    Args:
        position: Snapshot of the ticker's lots. Lots are never modified.
        shares_to_sell: Positive quantity; zero yields an empty result.
        requested_lot_id: Consume only this lot (lot-based method only).
        as_of: Disposal date, used to classify lots without a stored holding period.
        strict: Raise OversellError when the position cannot cover the sale.
            When False, allocate what exists and report the shortfall through
            `shares_allocated`.

    Raises:
        NegativeSharesError, LotSelectionError, OversellError
    """
    if shares_to_sell < 0:
        raise NegativeSharesError(f"Cannot sell a negative number of shares: {shares_to_sell}")

    method = position.cost_basis_method
    if shares_to_sell == 0:
        return AllocationResult(method=method, shares_requested=Decimal(0))

    if strict and shares_to_sell > position.total_shares:
        raise OversellError(
            f"{position.ticker}: selling {shares_to_sell} shares but only {position.total_shares} held"
        )

    as_of = as_of or date.today()

    if method == CostBasisMethod.AVERAGE_COST:
        if requested_lot_id is not None:
            logger.debug("%s uses average cost; ignoring requested lot %s", position.ticker, requested_lot_id)
        return _allocate_average_cost(position, shares_to_sell)

    if requested_lot_id is not None:
        return _allocate_specific_lot(position, shares_to_sell, requested_lot_id, as_of)

    return _allocate_fifo(position, shares_to_sell, as_of)


def _allocate_average_cost(position: Position, shares_to_sell: Decimal) -> AllocationResult:
    if position.weighted_average_cost_per_share is None:
        position.weighted_average_cost_per_share = weighted_average_cost(position.lots)

    # Only held shares carry the average; any excess is left unallocated
    allocated = min(shares_to_sell, max(position.total_shares, Decimal(0)))
    if allocated < shares_to_sell:
        logger.warning(
            "%s: average-cost allocation covers %s of %s shares",
            position.ticker, allocated, shares_to_sell,
        )

    return AllocationResult(
        method=CostBasisMethod.AVERAGE_COST,
        shares_requested=shares_to_sell,
        shares_allocated=allocated,
        cost_basis=allocated * position.weighted_average_cost_per_share,
    )


def _allocate_specific_lot(
    position: Position,
    shares_to_sell: Decimal,
    lot_id: int,
    as_of: date,
) -> AllocationResult:
    lot = position.find_lot(lot_id)
    if lot is None:
        raise LotSelectionError(f"{position.ticker}: lot {lot_id} not found")
    if lot.shares < shares_to_sell:
        raise LotSelectionError(
            f"{position.ticker}: lot {lot_id} holds {lot.shares} shares, cannot cover {shares_to_sell}"
        )

    cost = shares_to_sell * lot.cost_per_share
    return AllocationResult(
        method=CostBasisMethod.LOT_BASED,
        shares_requested=shares_to_sell,
        shares_allocated=shares_to_sell,
        cost_basis=cost,
        lots_consumed=[LotConsumption(
            lot_id=lot.lot_id,
            shares=shares_to_sell,
            cost=cost,
            acquisition_date=lot.acquisition_date,
        )],
        holding_period_class=lot.holding_period(as_of),
    )


def _allocate_fifo(position: Position, shares_to_sell: Decimal, as_of: date) -> AllocationResult:
    remaining = shares_to_sell
    cost_basis = Decimal(0)
    consumed: list[LotConsumption] = []

    for lot in position.lots:
        if remaining <= 0:
            break
        if lot.shares <= 0:
            continue

        take = min(remaining, lot.shares)
        cost = take * lot.cost_per_share
        consumed.append(LotConsumption(
            lot_id=lot.lot_id,
            shares=take,
            cost=cost,
            acquisition_date=lot.acquisition_date,
        ))
        cost_basis += cost
        remaining -= take

    if remaining > 0:
        logger.warning(
            "%s: FIFO allocation exhausted lots with %s of %s shares uncovered",
            position.ticker, remaining, shares_to_sell,
        )

    # The oldest tranche decides the holding-period test for the whole sale
    term = None
    if consumed:
        first_lot = position.find_lot(consumed[0].lot_id)
        term = first_lot.holding_period(as_of) if first_lot else None

    return AllocationResult(
        method=CostBasisMethod.LOT_BASED,
        shares_requested=shares_to_sell,
        shares_allocated=shares_to_sell - remaining,
        cost_basis=cost_basis,
        lots_consumed=consumed,
        holding_period_class=term,
    )
