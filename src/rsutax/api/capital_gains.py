"""Capital gains API: yearly report, positions and cost-basis elections."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from rsutax.accounting.capital_gains import CapitalGainsEngine
from rsutax.api.deps import get_db, get_exchange_rate_service
from rsutax.api.schemas.capital_gains import MethodSwitchRequest, PositionResponse
from rsutax.db.repos.holding_repo import HoldingRepo
from rsutax.domain.models.reports import CapitalGainsReport
from rsutax.infra.fx.service import ExchangeRateService

router = APIRouter(prefix="/api/capital-gains", tags=["capital-gains"])

DbDep = Annotated[AsyncSession, Depends(get_db)]
FxDep = Annotated[ExchangeRateService, Depends(get_exchange_rate_service)]


@router.get("", response_model=CapitalGainsReport)
async def get_capital_gains(
    db: DbDep,
    fx: FxDep,
    year: int = Query(..., ge=2000, le=2100),
) -> CapitalGainsReport:
    """Realized gains for a tax year. Newly fetched rates are cached."""
    report = await CapitalGainsEngine(db, fx).compute_year_report(year)
    await db.commit()
    return report


@router.get("/positions", response_model=list[PositionResponse])
async def list_positions(db: DbDep) -> list[PositionResponse]:
    positions = await HoldingRepo(db).get_positions()
    return [PositionResponse.from_position(p) for p in positions]


@router.post("/method", response_model=PositionResponse)
async def set_cost_basis_method(body: MethodSwitchRequest, db: DbDep) -> PositionResponse:
    """Elect a cost-basis method. Average cost is irreversible (400 on revert)."""
    position = await HoldingRepo(db).update_cost_basis_method(body.ticker, body.method)
    if position is None:
        raise HTTPException(status_code=404, detail=f"No holdings for {body.ticker}")
    await db.commit()
    return PositionResponse.from_position(position)
