"""Exchange rate API: resolve, list cached and prefetch USD/DKK rates."""

from datetime import date
from decimal import Decimal
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from rsutax.api.deps import get_db, get_exchange_rate_service
from rsutax.api.schemas.exchange_rates import ManualRateRequest, PrefetchRequest, PrefetchResponse
from rsutax.domain.models.fx import ExchangeRate
from rsutax.infra.fx.service import ExchangeRateService

router = APIRouter(prefix="/api/exchange-rates", tags=["exchange-rates"])

DbDep = Annotated[AsyncSession, Depends(get_db)]
FxDep = Annotated[ExchangeRateService, Depends(get_exchange_rate_service)]


@router.get("", response_model=ExchangeRate)
async def get_exchange_rate(
    db: DbDep,
    fx: FxDep,
    date: date = Query(..., description="YYYY-MM-DD"),
    manual_rate: Optional[Decimal] = Query(None, gt=0, description="DKK per USD, used if no rate is found"),
) -> ExchangeRate:
    rate = await fx.resolve(date, manual_rate)
    await db.commit()
    return rate


@router.get("/cached", response_model=list[ExchangeRate])
async def list_cached_rates(fx: FxDep, limit: int = Query(100, ge=1, le=1000)) -> list[ExchangeRate]:
    return await fx.list_cached(limit)


@router.post("/prefetch", response_model=PrefetchResponse)
async def prefetch_rates(body: PrefetchRequest, db: DbDep, fx: FxDep) -> PrefetchResponse:
    resolved = await fx.prefetch_range(body.start_date, body.end_date)
    await db.commit()
    return PrefetchResponse(start_date=body.start_date, end_date=body.end_date, resolved=resolved)


@router.post("/manual", response_model=ExchangeRate)
async def set_manual_rate(body: ManualRateRequest, db: DbDep, fx: FxDep) -> ExchangeRate:
    """Supply a rate for a date Nationalbanken does not quote. An existing cached rate wins."""
    rate = await fx.resolve(body.date, body.manual_rate)
    await db.commit()
    return rate
