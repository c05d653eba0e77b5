"""Dividends API: gross dividends and foreign tax credit per year."""

from decimal import Decimal
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from rsutax.accounting.dividends import DividendEngine
from rsutax.api.deps import get_db, get_exchange_rate_service
from rsutax.domain.models.reports import DividendReport
from rsutax.infra.fx.service import ExchangeRateService

router = APIRouter(prefix="/api/dividends", tags=["dividends"])

DbDep = Annotated[AsyncSession, Depends(get_db)]
FxDep = Annotated[ExchangeRateService, Depends(get_exchange_rate_service)]


@router.get("", response_model=DividendReport)
async def get_dividends(
    db: DbDep,
    fx: FxDep,
    year: int = Query(..., ge=2000, le=2100),
    is_us_person: bool = Query(False),
    irs_tax_paid: Optional[Decimal] = Query(None, ge=0, description="US tax actually paid (USD)"),
) -> DividendReport:
    report = await DividendEngine(db, fx).compute_year_report(year, is_us_person, irs_tax_paid)
    await db.commit()
    return report
