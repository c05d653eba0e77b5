"""Reports API: download the annual tax workbook."""

from decimal import Decimal
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from rsutax.api.deps import get_db, get_exchange_rate_service
from rsutax.infra.fx.service import ExchangeRateService
from rsutax.report.data_collector import TaxReportCollector
from rsutax.report.excel_writer import ExcelWriter

router = APIRouter(prefix="/api/reports", tags=["reports"])

DbDep = Annotated[AsyncSession, Depends(get_db)]
FxDep = Annotated[ExchangeRateService, Depends(get_exchange_rate_service)]

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/{year}/download")
async def download_report(
    db: DbDep,
    fx: FxDep,
    year: int = Path(..., ge=2000, le=2100),
    is_us_person: bool = Query(False),
    irs_tax_paid: Optional[Decimal] = Query(None, ge=0),
):
    data = await TaxReportCollector(db, fx).collect(year, is_us_person, irs_tax_paid)
    await db.commit()

    buf = ExcelWriter().write_to_buffer(data)
    filename = f"rsutax_{year}.xlsx"
    return StreamingResponse(
        buf,
        media_type=XLSX_CONTENT_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
