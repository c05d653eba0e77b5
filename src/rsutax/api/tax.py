"""Tax API: Danish personal income tax with § 7P."""

from fastapi import APIRouter

from rsutax.accounting.danish_tax import calculate_danish_tax
from rsutax.domain.models.tax import TaxInput, TaxResult

router = APIRouter(prefix="/api/tax", tags=["tax"])


@router.post("/calculate", response_model=TaxResult)
async def calculate_tax(body: TaxInput) -> TaxResult:
    return calculate_danish_tax(body)
