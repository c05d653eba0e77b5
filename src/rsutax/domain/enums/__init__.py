from rsutax.domain.enums.activity import (
    DISPOSAL_ACTIVITIES,
    DIVIDEND_ACTIVITIES,
    WITHHOLDING_ACTIVITIES,
    ActivityType,
)
from rsutax.domain.enums.rate_source import RateSource
from rsutax.domain.enums.tax import CostBasisMethod, HoldingPeriod, IncomeCategory

__all__ = [
    "ActivityType",
    "CostBasisMethod",
    "DISPOSAL_ACTIVITIES",
    "DIVIDEND_ACTIVITIES",
    "HoldingPeriod",
    "IncomeCategory",
    "RateSource",
    "WITHHOLDING_ACTIVITIES",
]
