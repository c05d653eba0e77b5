from enum import Enum


class CostBasisMethod(str, Enum):
    """Cost-basis regime per ticker. AVERAGE_COST (gennemsnitsmetoden) is permanent once elected."""

    LOT_BASED = "LOT_BASED"
    AVERAGE_COST = "AVERAGE_COST"


class HoldingPeriod(str, Enum):
    SHORT_TERM = "SHORT_TERM"
    LONG_TERM = "LONG_TERM"

    @classmethod
    def parse(cls, raw: str | None) -> "HoldingPeriod | None":
        """Accept stored values as well as broker labels like 'Short Term'."""
        if not raw:
            return None
        normalized = raw.strip().upper().replace(" ", "_").replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            return None


class IncomeCategory(str, Enum):
    DIVIDEND = "DIVIDEND"
    WITHHOLDING = "WITHHOLDING"
