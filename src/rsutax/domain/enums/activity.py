from enum import Enum


class ActivityType(str, Enum):
    """Activity labels as they appear in imported broker statements."""

    SALE = "Sale"
    SOLD = "Sold"
    RELEASE = "Release"
    DIVIDEND_REINVESTMENT = "Dividend Reinvested"
    DIVIDEND_CASH = "Dividend (Cash)"
    DIVIDEND = "Dividend"
    WITHHOLDING = "Withholding"
    IRS_NRA_WITHHOLDING = "IRS Nonresident Alien Withholding"
    TAX_WITHHOLDING = "Tax Withholding"


DISPOSAL_ACTIVITIES = frozenset({ActivityType.SALE, ActivityType.SOLD})
DIVIDEND_ACTIVITIES = frozenset({ActivityType.DIVIDEND_CASH, ActivityType.DIVIDEND})
WITHHOLDING_ACTIVITIES = frozenset({
    ActivityType.WITHHOLDING,
    ActivityType.IRS_NRA_WITHHOLDING,
    ActivityType.TAX_WITHHOLDING,
})
