"""Report types returned by the capital gains and dividend aggregators."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from rsutax.domain.enums.rate_source import RateSource
from rsutax.domain.enums.tax import CostBasisMethod, HoldingPeriod, IncomeCategory
from rsutax.domain.models.ledger import LotConsumption


class SkippedTransaction(BaseModel):
    """A transaction excluded from report totals, with the reason."""

    transaction_id: int | None = None
    ticker: str
    date: date
    reason: str


class DisposalDetail(BaseModel):
    """A sale annotated with its computed cost basis and gain/loss."""

    transaction_id: int | None = None
    ticker: str
    date: date
    shares_sold: Decimal
    shares_allocated: Decimal
    proceeds_usd: Decimal
    proceeds_dkk: Decimal
    cost_basis_usd: Decimal
    cost_basis_dkk: Decimal
    gain_loss_usd: Decimal
    gain_loss_dkk: Decimal
    exchange_rate: Decimal
    rate_source: RateSource
    cost_basis_method: CostBasisMethod
    holding_period_class: HoldingPeriod | None = None
    lots_consumed: list[LotConsumption] = []
    warning: str | None = None


class TickerGainSummary(BaseModel):
    net_gain_loss_usd: Decimal = Decimal(0)
    net_gain_loss_dkk: Decimal = Decimal(0)
    shares_sold: Decimal = Decimal(0)
    transaction_count: int = 0
    cost_basis_method: CostBasisMethod


class CapitalGainsReport(BaseModel):
    """Realized gains for a period (rubrik 454 on the Danish return)."""

    year: int | None = None
    label: str | None = None
    period_start: date
    period_end: date

    net_gain_loss_usd: Decimal = Decimal(0)
    net_gain_loss_dkk: Decimal = Decimal(0)
    short_term_gain_loss_usd: Decimal = Decimal(0)
    short_term_gain_loss_dkk: Decimal = Decimal(0)
    long_term_gain_loss_usd: Decimal = Decimal(0)
    long_term_gain_loss_dkk: Decimal = Decimal(0)
    # Average-cost disposals carry no single acquisition date
    unclassified_gain_loss_usd: Decimal = Decimal(0)
    unclassified_gain_loss_dkk: Decimal = Decimal(0)

    by_ticker: dict[str, TickerGainSummary] = {}
    disposals: list[DisposalDetail] = []
    skipped: list[SkippedTransaction] = []


class IncomeDetail(BaseModel):
    transaction_id: int | None = None
    ticker: str
    date: date
    category: IncomeCategory
    amount_usd: Decimal  # Absolute value
    amount_dkk: Decimal
    exchange_rate: Decimal
    rate_source: RateSource


class TickerDividendSummary(BaseModel):
    gross_dividends_usd: Decimal = Decimal(0)
    gross_dividends_dkk: Decimal = Decimal(0)
    withheld_usd: Decimal = Decimal(0)
    withheld_dkk: Decimal = Decimal(0)
    transaction_count: int = 0  # Dividend payments only


class DividendReport(BaseModel):
    """Gross foreign dividends (rubrik 452) and foreign tax credit (rubrik 496)."""

    year: int
    gross_dividends_usd: Decimal = Decimal(0)
    gross_dividends_dkk: Decimal = Decimal(0)
    foreign_tax_credit_usd: Decimal = Decimal(0)
    foreign_tax_credit_dkk: Decimal = Decimal(0)
    actual_withheld_usd: Decimal = Decimal(0)
    actual_withheld_dkk: Decimal = Decimal(0)
    by_ticker: dict[str, TickerDividendSummary] = {}
    dividends: list[IncomeDetail] = []
    withholdings: list[IncomeDetail] = []
