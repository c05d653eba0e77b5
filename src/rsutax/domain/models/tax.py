"""Value types for the Danish income tax calculation."""

from decimal import Decimal

from pydantic import BaseModel, Field


class TaxRates(BaseModel):
    model_config = {"frozen": True}

    am_bidrag: Decimal
    bottom_tax: Decimal
    top_tax: Decimal
    municipal_tax: Decimal  # Average kommuneskat, varies by municipality
    top_tax_threshold: Decimal
    personal_allowance: Decimal
    allowance_7p_share: Decimal  # Default § 7P allowance as a share of salary


class TaxInput(BaseModel):
    yearly_salary_dkk: Decimal = Field(default=Decimal(0), ge=0)
    fradrag_dkk: Decimal = Field(default=Decimal(0), ge=0)
    amount_on_7p_dkk: Decimal = Field(default=Decimal(0), ge=0)
    amount_not_on_7p_dkk: Decimal = Field(default=Decimal(0), ge=0)
    allowance_7p_dkk: Decimal | None = Field(default=None, ge=0)  # None = derive from salary
    year: int


class TaxResult(BaseModel):
    total_income: Decimal
    taxable_income: Decimal  # After AM-bidrag
    taxable_income_after_deductions: Decimal

    am_bidrag: Decimal

    municipal_tax_base: Decimal
    municipal_tax: Decimal
    bottom_tax_base: Decimal
    bottom_tax: Decimal
    top_tax_base: Decimal
    top_tax: Decimal

    regular_total_tax: Decimal  # Before the § 7P benefit

    allowance_7p_dkk: Decimal
    tax_7p_reduction: Decimal
    regular_tax_on_7p_amount: Decimal

    total_tax: Decimal
    effective_tax_rate: Decimal  # Percent
    net_income: Decimal
