"""Danish personal income tax: AM-bidrag, kommuneskat, bundskat, topskat and § 7P.

Pure functions over Decimal inputs: the same TaxInput always yields an
identical TaxResult.
"""

from decimal import ROUND_HALF_UP, Decimal

from rsutax.domain.models.tax import TaxInput, TaxRates, TaxResult

TAX_RATES_2024 = TaxRates(
    am_bidrag=Decimal("0.08"),
    bottom_tax=Decimal("0.1209"),
    top_tax=Decimal("0.15"),
    municipal_tax=Decimal("0.25"),
    top_tax_threshold=Decimal("588900"),
    personal_allowance=Decimal("49700"),
    allowance_7p_share=Decimal("0.20"),
)


def get_tax_rates(year: int) -> TaxRates:
    """Rates for a tax year. Only 2024 rates are tabulated; they apply to every year."""
    return TAX_RATES_2024


def default_allowance_7p(yearly_salary_dkk: Decimal, rates: TaxRates = TAX_RATES_2024) -> Decimal:
    """Employer § 7P allowance: a fixed share of base salary, in whole DKK."""
    return (yearly_salary_dkk * rates.allowance_7p_share).quantize(Decimal(1), rounding=ROUND_HALF_UP)


def calculate_danish_tax(tax_input: TaxInput) -> TaxResult:
    rates = get_tax_rates(tax_input.year)
    zero = Decimal(0)

    total_income = tax_input.yearly_salary_dkk + tax_input.amount_on_7p_dkk + tax_input.amount_not_on_7p_dkk

    am_bidrag = total_income * rates.am_bidrag
    income_after_am = total_income - am_bidrag

    taxable_after_deductions = max(
        zero, income_after_am - rates.personal_allowance - tax_input.fradrag_dkk,
    )

    municipal_tax = taxable_after_deductions * rates.municipal_tax
    bottom_tax = taxable_after_deductions * rates.bottom_tax

    top_tax_base = zero
    top_tax = zero
    if taxable_after_deductions > rates.top_tax_threshold:
        top_tax_base = taxable_after_deductions - rates.top_tax_threshold
        top_tax = top_tax_base * rates.top_tax

    regular_total_tax = am_bidrag + municipal_tax + bottom_tax + top_tax

    allowance = tax_input.allowance_7p_dkk
    if allowance is None:
        allowance = default_allowance_7p(tax_input.yearly_salary_dkk, rates)

    # § 7P: average-rate approximation on the allowance, not a marginal recomputation
    tax_7p_reduction = zero
    regular_tax_on_7p_amount = zero
    if tax_input.amount_on_7p_dkk > 0 and allowance > 0:
        average_rate = rates.municipal_tax + rates.bottom_tax
        regular_tax_on_7p_amount = tax_input.amount_on_7p_dkk * (1 - rates.am_bidrag) * average_rate
        tax_7p_reduction = allowance * (1 - rates.am_bidrag) * average_rate

    total_tax = regular_total_tax - tax_7p_reduction
    effective_tax_rate = total_tax / total_income * 100 if total_income > 0 else zero

    return TaxResult(
        total_income=total_income,
        taxable_income=income_after_am,
        taxable_income_after_deductions=taxable_after_deductions,
        am_bidrag=am_bidrag,
        municipal_tax_base=taxable_after_deductions,
        municipal_tax=municipal_tax,
        bottom_tax_base=taxable_after_deductions,
        bottom_tax=bottom_tax,
        top_tax_base=top_tax_base,
        top_tax=top_tax,
        regular_total_tax=regular_total_tax,
        allowance_7p_dkk=allowance,
        tax_7p_reduction=tax_7p_reduction,
        regular_tax_on_7p_amount=regular_tax_on_7p_amount,
        total_tax=total_tax,
        effective_tax_rate=effective_tax_rate,
        net_income=total_income - total_tax,
    )
