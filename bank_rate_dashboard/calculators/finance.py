"""
Loan, savings and credit card arithmetic.

Rates are annual percentages (5.0 means 5%). Amounts share one currency unit.
Every function is total: bad input (negative, NaN or infinite) gives a
default result instead of raising, since values arrive from form fields
while the user is still typing.
"""

import math
from dataclasses import dataclass


MAX_PAYOFF_MONTHS = 600  # 50 years
PAYOFF_TOLERANCE = 0.01


@dataclass(frozen=True)
class CreditCardPayoff:
    """Outcome of paying a fixed amount off a card balance each month."""

    months_to_repay: int | None
    total_interest: float
    will_not_repay: bool


def _valid(*values: float) -> bool:
    return all(math.isfinite(v) and v >= 0 for v in values)


def _monthly_rate(annual_rate_pct: float) -> float:
    return annual_rate_pct / 100 / 12


def monthly_payment_amortised(
    principal: float, annual_rate_pct: float, years: float
) -> float:
    """
    Monthly payment for a repayment loan.

    P * r(1+r)^n / ((1+r)^n - 1) with r the monthly rate and n the number
    of months.
    """
    if not _valid(principal, annual_rate_pct, years):
        return 0.0
    if principal == 0 or years == 0:
        return 0.0

    num_months = years * 12
    if annual_rate_pct == 0:
        return principal / num_months

    rate = _monthly_rate(annual_rate_pct)
    growth = (1 + rate) ** num_months
    denominator = growth - 1
    if denominator == 0:
        return 0.0

    return principal * rate * growth / denominator


def monthly_payment_interest_only(principal: float, annual_rate_pct: float) -> float:
    """Monthly payment for an interest-only loan."""
    if not _valid(principal, annual_rate_pct):
        return 0.0
    if principal == 0:
        return 0.0

    return principal * _monthly_rate(annual_rate_pct)


def savings_compound_monthly(
    balance: float, annual_rate_pct: float, months: float
) -> float:
    """Balance after compounding monthly for the given number of months."""
    if not _valid(balance, annual_rate_pct, months) or months == 0:
        return balance

    return balance * (1 + _monthly_rate(annual_rate_pct)) ** months


def savings_simple(balance: float, annual_rate_pct: float, months: float) -> float:
    """Balance after simple (non-compounding) interest."""
    if not _valid(balance, annual_rate_pct, months) or months == 0:
        return balance

    return balance * (1 + _monthly_rate(annual_rate_pct) * months)


def simulate_credit_card_payoff(
    balance: float, apr_pct: float, monthly_payment: float
) -> CreditCardPayoff:
    """
    Simulate month by month until the balance is cleared.

    Stops early when a payment does not cover the month's interest, and
    gives up after MAX_PAYOFF_MONTHS. Both report will_not_repay.
    """
    if (
        not _valid(balance, apr_pct, monthly_payment)
        or balance == 0
        or monthly_payment == 0
    ):
        return CreditCardPayoff(
            months_to_repay=None, total_interest=0.0, will_not_repay=False
        )

    rate = _monthly_rate(apr_pct)
    current = balance
    total_interest = 0.0
    months = 0

    while current > PAYOFF_TOLERANCE and months < MAX_PAYOFF_MONTHS:
        interest = current * rate
        total_interest += interest

        if monthly_payment <= interest:
            return CreditCardPayoff(
                months_to_repay=None,
                total_interest=total_interest,
                will_not_repay=True,
            )

        current = current + interest - monthly_payment
        months += 1

    capped = months >= MAX_PAYOFF_MONTHS
    return CreditCardPayoff(
        months_to_repay=None if capped else months,
        total_interest=total_interest,
        will_not_repay=capped,
    )
