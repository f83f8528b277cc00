"""Personal-finance calculators."""

from bank_rate_dashboard.calculators.finance import (
    CreditCardPayoff,
    monthly_payment_amortised,
    monthly_payment_interest_only,
    savings_compound_monthly,
    savings_simple,
    simulate_credit_card_payoff,
)

__all__ = [
    "CreditCardPayoff",
    "monthly_payment_amortised",
    "monthly_payment_interest_only",
    "savings_compound_monthly",
    "savings_simple",
    "simulate_credit_card_payoff",
]
