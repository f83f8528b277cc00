"""Compare mortgage, savings and loan outcomes now against a Bank Rate scenario."""

from dataclasses import dataclass, field
import math
from enum import Enum

from bank_rate_dashboard.calculators.finance import (
    CreditCardPayoff,
    monthly_payment_amortised,
    monthly_payment_interest_only,
    savings_compound_monthly,
    savings_simple,
    simulate_credit_card_payoff,
)
from bank_rate_dashboard.config import SCENARIO_CHANGES


class RepaymentType(Enum):
    """How a mortgage is paid back."""
    REPAYMENT = "repayment"
    INTEREST_ONLY = "interest-only"


class RateMode(Enum):
    """Whether a product tracks Bank Rate or pays a fixed rate."""
    MARGIN = "margin"  # Bank Rate + margin
    FIXED = "fixed"


class InterestType(Enum):
    SIMPLE = "simple"
    COMPOUND = "compound"


class LoanMode(Enum):
    PERSONAL_LOAN = "personal-loan"
    CREDIT_CARD = "credit-card"


@dataclass
class MortgageInputs:
    loan_amount: float = 250000.0
    term_years: float = 25.0
    repayment_type: RepaymentType = RepaymentType.REPAYMENT
    lender_margin: float = 1.50  # percentage points over Bank Rate
    current_fixed_rate: float | None = None


@dataclass
class SavingsInputs:
    balance: float = 10000.0
    savings_mode: RateMode = RateMode.MARGIN
    margin: float = 0.50
    fixed_apy: float = 4.00
    time_months: float = 12.0
    interest_type: InterestType = InterestType.COMPOUND


@dataclass
class PersonalLoanInputs:
    loan_amount: float = 10000.0
    term_years: float = 5.0
    rate_mode: RateMode = RateMode.MARGIN
    margin: float = 3.00
    fixed_apr: float = 8.00


@dataclass
class CreditCardInputs:
    balance: float = 5000.0
    apr: float = 18.00
    monthly_repayment: float = 200.0


@dataclass
class LoanInputs:
    """Loans tab: one of the two products is active."""

    mode: LoanMode = LoanMode.PERSONAL_LOAN
    personal: PersonalLoanInputs = field(default_factory=PersonalLoanInputs)
    card: CreditCardInputs = field(default_factory=CreditCardInputs)


@dataclass(frozen=True)
class MortgageComparison:
    effective_rate_now: float
    effective_rate_scenario: float
    payment_now: float
    payment_scenario: float
    difference: float
    payment_current_fixed: float | None


@dataclass(frozen=True)
class SavingsComparison:
    annual_rate_now: float
    annual_rate_scenario: float
    final_balance_now: float
    final_balance_scenario: float
    interest_now: float
    interest_scenario: float
    difference: float


@dataclass(frozen=True)
class PersonalLoanResult:
    annual_rate: float
    monthly_payment: float
    total_paid: float
    total_interest: float


def scenario_rate(base_rate: float, change: float) -> float:
    """Bank Rate after a hypothetical move of `change` percentage points."""
    if change not in SCENARIO_CHANGES:
        raise ValueError(f"Unknown scenario change: {change}")
    return base_rate + change


def _mortgage_payment(inputs: MortgageInputs, annual_rate: float) -> float:
    if inputs.repayment_type is RepaymentType.REPAYMENT:
        return monthly_payment_amortised(inputs.loan_amount, annual_rate, inputs.term_years)
    return monthly_payment_interest_only(inputs.loan_amount, annual_rate)


def compare_mortgage(
    base_rate: float, change: float, inputs: MortgageInputs
) -> MortgageComparison:
    """Tracker mortgage payment at today's Bank Rate and under the scenario."""
    rate_now = base_rate + inputs.lender_margin
    rate_scenario = scenario_rate(base_rate, change) + inputs.lender_margin

    payment_now = _mortgage_payment(inputs, rate_now)
    payment_scenario = _mortgage_payment(inputs, rate_scenario)

    # A blank or zero fixed rate means "not on a fixed deal"
    payment_fixed = None
    if inputs.current_fixed_rate and math.isfinite(inputs.current_fixed_rate):
        payment_fixed = _mortgage_payment(inputs, inputs.current_fixed_rate)

    return MortgageComparison(
        effective_rate_now=rate_now,
        effective_rate_scenario=rate_scenario,
        payment_now=payment_now,
        payment_scenario=payment_scenario,
        difference=payment_scenario - payment_now,
        payment_current_fixed=payment_fixed,
    )


def compare_savings(
    base_rate: float, change: float, inputs: SavingsInputs
) -> SavingsComparison:
    """Savings balance after the term at today's rate and under the scenario."""
    bank_rate_scenario = scenario_rate(base_rate, change)
    if inputs.savings_mode is RateMode.MARGIN:
        rate_now = base_rate + inputs.margin
        rate_scenario = bank_rate_scenario + inputs.margin
    else:
        rate_now = rate_scenario = inputs.fixed_apy

    grow = (
        savings_compound_monthly
        if inputs.interest_type is InterestType.COMPOUND
        else savings_simple
    )
    final_now = grow(inputs.balance, rate_now, inputs.time_months)
    final_scenario = grow(inputs.balance, rate_scenario, inputs.time_months)

    return SavingsComparison(
        annual_rate_now=rate_now,
        annual_rate_scenario=rate_scenario,
        final_balance_now=final_now,
        final_balance_scenario=final_scenario,
        interest_now=final_now - inputs.balance,
        interest_scenario=final_scenario - inputs.balance,
        difference=final_scenario - final_now,
    )


def personal_loan(base_rate: float, inputs: PersonalLoanInputs) -> PersonalLoanResult:
    """Repayment schedule totals for a personal loan at today's rate."""
    if inputs.rate_mode is RateMode.MARGIN:
        annual_rate = base_rate + inputs.margin
    else:
        annual_rate = inputs.fixed_apr

    payment = monthly_payment_amortised(inputs.loan_amount, annual_rate, inputs.term_years)
    total_paid = payment * inputs.term_years * 12

    return PersonalLoanResult(
        annual_rate=annual_rate,
        monthly_payment=payment,
        total_paid=total_paid,
        total_interest=total_paid - inputs.loan_amount,
    )


def credit_card(inputs: CreditCardInputs) -> CreditCardPayoff:
    """Card payoff does not depend on Bank Rate; the APR is taken as given."""
    return simulate_credit_card_payoff(inputs.balance, inputs.apr, inputs.monthly_repayment)
