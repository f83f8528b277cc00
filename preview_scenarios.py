"""Quick look at calculator results under each Bank Rate scenario."""

from bank_rate_dashboard.calculators.scenario import (
    CreditCardInputs,
    MortgageInputs,
    SavingsInputs,
    compare_mortgage,
    compare_savings,
    credit_card,
)
from bank_rate_dashboard.config import SCENARIO_CHANGES
from bank_rate_dashboard.data import BoeFetcher, FeedError


def main() -> None:
    try:
        with BoeFetcher() as fetcher:
            series = fetcher.fetch_series()
    except FeedError as e:
        print(f"Could not load Bank Rate: {e.message}")
        return

    latest = series.latest
    print(f"\nBank Rate {latest.value:.2f}% - As of {latest.date}")
    print("=" * 60)

    mortgage = MortgageInputs()
    savings = SavingsInputs()
    print(f"\nMortgage £{mortgage.loan_amount:,.0f} over {mortgage.term_years:.0f} years, "
          f"savings £{savings.balance:,.0f} for {savings.time_months:.0f} months\n")

    for change in SCENARIO_CHANGES:
        m = compare_mortgage(latest.value, change, mortgage)
        s = compare_savings(latest.value, change, savings)
        print(f"  {change:+.2f} | mortgage {m.payment_scenario:>9,.2f} ({m.difference:+8.2f}) "
              f"| savings {s.final_balance_scenario:>10,.2f} ({s.difference:+7.2f})")

    print("\n" + "-" * 60)
    card = credit_card(CreditCardInputs())
    if card.will_not_repay:
        print("Credit card: repayment too low to clear the balance")
    else:
        print(f"Credit card: repaid in {card.months_to_repay} months, "
              f"£{card.total_interest:,.2f} interest")


if __name__ == "__main__":
    main()
