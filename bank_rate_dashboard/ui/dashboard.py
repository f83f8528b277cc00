"""Streamlit dashboard for Bank Rate history and what-if calculators.

- Header: latest Bank Rate
- Chart: rate changes over a selectable window
- Calculators: mortgage, savings, loans & credit cards under a rate scenario
"""

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from bank_rate_dashboard.calculators.scenario import (
    CreditCardInputs,
    InterestType,
    LoanMode,
    MortgageInputs,
    PersonalLoanInputs,
    RateMode,
    RepaymentType,
    SavingsInputs,
    compare_mortgage,
    compare_savings,
    credit_card,
    personal_loan,
    scenario_rate,
)
from bank_rate_dashboard.config import RANGE_OPTIONS, SCENARIO_CHANGES, Settings
from bank_rate_dashboard.data import BoeFetcher, FeedError
from bank_rate_dashboard.data.views import filter_range, header_stats, y_domain
from bank_rate_dashboard.models import RateSeries


settings = Settings()

POSITIVE = "#10b981"
NEGATIVE = "#ef4444"
MUTED = "#94a3b8"
LINE = "#3b82f6"


@st.cache_data(ttl=settings.cache_ttl_seconds, show_spinner=False)
def load_series() -> RateSeries:
    """Fetch the rate history; refreshed once per cache TTL."""
    with BoeFetcher(settings) as fetcher:
        return fetcher.fetch_series()


def format_currency(value: float) -> str:
    return f"£{value:,.2f}"


def format_signed_currency(value: float) -> str:
    sign = "+" if value >= 0 else "-"
    return f"{sign}£{abs(value):,.2f}"


# =============================================================================
# HEADER & CHART
# =============================================================================

def render_header(series: RateSeries) -> None:
    """Render the latest rate."""
    latest = series.latest
    if latest is None:
        return

    as_of = pd.Timestamp(latest.date).strftime("%d %b %Y")
    st.markdown(
        f"""
        <div style="text-align: center; padding: 2rem 0;">
            <div style="color: {MUTED}; font-size: 0.8rem; text-transform: uppercase; letter-spacing: 0.1em;">
                Bank of England Bank Rate
            </div>
            <div style="font-size: 4rem; font-weight: 700; font-family: 'SF Mono', 'Consolas', monospace;">
                {latest.value:.2f}%
            </div>
            <div style="color: {MUTED}; font-size: 0.9rem;">As of {as_of}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def render_history_chart(series: RateSeries) -> None:
    """Render the changes-only history for the selected window."""
    frame = series.to_frame(changes_only=True)
    if frame.empty:
        st.info("No rate history to chart")
        return

    range_key = st.radio(
        "Range",
        options=list(RANGE_OPTIONS.keys()),
        index=2,
        horizontal=True,
        key="chart.range",
        label_visibility="collapsed",
    )
    window = filter_range(frame, range_key)
    stats = header_stats(window)

    if stats is not None:
        color = POSITIVE if stats.change_pct >= 0 else NEGATIVE
        period = "all time" if range_key == "ALL" else range_key.lower()
        st.markdown(
            f"""
            <div style="display: flex; align-items: baseline; gap: 1rem;">
                <span style="font-size: 2rem; font-weight: 600;">{stats.end_value:.2f}%</span>
                <span style="background: {color}; color: white; padding: 0.15rem 0.6rem; border-radius: 4px;">
                    {stats.badge_text} {period}
                </span>
            </div>
            <div style="color: {MUTED}; font-size: 0.8rem;">
                {stats.start_date.strftime('%b %Y')} to {stats.end_date.strftime('%b %Y')}
            </div>
            """,
            unsafe_allow_html=True,
        )

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=window.index, y=window["value"],
        mode="lines+markers", line=dict(color=LINE, width=2, shape="hv"),
        marker=dict(size=5),
        name="Bank Rate",
        hovertemplate="%{x|%d %b %Y}: %{y:.2f}%<extra></extra>",
    ))

    fig.update_layout(
        height=360, margin=dict(l=0, r=20, t=10, b=0),
        paper_bgcolor="rgba(0,0,0,0)", plot_bgcolor="rgba(0,0,0,0)",
        showlegend=False,
        xaxis=dict(showgrid=True, gridcolor="#1e293b", tickformat="%b %Y"),
        hovermode="x unified",
    )
    domain = y_domain(window)
    fig.update_yaxes(
        showgrid=True, gridcolor="#1e293b", ticksuffix="%",
        range=list(domain) if domain else None,
    )

    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})


# =============================================================================
# CALCULATORS
# =============================================================================

def render_mortgage_tab(base_rate: float, change: float) -> None:
    col_inputs, col_results = st.columns(2)
    with col_inputs:
        inputs = MortgageInputs(
            loan_amount=st.number_input("Loan amount (£)", min_value=0.0, value=250000.0, step=1000.0, key="mortgage.loan_amount"),
            term_years=st.number_input("Term (years)", min_value=0.0, value=25.0, step=1.0, key="mortgage.term_years"),
            repayment_type=st.radio(
                "Repayment type",
                options=list(RepaymentType),
                format_func=lambda t: "Repayment" if t is RepaymentType.REPAYMENT else "Interest only",
                horizontal=True,
                key="mortgage.repayment_type",
            ),
            lender_margin=st.number_input("Lender margin (% points)", value=1.50, step=0.01, key="mortgage.lender_margin"),
            current_fixed_rate=st.number_input(
                "Current fixed rate (%, optional)", min_value=0.0, value=None, step=0.01,
                key="mortgage.current_fixed_rate",
            ),
        )

    result = compare_mortgage(base_rate, change, inputs)
    with col_results:
        st.metric("Monthly payment now", format_currency(result.payment_now),
                  help=f"At {result.effective_rate_now:.2f}%")
        st.metric(
            "Monthly payment under scenario", format_currency(result.payment_scenario),
            delta=format_signed_currency(result.difference), delta_color="inverse",
            help=f"At {result.effective_rate_scenario:.2f}%",
        )
        if result.payment_current_fixed is not None:
            st.metric("Monthly payment at your fixed rate", format_currency(result.payment_current_fixed))


def render_savings_tab(base_rate: float, change: float) -> None:
    col_inputs, col_results = st.columns(2)
    with col_inputs:
        balance = st.number_input("Balance (£)", min_value=0.0, value=10000.0, step=100.0, key="savings.balance")
        mode = st.radio(
            "Rate",
            options=list(RateMode),
            format_func=lambda m: "Bank Rate + margin" if m is RateMode.MARGIN else "Fixed APY",
            horizontal=True,
            key="savings.mode",
        )
        if mode is RateMode.MARGIN:
            margin = st.number_input("Margin (% points)", value=0.50, step=0.01, key="savings.margin")
            fixed_apy = SavingsInputs.fixed_apy
        else:
            margin = SavingsInputs.margin
            fixed_apy = st.number_input("Fixed APY (%)", min_value=0.0, value=4.00, step=0.01, key="savings.fixed_apy")
        months = st.number_input("Time period (months)", min_value=0.0, value=12.0, step=1.0, key="savings.time_months")
        interest_type = st.radio(
            "Interest",
            options=list(InterestType),
            index=1,
            format_func=lambda t: t.value.title(),
            horizontal=True,
            key="savings.interest_type",
        )

    result = compare_savings(
        base_rate, change,
        SavingsInputs(balance, mode, margin, fixed_apy, months, interest_type),
    )
    with col_results:
        st.metric("Final balance now", format_currency(result.final_balance_now),
                  help=f"At {result.annual_rate_now:.2f}%, interest {format_currency(result.interest_now)}")
        st.metric(
            "Final balance under scenario", format_currency(result.final_balance_scenario),
            delta=format_signed_currency(result.difference),
            help=f"At {result.annual_rate_scenario:.2f}%, interest {format_currency(result.interest_scenario)}",
        )


def render_loans_tab(base_rate: float) -> None:
    mode = st.radio(
        "Product",
        options=list(LoanMode),
        format_func=lambda m: "Personal loan" if m is LoanMode.PERSONAL_LOAN else "Credit card",
        horizontal=True,
        key="loan.mode",
    )
    col_inputs, col_results = st.columns(2)

    if mode is LoanMode.PERSONAL_LOAN:
        with col_inputs:
            amount = st.number_input("Loan amount (£)", min_value=0.0, value=10000.0, step=500.0, key="loan.amount")
            years = st.number_input("Term (years)", min_value=0.0, value=5.0, step=1.0, key="loan.term_years")
            rate_mode = st.radio(
                "Rate mode",
                options=list(RateMode),
                format_func=lambda m: "Bank Rate + margin" if m is RateMode.MARGIN else "Fixed APR",
                horizontal=True,
                key="loan.rate_mode",
            )
            if rate_mode is RateMode.MARGIN:
                margin = st.number_input("Margin (% points)", value=3.00, step=0.01, key="loan.margin")
                fixed_apr = PersonalLoanInputs.fixed_apr
            else:
                margin = PersonalLoanInputs.margin
                fixed_apr = st.number_input("Fixed APR (%)", min_value=0.0, value=8.00, step=0.01, key="loan.fixed_apr")

        loan = personal_loan(base_rate, PersonalLoanInputs(amount, years, rate_mode, margin, fixed_apr))
        with col_results:
            st.metric("Monthly payment", format_currency(loan.monthly_payment), help=f"At {loan.annual_rate:.2f}%")
            st.metric("Total interest", format_currency(loan.total_interest))
            st.metric("Total paid", format_currency(loan.total_paid))
        return

    with col_inputs:
        card_inputs = CreditCardInputs(
            balance=st.number_input("Balance (£)", min_value=0.0, value=5000.0, step=100.0, key="card.balance"),
            apr=st.number_input("APR (%)", min_value=0.0, value=18.00, step=0.01, key="card.apr"),
            monthly_repayment=st.number_input("Monthly repayment (£)", min_value=0.0, value=200.0, step=10.0, key="card.monthly_repayment"),
        )

    payoff = credit_card(card_inputs)
    with col_results:
        if payoff.will_not_repay:
            st.error("At this repayment the balance will not be cleared. Increase the monthly repayment.")
        elif payoff.months_to_repay is None:
            st.info("Enter a balance and monthly repayment.")
        else:
            st.metric("Time to repay", f"{payoff.months_to_repay} months",
                      help=f"{payoff.months_to_repay / 12:.1f} years")
        st.metric("Total interest", format_currency(payoff.total_interest))


def render_calculators(base_rate: float) -> None:
    """Render the scenario selector and calculator tabs."""
    st.markdown("### What would a rate change mean for you?")

    change = st.radio(
        "Bank Rate change",
        options=list(SCENARIO_CHANGES),
        index=SCENARIO_CHANGES.index(0.0),
        format_func=lambda c: f"{c:+.2f}%",
        horizontal=True,
        key="scenario.change",
    )
    st.caption(
        f"Base Rate: {base_rate:.2f}% | Scenario Rate: {scenario_rate(base_rate, change):.2f}%"
    )

    tab_mortgage, tab_savings, tab_loans = st.tabs(["Mortgage", "Savings", "Loans & Credit Cards"])
    with tab_mortgage:
        render_mortgage_tab(base_rate, change)
    with tab_savings:
        render_savings_tab(base_rate, change)
    with tab_loans:
        render_loans_tab(base_rate)


# =============================================================================
# MAIN APP
# =============================================================================

def main() -> None:
    """Main dashboard entry point."""
    st.set_page_config(
        page_title="Bank Rate Dashboard",
        page_icon="",
        layout="wide",
    )

    with st.spinner("Loading..."):
        try:
            series = load_series()
        except FeedError as e:
            st.error(e.message)
            if e.details:
                st.caption(e.details)
            return

    render_header(series)
    render_history_chart(series)

    if series.latest is not None:
        render_calculators(series.latest.value)

    st.caption(
        f"Series Code: {series.series_code} | Source: Bank of England Database"
    )


if __name__ == "__main__":
    main()
