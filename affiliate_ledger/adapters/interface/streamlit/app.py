"""Streamlit dashboard entry point."""

from collections.abc import Sequence
from decimal import Decimal

import streamlit as st
import altair as alt

from affiliate_ledger.adapters.interface.streamlit.sankey_cashflow import (
    SankeyState,
    apply_click,
    build_plotly_figure,
    build_sankey_model,
)
from affiliate_ledger.domain.constants import CURRENCY_VND
from affiliate_ledger.domain.models import (
    PartnerLedgerReport,
    PeriodAssetDetail,
    PeriodFinancials,
    PeriodState,
)
from affiliate_ledger.domain.models.debts import DebtPosition
from affiliate_ledger.domain.services.periods import period_end
from affiliate_ledger.infrastructure.container import (
    build_debt_positions_use_case,
    build_partner_ledgers_use_case,
    build_period_asset_details_use_case,
    build_period_financials_use_case,
    build_period_repository,
)

SANKEY_STATE_KEY = "cash_flow_sankey_state"


def _fetch_period_state() -> PeriodState:
    """Fetch the period lifecycle state."""
    return build_period_repository().load_state()


@st.cache_data(show_spinner=False, ttl=60)
def _load_period_state() -> PeriodState:
    """Cached wrapper around _fetch_period_state."""
    return _fetch_period_state()


def _fetch_financials(period: str) -> PeriodFinancials:
    """Compute the financials of a period from the ledger."""
    return build_period_financials_use_case().execute(period=period)


@st.cache_data(show_spinner=False)
def _load_financials(period: str, schema_version: int = 1) -> PeriodFinancials:
    """Cached wrapper around _fetch_financials."""
    _ = schema_version
    return _fetch_financials(period)


@st.cache_data(show_spinner=False)
def _load_asset_details(period: str) -> Sequence[PeriodAssetDetail]:
    return build_period_asset_details_use_case().execute(period=period)


@st.cache_data(show_spinner=False)
def _load_partner_ledgers() -> PartnerLedgerReport:
    return build_partner_ledgers_use_case().execute()


@st.cache_data(show_spinner=False)
def _load_debt_positions(as_of: str | None) -> Sequence[DebtPosition]:
    return build_debt_positions_use_case().execute(as_of=as_of)


def _format_currency(value: Decimal, currency_code: str = CURRENCY_VND) -> str:
    """Format currency values for display."""
    if currency_code == CURRENCY_VND:
        return f"{value:,.0f} ₫"
    symbol = "$" if currency_code == "USD" else currency_code
    return f"{value:,.2f} {symbol}"


def _period_options(state: PeriodState) -> list[str]:
    """Return the open period first, then closed periods newest first."""
    closed = sorted(state.closed_period_names(), reverse=True)
    if state.active_period:
        return [state.active_period, *closed]
    return closed


def _resolve_financials(state: PeriodState, period: str) -> PeriodFinancials:
    """Return the stored snapshot of a closed period, else recompute."""
    closed = state.find_closed(period)
    if closed is not None and closed.financials is not None:
        return closed.financials
    return _load_financials(period, schema_version=1)


def _render_metrics(financials: PeriodFinancials) -> None:
    revenue_col, cost_col, tax_col, profit_col = st.columns(4)
    revenue_col.metric("Revenue", _format_currency(financials.total_revenue))
    cost_col.metric("Costs", _format_currency(financials.total_cost))
    tax_col.metric("Tax payable", _format_currency(financials.tax.tax_payable))
    profit_col.metric("Net profit", _format_currency(financials.net_profit))
    if financials.exchange_rate_gain_loss:
        st.caption(
            "Includes exchange gain/loss of "
            f"{_format_currency(financials.exchange_rate_gain_loss)}"
        )


def _render_partner_table(financials: PeriodFinancials) -> None:
    st.subheader("Partners")
    data = [
        {
            "Partner": share.name,
            "Revenue": _format_currency(share.revenue),
            "Cost": _format_currency(share.cost),
            "Profit": _format_currency(share.profit),
            "Tax": _format_currency(share.tax_payable),
        }
        for share in financials.partner_pnl_details
    ]
    st.dataframe(data, width="stretch", hide_index=True)


def _prepare_donut_chart_data(
    financials: PeriodFinancials,
) -> list[dict[str, str | float]]:
    """Split revenue into ad cost, misc cost, tax and net profit slices.

    Negative slices are left out; the chart shows where revenue went.
    """
    slices = [
        ("Ad cost", financials.total_ad_cost),
        ("Misc cost", financials.total_misc_cost),
        ("Tax", financials.tax.tax_payable),
        ("Net profit", financials.net_profit),
    ]
    positive = [(name, amount) for name, amount in slices if amount > 0]
    total = sum((amount for _name, amount in positive), start=Decimal("0"))
    data: list[dict[str, str | float]] = []
    for name, amount in positive:
        share = amount / total * Decimal("100") if total else Decimal("0")
        data.append(
            {
                "category": name,
                "amount": float(amount),
                "amount_label": _format_currency(amount),
                "share_label": f"{share:.1f}%",
            }
        )
    return data


def _render_cost_profit_chart(
    financials: PeriodFinancials,
    chart_size: int = 320,
) -> None:
    """Render a donut chart of costs, tax and profit."""
    data = _prepare_donut_chart_data(financials)
    if not data:
        st.info("No revenue or costs recorded for this period.")
        return
    hover = alt.selection_point(
        name="hover",
        fields=["category"],
        on="view:mouseover",
        clear="view:mouseout",
        empty=False,
    )
    base = alt.Chart(alt.Data(values=data)).mark_arc(
        innerRadius=chart_size * 0.4,
        cornerRadius=8,
        padAngle=0.02,
        stroke="#0f1115",
        strokeWidth=2,
    ).encode(
        theta=alt.Theta("amount:Q"),
        color=alt.Color(
            "category:N",
            scale=alt.Scale(
                range=["#e76f51", "#f4a261", "#457b9d", "#2e7d32"]
            ),
            legend=alt.Legend(orient="bottom", title=None, columns=2),
        ),
        opacity=alt.condition(hover, alt.value(1.0), alt.value(0.25)),
        tooltip=[
            alt.Tooltip("category:N"),
            alt.Tooltip("amount_label:N"),
            alt.Tooltip("share_label:N"),
        ],
    )
    hover_text = alt.Chart(alt.Data(values=data)).transform_filter(
        hover
    ).mark_text(
        align="center",
        baseline="middle",
        fontSize=16,
        fontWeight="bold",
        color="#f5f7ff",
    ).encode(
        text="amount_label:N"
    )
    chart = alt.layer(base, hover_text).add_params(hover).properties(
        width=chart_size,
        height=chart_size,
    ).configure_view(
        stroke=None
    )
    st.subheader("Where revenue went")
    st.altair_chart(chart, width="stretch")


def _render_cash_flow(financials: PeriodFinancials) -> None:
    """Render the cash flow Sankey with click-to-expand activities."""
    statement = financials.cash_flow
    st.subheader("Cash flow")
    begin_col, change_col, end_col = st.columns(3)
    begin_col.metric(
        "Beginning balance", _format_currency(statement.beginning_balance)
    )
    change_col.metric("Net change", _format_currency(statement.net_change))
    end_col.metric("End balance", _format_currency(statement.end_balance))

    state = st.session_state.setdefault(SANKEY_STATE_KEY, SankeyState())
    state.allow_negative_diff = st.checkbox(
        "Show deficit", value=state.allow_negative_diff
    )
    collapse_col, back_col = st.columns(2)
    if collapse_col.button("Collapse all"):
        state.reset_all()
    if back_col.button("Collapse last"):
        state.reset_last_branch()
    model = build_sankey_model(statement, state)
    if not model.links:
        st.info("No cash movements in this period.")
        return
    event = st.plotly_chart(
        build_plotly_figure(model),
        on_select="rerun",
        key="cash_flow_sankey",
    )
    points = (event or {}).get("selection", {}).get("points", [])
    if points and apply_click(
        state=state,
        model=model,
        node_index=points[0].get("point_number", -1),
    ):
        st.rerun()


def _render_warnings(financials: PeriodFinancials) -> None:
    if not financials.warnings:
        return
    with st.expander(f"Warnings ({len(financials.warnings)})"):
        for warning in financials.warnings:
            st.write(f"`{warning.code}` {warning.message}")


def _render_partner_ledgers(report: PartnerLedgerReport) -> None:
    """Render one tab per partner with running balances."""
    if not report.ledgers:
        st.info("No partners recorded.")
        return
    tabs = st.tabs([ledger.name for ledger in report.ledgers])
    for tab, ledger in zip(tabs, report.ledgers):
        with tab:
            inflow_col, outflow_col, balance_col = st.columns(3)
            inflow_col.metric("Inflow", _format_currency(ledger.total_inflow))
            outflow_col.metric(
                "Outflow", _format_currency(ledger.total_outflow)
            )
            balance_col.metric("Balance", _format_currency(ledger.balance))
            data = [
                {
                    "Date": line.entry.date,
                    "Description": line.entry.description,
                    "Type": line.entry.type,
                    "Amount": _format_currency(line.entry.amount),
                    "Balance": _format_currency(line.running_balance),
                    "Automatic": line.is_automatic,
                }
                for line in ledger.entries
            ]
            st.dataframe(data, width="stretch", hide_index=True)


def _render_assets(details: Sequence[PeriodAssetDetail]) -> None:
    st.subheader("Assets")
    data = [
        {
            "Asset": detail.name,
            "Opening": _format_currency(
                detail.opening_balance, detail.currency
            ),
            "Change": _format_currency(detail.change, detail.currency),
            "Closing": _format_currency(
                detail.closing_balance, detail.currency
            ),
        }
        for detail in details
    ]
    st.dataframe(data, width="stretch", hide_index=True)


def _render_debts(positions: Sequence[DebtPosition]) -> None:
    st.subheader("Liabilities and receivables")
    if not positions:
        st.info("No liabilities or receivables recorded.")
        return
    data = [
        {
            "Kind": position.kind,
            "Description": position.description,
            "Total": _format_currency(
                position.total_amount, position.currency
            ),
            "Paid": _format_currency(position.paid_amount, position.currency),
            "Remaining": _format_currency(
                position.remaining_amount, position.currency
            ),
            "Settled": position.is_settled,
        }
        for position in positions
    ]
    st.dataframe(data, width="stretch", hide_index=True)


def main() -> None:
    """Render the Streamlit app."""
    st.set_page_config(page_title="Affiliate Ledger", layout="wide")
    st.title("Affiliate Ledger")

    state = _load_period_state()
    options = _period_options(state)
    if not options:
        st.warning("No period is open. Run the open-period command first.")
        return
    period = st.sidebar.selectbox("Period", options, index=0)
    if state.find_closed(period) is not None:
        st.sidebar.caption("Closed period (read-only snapshot)")
    page = st.sidebar.selectbox("Page", ["Dashboard", "Partners", "Assets"])

    if page == "Dashboard":
        financials = _resolve_financials(state, period)
        _render_metrics(financials)
        table_col, chart_col = st.columns(2)
        with table_col:
            _render_partner_table(financials)
        with chart_col:
            _render_cost_profit_chart(financials)
        _render_cash_flow(financials)
        _render_warnings(financials)
    elif page == "Partners":
        _render_partner_ledgers(_load_partner_ledgers())
    else:
        _render_assets(_load_asset_details(period))
        _render_debts(_load_debt_positions(period_end(period).isoformat()))


if __name__ == "__main__":  # pragma: no cover
    main()
