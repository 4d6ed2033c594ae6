"""Tests for the Streamlit app module."""

from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

from affiliate_ledger.adapters.interface.streamlit import app
from affiliate_ledger.domain.models import (
    ClosedPeriod,
    PartnerLedgerReport,
    PeriodState,
)


def _financials(**overrides):
    values = {
        "total_ad_cost": Decimal("3000000"),
        "total_misc_cost": Decimal("1000000"),
        "tax": SimpleNamespace(tax_payable=Decimal("0")),
        "net_profit": Decimal("6000000"),
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def test_fetch_financials_invokes_use_case(monkeypatch):
    """_fetch_financials should build the use case and pass the period."""
    calls = []

    class _FakeUseCase:
        def execute(self, period):
            calls.append(period)
            return "financials"

    monkeypatch.setattr(
        app, "build_period_financials_use_case", lambda: _FakeUseCase()
    )

    assert app._fetch_financials("2024-05") == "financials"
    assert calls == ["2024-05"]


def test_format_currency_by_code():
    assert app._format_currency(Decimal("1234567.4")) == "1,234,567 ₫"
    assert app._format_currency(Decimal("12.5"), "USD") == "12.50 $"


def test_period_options_list_open_period_first():
    state = PeriodState(
        active_period="2024-06",
        closed_periods=(
            ClosedPeriod(period="2024-04", closed_at=datetime(2024, 5, 2)),
            ClosedPeriod(period="2024-05", closed_at=datetime(2024, 6, 3)),
        ),
    )

    assert app._period_options(state) == ["2024-06", "2024-05", "2024-04"]
    assert app._period_options(PeriodState()) == []


def test_resolve_financials_prefers_closed_snapshot(monkeypatch):
    snapshot = _financials()
    state = PeriodState(
        closed_periods=(
            ClosedPeriod(
                period="2024-04",
                closed_at=datetime(2024, 5, 2),
                financials=snapshot,
            ),
        ),
    )
    loaded = []
    monkeypatch.setattr(
        app,
        "_load_financials",
        lambda period, schema_version=1: loaded.append(period) or "fresh",
    )

    assert app._resolve_financials(state, "2024-04") is snapshot
    assert app._resolve_financials(state, "2024-05") == "fresh"
    assert loaded == ["2024-05"]


def test_donut_data_keeps_positive_slices():
    data = app._prepare_donut_chart_data(_financials())

    assert [row["category"] for row in data] == [
        "Ad cost",
        "Misc cost",
        "Net profit",
    ]
    assert [row["share_label"] for row in data] == ["30.0%", "10.0%", "60.0%"]
    assert data[0]["amount"] == 3000000.0
    assert data[2]["amount_label"] == "6,000,000 ₫"


class _FakeSidebar:
    def __init__(self, page: str) -> None:
        self.page = page
        self.captions: list[str] = []

    def selectbox(self, label, options, index=0):
        if label == "Page":
            return self.page
        return options[index]

    def caption(self, text: str):
        self.captions.append(text)


class _FakeStreamlit:
    def __init__(self, page: str = "Partners") -> None:
        self.config_called = False
        self.title_text = None
        self.warning_text = None
        self.infos: list[str] = []
        self.subheaders: list[str] = []
        self.sidebar = _FakeSidebar(page)

    def set_page_config(self, **kwargs):
        self.config_called = True
        self.config_kwargs = kwargs

    def title(self, text: str):
        self.title_text = text

    def warning(self, text: str):
        self.warning_text = text

    def info(self, text: str):
        self.infos.append(text)

    def subheader(self, text: str):
        self.subheaders.append(text)

    def dataframe(self, data, **kwargs):
        self.dataframe_payload = (data, kwargs)

    def cache_data(self, **_kwargs):
        def decorator(func):
            return func

        return decorator


def test_main_warns_when_no_period(monkeypatch):
    """main should point to the open-period command on a new workspace."""
    fake_st = _FakeStreamlit()
    monkeypatch.setattr(app, "st", fake_st)
    monkeypatch.setattr(app, "_load_period_state", lambda: PeriodState())

    app.main()

    assert fake_st.config_called
    assert fake_st.title_text == "Affiliate Ledger"
    assert "No period is open" in fake_st.warning_text


def test_main_renders_partner_page(monkeypatch):
    fake_st = _FakeStreamlit(page="Partners")
    monkeypatch.setattr(app, "st", fake_st)
    monkeypatch.setattr(
        app,
        "_load_period_state",
        lambda: PeriodState(active_period="2024-05"),
    )
    monkeypatch.setattr(
        app, "_load_partner_ledgers", lambda: PartnerLedgerReport(ledgers=())
    )

    app.main()

    assert fake_st.warning_text is None
    assert fake_st.infos == ["No partners recorded."]
    assert fake_st.sidebar.captions == []


def test_main_renders_assets_with_period_end_debts(monkeypatch):
    fake_st = _FakeStreamlit(page="Assets")
    state = PeriodState(
        closed_periods=(
            ClosedPeriod(period="2024-02", closed_at=datetime(2024, 3, 1)),
        ),
    )
    as_of_dates = []
    monkeypatch.setattr(app, "st", fake_st)
    monkeypatch.setattr(app, "_load_period_state", lambda: state)
    monkeypatch.setattr(app, "_load_asset_details", lambda period: [])
    monkeypatch.setattr(
        app,
        "_load_debt_positions",
        lambda as_of: as_of_dates.append(as_of) or [],
    )

    app.main()

    assert as_of_dates == ["2024-02-29"]
    assert fake_st.subheaders == ["Assets", "Liabilities and receivables"]
    assert fake_st.sidebar.captions == ["Closed period (read-only snapshot)"]
