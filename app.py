"""Streamlit entry point for the payments analytics dashboard."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

import pandas as pd
import streamlit as st

from txn_analytics import features, ingest, insights, summarize, synth, utils, viz
from txn_analytics.config import DashboardConfig, load_config
from txn_analytics.logging_setup import configure_logging, get_logger
from txn_analytics.models import Transaction

logger = get_logger(__name__)

WINDOW_PRESETS: dict[str, int | None] = {
    "All time": None,
    "Last 7 days": 7,
    "Last 30 days": 30,
    "Last 90 days": 90,
}
SOURCE_CONFIGURED = "Configured file"
SOURCE_UPLOAD = "Upload CSV"
SOURCE_SYNTHETIC = "Synthetic data"
CHART_CONFIG = {"displayModeBar": False}


@st.cache_data(show_spinner=False)
def _parse_export(raw_text: str, strict: bool) -> list[Transaction]:
    return ingest.parse_transactions(raw_text, strict=strict)


@st.cache_data(show_spinner=False)
def _synthetic_transactions(rows: int, seed: int) -> list[Transaction]:
    return synth.generate_transactions(rows, seed=seed)


def _inject_styles() -> None:
    st.markdown(
        """
        <style>
        :root {
            --primary-500: #6366f1;
            --slate-900: #0f172a;
            --slate-700: #334155;
            --slate-500: #64748b;
            --success-500: #15803d;
            --danger-500: #dc2626;
        }

        [data-testid="stAppViewContainer"] {
            background: radial-gradient(circle at 15% 20%, rgba(99, 102, 241, 0.06), transparent 32%),
                        #f5f7fb;
            color: var(--slate-900);
        }

        [data-testid="stSidebar"] {
            background: rgba(255, 255, 255, 0.92) !important;
            border-right: 1px solid rgba(226, 232, 240, 0.8);
        }

        .hero-card {
            background: #ffffff;
            border-radius: 24px;
            border: 1px solid rgba(226, 232, 240, 0.9);
            padding: 1.6rem 1.75rem;
            box-shadow: 0 36px 72px -50px rgba(15, 23, 42, 0.55);
        }

        .hero-card__label {
            font-size: 0.85rem;
            font-weight: 600;
            text-transform: uppercase;
            letter-spacing: 0.08em;
            color: var(--slate-500);
            margin-bottom: 0.55rem;
        }

        .hero-card__value {
            font-size: 2.45rem;
            font-weight: 700;
            color: var(--slate-900);
            line-height: 1.1;
        }

        .hero-card__delta {
            margin-top: 0.75rem;
            font-weight: 600;
            font-size: 1.02rem;
        }

        .hero-card__delta--positive { color: var(--success-500); }
        .hero-card__delta--negative { color: var(--danger-500); }
        .hero-card__delta--neutral { color: var(--slate-500); }

        .hero-card__meta {
            margin-top: 1.35rem;
            padding-top: 1.05rem;
            border-top: 1px solid rgba(226, 232, 240, 0.9);
            display: grid;
            gap: 0.85rem;
        }

        .hero-card__meta-label {
            font-size: 0.78rem;
            text-transform: uppercase;
            letter-spacing: 0.08em;
            color: var(--slate-500);
            font-weight: 600;
        }

        .hero-card__meta-value {
            font-size: 1rem;
            font-weight: 600;
            color: var(--slate-700);
        }

        div[data-testid="stMetric"] {
            background: #ffffff;
            border-radius: 18px;
            border: 1px solid rgba(226, 232, 240, 0.9);
            padding: 1.15rem 1.25rem;
            box-shadow: 0 30px 60px -46px rgba(15, 23, 42, 0.6);
        }

        .stDataFrame {
            border-radius: 18px;
            border: 1px solid rgba(226, 232, 240, 0.9);
            overflow: hidden;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def _delta_class(value: float | None) -> str:
    if value is None or value == 0:
        return "neutral"
    return "positive" if value > 0 else "negative"


def _metrics_table(rows: Iterable[tuple[str, str]]) -> pd.DataFrame:
    return pd.DataFrame(list(rows), columns=["Metric", "Value"])


def _entries_table(entries: Iterable[Mapping[str, object]], columns: Mapping[str, str]) -> pd.DataFrame:
    frame = pd.DataFrame(list(entries))
    if frame.empty:
        return pd.DataFrame(columns=list(columns.values()))
    return frame[list(columns)].rename(columns=columns)


def _render_details(
    tables: Iterable[pd.DataFrame],
    bullets: Iterable[str],
) -> None:
    with st.expander("Detailed metrics"):
        for table in tables:
            st.dataframe(table, hide_index=True, use_container_width=True)
        lines = list(bullets)
        if lines:
            st.markdown("\n".join(f"- {line}" for line in lines))
        else:
            st.caption("Not enough data in this window for insights.")


def _load_source(config: DashboardConfig, strict: bool) -> tuple[list[Transaction], str] | None:
    """Resolve the sidebar data source into transactions and a caption."""

    sidebar = st.sidebar
    options = [SOURCE_UPLOAD, SOURCE_SYNTHETIC]
    if config.data_path is not None:
        options.insert(0, SOURCE_CONFIGURED)
    source = sidebar.radio("Data source", options, index=0)

    if source == SOURCE_CONFIGURED:
        raw_text = ingest.read_export_text(config.data_path)
        return _parse_export(raw_text, strict), str(config.data_path)

    if source == SOURCE_UPLOAD:
        uploaded = sidebar.file_uploader("Balance export (CSV)", type=["csv"])
        if uploaded is None:
            st.info("Upload a balance export in the sidebar, or switch the data source to synthetic data.")
            return None
        raw_text = uploaded.getvalue().decode("utf-8-sig")
        return _parse_export(raw_text, strict), uploaded.name

    seed = int(
        sidebar.number_input(
            "Random seed", value=synth.DEFAULT_SEED, min_value=0, step=1, help="Deterministic RNG seed"
        )
    )
    rows = int(
        sidebar.slider(
            "Synthetic rows",
            min_value=50,
            max_value=3000,
            value=synth.DEFAULT_ROWS,
            step=50,
        )
    )
    return _synthetic_transactions(rows, seed), f"synthetic · seed {seed}"


def _render_overview(payload: insights.DashboardPayload, settlement_symbol: str) -> None:
    overview = payload["overview"]
    summary = payload["summary"]

    hero_left, hero_right = st.columns([0.9, 1.1], gap="large")
    with hero_left:
        growth = overview["month_over_month"]
        if growth is None:
            delta_text = "No prior month to compare"
        else:
            delta_text = f"{utils.format_percent(growth, signed=True)} vs last month"
        card_html = f"""
        <div class="hero-card">
            <div class="hero-card__label">Settled volume</div>
            <div class="hero-card__value">{utils.format_currency(overview["total_volume"], settlement_symbol, decimals=0)}</div>
            <div class="hero-card__delta hero-card__delta--{_delta_class(growth)}">{delta_text}</div>
            <div class="hero-card__meta">
                <div>
                    <div class="hero-card__meta-label">Payments</div>
                    <div class="hero-card__meta-value">{overview["payment_count"]:,} of {overview["total_count"]:,} rows · {utils.format_percent(overview["payment_share"])}</div>
                </div>
                <div>
                    <div class="hero-card__meta-label">Volume-weighted rate</div>
                    <div class="hero-card__meta-value">{utils.format_number(overview["volume_weighted_rate"], decimals=2)}</div>
                </div>
            </div>
        </div>
        """
        st.markdown(card_html, unsafe_allow_html=True)

    with hero_right:
        top = st.columns(3)
        top[0].metric(
            "Customer volume",
            utils.format_currency(summary["total_volume"]),
            delta=utils.format_percent(summary["volume_growth"], signed=True) if summary["volume_growth"] is not None else None,
        )
        top[1].metric(
            "Transactions",
            utils.format_number(summary["total_count"]),
            delta=utils.format_percent(summary["count_growth"], signed=True) if summary["count_growth"] is not None else None,
        )
        top[2].metric("Average size", utils.format_currency(summary["avg_transaction_size"]))

        bottom = st.columns(3)
        bottom[0].metric("Average ticket", utils.format_currency(overview["average_ticket_size"], settlement_symbol))
        bottom[1].metric("Largest transaction", utils.format_currency(overview["largest_transaction"], settlement_symbol))
        bottom[2].metric("Avg. settlement", f"{utils.format_number(overview['avg_processing_hours'], decimals=1)} h")

    with st.expander("Detailed metrics"):
        band_cols = st.columns(3)
        for column, key, title in (
            (band_cols[0], "processing_bands", "Time to availability"),
            (band_cols[1], "amount_ranges", "Settlement amount"),
            (band_cols[2], "ticket_bands", "Customer ticket"),
        ):
            with column:
                st.plotly_chart(viz.plot_breakdown_bar(overview[key], title), use_container_width=True, config=CHART_CONFIG)

        st.dataframe(
            _metrics_table(
                [
                    ("Average rate", utils.format_number(overview["avg_rate"], decimals=2)),
                    ("Rate range", f"{utils.format_number(overview['min_rate'], decimals=2)} – {utils.format_number(overview['max_rate'], decimals=2)}"),
                    ("Rate spread", utils.format_percent(overview["rate_spread"])),
                    ("Peak payment hour", overview["peak_hour"] or utils.NO_DATA),
                    ("Period growth", utils.format_percent(overview["period_growth"], signed=True)),
                    ("Volume per day", utils.format_currency(overview["volume_per_day"], settlement_symbol)),
                    ("Current month vs average", utils.format_percent(overview["current_month_vs_average"])),
                ]
            ),
            hide_index=True,
            use_container_width=True,
        )
        months = _entries_table(
            summary["recent_months"],
            {"label": "Month", "count": "Transactions", "volume": "Volume", "growth": "Growth (%)"},
        )
        st.dataframe(months, hide_index=True, use_container_width=True)


def main() -> None:
    """Render the payments analytics Streamlit application."""

    configure_logging()
    config = load_config()

    st.set_page_config(
        page_title="Payments Analytics",
        page_icon="💳",
        layout="wide",
    )
    _inject_styles()

    sidebar = st.sidebar
    sidebar.header("Data")
    strict = sidebar.toggle(
        "Strict ingestion",
        value=config.strict_ingestion,
        help="Reject exports whose header or column count does not match the expected layout.",
    )

    try:
        loaded = _load_source(config, strict)
    except ingest.IngestionError as exc:
        logger.warning("Ingestion failed: %s", exc)
        st.error(f"Could not read the export: {exc}")
        st.stop()
    if loaded is None:
        st.stop()
    transactions, source_label = loaded

    window_choice = sidebar.radio("Date window", list(WINDOW_PRESETS), index=0)
    if sidebar.button("Refresh"):
        st.cache_data.clear()
        st.rerun()

    enriched = features.add_engineered_features(transactions)
    filtered = features.filter_window(enriched, WINDOW_PRESETS[window_choice])

    sidebar.download_button(
        "Export filtered CSV",
        data=ingest.to_csv_text(filtered),
        file_name="transactions_filtered.csv",
        mime="text/csv",
    )

    payload = insights.build_dashboard(filtered, config)
    bullets = summarize.section_insights(payload)
    settlement_symbol = utils.currency_symbol(config.settlement_currency)

    st.title("Payments analytics")
    st.caption(f"{len(filtered):,} transactions · {window_choice} · {source_label}")
    if filtered.empty:
        st.info("No transactions in the selected window.")

    _render_overview(payload, settlement_symbol)
    st.markdown(summarize.headline_summary(payload, settlement_symbol=settlement_symbol))

    st.markdown("## Volume analysis")
    monthly_col, hourly_col = st.columns([1, 1], gap="large")
    with monthly_col:
        st.plotly_chart(viz.plot_monthly_volume(payload["monthly"]), use_container_width=True, config=CHART_CONFIG)
        _render_details(
            [
                _entries_table(
                    payload["monthly"]["months"],
                    {"label": "Month", "count": "Transactions", "volume": "Volume", "avg_size": "Avg size", "growth": "Growth (%)"},
                )
            ],
            bullets["monthly"],
        )
    with hourly_col:
        st.plotly_chart(viz.plot_hourly_velocity(payload["hourly"]), use_container_width=True, config=CHART_CONFIG)
        _render_details(
            [
                _entries_table(
                    payload["hourly"]["top_hours"],
                    {"label": "Hour", "count": "Transactions", "volume": "Volume", "avg_size": "Avg size"},
                )
            ],
            bullets["velocity"],
        )

    st.markdown("## Processing analysis")
    efficiency_col, segment_col = st.columns([1, 1], gap="large")
    with efficiency_col:
        st.plotly_chart(
            viz.plot_processing_distribution(payload["processing"]), use_container_width=True, config=CHART_CONFIG
        )
        processing_stats = payload["processing"]["stats"]
        _render_details(
            [
                _metrics_table(
                    [
                        ("Average", utils.format_minutes(processing_stats["mean"])),
                        ("Median", utils.format_minutes(processing_stats["median"])),
                        ("Std. deviation", utils.format_minutes(processing_stats["std_dev"])),
                        ("Fastest", utils.format_minutes(processing_stats["min"])),
                        ("Slowest", utils.format_minutes(processing_stats["max"])),
                    ]
                )
            ],
            bullets["processing"],
        )
    with segment_col:
        st.plotly_chart(viz.plot_value_segments(payload["value_segments"]), use_container_width=True, config=CHART_CONFIG)
        _render_details(
            [
                _entries_table(
                    payload["value_segments"]["segments"],
                    {"label": "Segment", "count": "Transactions", "volume": "Volume", "count_share": "Share (%)"},
                )
            ],
            bullets["segments"],
        )
    trend = payload["processing_trend"]
    st.plotly_chart(viz.plot_processing_trend(trend), use_container_width=True, config=CHART_CONFIG)
    _render_details(
        [
            _metrics_table(
                [
                    ("Overall average", utils.format_minutes(trend["overall_avg"])),
                    ("Day-on-day change", utils.format_percent(trend["time_change"], signed=True)),
                    ("Fastest day", trend["best_day"] or utils.NO_DATA),
                    ("Slowest day", trend["worst_day"] or utils.NO_DATA),
                    ("Average daily deviation", utils.format_minutes(trend["daily_variation"])),
                ]
            )
        ],
        [],
    )

    st.markdown("## Distribution analysis")
    currency_col, weekday_col = st.columns([1, 1], gap="large")
    with currency_col:
        st.plotly_chart(viz.plot_currency_donut(payload["currency"]), use_container_width=True, config=CHART_CONFIG)
        _render_details(
            [
                _entries_table(
                    payload["currency"]["currencies"],
                    {"label": "Currency", "count": "Transactions", "volume": "Volume", "volume_share": "Share (%)"},
                )
            ],
            bullets["currency"],
        )
    with weekday_col:
        st.plotly_chart(viz.plot_weekday_distribution(payload["weekday"]), use_container_width=True, config=CHART_CONFIG)
        _render_details(
            [
                _entries_table(
                    payload["weekday"]["days"],
                    {"label": "Day", "count": "Transactions", "volume": "Volume", "avg_size": "Avg size"},
                )
            ],
            bullets["weekday"],
        )

    st.markdown("## Exchange rate analysis")
    rates = payload["exchange_rates"]
    st.plotly_chart(viz.plot_exchange_rates(rates), use_container_width=True, config=CHART_CONFIG)
    _render_details(
        [
            _metrics_table(
                [
                    ("Current rate", utils.format_number(rates["latest_rate"], decimals=2)),
                    ("Change", utils.format_percent(rates["rate_change"], signed=True)),
                    ("Average rate", utils.format_number(rates["stats"]["mean"], decimals=2)),
                    ("Median rate", utils.format_number(rates["stats"]["median"], decimals=2)),
                    ("Volume-weighted rate", utils.format_number(rates["volume_weighted_rate"], decimals=2)),
                    ("Weighted vs simple", utils.format_percent(rates["weighted_vs_simple"], signed=True)),
                    ("Volatility", utils.format_percent(rates["stats"]["volatility"])),
                ]
            )
        ],
        bullets["exchange_rates"],
    )

    st.markdown("## Historical trends")
    st.plotly_chart(viz.plot_daily_volume(payload["daily"]), use_container_width=True, config=CHART_CONFIG)
    daily = payload["daily"]
    _render_details(
        [
            _metrics_table(
                [
                    ("Average daily volume", utils.format_currency(daily["avg_daily_volume"])),
                    ("Average daily transactions", utils.format_number(daily["avg_daily_count"], decimals=1)),
                    ("Volume change", utils.format_percent(daily["volume_change"], signed=True)),
                    ("Transaction change", utils.format_percent(daily["count_change"], signed=True)),
                ]
            )
        ],
        bullets["daily"],
    )


if __name__ == "__main__":
    main()
