"""Visualization utilities for the payments dashboard."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
from plotly.subplots import make_subplots

COUNT_COLOR = "#6366f1"
VOLUME_COLOR = "#22c55e"
ACCENT_COLOR = "#f97316"
PALETTE = ["#6366f1", "#22c55e", "#f97316", "#a855f7", "#ec4899"]
# Customer-facing amounts mix currencies, so volume axes carry no symbol.
VOLUME_AXIS_TITLE = "Customer volume"


def _empty_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        showarrow=False,
        x=0.5,
        y=0.5,
        xref="paper",
        yref="paper",
        font=dict(size=14, color="#6c757d"),
    )
    fig.update_layout(margin=dict(l=0, r=0, t=20, b=20))
    return fig


def _count_volume_bars(entries: list[Mapping[str, object]], title: str) -> go.Figure:
    df = pd.DataFrame(entries)
    fig = make_subplots(specs=[[{"secondary_y": True}]])
    fig.add_trace(
        go.Bar(name="Transaction Count", x=df["label"], y=df["count"], marker_color=COUNT_COLOR, offsetgroup=0),
        secondary_y=False,
    )
    fig.add_trace(
        go.Bar(name="Volume", x=df["label"], y=df["volume"], marker_color=VOLUME_COLOR, offsetgroup=1),
        secondary_y=True,
    )
    fig.update_layout(
        barmode="group",
        title=title,
        hovermode="x unified",
        margin=dict(l=0, r=0, t=45, b=0),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    fig.update_yaxes(title_text="Transactions", secondary_y=False)
    fig.update_yaxes(title_text=VOLUME_AXIS_TITLE, secondary_y=True)
    return fig


def plot_daily_volume(daily: Mapping[str, object]) -> go.Figure:
    """Daily customer volume with transaction count on a second axis."""

    days = list(daily.get("days", []))
    if not days:
        return _empty_figure("No dated transactions available.")

    df = pd.DataFrame(days)
    df["date"] = pd.to_datetime(df["date"])

    fig = make_subplots(specs=[[{"secondary_y": True}]])
    fig.add_trace(
        go.Scatter(
            name="Volume",
            x=df["date"],
            y=df["volume"],
            mode="lines+markers",
            fill="tozeroy",
            line=dict(color=COUNT_COLOR, width=2),
        ),
        secondary_y=False,
    )
    fig.add_trace(
        go.Scatter(
            name="Transaction Count",
            x=df["date"],
            y=df["count"],
            mode="lines+markers",
            line=dict(color=VOLUME_COLOR, width=2),
        ),
        secondary_y=True,
    )
    fig.update_layout(
        title="Daily transaction volume",
        hovermode="x unified",
        margin=dict(l=0, r=0, t=45, b=0),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    fig.update_yaxes(title_text=VOLUME_AXIS_TITLE, secondary_y=False)
    fig.update_yaxes(title_text="Transactions", secondary_y=True)
    return fig


def plot_hourly_velocity(hourly: Mapping[str, object]) -> go.Figure:
    hours = list(hourly.get("hours", []))
    if not hours:
        return _empty_figure("No hourly activity to chart.")
    return _count_volume_bars(hours, "Transactions by hour of day")


def plot_weekday_distribution(weekday: Mapping[str, object]) -> go.Figure:
    days = list(weekday.get("days", []))
    if not days or not weekday.get("total_count"):
        return _empty_figure("No weekday activity to chart.")
    return _count_volume_bars(days, "Weekday distribution")


def plot_monthly_volume(monthly: Mapping[str, object]) -> go.Figure:
    """Monthly volume line with the average month as a dashed reference."""

    months = list(monthly.get("months", []))
    if not months:
        return _empty_figure("No monthly volume available.")

    df = pd.DataFrame(months)
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            name="Monthly Volume",
            x=df["label"],
            y=df["volume"],
            mode="lines+markers",
            fill="tozeroy",
            line=dict(color=COUNT_COLOR, width=2, shape="spline"),
        )
    )
    average = monthly.get("avg_monthly_volume")
    if average is not None:
        fig.add_trace(
            go.Scatter(
                name="Average Volume",
                x=df["label"],
                y=[average] * len(df),
                mode="lines",
                line=dict(color=VOLUME_COLOR, dash="dash", width=2),
            )
        )
    fig.update_layout(
        title="Monthly volume trend",
        yaxis_title=VOLUME_AXIS_TITLE,
        margin=dict(l=0, r=0, t=45, b=0),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    return fig


def plot_currency_donut(currency: Mapping[str, object]) -> go.Figure:
    entries = [entry for entry in currency.get("currencies", []) if entry["volume"]]
    if not entries:
        return _empty_figure("No customer-facing volume to display.")

    df = pd.DataFrame(entries)
    fig = px.pie(
        df,
        names="label",
        values="volume",
        hole=0.55,
        title="Currency distribution",
        color_discrete_sequence=PALETTE,
    )
    fig.update_traces(textinfo="label+percent", pull=[0.03] * len(df))
    fig.update_layout(margin=dict(l=0, r=0, t=40, b=0))
    return fig


def plot_exchange_rates(rates: Mapping[str, object]) -> go.Figure:
    """Per-transaction rate with the weighted average and a moving average."""

    points = list(rates.get("points", []))
    if not points:
        return _empty_figure("No exchange-rate observations available.")

    df = pd.DataFrame(points)
    df["date"] = pd.to_datetime(df["date"])
    currency = rates.get("currency", "USD")

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            name=f"Rate per {currency}",
            x=df["date"],
            y=df["rate"],
            mode="lines",
            line=dict(color=COUNT_COLOR, width=2),
        )
    )
    weighted = rates.get("volume_weighted_rate")
    if weighted is not None:
        fig.add_trace(
            go.Scatter(
                name="Volume-Weighted Average",
                x=df["date"],
                y=[weighted] * len(df),
                mode="lines",
                line=dict(color=VOLUME_COLOR, dash="dash", width=2),
            )
        )
    fig.add_trace(
        go.Scatter(
            name="Moving Average",
            x=df["date"],
            y=df["moving_average"],
            mode="lines",
            line=dict(color=ACCENT_COLOR, width=2),
            connectgaps=False,
        )
    )
    fig.update_layout(
        title="Exchange rate movement",
        yaxis_title="Rate",
        xaxis_title="Date",
        margin=dict(l=0, r=0, t=45, b=0),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    return fig


def plot_value_segments(segments: Mapping[str, object]) -> go.Figure:
    entries = list(segments.get("segments", []))
    if not entries or not segments.get("total_count"):
        return _empty_figure("No transactions to segment.")

    df = pd.DataFrame(entries)
    fig = px.pie(
        df,
        names="label",
        values="count",
        hole=0.55,
        title="Transaction value segments",
        color_discrete_sequence=PALETTE,
    )
    fig.update_traces(textinfo="percent", sort=False, marker=dict(line=dict(color="white", width=2)))
    fig.update_layout(margin=dict(l=0, r=0, t=40, b=0))
    return fig


def plot_processing_distribution(processing: Mapping[str, object]) -> go.Figure:
    buckets = list(processing.get("buckets", []))
    if not buckets or not any(entry["count"] for entry in buckets):
        return _empty_figure("No processing times available.")

    df = pd.DataFrame(buckets)
    fig = px.bar(
        df,
        x="label",
        y="count",
        title="Processing time distribution",
        labels={"label": "Time to availability", "count": "Transactions"},
        color_discrete_sequence=[COUNT_COLOR],
    )
    fig.update_layout(margin=dict(l=0, r=0, t=40, b=0))
    return fig


def plot_processing_trend(trend: Mapping[str, object]) -> go.Figure:
    days = list(trend.get("days", []))
    if not days:
        return _empty_figure("No daily processing data available.")

    df = pd.DataFrame(days)
    df["date"] = pd.to_datetime(df["date"])

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            name="Average Processing Time",
            x=df["date"],
            y=df["avg_time"],
            mode="lines+markers",
            fill="tozeroy",
            line=dict(color=COUNT_COLOR, width=2),
        )
    )
    overall = trend.get("overall_avg")
    if overall is not None:
        fig.add_trace(
            go.Scatter(
                name="Overall Average",
                x=df["date"],
                y=[overall] * len(df),
                mode="lines",
                line=dict(color=VOLUME_COLOR, dash="dash", width=2),
            )
        )
    fig.update_layout(
        title="Processing time trend",
        yaxis_title="Minutes",
        xaxis_title="Date",
        margin=dict(l=0, r=0, t=45, b=0),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    return fig


def plot_breakdown_bar(entries: Iterable[Mapping[str, object]], title: str) -> go.Figure:
    """Horizontal share bars for the settlement overview bands."""

    data = list(entries)
    if not data or not any(entry["count"] for entry in data):
        return _empty_figure("No transactions in range.")

    df = pd.DataFrame(data)
    df["share"] = df["share"].fillna(0.0)
    fig = px.bar(
        df,
        x="share",
        y="label",
        orientation="h",
        text=df["share"].map(lambda value: f"{value:.1f}%"),
        title=title,
        labels={"share": "Share (%)", "label": ""},
        color_discrete_sequence=[COUNT_COLOR],
    )
    fig.update_layout(margin=dict(l=0, r=0, t=40, b=0))
    fig.update_xaxes(range=[0, 100])
    return fig
