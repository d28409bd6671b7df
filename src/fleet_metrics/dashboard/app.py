"""Transport Fleet Dashboard — Streamlit front end for the metrics generator.

Layout: sidebar month picker → main area with three tabs (Overview | Drivers | Analytics).
Design: metrics for headlines, plotly charts, tables for rosters, CSV/ZIP
downloads.  Calls the engine directly; no HTTP round-trip.

Run with:
    streamlit run src/fleet_metrics/dashboard/app.py
"""

from __future__ import annotations

from datetime import date

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from fleet_metrics.api.export import csv_filename, render_csv, render_zip, zip_filename
from fleet_metrics.api.insights import build_analytics
from fleet_metrics.engine.charts import build_charts
from fleet_metrics.engine.drivers import compute_drivers, rank_drivers, top_performers
from fleet_metrics.engine.kpi import compute_kpi, previous_month_kpi
from fleet_metrics.engine.months import trailing_months
from fleet_metrics.engine.trend import compute_trend
from fleet_metrics.engine.vehicles import compute_vehicles

_CHART_LAYOUT = dict(
    height=300,
    margin=dict(l=20, r=20, t=30, b=20),
    showlegend=False,
    plot_bgcolor="rgba(0,0,0,0)",
    paper_bgcolor="rgba(0,0,0,0)",
    font=dict(family="Inter", size=11, color="rgba(255,255,255,0.7)"),
)

_STATUS_LABELS = {"active": "🟢 active", "attention": "🟡 attention", "critical": "🔴 critical"}

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------
st.set_page_config(page_title="Transport Fleet Dashboard", page_icon="🚚", layout="wide")
st.title("Transport Fleet Dashboard")

# ---------------------------------------------------------------------------
# Sidebar — reporting period
# ---------------------------------------------------------------------------
st.sidebar.header("Reporting Period")
_this_month = date.today().strftime("%Y-%m")
month = st.sidebar.selectbox("Month", trailing_months(_this_month, 24)[::-1], index=0)

kpi = compute_kpi(month)
prev = previous_month_kpi(month)
vehicles = compute_vehicles(month)
charts = build_charts(month)

with st.sidebar.expander("Export", expanded=True):
    st.download_button(
        "KPI (CSV)", render_csv("kpi", month),
        file_name=csv_filename("kpi", month), mime="text/csv",
    )
    st.download_button(
        "Vehicles (CSV)", render_csv("vehicles", month),
        file_name=csv_filename("vehicles", month), mime="text/csv",
    )
    st.download_button(
        "Everything (ZIP)", render_zip(month),
        file_name=zip_filename(month), mime="application/zip",
    )

overview_tab, drivers_tab, analytics_tab = st.tabs(["Overview", "Drivers", "Analytics"])

# ═══════════════════════════════════════════════════════════════════════════
# Overview
# ═══════════════════════════════════════════════════════════════════════════
with overview_tab:
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Revenue", f"{kpi.revenue:,} ₽", compute_trend(kpi.revenue, prev.revenue).value)
    c2.metric("Costs", f"{kpi.costs:,} ₽", compute_trend(kpi.costs, prev.costs).value, delta_color="inverse")
    c3.metric("Profit", f"{kpi.profit:,} ₽", compute_trend(kpi.profit, prev.profit).value)
    c4.metric("Margin", f"{kpi.margin_pct:.1f}%")

    col_trend, col_expenses = st.columns(2)

    with col_trend:
        st.markdown(f"**Profit, last 6 months** ({charts.profit_trend.trend.value})")
        fig_trend = go.Figure()
        fig_trend.add_trace(go.Scatter(
            x=charts.profit_trend.labels,
            y=charts.profit_trend.data,
            mode="lines+markers",
            line=dict(color="#0984e3", width=2),
            fill="tozeroy",
            fillcolor="rgba(9,132,227,0.2)",
        ))
        fig_trend.update_layout(yaxis_title="Profit (₽)", **_CHART_LAYOUT)
        st.plotly_chart(fig_trend, use_container_width=True)

    with col_expenses:
        st.markdown(f"**Expenses breakdown** ({charts.expenses_breakdown.trend.value} vs previous month)")
        fig_exp = go.Figure()
        fig_exp.add_trace(go.Pie(
            labels=charts.expenses_breakdown.labels,
            values=charts.expenses_breakdown.data,
            hole=0.5,
        ))
        fig_exp.update_layout(**_CHART_LAYOUT)
        st.plotly_chart(fig_exp, use_container_width=True)

    st.markdown(f"**Vehicle profit** — best: {charts.summary.best_vehicle}")
    fig_veh = go.Figure()
    fig_veh.add_trace(go.Bar(
        x=charts.vehicles_performance.labels,
        y=charts.vehicles_performance.data,
        marker_color="#6c5ce7",
    ))
    fig_veh.update_layout(yaxis_title="Profit (₽)", **_CHART_LAYOUT)
    st.plotly_chart(fig_veh, use_container_width=True)

    vehicle_rows = pd.DataFrame([
        {"Plate": v.plate, "Model": v.model, "Profit (₽)": v.profit, "Margin (%)": v.margin_pct}
        for v in vehicles
    ])
    st.dataframe(vehicle_rows, use_container_width=True, hide_index=True)

# ═══════════════════════════════════════════════════════════════════════════
# Drivers
# ═══════════════════════════════════════════════════════════════════════════
with drivers_tab:
    drivers = compute_drivers(month)

    st.markdown("**Top performers**")
    cols = st.columns(3)
    for col, driver in zip(cols, top_performers(drivers)):
        col.metric(driver.name, f"{driver.score} pts", driver.vehicle, delta_color="off")

    driver_rows = pd.DataFrame([
        {
            "Driver": d.name,
            "Vehicle": d.vehicle,
            "Experience (yrs)": d.experience,
            "Profit (₽)": d.profit,
            "Efficiency (%)": d.efficiency,
            "Fuel (l/100 km)": d.fuel_consumption,
            "Safety (★)": d.safety_rating,
            "Score": d.score,
            "Status": _STATUS_LABELS[d.status],
        }
        for d in rank_drivers(drivers)
    ])
    st.dataframe(driver_rows, use_container_width=True, hide_index=True)

# ═══════════════════════════════════════════════════════════════════════════
# Analytics
# ═══════════════════════════════════════════════════════════════════════════
with analytics_tab:
    report = build_analytics(month)

    for alert in report.alerts:
        if alert.severity == "critical":
            st.error(f"{alert.icon} {alert.message}")
        else:
            st.warning(f"{alert.icon} {alert.message}")

    st.markdown("**Insights**")
    for insight in report.insights:
        st.markdown(f"{insight.icon} **{insight.title}** — {insight.description}")

    st.markdown("**Recommendations**")
    for rec in report.recommendations:
        with st.expander(f"{rec.icon} {rec.title}"):
            st.write(rec.description)
