"""
Marketing Budget Calculator - model lead targets, CPL scenarios and ROI.
Every input change recomputes the full budget model.
"""

import logging
import sys
from pathlib import Path

import streamlit as st
import plotly.graph_objects as go
from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path, override=True)

sys.path.insert(0, str(Path(__file__).parent))

from budget_calc.config import ERROR_MESSAGES, UI_TEXT, configure_logging, settings
from budget_calc.engine import BudgetInsights, compute, compute_insights
from budget_calc.formatting import (
    format_currency, format_number, format_percentage, format_ratio, format_roi
)
from budget_calc.inputs import INPUT_SECTIONS, InputField, build_inputs, validation_message
from budget_calc.models import CalculationResult, CalculatorInputs
from budget_calc.report import budget_breakdown, channel_totals, summary_frame, to_csv_bytes

configure_logging(settings.app.log_level)
logger = logging.getLogger(__name__)

st.set_page_config(page_title=settings.app.page_title, page_icon="📊", layout="wide", initial_sidebar_state="expanded")

HEADERS = UI_TEXT["HEADERS"]
CHANNEL_COLORS = {"Google": "#007aff", "Meta": "#af52de", "LinkedIn": "#34c759"}

# CSS
st.markdown("""
<style>
#MainMenu, footer, .stDeployButton {visibility: hidden; display: none;}
.stApp {background-color: #000000;}
.main .block-container {padding-top: 2rem; padding-bottom: 2rem;}
.page-title {font-size: 34px; font-weight: 700; color: #ffffff; margin-bottom: 4px;}
.page-subtitle {font-size: 14px; color: #8e8e93; margin-bottom: 20px;}
.stat-card {background-color: #1c1c1e; border-radius: 12px; padding: 16px; margin-bottom: 12px;}
.stat-label {font-size: 13px; color: #8e8e93; margin-bottom: 8px;}
.stat-value {font-size: 28px; font-weight: 600; color: #ffffff;}
.stat-change-positive {font-size: 13px; color: #34c759; margin-top: 4px;}
.stat-change-negative {font-size: 13px; color: #ff3b30; margin-top: 4px;}
.stat-change-neutral {font-size: 13px; color: #8e8e93; margin-top: 4px;}
.section-header {font-size: 20px; font-weight: 600; color: #ffffff; margin-top: 24px; margin-bottom: 12px;}
.line-item {display: flex; justify-content: space-between; font-size: 14px; color: #d1d1d6; padding: 4px 0;}
.line-item-total {display: flex; justify-content: space-between; font-size: 15px; font-weight: 600; color: #ffffff; border-top: 1px solid #3a3a3c; padding-top: 6px; margin-top: 4px;}
</style>
""", unsafe_allow_html=True)


@st.cache_data(show_spinner=False)
def run_calculation(inputs: CalculatorInputs) -> CalculationResult:
    """Budget model, memoized on the (frozen) inputs record."""
    return compute(inputs)


def stat_card(label, value, note=None, tone="neutral"):
    note_html = f'<div class="stat-change-{tone}">{note}</div>' if note else ""
    st.markdown(f'''<div class="stat-card">
        <div class="stat-label">{label}</div>
        <div class="stat-value">{value}</div>
        {note_html}
    </div>''', unsafe_allow_html=True)


def line_item(label, value, total=False):
    css = "line-item-total" if total else "line-item"
    st.markdown(f'<div class="{css}"><span>{label}</span><span>{value}</span></div>', unsafe_allow_html=True)


def render_input(field: InputField):
    label = field.label
    if field.prefix:
        label = f"{label} ({field.prefix})"
    elif field.suffix:
        label = f"{label} ({field.suffix})"
    return st.number_input(
        label,
        min_value=float(field.min_value),
        max_value=float(field.max_value),
        value=float(field.display_default),
        step=float(field.step),
        key=f"input_{field.key}",
    )


def render_input_form() -> CalculatorInputs:
    """Render all input sections in the sidebar and return validated inputs."""
    raw_values = {}
    with st.sidebar:
        for section in INPUT_SECTIONS:
            st.markdown(f"### {section.header}")
            for field in section.fields:
                raw_values[field.key] = render_input(field)
                message = validation_message(field, raw_values[field.key])
                if message:
                    st.caption(message)
    return build_inputs(raw_values)


def create_budget_chart(result: CalculationResult, height=320):
    """Grouped bar chart of spend per channel, split by campaign type."""
    df = budget_breakdown(result)

    fig = go.Figure()
    for campaign, color in (("Service", "#007aff"), ("Franchise", "#ff9500"), ("Commercial", "#34c759")):
        rows = df[df["campaign"] == campaign]
        fig.add_trace(go.Bar(
            name=campaign,
            x=rows["channel"],
            y=rows["budget"],
            marker_color=color,
            hovertemplate=campaign + ': $%{y:,.0f}<extra></extra>'
        ))

    fig.update_layout(
        barmode='stack',
        height=height,
        margin=dict(l=0, r=0, t=30, b=30),
        paper_bgcolor='rgba(0,0,0,0)',
        plot_bgcolor='rgba(0,0,0,0)',
        showlegend=True,
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="left", x=0, font=dict(color='#ffffff', size=11)),
        xaxis=dict(showgrid=False, showline=False, tickfont=dict(color='#8e8e93', size=10)),
        yaxis=dict(showgrid=True, gridcolor='rgba(142,142,147,0.2)', showline=False,
                   tickfont=dict(color='#8e8e93', size=10), tickprefix='$', tickformat=',.0f'),
        hoverlabel=dict(bgcolor='#1c1c1e', font_size=12, font_color='#ffffff')
    )
    return fig


def create_channel_mix_chart(result: CalculationResult, height=260):
    """Donut of paid spend share per channel."""
    totals = channel_totals(result)
    fig = go.Figure(go.Pie(
        labels=totals["channel"],
        values=totals["budget"],
        hole=0.6,
        marker=dict(colors=[CHANNEL_COLORS.get(c, "#8e8e93") for c in totals["channel"]]),
        hovertemplate='%{label}: $%{value:,.0f}<extra></extra>',
        textinfo='percent'
    ))
    fig.update_layout(
        height=height,
        margin=dict(l=0, r=0, t=10, b=10),
        paper_bgcolor='rgba(0,0,0,0)',
        showlegend=True,
        legend=dict(font=dict(color='#ffffff', size=11))
    )
    return fig


def render_lead_volume(result: CalculationResult):
    leads = result.lead_metrics
    st.markdown(f'<div class="section-header">{HEADERS["ANNUAL_VOLUME"]}</div>', unsafe_allow_html=True)
    line_item("RMF service leads", format_number(leads.rmf_service_leads_annual))
    line_item("Auckland service leads", format_number(leads.auckland_service_leads_annual))
    line_item("Total service leads", format_number(leads.total_service_leads), total=True)
    line_item("Franchise leads", format_number(leads.total_franchise_leads))
    line_item("Commercial leads", format_number(leads.total_commercial_leads))
    line_item("All leads", format_number(leads.total_leads), total=True)


def render_budget_allocation(result: CalculationResult):
    budget = result.budget_allocation
    channels = result.channel_leads
    st.markdown(f'<div class="section-header">{HEADERS["BUDGET_ALLOCATION"]}</div>', unsafe_allow_html=True)

    col1, col2, col3 = st.columns(3)
    with col1:
        st.markdown("**Google Ads**")
        line_item(f"Service ({format_number(channels.google_service_leads)} leads)", format_currency(budget.google_service_budget))
        line_item(f"Franchise ({format_number(channels.google_franchise_leads)} leads)", format_currency(budget.google_franchise_budget))
        line_item("Total Google", format_currency(budget.total_google_budget), total=True)
    with col2:
        st.markdown("**Meta Ads**")
        line_item(f"Service ({format_number(channels.meta_service_leads)} leads)", format_currency(budget.meta_service_budget))
        line_item(f"Franchise ({format_number(channels.meta_franchise_leads)} leads)", format_currency(budget.meta_franchise_budget))
        line_item("Total Meta", format_currency(budget.total_meta_budget), total=True)
    with col3:
        st.markdown("**LinkedIn**")
        line_item(f"Commercial ({format_number(result.lead_metrics.total_commercial_leads)} leads)", format_currency(budget.commercial_budget))
        line_item("Total Paid Ads", format_currency(budget.total_paid_ads), total=True)

    st.plotly_chart(create_budget_chart(result), use_container_width=True, config={'displayModeBar': False})


def render_roi(result: CalculationResult, inputs: CalculatorInputs, insights: BudgetInsights):
    financials = result.financial_metrics
    st.markdown(f'<div class="section-header">{HEADERS["ROI_PROJECTION"]}</div>', unsafe_allow_html=True)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        stat_card("Customer LTV", format_currency(financials.customer_ltv),
                  f"{format_currency(inputs.avg_monthly_service_fee)}/mo × {format_number(inputs.avg_customer_retention_months)} months")
    with col2:
        stat_card("Converted Customers", format_number(financials.converted_customers),
                  f"From {format_number(result.lead_metrics.total_service_leads)} service leads at "
                  f"{format_percentage(inputs.service_lead_conversion_rate)} conversion")
    with col3:
        stat_card("Projected Revenue", format_currency(financials.total_revenue))
    with col4:
        if insights.is_profitable:
            note, tone = f"Every $1 spent returns ${insights.return_per_dollar:.2f}", "positive"
        else:
            note, tone = "Adjust targets or CPL to improve ROI", "negative"
        stat_card("ROI", format_roi(financials.roi), note, tone)

    col1, col2 = st.columns(2)
    with col1:
        stat_card("Cost per Acquisition", format_currency(financials.cost_per_acquisition))
    with col2:
        stat_card("LTV:CAC Ratio", format_ratio(financials.ltv_cac_ratio))


def render_additional_budget(insights: BudgetInsights):
    extra = settings.additional_budget
    st.markdown(f'<div class="section-header">{HEADERS["ADDITIONAL_BUDGET"]}</div>', unsafe_allow_html=True)
    line_item("Out-of-home", format_currency(extra.out_of_home))
    line_item("Content production", format_currency(extra.content_production))
    line_item("Total marketing budget", format_currency(insights.total_marketing_budget), total=True)


def render_insights(result: CalculationResult, inputs: CalculatorInputs, insights: BudgetInsights):
    st.markdown(f'<div class="section-header">{HEADERS["KEY_INSIGHTS"]}</div>', unsafe_allow_html=True)
    col1, col2 = st.columns([3, 2])
    with col1:
        st.markdown(
            f"**Channel mix:** Google {insights.google_share_pct:.0f}% | "
            f"Meta {insights.meta_share_pct:.0f}% | LinkedIn {insights.linkedin_share_pct:.0f}%"
        )
        st.markdown(f"**Blended CPL:** {format_currency(result.financial_metrics.average_cpl)} per lead across all campaigns")
        st.markdown(
            f"**Service strategy:** targeting {format_number(result.lead_metrics.total_service_leads)} service leads annually "
            f"at {format_percentage(inputs.google_service_split)} Google / {format_percentage(1 - inputs.google_service_split)} Meta split"
        )
        st.markdown(
            f"**Break-even:** need {format_percentage(insights.breakeven_conversion_rate, decimals=1)} "
            f"conversion rate to break even on service leads"
        )
    with col2:
        st.plotly_chart(create_channel_mix_chart(result), use_container_width=True, config={'displayModeBar': False})


def render_breakdown(result: CalculationResult, insights: BudgetInsights):
    st.markdown(f'<div class="section-header">{HEADERS["BREAKDOWN"]}</div>', unsafe_allow_html=True)
    df = budget_breakdown(result)
    st.dataframe(
        df,
        hide_index=True,
        use_container_width=True,
        column_config={
            "leads": st.column_config.NumberColumn("Leads", format="%.0f"),
            "budget": st.column_config.NumberColumn("Budget", format="$%.0f"),
            "share_of_spend": st.column_config.NumberColumn("Share of spend", format="%.1f%%"),
        },
    )
    col1, col2 = st.columns(2)
    with col1:
        st.download_button("Download breakdown (CSV)", to_csv_bytes(df), file_name="budget_breakdown.csv",
                           mime="text/csv", use_container_width=True)
    with col2:
        st.download_button("Download summary (CSV)", to_csv_bytes(summary_frame(result, insights)),
                           file_name="budget_summary.csv", mime="text/csv", use_container_width=True)


def main():
    st.markdown(f'<div class="page-title">{settings.app.page_title}</div>', unsafe_allow_html=True)
    st.markdown(f'<div class="page-subtitle">{settings.app.subtitle}</div>', unsafe_allow_html=True)

    inputs = render_input_form()

    try:
        result = run_calculation(inputs)
        insights = compute_insights(result, settings.additional_budget.to_constants())

        col1, col2 = st.columns([1, 2])
        with col1:
            render_lead_volume(result)
            render_additional_budget(insights)
        with col2:
            render_budget_allocation(result)

        render_roi(result, inputs, insights)
        render_insights(result, inputs, insights)
        render_breakdown(result, insights)
    except Exception as e:
        logger.exception("Rendering results failed for inputs %s: %s", inputs, e)
        st.error(ERROR_MESSAGES["CALCULATION_ERROR"])


if __name__ == "__main__":
    main()
