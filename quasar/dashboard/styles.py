"""
QUASAR Dashboard - Page Styles
==============================

HTML helpers (KPI cards, badges) and the CSS stylesheet injected once per
page.  Palettes and the Plotly layout live in
``quasar.visualization.theme``; this module only adds what needs Streamlit.

Usage
-----
    from quasar.dashboard.styles import inject_css, kpi_card_html
    inject_css()
"""

import streamlit as st

from ..visualization.theme import RISK_LEVEL_COLORS


def risk_css_class(level: str) -> str:
    """Badge CSS class for a risk level label."""
    return f"badge-{level}" if level in RISK_LEVEL_COLORS else "badge-low"


def kpi_status_class(value: float, warn: float, critical: float) -> str:
    """Pick a KPI card variant for a "lower is better" value."""
    if value >= critical:
        return "critical"
    if value >= warn:
        return "warning"
    return "success"


def kpi_card_html(label: str, value: str, delta: str = "", css_class: str = "") -> str:
    """Single KPI card as HTML for ``st.markdown(..., unsafe_allow_html=True)``.

    A delta starting with '-' is styled red, anything else green.
    """
    delta_html = ""
    if delta:
        delta_class = "delta-negative" if delta.startswith('-') else "delta-positive"
        delta_html = f'<p class="kpi-delta {delta_class}">{delta}</p>'
    return f"""
    <div class="kpi-container {css_class}">
        <p class="kpi-value">{value}</p>
        <p class="kpi-label">{label}</p>
        {delta_html}
    </div>
    """


def badge_html(text: str, css_class: str) -> str:
    return f'<span class="badge {css_class}">{text}</span>'


def inject_css():
    """Inject the dashboard stylesheet.  Call once at the top of the page."""
    st.markdown("""
<style>
    @import url('https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700&display=swap');
    .stApp { font-family: 'Inter', sans-serif; }

    /* Header */
    .quasar-header {
        font-size: 2.4rem;
        font-weight: 700;
        margin-bottom: 0;
        background: linear-gradient(135deg, #00B4D8 0%, #7B2CBF 100%);
        -webkit-background-clip: text;
        -webkit-text-fill-color: transparent;
    }
    .quasar-subheader { color: #8892B0; margin-top: 0; font-size: 0.95rem; }

    /* KPI cards */
    .kpi-container {
        background: linear-gradient(135deg, rgba(0, 180, 216, 0.12) 0%, rgba(17, 34, 64, 0.6) 100%);
        border-radius: 14px;
        padding: 18px;
        border-left: 4px solid #00B4D8;
        text-align: center;
        transition: transform 0.3s ease, box-shadow 0.3s ease;
    }
    .kpi-container:hover {
        transform: translateY(-3px);
        box-shadow: 0 10px 30px rgba(0, 180, 216, 0.25);
    }
    .kpi-container.critical { border-left-color: #EF476F; }
    .kpi-container.warning { border-left-color: #FFD166; }
    .kpi-container.success { border-left-color: #06D6A0; }
    .kpi-value {
        font-size: 2.2rem;
        font-weight: 700;
        margin: 0;
        color: #E0E6F0;
    }
    .kpi-label {
        font-size: 0.78rem;
        text-transform: uppercase;
        letter-spacing: 0.08em;
        color: #8892B0;
        margin: 4px 0 0 0;
    }
    .kpi-delta { font-size: 0.8rem; margin: 4px 0 0 0; }
    .delta-positive { color: #06D6A0; }
    .delta-negative { color: #EF476F; }

    /* Badges */
    .badge {
        display: inline-block;
        padding: 2px 10px;
        border-radius: 999px;
        font-size: 0.72rem;
        font-weight: 600;
        text-transform: uppercase;
    }
    .badge-critical { background: rgba(239, 71, 111, 0.2); color: #EF476F; }
    .badge-high { background: rgba(247, 140, 107, 0.2); color: #F78C6B; }
    .badge-medium { background: rgba(255, 209, 102, 0.2); color: #FFD166; }
    .badge-low { background: rgba(6, 214, 160, 0.2); color: #06D6A0; }

    /* Top-risk sidebar cards */
    .risk-card {
        background: rgba(17, 34, 64, 0.6);
        border: 1px solid rgba(239, 71, 111, 0.25);
        border-radius: 12px;
        padding: 12px 14px;
        margin-bottom: 10px;
    }
    .risk-card h4 { margin: 0 0 4px 0; font-size: 0.95rem; }
    .risk-card .evidence { color: #8892B0; font-size: 0.75rem; font-family: monospace; }

    /* Section title */
    .section-title {
        color: #8892B0;
        font-size: 0.8rem;
        text-transform: uppercase;
        letter-spacing: 0.1em;
        border-bottom: 1px solid #1E2D4A;
        padding-bottom: 4px;
        margin: 18px 0 10px 0;
    }

    [data-testid="stSidebar"] { background: linear-gradient(180deg, #0A1628 0%, #112240 100%); }
    #MainMenu { visibility: hidden; }
    footer { visibility: hidden; }
</style>
""", unsafe_allow_html=True)
