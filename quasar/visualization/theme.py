"""
QUASAR Chart Theme
==================

Colour palettes and the Plotly base layout shared by every figure.  Kept
free of Streamlit so figures can be built (and tested) without the UI.

Colour semantics
----------------
Risk level (from ``quantum_risk_score``):
    critical  : red      (>= 0.9)
    high      : orange   (>= 0.8)
    medium    : amber    (>= 0.6)
    low       : green

Migration status:
    vulnerable (legacy)        : red
    migrating                  : amber
    secure (post-quantum)      : green

Usage
-----
    from quasar.visualization.theme import get_plotly_theme, AXIS_STYLE
    fig.update_layout(**get_plotly_theme())
    fig.update_xaxes(**AXIS_STYLE)
"""

# ── Palette ──────────────────────────────────────────────────────────────────
QUASAR_COLORS = {
    'background': '#0A1628',
    'surface': '#112240',
    'primary': '#00B4D8',
    'secondary': '#7B2CBF',
    'text': '#E0E6F0',
    'muted': '#8892B0',
    'danger': '#EF476F',
    'warning': '#FFD166',
    'success': '#06D6A0',
}

# Sequence used for categorical charts (algorithm pie etc.)
CHART_SEQUENCE = ['#00B4D8', '#7B2CBF', '#EF476F', '#FFD166', '#06D6A0', '#8D99AE']

RISK_LEVEL_COLORS = {
    'critical': '#EF476F',
    'high': '#F78C6B',
    'medium': '#FFD166',
    'low': '#06D6A0',
}

STATUS_COLORS = {
    'vulnerable': '#EF476F',
    'migrating': '#FFD166',
    'secure': '#06D6A0',
}

RISK_BUCKET_COLORS = {
    'High Risk': RISK_LEVEL_COLORS['critical'],
    'Medium Risk': RISK_LEVEL_COLORS['medium'],
    'Low Risk': RISK_LEVEL_COLORS['low'],
}


def label_color_css(label, colors) -> str:
    """CSS ``color`` declaration for a table cell, or '' for unknown labels.

    Used with ``DataFrame.style.map`` on the status and risk level columns.
    """
    color = colors.get(label)
    return f"color: {color}; font-weight: 600" if color else ""


def get_plotly_theme() -> dict:
    """Base Plotly layout for the dark dashboard, for ``fig.update_layout(**...)``."""
    return dict(
        paper_bgcolor='rgba(0,0,0,0)',
        plot_bgcolor='rgba(0,0,0,0)',
        font=dict(family='Inter', color=QUASAR_COLORS['text']),
        margin=dict(l=40, r=30, t=50, b=40),
        legend=dict(orientation='h', yanchor='bottom', y=-0.25, x=0),
    )


# Subtle grid lines for the dark theme:
#   fig.update_xaxes(**AXIS_STYLE)
AXIS_STYLE = dict(
    gridcolor='#1E2D4A',
    zerolinecolor='#1E2D4A',
)
