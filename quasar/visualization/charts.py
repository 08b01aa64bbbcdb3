"""
QUASAR Dashboard - Plotly Chart Builders
========================================

One figure per chart mapper.  Each builder takes the plain records produced
by ``quasar.visualization.chart_data`` (never raw assets), so the figures
stay dumb and the numbers are tested once, at the mapper level.

Every figure passes through ``_apply_theme`` for the shared dark layout.
"""

import plotly.graph_objects as go

from .theme import (
    AXIS_STYLE,
    CHART_SEQUENCE,
    QUASAR_COLORS,
    RISK_BUCKET_COLORS,
    get_plotly_theme,
)


def _apply_theme(fig: go.Figure, title: str = "", height: int = 360) -> go.Figure:
    """Apply the dark theme and axis grid styling; returns ``fig`` for chaining."""
    fig.update_layout(**get_plotly_theme())
    fig.update_layout(height=height)
    if title:
        fig.update_layout(title=dict(text=title, font=dict(size=15)))
    fig.update_xaxes(**AXIS_STYLE)
    fig.update_yaxes(**AXIS_STYLE)
    return fig


def chart_algorithm_distribution(records) -> go.Figure:
    """Donut of asset counts per encryption algorithm."""
    fig = go.Figure(go.Pie(
        labels=[r['name'] for r in records],
        values=[r['value'] for r in records],
        hole=0.55,
        marker=dict(colors=CHART_SEQUENCE[:len(records)]),
        textinfo='label+percent',
        hovertemplate='%{label}: %{value} assets<extra></extra>',
    ))
    return _apply_theme(fig, "Algorithm Distribution")


def chart_certificate_status(records) -> go.Figure:
    colors = [QUASAR_COLORS['success'], QUASAR_COLORS['danger']]
    fig = go.Figure(go.Pie(
        labels=[r['name'] for r in records],
        values=[r['value'] for r in records],
        hole=0.6,
        marker=dict(colors=colors[:len(records)]),
        hovertemplate='%{label}: %{value}<extra></extra>',
    ))
    return _apply_theme(fig, "Certificate Status")


def chart_compliance_trend(points) -> go.Figure:
    """Two lines: post-quantum compliance and overall encryption strength."""
    dates = [p['date'] for p in points]
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=dates, y=[p['compliance'] for p in points],
        name='Compliance', mode='lines+markers',
        line=dict(color=QUASAR_COLORS['primary'], width=3),
    ))
    fig.add_trace(go.Scatter(
        x=dates, y=[p['strength'] for p in points],
        name='Encryption Strength', mode='lines+markers',
        line=dict(color=QUASAR_COLORS['secondary'], width=3, dash='dot'),
    ))
    fig = _apply_theme(fig, "Compliance Trend (7 days)")
    fig.update_yaxes(range=[0, 100])
    return fig


def chart_performance_comparison(rows) -> go.Figure:
    """Grouped before/after bars.  Memory and throughput are already scaled."""
    metrics = [r['metric'] for r in rows]
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=metrics, y=[r['before'] for r in rows], name='Before',
        marker_color=QUASAR_COLORS['danger'],
    ))
    fig.add_trace(go.Bar(
        x=metrics, y=[r['after'] for r in rows], name='After',
        marker_color=QUASAR_COLORS['primary'],
    ))
    fig.update_layout(barmode='group')
    return _apply_theme(fig, "Performance: Before vs After Migration")


def chart_risk_timeline(points) -> go.Figure:
    """Stacked areas for vulnerable / migrating / secure counts."""
    dates = [p['date'] for p in points]
    fig = go.Figure()
    for key, label, color in [
        ('vulnerable', 'Vulnerable', QUASAR_COLORS['danger']),
        ('migrating', 'Migrating', QUASAR_COLORS['warning']),
        ('secure', 'Secure', QUASAR_COLORS['success']),
    ]:
        fig.add_trace(go.Scatter(
            x=dates, y=[p[key] for p in points], name=label,
            mode='lines', stackgroup='status',
            line=dict(color=color, width=1.5),
        ))
    return _apply_theme(fig, "Risk Timeline (7 days)")


def chart_risk_distribution(records) -> go.Figure:
    fig = go.Figure(go.Bar(
        x=[r['name'] for r in records],
        y=[r['value'] for r in records],
        marker_color=[RISK_BUCKET_COLORS.get(r['name'], QUASAR_COLORS['muted']) for r in records],
        text=[r['value'] for r in records],
        textposition='outside',
    ))
    return _apply_theme(fig, "Risk Distribution")


def chart_quantum_simulation(rows) -> go.Figure:
    """Horizontal bars of simulated break time, confidence in the hover."""
    fig = go.Figure(go.Bar(
        y=[r['algorithm'] for r in rows],
        x=[r['break_time'] for r in rows],
        orientation='h',
        marker_color=CHART_SEQUENCE[:len(rows)],
        customdata=[round(r['confidence'], 1) for r in rows],
        hovertemplate='%{y}: %{x:.1f}<br>Confidence %{customdata}%<extra></extra>',
    ))
    fig = _apply_theme(fig, "Quantum Attack Simulation", height=320)
    fig.update_xaxes(title_text="Simulated break time")
    return fig


def chart_vulnerability_buckets(records, selected=None) -> go.Figure:
    """Donut of high / medium / low vulnerability counts.

    The slice for ``selected`` (a bucket level) is pulled out and outlined.
    """
    fig = go.Figure(go.Pie(
        labels=[r['name'] for r in records],
        values=[r['value'] for r in records],
        customdata=[r['level'] for r in records],
        hole=0.55,
        sort=False,
        pull=[0.08 if r['level'] == selected else 0 for r in records],
        marker=dict(
            colors=[RISK_BUCKET_COLORS.get(r['name'], QUASAR_COLORS['muted']) for r in records],
            line=dict(
                color=QUASAR_COLORS['text'],
                width=[3 if r['level'] == selected else 0 for r in records],
            ),
        ),
        hovertemplate='%{label}: %{value} assets (%{percent})<extra></extra>',
    ))
    return _apply_theme(fig, "Quantum Vulnerability Distribution")
