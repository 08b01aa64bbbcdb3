"""
QUASAR Dashboard - Streamlit Application
========================================

Renders the quantum-risk dashboard for the active asset collection.

Pages
-----
* **Overview**   -- KPI cards, charts, migration queue, the top-risk column,
                    the vulnerability-bucket overview and the asset table.
* **Assistant**  -- the streamed demo assistant, quick actions, JSON export
                    and the quantum attack simulator.

Session state
-------------
Streamlit re-runs this script on every interaction.  Everything that must
survive a rerun lives in ``st.session_state`` (see ``DEFAULTS``).  The data
source is an immutable ``SessionDataSource`` that is replaced, never
mutated, so a failed upload simply leaves the previous value in place.

Error handling
--------------
Core functions raise ``QuasarError`` subclasses.  They are caught here, at
the widget that triggered them, and shown with ``st.error`` / ``st.toast``.
"""

import html
import logging
import random
from datetime import date

import streamlit as st

from ..core.config import (
    ALGORITHM_CHART_LIMIT,
    APP_SUBTITLE,
    APP_TITLE,
    DEFAULT_DATA_FILE,
    TONES,
    VERBOSITY_LEVELS,
    VULNERABILITY_DRILLDOWN_LIMIT,
)
from ..core.exceptions import QuasarError
from ..ingestion.csv_parser import load_default_assets, sample_template
from ..metrics.aggregator import calculate_metrics
from ..models.data_models import DataMode, assets_to_dataframe
from ..reports.excel_export import EXCEL_MIME, build_inventory_workbook
from ..reports.pdf_report import build_pdf_report, report_filename
from ..scoring import get_migration_tasks, get_risk_level, get_status_label, get_top_risks
from ..session.data_source import SessionDataSource, apply_upload
from ..simulation.assistant import (
    EXAMPLE_QUESTIONS,
    enhance_query,
    export_interaction,
    quick_action_query,
    stream_response,
)
from ..simulation.quantum import (
    demo_simulation_data,
    quantum_simulation_data,
    simulate_migration_start,
)
from ..visualization import charts
from ..visualization.chart_data import (
    algorithm_distribution,
    assets_in_bucket,
    certificate_status,
    compliance_trend,
    migration_progress,
    performance_comparison,
    risk_distribution,
    risk_timeline,
    vulnerability_buckets,
)
from ..visualization.theme import RISK_LEVEL_COLORS, STATUS_COLORS, label_color_css
from .styles import badge_html, inject_css, kpi_card_html, kpi_status_class, risk_css_class

logger = logging.getLogger(__name__)

# ============================================================================
# SESSION STATE
# ============================================================================
DEFAULTS = {
    'source': None,               # SessionDataSource for this browser session
    'upload_key': 0,              # Bumped to reset the file_uploader widget
    'last_upload': None,          # (name, size) of the last applied upload
    'pdf_bytes': None,
    'pdf_name': None,
    'assistant_query': "",
    'assistant_response': "",
    'assistant_verbosity': "medium",
    'assistant_tone': "technical",
    'migrations': {},             # asset_id -> simulated migration status
    'simulation': None,
}


def init_session_state():
    for key, default in DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = default.copy() if isinstance(default, dict) else default
    if st.session_state.source is None:
        st.session_state.source = SessionDataSource.from_defaults(get_default_assets())


@st.cache_data
def get_default_assets(path=str(DEFAULT_DATA_FILE)):
    """Bundled inventory, parsed once per server process."""
    return load_default_assets(path)


# ============================================================================
# SIDEBAR: DATA SOURCE
# ============================================================================

def render_data_controls():
    """Upload bar, data-mode switch, clear button and template download."""
    source = st.session_state.source

    st.sidebar.markdown('<p class="section-title">Data Source</p>', unsafe_allow_html=True)
    uploaded = st.sidebar.file_uploader(
        "Upload asset inventory (CSV)",
        key=f"uploader_{st.session_state.upload_key}",
        help="Required columns: asset_id, type, encryption_algorithm, key_length, "
             "current_status, quantum_vulnerability_score, migration_priority, "
             "predicted_migration_risk",
    )

    if uploaded is not None:
        upload_id = (uploaded.name, uploaded.size)
        if upload_id != st.session_state.last_upload:
            st.session_state.last_upload = upload_id
            try:
                source = apply_upload(source, uploaded.name, uploaded.getvalue())
            except QuasarError as e:
                st.sidebar.error(str(e))
            else:
                st.session_state.source = source
                st.toast(f"Loaded {len(source.uploaded_assets)} assets from {uploaded.name}")

    if source.has_upload:
        st.sidebar.caption(
            f"Uploaded: **{source.upload_name}** ({len(source.uploaded_assets)} assets)"
        )
        modes = [DataMode.COMBINED, DataMode.UPLOAD_ONLY]
        choice = st.sidebar.radio(
            "View",
            modes,
            index=modes.index(source.mode),
            format_func=lambda m: m.label,
            horizontal=True,
        )
        if choice != source.mode:
            st.session_state.source = source.with_mode(choice)
            st.rerun()

        if st.sidebar.button("Clear upload", use_container_width=True):
            st.session_state.source = source.cleared()
            st.session_state.last_upload = None
            st.session_state.upload_key += 1
            st.rerun()

    filename, payload = sample_template()
    st.sidebar.download_button(
        "Download sample template",
        data=payload,
        file_name=filename,
        mime="text/csv",
        use_container_width=True,
    )


def render_export_controls(assets, metrics):
    st.sidebar.markdown('<p class="section-title">Export</p>', unsafe_allow_html=True)
    if st.sidebar.button("Generate PDF report", use_container_width=True):
        try:
            with st.spinner("Building PDF report..."):
                st.session_state.pdf_bytes = build_pdf_report(assets, metrics)
                st.session_state.pdf_name = report_filename()
            st.toast("PDF report ready")
        except QuasarError as e:
            st.sidebar.error(str(e))

    if st.session_state.pdf_bytes:
        st.sidebar.download_button(
            "Download PDF",
            data=st.session_state.pdf_bytes,
            file_name=st.session_state.pdf_name,
            mime="application/pdf",
            use_container_width=True,
        )

    try:
        workbook = build_inventory_workbook(assets, metrics)
    except QuasarError as e:
        st.sidebar.error(str(e))
    else:
        st.sidebar.download_button(
            "Download inventory (Excel)",
            data=workbook,
            file_name=f"QUASAR_Inventory_{date.today().isoformat()}.xlsx",
            mime=EXCEL_MIME,
            use_container_width=True,
        )


# ============================================================================
# OVERVIEW PAGE
# ============================================================================

def render_header(source):
    st.markdown(f'<p class="quasar-header">{APP_TITLE}</p>', unsafe_allow_html=True)
    subtitle = APP_SUBTITLE
    if source.has_upload:
        subtitle += f" | {source.mode.label} view"
    st.markdown(f'<p class="quasar-subheader">{subtitle}</p>', unsafe_allow_html=True)


def render_kpis(metrics):
    cards = [
        ("Total Assets", f"{metrics.total_assets:,}", "", ""),
        ("Vulnerable", f"{metrics.vulnerable_assets:,}",
         f"{metrics.critical_assets} critical",
         kpi_status_class(metrics.vulnerable_assets, 1, max(metrics.total_assets // 2, 1))),
        ("Post-Quantum", f"{metrics.post_quantum_assets:,}",
         f"{metrics.migrating_assets} migrating", "success"),
        ("Avg Risk Score", f"{metrics.average_risk_score}%", "",
         kpi_status_class(metrics.average_risk_score, 60, 80)),
        ("Compliance", f"{metrics.avg_compliance_score}%",
         f"-{metrics.expired_certs} expired certs" if metrics.expired_certs else "", ""),
        ("Automation", f"{metrics.automation_success_rate}%",
         f"{metrics.avg_migration_time}h avg migration", ""),
    ]
    for col, (label, value, delta, css) in zip(st.columns(len(cards)), cards):
        col.markdown(kpi_card_html(label, value, delta, css), unsafe_allow_html=True)

    impact_cols = st.columns(4)
    impact_cols[0].metric("Latency impact", f"{metrics.avg_latency_impact:+d}%")
    impact_cols[1].metric("CPU impact", f"{metrics.avg_cpu_impact:+d}%")
    impact_cols[2].metric("Memory impact", f"{metrics.avg_memory_impact:+d}%")
    impact_cols[3].metric("Throughput impact", f"{metrics.avg_throughput_impact:+d}%")


def render_charts(assets, metrics, today):
    left, right = st.columns(2)
    left.plotly_chart(
        charts.chart_risk_timeline(risk_timeline(assets, today)),
        use_container_width=True,
    )
    right.plotly_chart(
        charts.chart_algorithm_distribution(
            algorithm_distribution(assets, limit=ALGORITHM_CHART_LIMIT)
        ),
        use_container_width=True,
    )

    left, middle, right = st.columns(3)
    left.plotly_chart(
        charts.chart_risk_distribution(risk_distribution(metrics)),
        use_container_width=True,
    )
    middle.plotly_chart(
        charts.chart_certificate_status(certificate_status(assets)),
        use_container_width=True,
    )
    right.plotly_chart(
        charts.chart_compliance_trend(compliance_trend(assets, today)),
        use_container_width=True,
    )

    st.plotly_chart(
        charts.chart_performance_comparison(performance_comparison(assets)),
        use_container_width=True,
    )


def render_asset_overview(assets):
    """Migrated / pending counts, vulnerability buckets and a per-bucket drill-down."""
    st.markdown('<p class="section-title">Project Asset Overview</p>', unsafe_allow_html=True)
    progress = migration_progress(assets)
    buckets = vulnerability_buckets(assets)

    cards = [
        ("Total Assets", f"{progress['total']:,}", ""),
        ("Migrated", f"{progress['migrated']:,}", "success"),
        ("Pending", f"{progress['pending']:,}", "warning"),
    ] + [
        (b['name'], f"{b['percent']}%",
         {'high': "critical", 'medium': "warning", 'low': "success"}[b['level']])
        for b in buckets
    ]
    for col, (label, value, css) in zip(st.columns(len(cards)), cards):
        col.markdown(kpi_card_html(label, value, css_class=css), unsafe_allow_html=True)

    levels = [None] + [b['level'] for b in buckets]
    names = {b['level']: f"{b['name']} ({b['value']})" for b in buckets}
    chart_col, table_col = st.columns(2)
    with table_col:
        selected = st.selectbox(
            "Filter by vulnerability",
            levels,
            format_func=lambda level: "Select a risk level" if level is None else names[level],
            key="overview_bucket",
        )
    chart_col.plotly_chart(
        charts.chart_vulnerability_buckets(buckets, selected),
        use_container_width=True,
    )

    with table_col:
        if selected is None:
            st.caption("Choose a risk level to list its assets.")
            return
        matches = assets_in_bucket(assets, selected)
        if not matches:
            st.caption("No assets in this bucket.")
            return
        df = assets_to_dataframe(matches[:VULNERABILITY_DRILLDOWN_LIMIT])[[
            'asset_id', 'type', 'encryption_algorithm',
            'quantum_vulnerability_score', 'current_status',
        ]]
        st.dataframe(df, use_container_width=True, hide_index=True)
        if len(matches) > VULNERABILITY_DRILLDOWN_LIMIT:
            st.caption(f"Showing {VULNERABILITY_DRILLDOWN_LIMIT} of {len(matches)} assets")


def render_asset_table(assets):
    st.markdown('<p class="section-title">Asset Inventory</p>', unsafe_allow_html=True)
    df = assets_to_dataframe(assets)
    if df.empty:
        st.info("No assets in the current view.")
        return
    df.insert(1, 'risk_level', df['quantum_risk_score'].map(get_risk_level))
    df.insert(2, 'status', df['current_status'].map(get_status_label))
    styled = (
        df.style
        .map(label_color_css, colors=RISK_LEVEL_COLORS, subset=['risk_level'])
        .map(label_color_css, colors=STATUS_COLORS, subset=['status'])
    )
    st.dataframe(
        styled,
        use_container_width=True,
        hide_index=True,
        column_config={
            'quantum_risk_score': st.column_config.ProgressColumn(
                "Risk", min_value=0.0, max_value=1.0, format="%.2f"),
            'quantum_vulnerability_score': st.column_config.ProgressColumn(
                "Vulnerability", min_value=0, max_value=100, format="%d"),
        },
    )


def render_migration_queue(assets):
    st.markdown('<p class="section-title">Migration Queue</p>', unsafe_allow_html=True)
    tasks = get_migration_tasks(assets)
    if not tasks:
        st.success("No high-criticality legacy assets awaiting migration.")
        return

    migrations = st.session_state.migrations
    for task in tasks:
        cols = st.columns([2, 3, 1, 1, 1])
        cols[0].markdown(f"**{task.name}**  \n{task.type}")
        cols[1].markdown(f"{task.current_algorithm} → **{task.target_algorithm}**")
        cols[2].markdown(badge_html(task.priority, risk_css_class(task.priority)),
                         unsafe_allow_html=True)
        started = migrations.get(task.id)
        if started:
            cols[3].caption(f"{started['status']} · ETA {started['eta']}")
        else:
            cols[3].caption(task.estimated_time)
            if cols[4].button("Start", key=f"migrate_{task.id}"):
                migrations[task.id] = simulate_migration_start(task.id)
                st.toast(f"Migration started for {task.id}")
                st.rerun()


def render_top_risks(assets):
    st.markdown('<p class="section-title">Top Risks</p>', unsafe_allow_html=True)
    items = get_top_risks(assets)
    if not items:
        st.caption("No assets in the current view.")
        return
    for item in items:
        actions = "".join(f"<li>{html.escape(a)}</li>" for a in item.actions)
        st.markdown(f"""
        <div class="risk-card">
            <h4>#{item.rank} {html.escape(item.risk_label)} <span style="float:right">{item.score}</span></h4>
            <p style="font-size:0.8rem;margin:4px 0">{html.escape(item.explanation)}</p>
            <ul style="font-size:0.78rem;margin:4px 0 4px 16px">{actions}</ul>
            <p class="evidence">{html.escape(item.evidence_snippet)}</p>
        </div>
        """, unsafe_allow_html=True)


def render_overview():
    source = st.session_state.source
    assets = source.active_assets
    metrics = calculate_metrics(assets)
    today = date.today()

    render_export_controls(assets, metrics)
    render_header(source)
    render_kpis(metrics)

    main_col, side_col = st.columns([3, 1])
    with main_col:
        render_charts(assets, metrics, today)
        render_migration_queue(assets)
    with side_col:
        render_top_risks(assets)

    render_asset_overview(assets)
    render_asset_table(assets)


# ============================================================================
# ASSISTANT PAGE
# ============================================================================

def _run_assistant(query, verbosity, tone):
    st.session_state.assistant_response = st.write_stream(
        stream_response(query, verbosity, tone)
    )


def render_assistant():
    st.markdown('<p class="section-title">Ask QUASAR</p>', unsafe_allow_html=True)
    st.caption("Demo mode: responses are simulated, no external calls are made.")

    example = st.selectbox("Examples", [""] + EXAMPLE_QUESTIONS)
    query = st.text_area("Question", value=example or st.session_state.assistant_query, height=90)
    col_v, col_t = st.columns(2)
    verbosity = col_v.selectbox(
        "Length", VERBOSITY_LEVELS,
        index=VERBOSITY_LEVELS.index(st.session_state.assistant_verbosity),
    )
    tone = col_t.selectbox(
        "Tone", TONES,
        index=TONES.index(st.session_state.assistant_tone),
    )

    if st.button("Ask", type="primary"):
        try:
            enhanced = enhance_query(query, verbosity, tone)
        except ValueError as e:
            st.error(str(e))
        else:
            st.session_state.assistant_query = query
            st.session_state.assistant_verbosity = verbosity
            st.session_state.assistant_tone = tone
            _run_assistant(enhanced, verbosity, tone)
    elif st.session_state.assistant_response:
        st.markdown(st.session_state.assistant_response)

    response = st.session_state.assistant_response
    if not response:
        return

    st.markdown('<p class="section-title">Quick Actions</p>', unsafe_allow_html=True)
    col_s, col_e, col_j = st.columns(3)
    for col, action, label in [(col_s, "summarize", "Summarize"), (col_e, "extract", "Extract actions")]:
        if col.button(label, use_container_width=True):
            _run_assistant(quick_action_query(action), "short", tone)

    filename, payload = export_interaction(
        st.session_state.assistant_query, response,
        st.session_state.assistant_verbosity, st.session_state.assistant_tone,
    )
    col_j.download_button(
        "Export JSON", data=payload, file_name=filename,
        mime="application/json", use_container_width=True,
    )


def render_simulator(assets):
    st.markdown('<p class="section-title">Quantum Attack Simulator</p>', unsafe_allow_html=True)
    demo = st.toggle("Use demo baselines", value=False)
    if st.button("Run simulation"):
        rng = random.Random()
        st.session_state.simulation = (
            demo_simulation_data(rng) if demo else quantum_simulation_data(assets, rng)
        )
    if st.session_state.simulation:
        st.plotly_chart(
            charts.chart_quantum_simulation(st.session_state.simulation),
            use_container_width=True,
        )


def render_assistant_page():
    source = st.session_state.source
    render_header(source)
    left, right = st.columns([3, 2])
    with left:
        render_assistant()
    with right:
        render_simulator(source.active_assets)


# ============================================================================
# ENTRY POINT
# ============================================================================

def main():
    """Build the page; called from the repository-level ``dashboard.py``."""
    inject_css()
    init_session_state()
    render_data_controls()

    pages = [
        st.Page(render_overview, title="Overview", icon="🛡️", url_path="overview", default=True),
        st.Page(render_assistant_page, title="Assistant", icon="🤖", url_path="assistant"),
    ]
    st.navigation({APP_TITLE: pages}).run()
