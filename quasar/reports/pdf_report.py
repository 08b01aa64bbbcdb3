"""
PDF report export.

Builds a multi-page snapshot of the active dashboard view with reportlab
platypus:

  1. Cover      -- title, generation time, KPI summary table
  2. Charts     -- algorithm distribution pie, performance comparison bars,
                   risk distribution table
  3. Top risks  -- composite-ranked assets with recommended actions
  4. Inventory  -- full asset table; header row repeats on every page

The report is generated from the same chart mappers the dashboard uses, so
the numbers match what is on screen.
"""

import io
import logging
from datetime import date, datetime
from xml.sax.saxutils import escape

from reportlab.graphics.charts.barcharts import VerticalBarChart
from reportlab.graphics.charts.piecharts import Pie
from reportlab.graphics.shapes import Drawing
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..core.config import ALGORITHM_CHART_LIMIT, APP_SUBTITLE, APP_TITLE, REPORT_FILENAME_PATTERN
from ..core.exceptions import ExportTargetMissingError, ReportExportError
from ..metrics.aggregator import calculate_metrics
from ..scoring import get_risk_level, get_status_label, get_top_risks
from ..visualization.chart_data import (
    algorithm_distribution,
    performance_comparison,
    risk_distribution,
)

logger = logging.getLogger(__name__)

PRIMARY = colors.HexColor('#00B4D8')
DARK = colors.HexColor('#0A1628')
GRID = colors.HexColor('#CCCCCC')
MUTED = colors.HexColor('#666666')

CHART_COLORS = [
    colors.HexColor('#00B4D8'), colors.HexColor('#7B2CBF'), colors.HexColor('#EF476F'),
    colors.HexColor('#FFD166'), colors.HexColor('#06D6A0'), colors.HexColor('#8D99AE'),
]

INVENTORY_COLUMNS = [
    ('Asset', 'asset_id'),
    ('Type', 'type'),
    ('Algorithm', 'encryption_algorithm'),
    ('Key', 'key_length'),
    ('Risk', 'quantum_risk_score'),
    ('Vuln.', 'quantum_vulnerability_score'),
    ('Criticality', 'criticality'),
    ('Status', 'current_status'),
    ('Priority', 'migration_priority'),
    ('Cert', 'cert_valid'),
]


def report_filename(day=None):
    """QUASAR_Report_<YYYY-MM-DD>.pdf for the given (or current) date."""
    day = day or date.today()
    return REPORT_FILENAME_PATTERN.format(date=day.isoformat())


def _table_style(header_color=PRIMARY):
    return TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), header_color),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 8),
        ('GRID', (0, 0), (-1, -1), 0.5, GRID),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#F2F6FA')]),
        ('TOPPADDING', (0, 0), (-1, -1), 3),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 3),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
    ])


def _kpi_rows(metrics):
    return [
        ['Metric', 'Value'],
        ['Total Assets', f"{metrics.total_assets:,}"],
        ['Vulnerable (legacy)', f"{metrics.vulnerable_assets:,}"],
        ['Migrating', f"{metrics.migrating_assets:,}"],
        ['Post-Quantum', f"{metrics.post_quantum_assets:,}"],
        ['Critical (high + legacy)', f"{metrics.critical_assets:,}"],
        ['Average Risk Score', f"{metrics.average_risk_score}%"],
        ['Avg Quantum Vulnerability', f"{metrics.avg_quantum_vulnerability}"],
        ['Avg Time to Q-Safe', f"{metrics.avg_time_to_qsafe} days"],
        ['Avg Migration Time', f"{metrics.avg_migration_time} hours"],
        ['Automation Success Rate', f"{metrics.automation_success_rate}%"],
        ['Avg Compliance Score', f"{metrics.avg_compliance_score}%"],
        ['Expired Certificates', f"{metrics.expired_certs:,}"],
        ['Avg Encryption Strength', f"{metrics.avg_encryption_strength}"],
        ['Avg Predicted Migration Risk', f"{metrics.avg_predicted_migration_risk}%"],
        ['Latency / CPU Impact', f"{metrics.avg_latency_impact:+d}% / {metrics.avg_cpu_impact:+d}%"],
        ['Memory / Throughput Impact',
         f"{metrics.avg_memory_impact:+d}% / {metrics.avg_throughput_impact:+d}%"],
    ]


def _algorithm_pie(assets):
    slices = algorithm_distribution(assets, limit=ALGORITHM_CHART_LIMIT)
    if not slices:
        return None
    drawing = Drawing(400, 160)
    pie = Pie()
    pie.x, pie.y, pie.width, pie.height = 120, 15, 130, 130
    pie.data = [s['value'] for s in slices]
    pie.labels = [f"{s['name']} ({s['value']})" for s in slices]
    pie.slices.strokeWidth = 0.5
    for i, color in enumerate(CHART_COLORS[:len(slices)]):
        pie.slices[i].fillColor = color
    drawing.add(pie)
    return drawing


def _performance_bars(assets):
    rows = performance_comparison(assets)
    drawing = Drawing(450, 160)
    chart = VerticalBarChart()
    chart.x, chart.y, chart.height, chart.width = 50, 30, 110, 360
    chart.data = [[r['before'] for r in rows], [r['after'] for r in rows]]
    chart.categoryAxis.categoryNames = [r['metric'] for r in rows]
    chart.categoryAxis.labels.fontSize = 7
    chart.valueAxis.labels.fontSize = 7
    chart.valueAxis.valueMin = 0
    chart.valueAxis.valueMax = max([r['before'] for r in rows] + [r['after'] for r in rows] + [1]) * 1.1
    chart.bars[0].fillColor = CHART_COLORS[2]
    chart.bars[1].fillColor = CHART_COLORS[0]
    drawing.add(chart)
    return drawing


def _build_story(assets, metrics, generated_at):
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle('QTitle', parent=styles['Heading1'], fontSize=24, spaceAfter=6,
                                 alignment=TA_CENTER, textColor=DARK)
    subtitle_style = ParagraphStyle('QSub', parent=styles['Normal'], fontSize=11, alignment=TA_CENTER,
                                    textColor=MUTED)
    heading_style = ParagraphStyle('QHeading', parent=styles['Heading2'], fontSize=14, spaceBefore=8,
                                   spaceAfter=4, textColor=DARK)
    body_style = ParagraphStyle('QBody', parent=styles['Normal'], fontSize=9, leading=11, spaceAfter=3)
    cell_style = ParagraphStyle('QCell', parent=body_style, fontSize=7, leading=9, spaceAfter=0)

    story = []

    # ===== COVER =====
    story.append(Spacer(1, 0.4 * inch))
    story.append(Paragraph(APP_TITLE, title_style))
    story.append(Paragraph(escape(APP_SUBTITLE), subtitle_style))
    story.append(Spacer(1, 0.1 * inch))
    story.append(Paragraph(f"Generated {generated_at.strftime('%Y-%m-%d %H:%M')}", subtitle_style))
    story.append(Spacer(1, 0.3 * inch))
    story.append(Paragraph("Key Metrics", heading_style))
    kpi_table = Table(_kpi_rows(metrics), colWidths=[3 * inch, 2 * inch])
    kpi_table.setStyle(_table_style())
    story.append(kpi_table)
    story.append(PageBreak())

    # ===== CHARTS =====
    story.append(Paragraph("Algorithm Distribution", heading_style))
    pie = _algorithm_pie(assets)
    if pie is not None:
        story.append(pie)
    else:
        story.append(Paragraph("No assets in the current view.", body_style))

    story.append(Paragraph("Performance Comparison (migrating and post-quantum assets)", heading_style))
    story.append(_performance_bars(assets))
    story.append(Paragraph("Memory and throughput are shown divided by 10.", body_style))

    story.append(Paragraph("Risk Distribution", heading_style))
    risk_rows = [['Bucket', 'Assets']] + [[r['name'], r['value']] for r in risk_distribution(metrics)]
    risk_table = Table(risk_rows, colWidths=[2.5 * inch, 1.5 * inch])
    risk_table.setStyle(_table_style())
    story.append(risk_table)
    story.append(PageBreak())

    # ===== TOP RISKS =====
    story.append(Paragraph("Top Risks", heading_style))
    risk_items = get_top_risks(assets)
    if risk_items:
        rows = [['#', 'Asset', 'Score', 'Explanation', 'Actions']]
        for item in risk_items:
            rows.append([
                item.rank,
                Paragraph(escape(item.risk_label), cell_style),
                item.score,
                Paragraph(escape(item.explanation), cell_style),
                Paragraph('<br/>'.join(escape(a) for a in item.actions), cell_style),
            ])
        top_table = Table(rows, colWidths=[0.3 * inch, 1.4 * inch, 0.5 * inch, 3.2 * inch, 2.6 * inch],
                          repeatRows=1)
        top_table.setStyle(_table_style(colors.HexColor('#EF476F')))
        story.append(top_table)
    else:
        story.append(Paragraph("No assets in the current view.", body_style))
    story.append(PageBreak())

    # ===== INVENTORY =====
    story.append(Paragraph(f"Asset Inventory ({len(assets):,} assets)", heading_style))
    rows = [[label for label, _ in INVENTORY_COLUMNS] + ['Level']]
    for asset in assets:
        row = []
        for _, attr in INVENTORY_COLUMNS:
            value = getattr(asset, attr)
            if attr == 'quantum_risk_score':
                value = f"{value:.2f}"
            elif attr == 'current_status':
                value = f"{value} ({get_status_label(value)})"
            row.append(value)
        row.append(get_risk_level(asset.quantum_risk_score))
        rows.append(row)
    inventory = Table(rows, repeatRows=1)
    inventory.setStyle(_table_style(DARK))
    story.append(inventory)

    story.append(Spacer(1, 0.15 * inch))
    story.append(Paragraph(
        f"{APP_TITLE} | {generated_at.strftime('%Y-%m-%d %H:%M')} | Confidential",
        ParagraphStyle('QFooter', parent=body_style, alignment=TA_CENTER, fontSize=8, textColor=MUTED),
    ))
    return story


def build_pdf_report(assets, metrics=None, generated_at=None):
    """Render the dashboard view as PDF bytes.

    Args:
        assets: Active assets, or None when nothing is on screen.
        metrics: Precomputed DashboardMetrics; computed when omitted.
        generated_at: Timestamp printed on the report.

    Raises:
        ExportTargetMissingError: ``assets`` is None.
        ReportExportError: reportlab failed to build the document.
    """
    if assets is None:
        raise ExportTargetMissingError("Unable to find content to export")

    assets = tuple(assets)
    generated_at = generated_at or datetime.now()
    try:
        if metrics is None:
            metrics = calculate_metrics(assets)
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer, pagesize=landscape(letter),
            rightMargin=0.5 * inch, leftMargin=0.5 * inch,
            topMargin=0.4 * inch, bottomMargin=0.4 * inch,
            title=f"{APP_TITLE} Report", author=APP_TITLE,
        )
        doc.build(_build_story(assets, metrics, generated_at))
    except Exception as e:
        logger.exception(f"PDF export failed for {len(assets)} assets")
        raise ReportExportError("Failed to export PDF. Please try again.") from e

    pdf_bytes = buffer.getvalue()
    logger.info(f"Built PDF report: {len(assets)} assets, {len(pdf_bytes):,} bytes")
    return pdf_bytes
