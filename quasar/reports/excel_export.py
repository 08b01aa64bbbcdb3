"""
Excel inventory export.

Writes the active asset view to a workbook with three sheets:

    Assets          -- every field plus the risk level and status label
    Metrics         -- the dashboard KPIs as label/value rows
    Migration Queue -- high-criticality legacy assets and their targets

Written with ``pd.ExcelWriter`` on the openpyxl engine; header rows get the
dashboard's dark fill and risk-level cells are colour-coded.
"""

import io
import logging
from dataclasses import asdict

import pandas as pd
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from ..core.exceptions import ExportTargetMissingError, ReportExportError
from ..metrics.aggregator import calculate_metrics
from ..models.data_models import assets_to_dataframe
from ..scoring import get_migration_tasks, get_risk_level, get_status_label

logger = logging.getLogger(__name__)

EXCEL_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

HEADER_FILL = PatternFill(start_color="0A1628", end_color="0A1628", fill_type="solid")
HEADER_FONT = Font(bold=True, color="FFFFFF")

RISK_FILLS = {
    'critical': PatternFill(start_color="F8D7DA", end_color="F8D7DA", fill_type="solid"),
    'high': PatternFill(start_color="FDE2D4", end_color="FDE2D4", fill_type="solid"),
    'medium': PatternFill(start_color="FFF3CD", end_color="FFF3CD", fill_type="solid"),
    'low': PatternFill(start_color="D4EDDA", end_color="D4EDDA", fill_type="solid"),
}


def _style_sheet(ws, col_count, width=18):
    for col in range(1, col_count + 1):
        cell = ws.cell(row=1, column=col)
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        ws.column_dimensions[get_column_letter(col)].width = width
    ws.freeze_panes = 'A2'


def _strip_illegal_characters(df):
    """Drop control characters openpyxl refuses to store from text columns."""
    for col in df.columns:
        df[col] = df[col].map(
            lambda v: ILLEGAL_CHARACTERS_RE.sub('', v) if isinstance(v, str) else v
        )
    return df


def build_inventory_workbook(assets, metrics=None):
    """Render the asset view as .xlsx bytes.

    Raises:
        ExportTargetMissingError: ``assets`` is None.
        ReportExportError: the workbook could not be written.
    """
    if assets is None:
        raise ExportTargetMissingError("Unable to find content to export")

    assets = tuple(assets)
    if metrics is None:
        metrics = calculate_metrics(assets)

    df = assets_to_dataframe(assets)
    df.insert(1, 'risk_level', df['quantum_risk_score'].map(get_risk_level))
    df.insert(2, 'status_label', df['current_status'].map(get_status_label))

    metric_rows = [
        (name, value) for name, value in metrics.to_dict().items()
        if not isinstance(value, dict)
    ]
    metrics_df = pd.DataFrame(metric_rows, columns=['Metric', 'Value'])

    queue_df = pd.DataFrame(
        [asdict(task) for task in get_migration_tasks(assets)],
        columns=['id', 'type', 'current_algorithm', 'target_algorithm',
                 'priority', 'estimated_time'],
    )

    df = _strip_illegal_characters(df)
    queue_df = _strip_illegal_characters(queue_df)

    buffer = io.BytesIO()
    try:
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, sheet_name='Assets', index=False)
            metrics_df.to_excel(writer, sheet_name='Metrics', index=False)
            queue_df.to_excel(writer, sheet_name='Migration Queue', index=False)

            ws = writer.sheets['Assets']
            _style_sheet(ws, len(df.columns), width=16)
            for row_idx, level in enumerate(df['risk_level'], start=2):
                ws.cell(row=row_idx, column=2).fill = RISK_FILLS[level]

            _style_sheet(writer.sheets['Metrics'], 2, width=30)
            _style_sheet(writer.sheets['Migration Queue'], len(queue_df.columns))
    except Exception as e:
        logger.exception("Excel export failed")
        raise ReportExportError("Failed to export Excel workbook. Please try again.") from e

    logger.info(f"Built Excel inventory: {len(assets)} assets")
    return buffer.getvalue()
