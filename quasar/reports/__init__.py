"""
Report exports for QUASAR: the PDF snapshot and the Excel inventory.
"""

from quasar.reports.pdf_report import build_pdf_report, report_filename
from quasar.reports.excel_export import EXCEL_MIME, build_inventory_workbook

__all__ = [
    'build_pdf_report',
    'report_filename',
    'build_inventory_workbook',
    'EXCEL_MIME',
]
